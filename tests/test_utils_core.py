import importlib
import subprocess
import sys
import unittest
from unittest import mock

from _support import FakeScreen, make_fake_curses

_MODULES = ("treefm.theme", "treefm.utils")


class UtilsCoreTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._prev_curses = sys.modules.get("curses")
        sys.modules["curses"] = make_fake_curses()

        for mod_name in _MODULES:
            sys.modules.pop(mod_name, None)
        cls.utils = importlib.import_module("treefm.utils")
        cls.theme = importlib.import_module("treefm.theme")
        cls.curses = sys.modules["curses"]

    @classmethod
    def tearDownClass(cls):
        for mod_name in _MODULES:
            sys.modules.pop(mod_name, None)
        if cls._prev_curses is not None:
            sys.modules["curses"] = cls._prev_curses
        else:
            sys.modules.pop("curses", None)

    def test_init_colors_registers_every_role(self):
        with mock.patch.object(self.utils.curses, "init_pair") as init_pair:
            self.utils.init_colors("hacker")

        hacker = self.theme.THEMES["hacker"]
        expected = {
            pair_id: hacker.pairs[role]
            for role, pair_id in self.theme.ROLE_TO_PAIR_ID.items()
        }
        registered = {call.args[0]: call.args[1:] for call in init_pair.call_args_list}
        self.assertEqual(registered, expected)

    def test_init_colors_accepts_theme_object_and_unknown_key(self):
        with mock.patch.object(self.utils.curses, "init_pair") as init_pair:
            self.utils.init_colors(self.theme.THEMES["dos_cga"])
            self.utils.init_colors("no-such-theme")
        self.assertEqual(init_pair.call_count, 2 * len(self.theme.ROLE_TO_PAIR_ID))

    def test_theme_attr_maps_role_to_pair(self):
        self.assertEqual(
            self.utils.theme_attr("cursor"),
            self.curses.color_pair(self.theme.ROLE_TO_PAIR_ID["cursor"]),
        )

    def test_safe_addstr_clips_to_window(self):
        screen = FakeScreen(5, 10)
        self.utils.safe_addstr(screen, 0, 2, "abcdefghijkl")
        self.utils.safe_addstr(screen, 5, 0, "outside")
        self.utils.safe_addstr(screen, 1, 9, "edge")
        self.assertEqual(screen.calls, [(0, 2, "abcdefg", 0)])

    def test_safe_addstr_ignores_curses_error(self):
        screen = mock.Mock()
        screen.getmaxyx.return_value = (5, 10)
        screen.addnstr.side_effect = self.curses.error("bottom-right corner")
        self.utils.safe_addstr(screen, 4, 0, "x")

    def test_normalize_key_code(self):
        self.assertEqual(self.utils.normalize_key_code(260), 260)
        self.assertEqual(self.utils.normalize_key_code("\n"), 10)
        self.assertEqual(self.utils.normalize_key_code("\r"), 10)
        self.assertEqual(self.utils.normalize_key_code("\x1b"), 27)
        self.assertEqual(self.utils.normalize_key_code("\x7f"), 127)
        self.assertEqual(self.utils.normalize_key_code("\b"), 8)
        self.assertEqual(self.utils.normalize_key_code("a"), 97)
        self.assertIsNone(self.utils.normalize_key_code(""))
        self.assertIsNone(self.utils.normalize_key_code(None))

    def test_check_unicode_support(self):
        with mock.patch.object(self.utils.locale, "getpreferredencoding", return_value="UTF-8"):
            self.assertTrue(self.utils.check_unicode_support())
        with mock.patch.object(self.utils.locale, "getpreferredencoding", return_value="ascii"):
            self.assertFalse(self.utils.check_unicode_support())

    def test_format_size(self):
        self.assertEqual(self.utils.format_size(0), "0 B")
        self.assertEqual(self.utils.format_size(512), "512 B")
        self.assertEqual(self.utils.format_size(1536), "1.5 KB")
        self.assertEqual(self.utils.format_size(3 * 1024 ** 3), "3.0 GB")
        self.assertEqual(self.utils.format_size(-5), "0 B")

    def test_format_date(self):
        self.assertRegex(self.utils.format_date(0), r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}$")
        self.assertEqual(self.utils.format_date(1e20), "?")

    def test_system_opener_per_platform(self):
        with mock.patch.object(self.utils.sys, "platform", "darwin"):
            self.assertEqual(self.utils.system_opener(), "open")
        with mock.patch.object(self.utils.sys, "platform", "linux"):
            self.assertEqual(self.utils.system_opener(), "xdg-open")

    def test_open_with_system_detaches_opener(self):
        popen = mock.Mock()
        with mock.patch.object(self.utils, "system_opener", return_value="xdg-open"):
            self.utils.open_with_system("/tmp/report.pdf", popen=popen)

        popen.assert_called_once_with(
            ["xdg-open", "/tmp/report.pdf"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )

    def test_open_with_system_propagates_missing_opener(self):
        popen = mock.Mock(side_effect=FileNotFoundError(2, "No such file or directory"))
        with self.assertRaises(OSError):
            self.utils.open_with_system("/tmp/x", popen=popen)


if __name__ == "__main__":
    unittest.main()
