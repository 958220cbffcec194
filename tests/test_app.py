import importlib
import os
import sys
import tempfile
import unittest
from unittest import mock

from _support import FakeScreen, build_tree, make_fake_curses

_MODULES = (
    "treefm.utils",
    "treefm.theme",
    "treefm.core.rendering",
    "treefm.core.key_router",
    "treefm.core.bootstrap",
    "treefm.core.event_loop",
    "treefm.core.app",
    "treefm.__main__",
)

_TERMINAL_HOOKS = (
    "configure_terminal",
    "disable_flow_control",
    "enable_mouse_support",
    "disable_mouse_support",
    "restore_terminal",
    "init_colors",
)


class TreeFMAppTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._prev_curses = sys.modules.get("curses")
        cls.fake_curses = make_fake_curses()
        sys.modules["curses"] = cls.fake_curses
        for mod_name in _MODULES:
            sys.modules.pop(mod_name, None)
        cls.app_mod = importlib.import_module("treefm.core.app")
        cls.main_mod = importlib.import_module("treefm.__main__")
        cls.config_mod = importlib.import_module("treefm.core.config")
        cls.modes = importlib.import_module("treefm.core.modes")

    @classmethod
    def tearDownClass(cls):
        for mod_name in _MODULES:
            sys.modules.pop(mod_name, None)
        if cls._prev_curses is not None:
            sys.modules["curses"] = cls._prev_curses
        else:
            sys.modules.pop("curses", None)

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.root = os.path.join(self.tmp.name, "work")
        build_tree(self.root, {"docs": {"readme.md": "hi"}, "a.txt": "a", ".hidden": "h"})
        self.config_path = os.path.join(self.tmp.name, "config", "config.toml")
        self.hooks = {}
        for name in _TERMINAL_HOOKS:
            patcher = mock.patch.object(self.app_mod, name)
            self.hooks[name] = patcher.start()
            self.addCleanup(patcher.stop)
        unicode_patch = mock.patch.object(self.app_mod, "check_unicode_support", return_value=False)
        unicode_patch.start()
        self.addCleanup(unicode_patch.stop)
        self.opener = mock.Mock()

    def _make_app(self, **config_overrides):
        options = {"trash_dir": os.path.join(self.tmp.name, "trash")}
        options.update(config_overrides)
        config = self.config_mod.AppConfig(**options)
        return self.app_mod.TreeFM(
            FakeScreen(40, 100),
            start_dir=self.root,
            config=config,
            config_path=self.config_path,
            opener=self.opener,
        )

    def _line_of(self, app, name):
        for i, row in enumerate(app.nav.tree_rows()):
            if row.name == name and row.entry_index is not None:
                return i - app.nav.scroll_offset
        raise AssertionError(name)

    def test_startup_configures_terminal_and_loads_directory(self):
        app = self._make_app()

        self.hooks["configure_terminal"].assert_called_once()
        self.hooks["disable_flow_control"].assert_called_once_with()
        self.hooks["enable_mouse_support"].assert_called_once_with()
        self.hooks["init_colors"].assert_called_once_with("classic")
        self.assertEqual([e.name for e in app.nav.entries], ["docs", "a.txt"])
        self.assertTrue(os.path.isdir(os.path.join(self.tmp.name, "trash")))
        self.assertIsInstance(app.controller.mode, self.modes.NormalMode)

    def test_trash_creation_failure_becomes_status(self):
        blocker = os.path.join(self.tmp.name, "blocker")
        build_tree(self.tmp.name, {"blocker": "file"})
        app = self._make_app(trash_dir=os.path.join(blocker, "trash"))
        self.assertIsInstance(app.controller.mode, self.modes.StatusMessageMode)
        self.assertIn("Cannot create trash directory", app.controller.mode.message)

    def test_ctrl_q_stops_the_loop(self):
        app = self._make_app()
        app.handle_key("\x11")
        self.assertFalse(app.running)

    def test_unknown_key_is_ignored(self):
        app = self._make_app()
        app.handle_key("\t")
        self.assertTrue(app.running)
        self.assertIsInstance(app.controller.mode, self.modes.NormalMode)

    def test_enter_on_file_opens_it(self):
        app = self._make_app()
        app.handle_key(self.fake_curses.KEY_DOWN)
        app.handle_key("\n")

        self.opener.assert_called_once_with(os.path.join(self.root, "a.txt"))
        self.assertEqual(app.controller.mode.message, "Opening 'a.txt'")

    def test_opener_failure_is_reported(self):
        self.opener.side_effect = FileNotFoundError(2, "No such file or directory", "xdg-open")
        app = self._make_app()
        app.nav.move_to(1)
        app.handle_key("\r")
        self.assertTrue(app.controller.mode.message.startswith("Failed to open file:"))

    def test_enter_on_directory_descends(self):
        app = self._make_app()
        app.handle_key("\n")
        self.assertEqual(app.nav.current_dir, os.path.join(self.root, "docs"))
        self.opener.assert_not_called()

    def test_toggle_hidden_persists_config(self):
        app = self._make_app()
        app.handle_key(".")

        self.assertIn(".hidden", [e.name for e in app.nav.entries])
        saved = self.config_mod.load_config(self.config_path)
        self.assertTrue(saved.show_hidden)
        self.assertEqual(saved.trash_dir, "")

    def test_toggle_keeps_command_line_overrides_out_of_config_file(self):
        self.config_mod.save_config(
            self.config_mod.AppConfig(theme="hacker", sort_by="modified"), self.config_path
        )
        one_off = os.path.join(self.tmp.name, "oneoff")
        args = self.main_mod.build_parser().parse_args(
            [self.root, "--config", self.config_path, "--trash-dir", one_off]
        )
        config = self.main_mod.resolve_config(args)
        app = self.app_mod.TreeFM(
            FakeScreen(40, 100),
            start_dir=self.root,
            config=config,
            config_path=self.config_path,
            opener=self.opener,
        )

        app.handle_key(".")

        self.assertEqual(app.config.trash_dir, one_off)
        saved = self.config_mod.load_config(self.config_path)
        self.assertTrue(saved.show_hidden)
        self.assertEqual(saved.trash_dir, "")
        self.assertEqual(saved.theme, "hacker")
        self.assertEqual(saved.sort_by, "modified")

    def test_mouse_click_and_drag_select_range(self):
        app = self._make_app(show_hidden=True)
        c = self.fake_curses
        first = self._line_of(app, "docs")
        last = self._line_of(app, "a.txt")

        app.handle_mouse((0, 4, first, 0, c.BUTTON1_PRESSED))
        app.handle_mouse((0, 4, last, 0, c.REPORT_MOUSE_POSITION))
        app.handle_mouse((0, 4, last, 0, c.BUTTON1_RELEASED))

        self.assertEqual(app.nav.selected, {0, 1, 2})
        self.assertEqual(app.nav.current_entry().name, "a.txt")

    def test_ctrl_click_toggles_selection(self):
        app = self._make_app()
        c = self.fake_curses
        line = self._line_of(app, "a.txt")
        app.handle_mouse((0, 4, line, 0, c.BUTTON1_CLICKED | c.BUTTON_CTRL))
        self.assertEqual(app.nav.selected, {1})

    def test_release_outside_tree_ends_drag(self):
        app = self._make_app()
        c = self.fake_curses
        app.handle_mouse((0, 4, self._line_of(app, "docs"), 0, c.BUTTON1_PRESSED))
        app.handle_mouse((0, 4, 39, 0, c.BUTTON1_RELEASED))
        app.handle_mouse((0, 4, self._line_of(app, "a.txt"), 0, c.REPORT_MOUSE_POSITION))
        self.assertEqual(app.nav.selected, {0})
        self.assertEqual(app.nav.current_entry().name, "docs")

    def test_frame_draws_tree_and_status(self):
        app = self._make_app()
        app.draw_tree()
        app.draw_statusbar()
        text = app.stdscr.all_text()
        self.assertIn("docs", text)
        self.assertIn("a.txt", text)
        self.assertIn("2 item(s)", app.stdscr.text_at(39))

    def test_cleanup_restores_terminal(self):
        app = self._make_app()
        app.cleanup()
        self.hooks["disable_mouse_support"].assert_called_once_with()
        self.hooks["restore_terminal"].assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
