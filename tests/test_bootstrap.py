import importlib
import sys
import types
import unittest
from unittest import mock


def _install_fake_curses():
    fake = types.ModuleType("curses")
    fake.ALL_MOUSE_EVENTS = 0xFFFFFFF
    fake.REPORT_MOUSE_POSITION = 0x10000000
    fake.error = RuntimeError
    fake.curs_set = mock.Mock()
    fake.noecho = mock.Mock()
    fake.raw = mock.Mock()
    fake.noraw = mock.Mock()
    fake.mousemask = mock.Mock()
    fake.mouseinterval = mock.Mock()
    return fake


def _install_fake_termios():
    fake = types.ModuleType("termios")
    fake.error = OSError
    fake.IXON = 0x0200
    fake.IXOFF = 0x0400
    fake.ICRNL = 0x0100
    fake.TCSANOW = 0
    fake.tcgetattr = mock.Mock(
        return_value=[fake.IXON | fake.IXOFF | fake.ICRNL, 0, 0, 0, 0, 0, 0]
    )
    fake.tcsetattr = mock.Mock()
    return fake


class BootstrapTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._prev_curses = sys.modules.get("curses")
        cls._prev_termios = sys.modules.get("termios")
        cls.fake_curses = _install_fake_curses()
        cls.fake_termios = _install_fake_termios()
        sys.modules["curses"] = cls.fake_curses
        sys.modules["termios"] = cls.fake_termios
        sys.modules.pop("treefm.core.bootstrap", None)
        cls.bootstrap = importlib.import_module("treefm.core.bootstrap")

    @classmethod
    def tearDownClass(cls):
        sys.modules.pop("treefm.core.bootstrap", None)
        if cls._prev_curses is not None:
            sys.modules["curses"] = cls._prev_curses
        else:
            sys.modules.pop("curses", None)
        if cls._prev_termios is not None:
            sys.modules["termios"] = cls._prev_termios
        else:
            sys.modules.pop("termios", None)

    def setUp(self):
        self.fake_termios.tcgetattr.reset_mock()
        self.fake_termios.tcsetattr.reset_mock()

    def test_configure_terminal_enters_raw_mode(self):
        stdscr = types.SimpleNamespace(
            keypad=mock.Mock(),
            nodelay=mock.Mock(),
            timeout=mock.Mock(),
        )

        self.bootstrap.configure_terminal(stdscr, timeout_ms=777)

        self.fake_curses.curs_set.assert_called_once_with(0)
        self.fake_curses.noecho.assert_called_once_with()
        self.fake_curses.raw.assert_called_once_with()
        stdscr.keypad.assert_called_once_with(True)
        stdscr.nodelay.assert_called_once_with(False)
        stdscr.timeout.assert_called_once_with(777)

    def test_restore_terminal_leaves_raw_mode(self):
        self.fake_curses.noraw.reset_mock()
        self.bootstrap.restore_terminal()
        self.fake_curses.noraw.assert_called_once_with()

    def test_restore_terminal_ignores_curses_error(self):
        self.fake_curses.noraw.side_effect = self.fake_curses.error("not initialised")
        try:
            self.bootstrap.restore_terminal()
        finally:
            self.fake_curses.noraw.side_effect = None

    def test_disable_flow_control_clears_only_flow_flags(self):
        stream = types.SimpleNamespace(fileno=mock.Mock(return_value=9))

        self.assertTrue(self.bootstrap.disable_flow_control(stream))

        self.fake_termios.tcgetattr.assert_called_once_with(9)
        fd, when, attrs = self.fake_termios.tcsetattr.call_args.args
        self.assertEqual((fd, when), (9, self.fake_termios.TCSANOW))
        self.assertEqual(attrs[0] & self.fake_termios.IXON, 0)
        self.assertEqual(attrs[0] & self.fake_termios.IXOFF, 0)
        self.assertEqual(attrs[0] & self.fake_termios.ICRNL, self.fake_termios.ICRNL)

    def test_disable_flow_control_without_a_tty(self):
        self.fake_termios.tcgetattr.side_effect = OSError("not a tty")
        try:
            result = self.bootstrap.disable_flow_control(
                types.SimpleNamespace(fileno=mock.Mock(return_value=9))
            )
        finally:
            self.fake_termios.tcgetattr.side_effect = None

        self.assertFalse(result)
        self.fake_termios.tcsetattr.assert_not_called()

    def test_disable_flow_control_with_stream_lacking_fileno(self):
        self.assertFalse(self.bootstrap.disable_flow_control(object()))

    def test_enable_mouse_support_requests_motion_events(self):
        with mock.patch("builtins.print") as print_mock:
            self.bootstrap.enable_mouse_support()

        self.fake_curses.mousemask.assert_called_once_with(
            self.fake_curses.ALL_MOUSE_EVENTS | self.fake_curses.REPORT_MOUSE_POSITION
        )
        self.fake_curses.mouseinterval.assert_called_once_with(0)
        sequences = [call.args[0] for call in print_mock.call_args_list]
        self.assertEqual(sequences, ["\033[?1002h", "\033[?1006h"])

    def test_disable_mouse_support_prints_restore_sequences(self):
        with mock.patch("builtins.print") as print_mock:
            self.bootstrap.disable_mouse_support()

        sequences = [call.args[0] for call in print_mock.call_args_list]
        self.assertEqual(sequences, ["\033[?1002l", "\033[?1006l"])


if __name__ == "__main__":
    unittest.main()
