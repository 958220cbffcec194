import unittest

from treefm.core.actions import ActionResult, ActionType, Command, Key, MouseKind


class ActionResultTests(unittest.TestCase):
    def test_action_result_stores_type_and_payload(self):
        result = ActionResult(ActionType.OPEN_FILE, "/tmp/demo.txt")
        self.assertEqual(result.type, ActionType.OPEN_FILE)
        self.assertEqual(result.payload, "/tmp/demo.txt")

    def test_action_result_payload_defaults_to_none(self):
        result = ActionResult(ActionType.QUIT)
        self.assertEqual(result.type, ActionType.QUIT)
        self.assertIsNone(result.payload)

    def test_enums_parse_string_values(self):
        self.assertEqual(Command("page_down"), Command.PAGE_DOWN)
        self.assertEqual(ActionType("open_file"), ActionType.OPEN_FILE)
        self.assertEqual(MouseKind("drag"), MouseKind.DRAG)


class KeyTests(unittest.TestCase):
    def test_key_defaults(self):
        key = Key(Command.UP)
        self.assertIsNone(key.char)
        self.assertFalse(key.shift)

    def test_keys_compare_by_value(self):
        self.assertEqual(Key(Command.CHAR, "x"), Key(Command.CHAR, "x"))
        self.assertNotEqual(Key(Command.UP), Key(Command.UP, shift=True))


if __name__ == "__main__":
    unittest.main()
