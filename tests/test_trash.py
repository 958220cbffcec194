import os
import tempfile
import unittest

from _support import build_tree
from treefm.core.trash import TrashStore, default_trash_dir


class TrashStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = os.path.join(self.tmp.name, 'trash')
        self.trash = TrashStore(self.root, clock=lambda: 1700000000.75)

    def test_ensure_creates_root(self):
        self.assertFalse(os.path.isdir(self.root))
        self.trash.ensure()
        self.assertTrue(os.path.isdir(self.root))
        self.trash.ensure()

    def test_name_is_timestamp_and_original_name(self):
        self.trash.ensure()
        self.assertEqual(
            self.trash.path_for('/home/u/notes.txt'),
            os.path.join(self.root, '1700000000_notes.txt'),
        )

    def test_same_second_collision_gets_counter(self):
        self.trash.ensure()
        build_tree(self.root, {'1700000000_notes.txt': 'old'})
        self.assertEqual(
            self.trash.path_for('/elsewhere/notes.txt'),
            os.path.join(self.root, '1700000000_notes (1).txt'),
        )

    def test_directory_with_trailing_separator(self):
        self.assertEqual(
            self.trash.path_for('/srv/data/'),
            os.path.join(self.root, '1700000000_data'),
        )

    def test_default_root_lives_under_home(self):
        self.assertTrue(default_trash_dir().endswith(os.path.join('.local', 'share', 'treefm', 'trash')))


if __name__ == '__main__':
    unittest.main()
