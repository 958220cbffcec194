"""
Main treefm application class.
"""
import dataclasses
import logging
import os

from ..constants import INPUT_TIMEOUT_MS
from ..utils import check_unicode_support, init_colors, open_with_system
from .actions import ActionType, MouseKind
from .bootstrap import (
    configure_terminal,
    disable_flow_control,
    disable_mouse_support,
    enable_mouse_support,
    restore_terminal,
)
from .config import AppConfig, load_config, save_config
from .controller import ExplorerController
from .elevation import ElevationRunner
from .event_loop import run_app_loop
from .key_router import MouseDecoder, decode_key
from .listing import DirectoryLister
from .navigation import NavigationModel
from .operations import OperationEngine
from .rendering import draw_modal, draw_statusbar, draw_tree, glyph_set, tree_height
from .trash import TrashStore

LOGGER = logging.getLogger(__name__)


class TreeFM:
    """Main application class."""

    def __init__(self, stdscr, start_dir=None, config=None, config_path=None, opener=open_with_system):
        self.stdscr = stdscr
        self.running = True
        self.config = config or AppConfig()
        self.config_path = config_path
        self.use_unicode = check_unicode_support()
        self.glyphs = glyph_set(self.use_unicode)
        self._opener = opener
        self.mouse = MouseDecoder()

        lister = DirectoryLister(self.config.show_hidden, self.config.sort_by)
        self.nav = NavigationModel(start_dir or os.getcwd(), lister)
        self.trash = TrashStore(self.config.trash_dir or None)
        self.engine = OperationEngine(self.trash, ElevationRunner(self.config.elevation_helper))
        self.controller = ExplorerController(
            self.nav, self.engine, on_listing_changed=self.persist_listing,
        )

        # Setup terminal
        configure_terminal(stdscr, timeout_ms=INPUT_TIMEOUT_MS)
        disable_flow_control()
        enable_mouse_support()
        init_colors(self.config.theme)

        self.nav.load()
        try:
            self.trash.ensure()
        except OSError as exc:
            LOGGER.warning('cannot create trash directory %s: %s', self.trash.root, exc)
            self.controller.show_status(f'Cannot create trash directory: {exc}')
        if self.nav.load_error:
            self.controller.show_status(f'Cannot read directory: {self.nav.load_error}')

    def persist_listing(self, lister):
        """Write the hidden/sort toggles back to the config file.

        Only those two keys change on disk; command-line overrides held in
        ``self.config`` stay out of the file.
        """
        toggles = {'show_hidden': lister.show_hidden, 'sort_by': lister.sort_key}
        self.config = dataclasses.replace(self.config, **toggles)
        try:
            saved = dataclasses.replace(load_config(self.config_path), **toggles)
            save_config(saved, self.config_path)
        except OSError as exc:
            LOGGER.warning('cannot save config: %s', exc)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_tree(self):
        draw_tree(self)

    def draw_statusbar(self):
        draw_statusbar(self)

    def draw_modal(self):
        draw_modal(self)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key):
        """Decode one raw key and route it through the controller."""
        decoded = decode_key(key)
        if decoded is None:
            return
        self._dispatch_result(self.controller.handle_key(decoded))

    def handle_mouse(self, event):
        """Route one curses mouse event (id, x, y, z, bstate)."""
        _, _mx, my, _, bstate = event
        ctrl = MouseDecoder.ctrl_held(bstate)
        in_tree = 0 <= my < tree_height(self.stdscr)
        for kind in self.mouse.decode(bstate):
            if in_tree:
                self.controller.handle_mouse(kind, my, ctrl)
            elif kind is MouseKind.RELEASE:
                self.nav.release()

    def _dispatch_result(self, result):
        if result is None:
            return
        if result.type is ActionType.QUIT:
            self.running = False
        elif result.type is ActionType.OPEN_FILE:
            self.open_file(result.payload)

    def open_file(self, path):
        try:
            self._opener(path)
        except OSError as exc:
            LOGGER.debug('cannot open %s: %s', path, exc)
            self.controller.report_open(path, exc)
            return
        self.controller.report_open(path)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cleanup(self):
        disable_mouse_support()
        restore_terminal()

    def run(self):
        run_app_loop(self)
