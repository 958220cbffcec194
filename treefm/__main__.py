"""
Entry point for treefm.
"""
import argparse
import curses
import dataclasses
import locale
import logging
import os
import traceback

from .constants import APP_NAME, APP_VERSION
from .core.app import TreeFM
from .core.config import default_config_path, load_config

LOGGER = logging.getLogger(__name__)

# Ensure UTF-8
try:
    locale.setlocale(locale.LC_ALL, '')
except locale.Error:
    pass


def build_parser():
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='Terminal file manager with a directory tree, trash and undo.',
    )
    parser.add_argument('path', nargs='?', default=None, help='Directory to open. Defaults to the current directory.')
    parser.add_argument('--show-hidden', action='store_true', help='Show entries whose names start with a dot.')
    parser.add_argument('--trash-dir', metavar='DIR', help='Where deleted entries are moved.')
    parser.add_argument('--config', metavar='FILE', help=f'Config file (default: {default_config_path()}).')
    parser.add_argument('--log-file', metavar='FILE', help='Write debug logs to FILE.')
    parser.add_argument('--version', action='version', version=f'{APP_NAME} {APP_VERSION}')
    return parser


def configure_logging(log_file=None):
    """Send debug records to a file; curses owns the terminal."""
    if not log_file and os.environ.get('TREEFM_DEBUG'):
        log_file = os.path.join(os.path.expanduser('~'), '.cache', APP_NAME, 'debug.log')
    if not log_file:
        return None
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    return log_file


def resolve_config(args):
    """Load the config file and apply command-line overrides."""
    config = load_config(args.config)
    overrides = {}
    if args.show_hidden:
        overrides['show_hidden'] = True
    if args.trash_dir:
        overrides['trash_dir'] = os.path.abspath(os.path.expanduser(args.trash_dir))
    return dataclasses.replace(config, **overrides) if overrides else config


def run(argv=None):
    """Run treefm and return process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    start_dir = os.path.abspath(os.path.expanduser(args.path or os.getcwd()))
    if not os.path.isdir(start_dir):
        print(f'{APP_NAME}: not a directory: {start_dir}')
        return 2
    config = resolve_config(args)
    LOGGER.debug('starting in %s with %r', start_dir, config)

    def main(stdscr):
        app = TreeFM(stdscr, start_dir=start_dir, config=config, config_path=args.config)
        app.run()

    try:
        curses.wrapper(main)
        return 0
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        # Any crash must leave the terminal usable.
        try:
            curses.endwin()
        except curses.error:
            pass
        LOGGER.exception('crashed')
        print(f'\nError: {e}')
        traceback.print_exc()
        return 1


def main_cli():
    """Console script entrypoint."""
    return run()


if __name__ == '__main__':
    raise SystemExit(main_cli())
