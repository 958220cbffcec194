"""Main loop helpers for treefm."""

import curses


def draw_frame(app):
    """Render a full frame before reading input."""
    app.stdscr.erase()
    app.draw_tree()
    app.draw_statusbar()
    app.draw_modal()
    app.stdscr.noutrefresh()
    curses.doupdate()


def read_input_key(stdscr):
    """Read one key from curses, returning None on timeout/no input."""
    try:
        return stdscr.get_wch()
    except curses.error:
        return None


def dispatch_input(app, key):
    """Dispatch one input event."""
    if key is None:
        return

    if isinstance(key, int) and key == curses.KEY_MOUSE:
        try:
            event = curses.getmouse()
        except curses.error:
            return
        app.handle_mouse(event)
        return

    if isinstance(key, int) and key == curses.KEY_RESIZE:
        curses.update_lines_cols()
        return

    app.handle_key(key)


def run_app_loop(app):
    """Run main draw/input loop with terminal cleanup on exit."""
    try:
        while app.running:
            draw_frame(app)
            key = read_input_key(app.stdscr)
            dispatch_input(app, key)
    finally:
        app.cleanup()
