import curses
import logging

from command_executor import CommandExecutor
from editor import Editor
from grid_pane import GridPane
from input_buffer import normalize_key
from screen_layout import ScreenLayout
from status_bar import render_message, render_status, status_cursor_x

logger = logging.getLogger(__name__)


class Orchestrator:
    """Render, wait for one key, handle it; repeat until a quit command."""

    def __init__(self, stdscr, session):
        self.stdscr = stdscr
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(False)

        self.session = session
        self.session.on_mode_change = self._on_mode_change
        self.layout = ScreenLayout(stdscr)
        self.session.viewport.resize(self.layout.H, self.layout.W)
        self.grid = GridPane()

        self.exec = CommandExecutor(session)
        self.editor = Editor(session, self.exec)
        self._on_mode_change(session.mode)

    # ---------------- helpers ----------------

    def _on_mode_change(self, _mode):
        try:
            curses.curs_set(1 if self.session.editing else 0)
        except curses.error:
            pass

    def _relayout(self):
        curses.update_lines_cols()
        self.stdscr.clear()
        self.layout = ScreenLayout(self.stdscr)
        self.session.viewport.resize(self.layout.H, self.layout.W)

    # ---------------- UI ----------------

    def redraw(self):
        self.grid.draw(self.layout.table_win, self.session)

        mw = self.layout.message_win
        mw.erase()
        _, w = mw.getmaxyx()
        try:
            mw.addnstr(0, 0, render_message(self.session, w), max(0, w - 1))
        except curses.error:
            pass
        mw.noutrefresh()

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self.session, w), max(0, w - 1), self.grid.attr_ui)
        except curses.error:
            pass
        if self.session.editing:
            try:
                sw.move(0, max(0, min(status_cursor_x(self.session), w - 2)))
            except curses.error:
                pass
        sw.noutrefresh()
        curses.doupdate()

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()

        while not self.session.quit_requested:
            self.redraw()
            try:
                ch = self.stdscr.get_wch()
            except curses.error:
                continue
            ch = normalize_key(ch)

            if ch == curses.KEY_RESIZE:
                self._relayout()
                continue

            self.editor.handle_key(ch)

        logger.info("main loop finished")
