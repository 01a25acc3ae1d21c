import curses
import logging

from input_buffer import (
    BACKSPACE_KEYS,
    ENTER_KEYS,
    KEY_CTRL_B,
    KEY_CTRL_D,
    KEY_CTRL_F,
    KEY_CTRL_U,
)
from session import Mode
from viewport import Direction

logger = logging.getLogger(__name__)

_MOVES = {
    curses.KEY_LEFT: Direction.LEFT,
    curses.KEY_RIGHT: Direction.RIGHT,
    curses.KEY_UP: Direction.UP,
    curses.KEY_DOWN: Direction.DOWN,
    "h": Direction.LEFT,
    "l": Direction.RIGHT,
    "k": Direction.UP,
    "j": Direction.DOWN,
}

# pages scrolled per key; negative scrolls towards the top
_SCROLLS = {
    KEY_CTRL_F: 1,
    KEY_CTRL_B: -1,
    KEY_CTRL_D: 0.5,
    curses.KEY_NPAGE: 0.5,
    KEY_CTRL_U: -0.5,
    curses.KEY_PPAGE: -0.5,
}


def _as_char(ch):
    if isinstance(ch, str):
        return ch
    if isinstance(ch, int) and 32 <= ch <= 126:
        return chr(ch)
    return None


class Editor:
    """Turns key events into sheet edits, cursor motion and commands."""

    def __init__(self, session, dispatcher):
        self.session = session
        self.dispatcher = dispatcher

    @property
    def sheet(self):
        return self.session.sheet

    @property
    def viewport(self):
        return self.session.viewport

    @property
    def input(self):
        return self.session.input

    @property
    def mode(self):
        return self.session.mode

    # ---------- mode changes ----------
    def edit_current_cell(self, prepend: bool = False):
        cell = self.sheet.get(self.viewport.cursor)
        if cell is not None:
            self.input.set_buffer(cell.source, cursor=0 if prepend else None)
        else:
            self.input.reset()
        self.input.set_history(None)
        self.session.set_mode(Mode.INSERT)

    def start_command(self):
        self.input.set_buffer(":")
        self.input.set_history(self.session.history_items())
        self.session.set_mode(Mode.COMMAND)

    def _leave_input(self):
        self.input.reset()
        self.session.set_mode(Mode.NORMAL)

    def _submit(self):
        text = self.input.get_buffer()
        if self.mode == Mode.INSERT:
            cursor = self.viewport.cursor
            if self.input.is_blank():
                self.sheet.erase(cursor)
            else:
                self.sheet.set_input(cursor, text)
            self._leave_input()
            return
        # leave command mode before running, so commands may change mode themselves
        self._leave_input()
        if text.strip():
            self.dispatcher.execute(text)

    # ---------- public API ----------
    def handle_key(self, ch):
        if self.mode in (Mode.INSERT, Mode.COMMAND):
            result = self.input.handle_key(ch)
            if result == "submit":
                self._submit()
            elif result == "cancel":
                self._leave_input()
            return

        self._handle_normal(ch)

    def _handle_normal(self, ch):
        if ch in ENTER_KEYS or ch == curses.KEY_IC:
            self.edit_current_cell()
            return

        if ch in BACKSPACE_KEYS or ch == curses.KEY_DC:
            self.sheet.erase(self.viewport.cursor)
            return

        if ch in _SCROLLS:
            self.viewport.scroll_page(_SCROLLS[ch])
            return

        char = _as_char(ch)
        direction = _MOVES.get(ch if char is None else char)
        if direction is not None:
            self.viewport.move_cursor(direction)
            return

        if char == ":":
            self.start_command()
        elif char == "i":
            self.edit_current_cell()
        elif char in ("A", "I"):
            self.edit_current_cell(prepend=True)
        elif char == "J":
            # fold the cursor cell into the one above it
            cursor = self.viewport.cursor
            if self.sheet.join(cursor.offset(rows=-1), cursor):
                self.viewport.move_cursor(Direction.UP)
        elif char == "O":
            if self.viewport.move_cursor(Direction.UP):
                self.edit_current_cell()
