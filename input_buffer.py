import curses

KEY_ESC = 27
KEY_CTRL_A = 1
KEY_CTRL_B = 2
KEY_CTRL_D = 4
KEY_CTRL_E = 5
KEY_CTRL_F = 6
KEY_CTRL_K = 11
KEY_CTRL_N = 14
KEY_CTRL_P = 16
KEY_CTRL_U = 21
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)


def normalize_key(key):
    """Map a curses get_wch() result onto the int/str key protocol.

    Control characters become ints; other characters stay one-char strings;
    special keys are already ints.
    """
    if isinstance(key, str):
        if len(key) == 1 and (ord(key) < 32 or ord(key) == 127):
            return ord(key)
        return key
    return key


def key_text(key):
    """Printable text carried by a key, or None for control/special keys."""
    if isinstance(key, str):
        return key if key.isprintable() and key != "" else None
    if isinstance(key, int) and 32 <= key <= 126:
        return chr(key)
    return None


class InputBuffer:
    """Single-line edit buffer used by insert and command modes."""

    def __init__(self):
        self.buffer = ""
        self.cursor = 0
        self.history = None  # None disables history navigation
        self.history_idx = None

    # ---------- state helpers ----------
    def reset(self):
        self.buffer = ""
        self.cursor = 0
        self.history_idx = None

    def set_buffer(self, text, cursor=None):
        self.buffer = text or ""
        self.cursor = len(self.buffer) if cursor is None else max(0, min(cursor, len(self.buffer)))
        self.history_idx = None

    def get_buffer(self):
        return self.buffer

    def is_blank(self):
        return self.buffer.strip() == ""

    def set_history(self, entries):
        self.history = None if entries is None else list(entries)
        self.history_idx = None

    def _apply_history(self, prefix):
        if self.history_idx is None:
            self.set_buffer(prefix)
            return
        self.buffer = self.history[self.history_idx]
        self.cursor = len(self.buffer)

    def _history_back(self):
        if not self.history:
            return
        if self.history_idx is None:
            self.history_idx = len(self.history) - 1
        else:
            self.history_idx = max(0, self.history_idx - 1)
        self._apply_history(":")

    def _history_forward(self):
        if not self.history or self.history_idx is None:
            return
        self.history_idx += 1
        if self.history_idx >= len(self.history):
            self.history_idx = None
        self._apply_history(":")

    # ---------- input handling ----------
    def handle_key(self, ch):
        """Apply one key; returns "submit", "cancel" or None."""
        if ch in ENTER_KEYS:
            return "submit"

        if ch == KEY_ESC:
            self.reset()
            return "cancel"

        if self.history is not None:
            if ch in (KEY_CTRL_P, curses.KEY_UP):
                self._history_back()
                return None
            if ch in (KEY_CTRL_N, curses.KEY_DOWN):
                self._history_forward()
                return None

        if ch in BACKSPACE_KEYS:
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            return None

        if ch in (curses.KEY_DC, KEY_CTRL_D):
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
            return None

        if ch in (curses.KEY_LEFT, KEY_CTRL_B):
            self.cursor = max(0, self.cursor - 1)
            return None

        if ch in (curses.KEY_RIGHT, KEY_CTRL_F):
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None

        if ch in (curses.KEY_HOME, KEY_CTRL_A):
            self.cursor = 0
            return None

        if ch in (curses.KEY_END, KEY_CTRL_E):
            self.cursor = len(self.buffer)
            return None

        if ch == KEY_CTRL_U:
            self.buffer = ""
            self.cursor = 0
            return None

        if ch == KEY_CTRL_K:
            self.buffer = self.buffer[: self.cursor]
            return None

        text = key_text(ch)
        if text is not None:
            self.buffer = self.buffer[: self.cursor] + text + self.buffer[self.cursor :]
            self.cursor += len(text)
            self.history_idx = None
        return None
