import curses

from cell_values import kind_of
from coordinates import Coordinate, column_letter
from evaluation import display_text
from viewport import ROW_NUMBER_WIDTH


def format_cell(value, width: int) -> str:
    """Fit a displayed value into a cell: strings left, everything else right."""
    text = display_text(value)
    if len(text) > width:
        text = text[: width - 1]
    if kind_of(value) in ("string", "error"):
        return text.ljust(width)
    return text.rjust(width)


class GridPane:
    PAIR_UI = 1
    PAIR_CELL = 2
    PAIR_CURSOR = 3

    def __init__(self):
        self.attr_ui = curses.A_REVERSE
        self.attr_cell = curses.A_NORMAL
        self.attr_cursor = curses.A_REVERSE | curses.A_BOLD
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_UI, curses.COLOR_BLACK, curses.COLOR_GREEN)
            curses.init_pair(self.PAIR_CELL, curses.COLOR_GREEN, -1)
            curses.init_pair(self.PAIR_CURSOR, curses.COLOR_BLACK, curses.COLOR_GREEN)
            self.attr_ui = curses.color_pair(self.PAIR_UI)
            self.attr_cell = curses.color_pair(self.PAIR_CELL)
            self.attr_cursor = curses.color_pair(self.PAIR_CURSOR) | curses.A_BOLD
        except curses.error:
            pass

    @staticmethod
    def _put(win, y, x, text, attr):
        h, w = win.getmaxyx()
        if y < 0 or y >= h or x < 0 or x >= w:
            return
        try:
            win.addnstr(y, x, text, w - x, attr)
        except curses.error:
            # writing the bottom-right cell raises after the text is drawn
            pass

    # ---------- rendering ----------
    def draw_header(self, win, viewport):
        h, w = win.getmaxyx()
        self._put(win, 0, 0, " " * w, self.attr_ui)
        cw = viewport.cell_width
        for i, column in enumerate(viewport.visible_columns()):
            x = ROW_NUMBER_WIDTH + i * cw + cw // 2
            self._put(win, 0, x, column_letter(column), self.attr_ui)

    def draw(self, win, session):
        """Paint header, row numbers and the visible cells; formulas are re-evaluated here."""
        win.erase()
        viewport = session.viewport
        sheet = session.sheet
        cw = viewport.cell_width
        self.draw_header(win, viewport)

        cursor = viewport.cursor
        cache = {}
        for y, row in enumerate(viewport.visible_rows(), start=1):
            self._put(win, y, 0, f"{row + 1:3d}"[-ROW_NUMBER_WIDTH:], self.attr_ui)
            for i, column in enumerate(viewport.visible_columns()):
                coordinate = Coordinate(column, row)
                x = ROW_NUMBER_WIDTH + i * cw
                if coordinate in sheet:
                    text = format_cell(sheet.evaluate(coordinate, cache), cw)
                else:
                    text = " " * cw
                attr = self.attr_cursor if coordinate == cursor else self.attr_cell
                self._put(win, y, x, text, attr)
        win.noutrefresh()
