from enum import Enum

import coordinates
from coordinates import MAX_COLUMNS, MAX_ROWS, Coordinate

# header row, message line and status bar
RESERVED_ROWS = 3
ROW_NUMBER_WIDTH = 3
DEFAULT_CELL_WIDTH = 10


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


_STEPS = {
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
}


class Viewport:
    """Cursor plus the top-left origin of the visible part of the sheet."""

    def __init__(self, height: int = 24, width: int = 80, cell_width: int = DEFAULT_CELL_WIDTH):
        self.height = height
        self.width = width
        self.cell_width = max(1, cell_width)
        self.cursor = Coordinate(0, 0)
        self.top = 0
        self.left = 0

    # ---------- geometry ----------
    def resize(self, height: int, width: int):
        self.height = height
        self.width = width
        self._follow_cursor()

    @property
    def page_height(self) -> int:
        return max(1, self.height - RESERVED_ROWS)

    @property
    def page_width(self) -> int:
        return max(1, (self.width - ROW_NUMBER_WIDTH) // self.cell_width)

    def visible_rows(self) -> range:
        return range(self.top, min(MAX_ROWS, self.top + self.page_height))

    def visible_columns(self) -> range:
        return range(self.left, min(MAX_COLUMNS, self.left + self.page_width))

    def is_visible(self, coordinate: Coordinate) -> bool:
        return coordinate.row in self.visible_rows() and coordinate.column in self.visible_columns()

    def _follow_cursor(self):
        row, column = self.cursor.row, self.cursor.column
        if row < self.top:
            self.top = row
        elif row >= self.top + self.page_height:
            self.top = row - self.page_height + 1
        if column < self.left:
            self.left = column
        elif column >= self.left + self.page_width:
            self.left = column - self.page_width + 1

    # ---------- movement ----------
    def move_cursor(self, direction: Direction) -> bool:
        dx, dy = _STEPS[direction]
        target = self.cursor.offset(dx, dy)
        if not coordinates.is_valid(target):
            return False
        self.cursor = target
        self._follow_cursor()
        return True

    def scroll_up(self, count: int) -> bool:
        if self.top == 0:
            return False
        self.top = max(0, self.top - max(1, count))
        last_visible = self.top + self.page_height - 1
        if self.cursor.row > last_visible:
            self.cursor = Coordinate(self.cursor.column, last_visible)
        return True

    def scroll_down(self, count: int) -> bool:
        max_top = MAX_ROWS - 1
        if self.top >= max_top:
            return False
        self.top = min(max_top, self.top + max(1, count))
        if self.cursor.row < self.top:
            self.cursor = Coordinate(self.cursor.column, self.top)
        return True

    def scroll_page(self, pages: float) -> bool:
        """Scroll by a (possibly fractional) number of pages; negative is up."""
        count = max(1, int(self.page_height * abs(pages)))
        if pages < 0:
            return self.scroll_up(count)
        return self.scroll_down(count)

    def move_to(self, coordinate: Coordinate) -> bool:
        if coordinate is None or not coordinates.is_valid(coordinate):
            return False
        self.top = max(0, coordinate.row - self.page_height // 2)
        self.left = max(0, coordinate.column - self.page_width // 2)
        self.cursor = coordinate
        return True
