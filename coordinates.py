import re
from dataclasses import dataclass
from typing import Optional

MAX_COLUMNS = 26
MAX_ROWS = 999

_NAME_PATTERN = re.compile(r"([A-Za-z])([0-9]+)")


@dataclass(frozen=True, order=True)
class Coordinate:
    """Zero-based (column, row) address of a cell."""

    column: int
    row: int

    def is_valid(self) -> bool:
        return is_valid(self)

    @property
    def name(self) -> str:
        return name(self)

    def offset(self, columns: int = 0, rows: int = 0) -> "Coordinate":
        return Coordinate(self.column + columns, self.row + rows)

    def __str__(self):
        if self.is_valid():
            return name(self)
        return f"({self.column}, {self.row})"


def is_valid(coordinate: Coordinate) -> bool:
    return 0 <= coordinate.column < MAX_COLUMNS and 0 <= coordinate.row < MAX_ROWS


def is_valid_name(text: str) -> bool:
    return parse(text) is not None


def parse(text: str) -> Optional[Coordinate]:
    """Parse a cell name such as ``B12`` (case-insensitive) into a Coordinate.

    Returns None for anything that is not one letter followed by digits, or
    whose row/column fall outside the sheet.
    """
    if not isinstance(text, str):
        return None
    match = _NAME_PATTERN.fullmatch(text)
    if not match:
        return None
    column = ord(match.group(1).upper()) - ord("A")
    row = int(match.group(2)) - 1
    coordinate = Coordinate(column, row)
    if not is_valid(coordinate):
        return None
    return coordinate


def name(coordinate: Coordinate) -> str:
    return f"{chr(ord('A') + coordinate.column)}{coordinate.row + 1}"


def column_letter(column: int) -> str:
    return chr(ord("A") + column)
