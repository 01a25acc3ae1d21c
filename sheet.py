import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

import coordinates
from cell_values import coerce_input, format_value, is_formula_text
from coordinates import Coordinate
from errors import EvaluationError
from evaluation import evaluate
from formula import FormulaEvaluator, add

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    coordinate: Coordinate
    value: Any

    @property
    def is_formula(self) -> bool:
        return is_formula_text(self.value)

    @property
    def source(self) -> str:
        if isinstance(self.value, str):
            return self.value
        return format_value(self.value)


class Sheet:
    """Sparse grid of cells keyed by Coordinate.

    Empty cells have no entry; ``modified`` tracks unsaved changes.
    """

    def __init__(self, separator: str = ",", filename: Optional[str] = None, evaluator=None):
        self.filename = filename
        self.separator = separator
        self.modified = False
        self.evaluator = evaluator if evaluator is not None else FormulaEvaluator()
        self._cells: Dict[Coordinate, Cell] = {}

    def __len__(self):
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(list(self._cells.values()))

    def __contains__(self, coordinate):
        return coordinate in self._cells

    # ---------- lookup ----------
    def get(self, coordinate: Coordinate) -> Optional[Cell]:
        return self._cells.get(coordinate)

    def get_source(self, coordinate: Coordinate) -> str:
        cell = self.get(coordinate)
        return cell.source if cell is not None else ""

    def used_bounds(self) -> Tuple[int, int]:
        """(columns, rows) of the smallest rectangle from A1 holding every cell."""
        if not self._cells:
            return 0, 0
        columns = max(c.column for c in self._cells) + 1
        rows = max(c.row for c in self._cells) + 1
        return columns, rows

    # ---------- mutation ----------
    def set(self, coordinate: Coordinate, value) -> bool:
        if not coordinates.is_valid(coordinate):
            return False
        if value is None or value == "":
            self.erase(coordinate)
            return True
        self._cells[coordinate] = Cell(coordinate, value)
        self.modified = True
        return True

    def set_input(self, coordinate: Coordinate, text: str) -> bool:
        """Store raw text, sniffing its type the way typed entry does."""
        return self.set(coordinate, coerce_input(text))

    def erase(self, coordinate: Coordinate) -> bool:
        if self._cells.pop(coordinate, None) is None:
            return False
        self.modified = True
        return True

    def clear(self):
        if self._cells:
            self._cells.clear()
            self.modified = True

    def join(self, first: Coordinate, second: Coordinate) -> bool:
        """Add the evaluated values of two cells into ``first``; drop ``second``."""
        if not (coordinates.is_valid(first) and coordinates.is_valid(second)):
            return False
        if first == second:
            return False
        if self.get(first) is None or self.get(second) is None:
            return False
        try:
            combined = add(self.evaluate(first), self.evaluate(second))
        except EvaluationError as exc:
            logger.debug("join %s + %s failed: %s", first, second, exc)
            return False
        self.set(first, combined)
        self.erase(second)
        return True

    # ---------- evaluation ----------
    def evaluate(self, coordinate: Coordinate, cache=None):
        """Display value of the cell at ``coordinate`` (None when empty).

        Pass the same ``cache`` dict to evaluate many cells of an unchanged sheet.
        """
        cell = self.get(coordinate)
        if cell is None:
            return None
        return evaluate(self, cell, cache)
