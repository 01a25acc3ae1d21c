import datetime
import re
from enum import IntEnum
from typing import Optional

import numpy as np
import pandas as pd

FORMULA_MARKER = "="
ERROR_DISPLAY = "#ERROR"
# ints wider than this cannot be turned back into text by the interpreter
MAX_INT_BITS = 13000

_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")
_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME = re.compile(r"\d{1,2}:\d{2}(?::\d{2})?")


class Month(IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self):
        return self.label


class Weekday(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self):
        return self.label


_MONTHS = {m.label: m for m in Month}
_WEEKDAYS = {d.label: d for d in Weekday}


class ErrorValue:
    """Display state of a cell whose formula could not be evaluated."""

    def __init__(self, message: str = ""):
        self.message = message

    def __eq__(self, other):
        return isinstance(other, ErrorValue)

    def __hash__(self):
        return hash(ERROR_DISPLAY)

    def __repr__(self):
        return f"ErrorValue({self.message!r})"

    def __str__(self):
        return ERROR_DISPLAY


def is_error(value) -> bool:
    return isinstance(value, ErrorValue)


def is_blank(text) -> bool:
    return text is None or str(text).strip() == ""


def is_formula_text(value) -> bool:
    return isinstance(value, str) and value.startswith(FORMULA_MARKER)


# ---------- classifiers ----------
# Each parser returns the typed value or None when the text does not match.


def fits_int(value: int) -> bool:
    return value.bit_length() <= MAX_INT_BITS


def parse_number(text: str):
    if not _NUMBER.fullmatch(text):
        return None
    if _INTEGER.fullmatch(text):
        try:
            value = int(text)
        except ValueError:
            return None
        return value if fits_int(value) else None
    return float(text)


def parse_date(text: str):
    if not _DATE.fullmatch(text):
        return None
    try:
        return pd.to_datetime(text, format="%Y-%m-%d").date()
    except (ValueError, OverflowError):
        return None


def parse_time(text: str):
    if not _TIME.fullmatch(text):
        return None
    fmt = "%H:%M:%S" if text.count(":") == 2 else "%H:%M"
    try:
        return pd.to_datetime(text, format=fmt).time()
    except (ValueError, OverflowError):
        return None


def parse_month(text: str):
    return _MONTHS.get(text)


def parse_weekday(text: str):
    return _WEEKDAYS.get(text)


def parse_boolean(text: str):
    if text == "true":
        return True
    if text == "false":
        return False
    return None


# Trial order decides the stored type of ambiguous input.
CLASSIFIERS = (
    ("number", parse_number),
    ("date", parse_date),
    ("time", parse_time),
    ("month", parse_month),
    ("weekday", parse_weekday),
    ("boolean", parse_boolean),
)


def classify(text: str):
    """Return ``(kind, value)`` for raw cell input, falling back to string."""
    text = "" if text is None else str(text)
    for kind, parser in CLASSIFIERS:
        value = parser(text)
        if value is not None:
            return kind, value
    return "string", text


def coerce_input(text: str):
    return classify(text)[1]


def kind_of(value) -> Optional[str]:
    """Name of the value kind, or None for objects that are not cell values."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Month):
        return "month"
    if isinstance(value, Weekday):
        return "weekday"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, datetime.date):
        return "date"
    if isinstance(value, datetime.time):
        return "time"
    if isinstance(value, ErrorValue):
        return "error"
    if isinstance(value, str):
        return "string"
    return None


def normalize(value):
    """Convert numpy/pandas scalars coming out of formulas into cell values."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, pd.Timestamp):
        value = value.date()
    elif isinstance(value, datetime.datetime):
        value = value.date()
    elif isinstance(value, datetime.timedelta):
        days = value.total_seconds() / 86400
        value = int(days) if days.is_integer() else days
    return value


def _format_float(value: float) -> str:
    if value != value or value in (float("inf"), float("-inf")):
        return repr(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def format_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Month, Weekday)):
        return value.label
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, datetime.time):
        if value.second:
            return value.strftime("%H:%M:%S")
        return value.strftime("%H:%M")
    return str(value)
