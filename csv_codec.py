import logging
import os

import pandas as pd

from coordinates import MAX_COLUMNS, MAX_ROWS, Coordinate
from errors import CsvError

logger = logging.getLogger(__name__)


class CsvHandler:
    """Reads and writes a sheet as separator-delimited text.

    No header row; row N of the file is sheet row N, field M is column M.
    """

    def __init__(self, path: str, separator: str = ","):
        self.path = path
        self.separator = separator

    # ---------- reading ----------
    def read_rows(self) -> list[list[str]]:
        """Rows of fields, with absent trailing fields as "" and bounds checked."""
        if not os.path.isfile(self.path):
            raise CsvError(f"No such file: {self.path}")
        overlong = []

        def keep_overlong(fields):
            overlong.append(len(fields))
            return None

        try:
            frame = pd.read_csv(
                self.path,
                sep=self.separator,
                header=None,
                names=list(range(MAX_COLUMNS)),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                quotechar='"',
                doublequote=True,
                encoding="utf-8",
                engine="python",
                on_bad_lines=keep_overlong,
            )
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, ValueError, OSError) as exc:
            raise CsvError(str(exc)) from exc

        if len(frame) > MAX_ROWS:
            raise CsvError(f"Too many rows ({len(frame)} > {MAX_ROWS})")
        # an overlong first row turns its leading fields into the index
        if overlong or (len(frame) and not isinstance(frame.index, pd.RangeIndex)):
            raise CsvError(f"Too many columns (more than {MAX_COLUMNS})")

        rows = []
        for values in frame.itertuples(index=False, name=None):
            rows.append(["" if pd.isna(v) else v for v in values])
        return rows

    def load_into(self, sheet) -> bool:
        try:
            rows = self.read_rows()
        except CsvError as exc:
            logger.warning("load %s failed: %s", self.path, exc)
            return False

        sheet.clear()
        for y, row in enumerate(rows):
            for x, field in enumerate(row):
                if field == "":
                    continue
                sheet.set_input(Coordinate(x, y), field)
        sheet.modified = False
        logger.info("loaded %s (%d cells)", self.path, len(sheet))
        return True

    # ---------- writing ----------
    def to_frame(self, sheet) -> pd.DataFrame:
        columns, rows = sheet.used_bounds()
        data = [
            [sheet.get_source(Coordinate(x, y)) for x in range(columns)]
            for y in range(rows)
        ]
        return pd.DataFrame(data, columns=range(columns), dtype=object)

    def to_text(self, sheet) -> str:
        frame = self.to_frame(sheet)
        if frame.empty:
            return ""
        # With a CRLF terminator the writer quotes fields holding either
        # character; record ends are then the CRLFs outside quotes.
        text = frame.to_csv(
            None,
            sep=self.separator,
            header=False,
            index=False,
            quotechar='"',
            doublequote=True,
            lineterminator="\r\n",
        )
        return _unix_records(text, '"')

    def save_from(self, sheet) -> bool:
        text = self.to_text(sheet)
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as exc:
            logger.warning("save %s failed: %s", self.path, exc)
            return False
        sheet.modified = False
        logger.info("saved %s (%d cells)", self.path, len(sheet))
        return True


def _unix_records(text: str, quotechar: str) -> str:
    """Turn CRLF record ends into LF, leaving CRLFs inside quoted fields alone."""
    parts = text.split("\r\n")
    out = [parts[0]]
    quotes = parts[0].count(quotechar)
    for part in parts[1:]:
        out.append("\n" if quotes % 2 == 0 else "\r\n")
        out.append(part)
        quotes += part.count(quotechar)
    return "".join(out)


def load(sheet, path: str, separator: str = ",") -> bool:
    return CsvHandler(path, separator).load_into(sheet)


def save(sheet, path: str, separator: str = ",") -> bool:
    return CsvHandler(path, separator).save_from(sheet)
