from __future__ import annotations

import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import ConfigurationError, SourceAccessError
from ..models.batch import LogTable

"""Maintenance log reader.

Reads the configured A1-notation range of a workbook sheet (.xlsx/.xls) or a
CSV file as a raw grid: the first row of the range is the header, every
following row is data. Cells are returned untyped; NaN/NaT become None.
"""

__all__ = [
    "CellRange",
    "parse_cell_range",
    "read_log_range",
]

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
CSV_SUFFIXES = {".csv"}

_RANGE = re.compile(r"^\s*([A-Za-z]{1,3})(\d+)\s*:\s*([A-Za-z]{1,3})(\d+)\s*$")


@dataclass(frozen=True)
class CellRange:
    """0-based inclusive bounds of an A1 range."""
    first_row: int
    first_col: int
    last_row: int
    last_col: int


def _column_index(letters: str) -> int:
    n = 0
    for ch in letters.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def parse_cell_range(cell_range: str) -> CellRange:
    """Parse ``"A1:L100"`` into 0-based bounds.

    Raises:
        ConfigurationError: On malformed or inverted ranges
    """
    m = _RANGE.match(cell_range)
    if m is None:
        raise ConfigurationError(f"invalid cell range: {cell_range!r} (expected e.g. A1:L100)")
    c0, r0, c1, r1 = m.groups()
    rng = CellRange(
        first_row=int(r0) - 1,
        first_col=_column_index(c0),
        last_row=int(r1) - 1,
        last_col=_column_index(c1),
    )
    if rng.first_row < 0 or rng.last_row < rng.first_row or rng.last_col < rng.first_col:
        raise ConfigurationError(f"invalid cell range: {cell_range!r}")
    return rng


def _read_raw(path: Path, sheet_name: str) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        try:
            return pd.read_csv(path, header=None, skip_blank_lines=False)
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
            raise SourceAccessError(f"cannot read {path}: {e}") from e
    if suffix not in EXCEL_SUFFIXES:
        raise ConfigurationError(f"unsupported maintenance log type: {path.suffix or path.name}")

    try:
        xls = pd.ExcelFile(path)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise SourceAccessError(f"cannot open workbook {path}: {e}") from e
    with xls:
        # シート名は大文字小文字まで一致させる
        if sheet_name not in [str(n) for n in xls.sheet_names]:
            raise ConfigurationError(f'Sheet "{sheet_name}" not found in {path.name}')
        try:
            return xls.parse(sheet_name, header=None)
        except (OSError, ValueError) as e:
            raise SourceAccessError(f"cannot read sheet {sheet_name!r} of {path}: {e}") from e


def _clean(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def read_log_range(path: Path, sheet_name: str, cell_range: str) -> LogTable:
    """Read header and data rows of the configured range.

    Rows beyond the end of the sheet are simply absent; short rows are padded
    with None to the width of the range.

    Raises:
        SourceAccessError: If the file is missing or unreadable
        ConfigurationError: If the sheet is missing, the range is malformed or
            the range holds no header row
    """
    rng = parse_cell_range(cell_range)
    if not path.exists():
        raise SourceAccessError(f"maintenance log not found: {path}")

    df = _read_raw(path, sheet_name)
    width = rng.last_col - rng.first_col + 1
    part = df.iloc[rng.first_row : rng.last_row + 1, rng.first_col : rng.last_col + 1]
    grid: list[list[Any]] = []
    for raw in part.itertuples(index=False, name=None):
        row = [_clean(v) for v in raw]
        row.extend([None] * (width - len(row)))
        grid.append(row)

    if not grid:
        raise ConfigurationError(
            f"no header row in range {cell_range} of {path.name}"
            + ("" if path.suffix.lower() in CSV_SUFFIXES else f" sheet {sheet_name}")
        )
    return LogTable(header=grid[0], rows=grid[1:])
