from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

"""Header column lookup by case-insensitive substring match.

Tolerant of column reordering: the log owner may move columns around freely as
long as each header still contains its configured hint.
"""

__all__ = [
    "find_column",
]

logger = logging.getLogger(__name__)


def find_column(header_row: Sequence[Any], label: str, sheet_name: str | None = None) -> int | None:
    """Return the index of the first header cell containing ``label``.

    Matching is case-insensitive and on substrings, so ``"due"`` finds
    ``"Next Due Date"``. Non-string header cells never match. Returns None
    when nothing matches; the caller decides whether that is fatal.
    """
    # label はリテラル扱い (正規表現メタ文字を無効化)
    pattern = re.compile(re.escape(label), re.IGNORECASE)
    for i, cell in enumerate(header_row):
        if isinstance(cell, str) and pattern.search(cell):
            return i
    where = f" on sheet {sheet_name}" if sheet_name else ""
    logger.info(f'No column found matching label "{label}"{where}')
    return None
