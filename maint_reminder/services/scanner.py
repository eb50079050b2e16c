from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

import pandas as pd

from ..errors import ConfigurationError
from ..models.batch import ClassifiedBatch
from ..models.config_models import ColumnHints, DueLabels, Thresholds
from ..models.maintenance_item import ItemStatus, MaintenanceItem
from .columns import find_column
from .date_math import to_calendar_date

"""Maintenance log scanner.

Turns the header row and data rows of the log into a ClassifiedBatch:
1. Resolve the task / due-date / archived columns once from the header
2. Walk rows in order, stopping after a run of empty rows
3. Skip archived rows
4. Classify every remaining row and bucket it into due or overdue

Pure transformation over the rows it is given; logging is a side channel only.
"""

__all__ = [
    "DEFAULT_MAX_EMPTY_ROWS",
    "ColumnIndices",
    "is_archived",
    "is_blank",
    "resolve_columns",
    "scan_log",
]

logger = logging.getLogger(__name__)

# 事前に広めに確保されたレンジを最後まで読まないための打ち切り条件
DEFAULT_MAX_EMPTY_ROWS = 4

_FALSE_STRINGS = {"", "false", "no", "n", "0", "off"}


@dataclass(frozen=True)
class ColumnIndices:
    """Resolved column positions (0-based). archived is None when absent."""
    task: int
    due: int
    archived: int | None


def is_blank(value: Any) -> bool:
    """True for missing cells: None, NaN/NaT, empty or whitespace-only text."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_archived(value: Any) -> bool:
    """Interpret an archived-flag cell. Checkboxes, 1/0 and yes/no text all work."""
    if is_blank(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def resolve_columns(
    header_row: Sequence[Any], hints: ColumnHints, sheet_name: str | None = None
) -> ColumnIndices:
    """Locate the three configured columns.

    Raises:
        ConfigurationError: If the task or due-date column is missing
    """
    i_task = find_column(header_row, hints.task, sheet_name)
    i_due = find_column(header_row, hints.due, sheet_name)
    i_archived = find_column(header_row, hints.archived, sheet_name)

    if i_task is None or i_due is None:  # 0 は有効な列番号
        where = f" in {sheet_name} sheet" if sheet_name else ""
        raise ConfigurationError(
            f"Required columns not found{where}: "
            f"task={hints.task!r} -> {i_task}, due={hints.due!r} -> {i_due}"
        )
    if i_archived is None:
        logger.warning(
            f'archived column "{hints.archived}" not found; archived rows will not be filtered'
        )
    return ColumnIndices(i_task, i_due, i_archived)


def _cell(row: Sequence[Any], index: int | None) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def scan_log(
    header_row: Sequence[Any],
    rows: Iterable[Sequence[Any]],
    hints: ColumnHints,
    thresholds: Thresholds,
    labels: DueLabels,
    today: date,
    max_empty_rows: int = DEFAULT_MAX_EMPTY_ROWS,
    sheet_name: str | None = None,
) -> ClassifiedBatch:
    """Scan log rows and partition actionable items into due and overdue.

    Args:
        header_row: First row of the configured range
        rows: Data rows, in sheet order
        hints: Column-name hints for task, due date and archived flag
        thresholds: Due / overdue day thresholds
        labels: Due-label templates handed to each item
        today: Evaluation date shared by every item of this scan
        max_empty_rows: Consecutive rows missing task or due date that end the scan

    Returns:
        ClassifiedBatch with both lists in source row order

    Raises:
        ConfigurationError: If the task or due-date column cannot be found
    """
    cols = resolve_columns(header_row, hints, sheet_name)

    due: list[MaintenanceItem] = []
    overdue: list[MaintenanceItem] = []
    n_empty = 0
    scanned = 0
    archived_count = 0

    for row_number, row in enumerate(rows, start=1):
        if n_empty >= max_empty_rows:
            logger.debug(f"{n_empty} consecutive empty rows; stopping before data row {row_number}")
            break
        scanned += 1

        desc = _cell(row, cols.task)
        raw_due = _cell(row, cols.due)
        if is_blank(desc) or is_blank(raw_due):
            n_empty += 1
            continue

        if is_archived(_cell(row, cols.archived)):
            # 空行カウンタは変更しない
            archived_count += 1
            logger.debug(f"row {row_number}: archived, skipped")
            continue
        n_empty = 0

        due_date = to_calendar_date(raw_due)
        if due_date is None:
            logger.warning(f"row {row_number}: unreadable due date {raw_due!r} for {desc!r}, skipped")
            continue

        item = MaintenanceItem(
            description=str(desc).strip(),
            due_date=due_date,
            today=today,
            thresholds=thresholds,
            labels=labels,
        )
        status = item.classify()
        if status is ItemStatus.OVERDUE:
            overdue.append(item)
        elif status is ItemStatus.DUE:
            due.append(item)
        else:
            logger.debug(f"row {row_number}: {item.description!r} on schedule ({item.due_label()})")

    return ClassifiedBatch(due=due, overdue=overdue, scanned_rows=scanned, archived_rows=archived_count)
