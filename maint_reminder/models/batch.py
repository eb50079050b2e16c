from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .maintenance_item import MaintenanceItem

"""Scan input/output models.

LogTable is the rectangular grid handed over by the tabular source; rows carry
no identity beyond their position. ClassifiedBatch is the result of one scan,
consumed once by the composer.
"""

__all__ = [
    "ClassifiedBatch",
    "LogTable",
]


@dataclass(frozen=True)
class LogTable:
    """Header row plus data rows of the configured range (untyped cells)."""
    header: list[Any]
    rows: list[list[Any]]


@dataclass(frozen=True)
class ClassifiedBatch:
    """Due and overdue items of one scan, each in source row order."""
    due: list[MaintenanceItem] = field(default_factory=list)
    overdue: list[MaintenanceItem] = field(default_factory=list)
    scanned_rows: int = 0  # rows actually visited before the empty-row stop
    archived_rows: int = 0

    @property
    def total(self) -> int:
        return len(self.due) + len(self.overdue)

    @property
    def is_empty(self) -> bool:
        return self.total == 0
