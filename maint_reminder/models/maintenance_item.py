from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from ..services.date_math import days_between
from ..services.templating import render_template
from .config_models import DueLabels, Thresholds

"""MaintenanceItem domain model and ItemStatus enum.

A MaintenanceItem wraps one log row's task description and due date, evaluated
against "today" as captured when the scan started. Classification is a single
three-way function so callers never have to sequence two predicates to keep
the due and overdue buckets disjoint.
"""

__all__ = [
    "ItemStatus",
    "MaintenanceItem",
]


class ItemStatus(Enum):
    """Three-way classification of a maintenance item.

    - ON_SCHEDULE: nothing to do yet
    - DUE: at or below the due threshold, not overdue
    - OVERDUE: at or below the negative overdue threshold
    """
    ON_SCHEDULE = "on_schedule"
    DUE = "due"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class MaintenanceItem:
    description: str
    due_date: date
    today: date  # evaluation date, captured once per scan
    thresholds: Thresholds = field(repr=False)
    labels: DueLabels = field(repr=False)

    def days_til_due(self) -> int:
        """Days until due; negative when past due."""
        return days_between(self.today, self.due_date)

    def is_overdue(self) -> bool:
        return self.days_til_due() <= -self.thresholds.overdue_days

    def is_due(self) -> bool:
        # overdue items also satisfy this; use classify() for bucketing
        return self.days_til_due() <= self.thresholds.due_days

    def classify(self) -> ItemStatus:
        if self.is_overdue():
            return ItemStatus.OVERDUE
        if self.is_due():
            return ItemStatus.DUE
        return ItemStatus.ON_SCHEDULE

    def due_label(self) -> str:
        """Human-readable offset, e.g. "due in 3 days" or "due 20 days ago"."""
        days = self.days_til_due()
        if days == 0:
            return self.labels.today
        if days >= 1:
            return render_template(self.labels.future, {"days": days})
        return render_template(self.labels.past, {"days": abs(days)})
