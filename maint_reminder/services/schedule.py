from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from ..errors import ConfigurationError

"""Recurring schedule management.

A schedule is the cross product of configured weekdays and hours, materialized
as one trigger registration per (day, hour) pair. Applying a schedule replaces
every registration previously created for the same entry point; registrations
belonging to other entry points are never touched.
"""

__all__ = [
    "ENTRY_POINT",
    "WEEKDAYS",
    "Trigger",
    "TriggerStore",
    "apply_schedule",
    "validate_schedule",
]

logger = logging.getLogger(__name__)

# トリガーが呼び出すエントリポイント名 (CLI の run サブコマンド)
ENTRY_POINT = "run"

WEEKDAYS = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)


@dataclass(frozen=True)
class Trigger:
    entry_point: str
    weekday: str  # one of WEEKDAYS
    hour: int  # 0-23


class TriggerStore(Protocol):
    """Host-side store of recurring registrations."""

    def list_triggers_for(self, entry_point: str) -> list[Trigger]: ...

    def delete(self, trigger: Trigger) -> None: ...

    def create(self, entry_point: str, weekday: str, hour: int) -> Trigger: ...


def validate_schedule(days: Iterable[str], hours: Iterable[int]) -> tuple[list[str], list[int]]:
    """Normalize weekday names to upper case and check hour bounds.

    Raises:
        ConfigurationError: On an unknown weekday or an hour outside 0-23
    """
    norm_days: list[str] = []
    for day in days:
        name = str(day).strip().upper()
        if name not in WEEKDAYS:
            raise ConfigurationError(f"unknown weekday in schedule: {day!r}")
        norm_days.append(name)
    norm_hours: list[int] = []
    for hour in hours:
        if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
            raise ConfigurationError(f"schedule hour must be an integer 0-23: {hour!r}")
        norm_hours.append(hour)
    return norm_days, norm_hours


def apply_schedule(
    store: TriggerStore,
    days: Iterable[str],
    hours: Iterable[int],
    entry_point: str = ENTRY_POINT,
) -> list[Trigger]:
    """Replace the schedule for ``entry_point`` with days × hours.

    Inputs are validated before anything is deleted. Empty days or hours
    leave zero registrations, which disables the schedule.

    Returns:
        The triggers created, in day-major order
    """
    norm_days, norm_hours = validate_schedule(days, hours)

    for trigger in store.list_triggers_for(entry_point):
        store.delete(trigger)
        logger.info(f"Deleted prior schedule for {entry_point} ({trigger.weekday} at {trigger.hour}:00)")

    created: list[Trigger] = []
    for day in norm_days:
        for hour in norm_hours:
            created.append(store.create(entry_point, day, hour))
            logger.info(f"Set up schedule for {day} at {hour}:00")

    if not created:
        logger.warning("schedule has no days or hours; automatic reminders are disabled")
    return created
