from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

"""Config dataclasses for the maintenance reminder.

The loader in maint_reminder/config/loader.py builds one ``ReminderConfig`` per
invocation; it is passed explicitly to every component that needs it and is
never mutated afterwards.
"""

__all__ = [
    "PLACEHOLDER_RECIPIENT",
    "ColumnHints",
    "DueLabels",
    "ReminderConfig",
    "ScanConfig",
    "ScheduleConfig",
    "SmtpConfig",
    "SourceConfig",
    "StatusLabels",
    "TemplateConfig",
    "Thresholds",
]

PLACEHOLDER_RECIPIENT = "youremail@gmail.com"


@dataclass(frozen=True)
class SourceConfig:
    """Where the maintenance log lives."""
    path: str  # .xlsx / .csv
    sheet_name: str  # CSV の場合は無視
    cell_range: str  # A1 notation, first row = header
    url: str | None = None  # link shown in the footer

    def reference_url(self) -> str:
        if self.url:
            return self.url
        return Path(self.path).resolve().as_uri()


@dataclass(frozen=True)
class ScheduleConfig:
    days: tuple[str, ...]  # MONDAY..SUNDAY
    hours: tuple[int, ...]  # 0-23
    crontab_path: str
    command: str


@dataclass(frozen=True)
class Thresholds:
    """Day thresholds used to classify an item."""
    due_days: int  # due within N days
    overdue_days: int  # overdue by at least M days


@dataclass(frozen=True)
class ScanConfig:
    max_empty_rows: int  # consecutive empty rows treated as end of data


@dataclass(frozen=True)
class DueLabels:
    today: str
    future: str  # {days}
    past: str  # {days}


@dataclass(frozen=True)
class StatusLabels:
    due: str
    overdue: str


@dataclass(frozen=True)
class TemplateConfig:
    subject: str  # {count}
    footer: str  # {url}
    section_header: str  # {status}
    due_labels: DueLabels
    status_labels: StatusLabels


@dataclass(frozen=True)
class ColumnHints:
    """Header hints, matched case-insensitively as substrings."""
    task: str
    due: str
    archived: str


@dataclass(frozen=True)
class SmtpConfig:
    """Mail transport settings.

    Environment variables take precedence over these values.
    """
    host: str | None
    port: int | None
    user: str | None
    password: str | None
    sender: str | None
    starttls: bool = True


@dataclass(frozen=True)
class ReminderConfig:
    """Root configuration object for one evaluation or schedule run."""
    recipient: str
    source: SourceConfig
    schedule: ScheduleConfig
    thresholds: Thresholds
    scan: ScanConfig
    templates: TemplateConfig
    columns: ColumnHints
    smtp: SmtpConfig
