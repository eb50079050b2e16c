# Shared pytest fixtures
from __future__ import annotations

import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

import pandas as pd
import pytest

from maint_reminder.logging.init import reset_logging
from maint_reminder.models.config_models import DueLabels, StatusLabels, TemplateConfig, Thresholds
from maint_reminder.services.schedule import Trigger

TODAY = date(2024, 6, 15)  # Saturday


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def no_smtp_env(monkeypatch):
    for name in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASSWORD", "SMTP_SENDER", "SMTP_STARTTLS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """recipient: owner@example.com
source:
  path: house_log.xlsx
  sheet_name: house_log
  cell_range: A1:D20
  url: https://example.com/house_log
schedule:
  days: [SATURDAY]
  hours: [7]
  crontab_path: config/maint-reminder.cron
  command: maint-reminder run
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "reminder.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def thresholds() -> Thresholds:
    return Thresholds(due_days=7, overdue_days=14)


@pytest.fixture()
def labels() -> DueLabels:
    return DueLabels(today="due today", future="due in {days} days", past="due {days} days ago")


@pytest.fixture()
def templates(labels: DueLabels) -> TemplateConfig:
    return TemplateConfig(
        subject="House maintenance due: {count} item(s)",
        footer="\nUpdate the log in {url}.",
        section_header="The following maintenance is {status}:",
        due_labels=labels,
        status_labels=StatusLabels(due="DUE", overdue="OVERDUE"),
    )


def write_log_xlsx(path: Path, rows: list[list[object]], sheet_name: str = "house_log") -> Path:
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


def sample_log_rows(today: date) -> list[list[object]]:
    return [
        ["Maintenance", "Next due", "Frequency", "Archived"],
        ["Clean gutters", datetime.combine(today - timedelta(days=20), datetime.min.time()), "", False],
        ["Replace filter", datetime.combine(today + timedelta(days=3), datetime.min.time()), "", False],
        ["Test smoke alarm", datetime.combine(today + timedelta(days=100), datetime.min.time()), "", True],
    ]


class RecordingTransport:
    """Transport fake that keeps every message; optionally fails."""

    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.error = error

    def send(self, to: str, subject: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to, subject, body))


class InMemoryTriggerStore:
    def __init__(self, triggers: list[Trigger] | None = None) -> None:
        self.triggers: list[Trigger] = list(triggers or [])

    def list_triggers_for(self, entry_point: str) -> list[Trigger]:
        return [t for t in self.triggers if t.entry_point == entry_point]

    def delete(self, trigger: Trigger) -> None:
        self.triggers.remove(trigger)

    def create(self, entry_point: str, weekday: str, hour: int) -> Trigger:
        t = Trigger(entry_point=entry_point, weekday=weekday, hour=hour)
        self.triggers.append(t)
        return t


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def trigger_store() -> InMemoryTriggerStore:
    return InMemoryTriggerStore()
