from __future__ import annotations

from pathlib import Path

import pytest

from maint_reminder.config.loader import load_config, read_raw_recipient
from maint_reminder.errors import ConfigurationError


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.recipient == "owner@example.com"
    assert cfg.source.cell_range == "A1:D20"
    assert cfg.source.reference_url() == "https://example.com/house_log"
    assert cfg.schedule.days == ("SATURDAY",)
    assert cfg.schedule.hours == (7,)


def test_load_config_applies_defaults(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.thresholds.due_days == 7
    assert cfg.thresholds.overdue_days == 14
    assert cfg.scan.max_empty_rows == 4
    assert cfg.columns.task == "Maintenance"
    assert cfg.columns.due == "Next due"
    assert cfg.columns.archived == "Archived"
    assert cfg.templates.due_labels.future == "due in {days} days"
    assert cfg.templates.status_labels.overdue == "OVERDUE"
    assert "{count}" in cfg.templates.subject


def test_load_config_partial_nested_override(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "templates:\n  due_labels:\n    today: today!\n"
    write_config.write_text(text, encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.templates.due_labels.today == "today!"
    assert cfg.templates.due_labels.past == "due {days} days ago"


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigurationError):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("recipient: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_missing_recipient(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("recipient: owner@example.com\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_placeholder_recipient(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("owner@example.com", "youremail@gmail.com")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_config(write_config)
    assert "recipient must be set" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_rejects_bad_hour(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("hours: [7]", "hours: [24]")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(write_config)


def test_load_config_normalizes_weekday_case(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("days: [SATURDAY]", "days: [saturday, Monday]")
    write_config.write_text(text, encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.schedule.days == ("SATURDAY", "MONDAY")


def test_load_config_rejects_unknown_weekday(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("days: [SATURDAY]", "days: [Caturday]")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_config(write_config)
    assert "unknown weekday" in str(e.value)


def test_load_config_source_url_fallback(write_config: Path, temp_workdir: Path):
    text = write_config.read_text(encoding="utf-8").replace("  url: https://example.com/house_log\n", "")
    write_config.write_text(text, encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.source.reference_url() == (temp_workdir / "house_log.xlsx").resolve().as_uri()


def test_smtp_env_overrides_yaml(write_config: Path, monkeypatch):
    text = write_config.read_text(encoding="utf-8") + "smtp:\n  host: yaml.example.com\n  port: 25\n"
    write_config.write_text(text, encoding="utf-8")
    monkeypatch.setenv("SMTP_HOST", "env.example.com")
    cfg = load_config(write_config)
    assert cfg.smtp.host == "env.example.com"
    assert cfg.smtp.port == 25


def test_smtp_port_env_must_be_int(write_config: Path, monkeypatch):
    monkeypatch.setenv("SMTP_PORT", "abc")
    with pytest.raises(ConfigurationError):
        load_config(write_config)


def test_read_raw_recipient(write_config: Path):
    assert read_raw_recipient(write_config) == "owner@example.com"


def test_read_raw_recipient_unusable(temp_workdir: Path):
    cfg = temp_workdir / "config" / "reminder.yml"
    assert read_raw_recipient(cfg) is None
    cfg.write_text("recipient: youremail@gmail.com\n", encoding="utf-8")
    assert read_raw_recipient(cfg) is None
    cfg.write_text(": : :\n  - [", encoding="utf-8")
    assert read_raw_recipient(cfg) is None
