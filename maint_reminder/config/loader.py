from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ..errors import ConfigurationError
from ..models.config_models import (
    PLACEHOLDER_RECIPIENT,
    ColumnHints,
    DueLabels,
    ReminderConfig,
    ScanConfig,
    ScheduleConfig,
    SmtpConfig,
    SourceConfig,
    StatusLabels,
    TemplateConfig,
    Thresholds,
)
from ..services.schedule import validate_schedule

"""Config loader.

Responsibilities:
- Load the YAML config (default: config/reminder.yml)
- Validate it against the bundled JSON schema (unknown keys rejected)
- Deep-merge the user values over DEFAULT_CONFIG
- Enforce that the recipient is set and is not the shipped placeholder
- Resolve SMTP settings (environment variables win over the YAML values)
"""

if TYPE_CHECKING:
    import jsonschema
    from jsonschema.exceptions import ValidationError
else:
    try:
        import jsonschema
        from jsonschema.exceptions import ValidationError
    except ImportError:  # pragma: no cover
        jsonschema = None  # type: ignore[assignment]
        ValidationError = Exception  # type: ignore[misc,assignment]

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "build_smtp_config",
    "load_config",
    "read_raw_recipient",
]

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/reminder.yml")

# Smart defaults; every key may be overridden in the YAML file.
DEFAULT_CONFIG: dict[str, Any] = {
    "source": {
        "path": "house_log.xlsx",
        "sheet_name": "house_log",
        "cell_range": "A1:L100",
        "url": None,
    },
    "schedule": {
        "days": ["SATURDAY"],
        "hours": [7],
        "crontab_path": "config/maint-reminder.cron",
        "command": "maint-reminder run",
    },
    "thresholds": {
        "due_days": 7,
        "overdue_days": 14,
    },
    "scan": {
        "max_empty_rows": 4,
    },
    "templates": {
        "subject": "🏠House maintenance due: {count} item(s)",
        "footer": "\nSee instructions and update Last Done date when complete in {url}.\n\n"
        " Thanks for the house love. 🔧❤️🔧",
        "section_header": "⚠️The following maintenance is {status}:",
        "due_labels": {
            "today": "due today",
            "future": "due in {days} days",
            "past": "due {days} days ago",
        },
        "status_labels": {
            "due": "DUE",
            "overdue": "OVERDUE",
        },
    },
    "columns": {
        "task": "Maintenance",
        "due": "Next due",
        "archived": "Archived",
    },
    "smtp": {
        "host": None,
        "port": None,
        "user": None,
        "password": None,
        "sender": None,
        "starttls": True,
    },
}


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigurationError: If jsonschema is unavailable, the schema file is
            missing or not valid JSON, or the data violates the schema
    """
    if jsonschema is None:
        raise ConfigurationError("jsonschema library is required for config validation")

    if not SCHEMA_PATH.exists():
        raise ConfigurationError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"config validation failed: {e.message}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_int(name: str, fallback: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer: {raw!r}") from e


def _env_bool(name: str, fallback: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def build_smtp_config(raw: dict[str, Any] | None = None) -> SmtpConfig:
    """SMTP settings from the environment, falling back to ``raw`` (YAML smtp section)."""
    raw = raw or {}
    # 環境変数 (.env 含む) > YAML の smtp セクション
    return SmtpConfig(
        host=os.getenv("SMTP_HOST") or raw.get("host"),
        port=_env_int("SMTP_PORT", raw.get("port")),
        user=os.getenv("SMTP_USER") or raw.get("user"),
        password=os.getenv("SMTP_PASSWORD") or raw.get("password"),
        sender=os.getenv("SMTP_SENDER") or raw.get("sender"),
        starttls=_env_bool("SMTP_STARTTLS", bool(raw.get("starttls", True))),
    )


def _is_placeholder(recipient: str) -> bool:
    return recipient.strip().lower() == PLACEHOLDER_RECIPIENT


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ReminderConfig:
    if not path.exists():
        raise ConfigurationError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    recipient = str(data["recipient"]).strip()
    if not recipient or _is_placeholder(recipient):
        raise ConfigurationError(
            "recipient must be set in the config before running (replace the sample address)"
        )

    merged = _deep_merge(DEFAULT_CONFIG, data)
    src = merged["source"]
    sch = merged["schedule"]
    # 曜日名は大文字に正規化 (saturday -> SATURDAY)
    days, hours = validate_schedule(sch["days"], sch["hours"])
    tpl = merged["templates"]
    cols = merged["columns"]

    return ReminderConfig(
        recipient=recipient,
        source=SourceConfig(
            path=src["path"],
            sheet_name=src["sheet_name"],
            cell_range=src["cell_range"],
            url=src.get("url"),
        ),
        schedule=ScheduleConfig(
            days=tuple(days),
            hours=tuple(hours),
            crontab_path=sch["crontab_path"],
            command=sch["command"],
        ),
        thresholds=Thresholds(
            due_days=merged["thresholds"]["due_days"],
            overdue_days=merged["thresholds"]["overdue_days"],
        ),
        scan=ScanConfig(max_empty_rows=merged["scan"]["max_empty_rows"]),
        templates=TemplateConfig(
            subject=tpl["subject"],
            footer=tpl["footer"],
            section_header=tpl["section_header"],
            due_labels=DueLabels(**tpl["due_labels"]),
            status_labels=StatusLabels(**tpl["status_labels"]),
        ),
        columns=ColumnHints(task=cols["task"], due=cols["due"], archived=cols["archived"]),
        smtp=build_smtp_config(merged["smtp"]),
    )


def read_raw_recipient(path: Path = DEFAULT_CONFIG_PATH) -> str | None:
    """Best-effort recipient lookup for error reporting.

    Reads the YAML without validation so that a config which fails to load
    can still name someone to notify. Returns None when no usable address is
    found (missing file, broken YAML, empty or placeholder value).
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.debug(f"fallback recipient unavailable: {e}")
        return None
    if not isinstance(data, dict):
        return None
    recipient = data.get("recipient")
    if not isinstance(recipient, str) or not recipient.strip() or _is_placeholder(recipient):
        return None
    return recipient.strip()
