"""Domain models for the maintenance reminder."""

from .batch import ClassifiedBatch, LogTable
from .config_models import (
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
from .error_record import ErrorRecord
from .maintenance_item import ItemStatus, MaintenanceItem
from .run_state import EvaluationResult, RunState

__all__ = [
    # Configuration models
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
    # Evaluation models
    "ClassifiedBatch",
    "EvaluationResult",
    "ErrorRecord",
    "ItemStatus",
    "LogTable",
    "MaintenanceItem",
    "RunState",
]
