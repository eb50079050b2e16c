from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""RunState enum and EvaluationResult model.

State transitions per invocation:
    start → config_loaded → scanned → (composed → sent | nothing_to_send) → done
Any state may move to failed, which is terminal.
"""

__all__ = [
    "EvaluationResult",
    "RunState",
]


class RunState(Enum):
    START = "start"
    CONFIG_LOADED = "config_loaded"
    SCANNED = "scanned"
    COMPOSED = "composed"
    SENT = "sent"
    NOTHING_TO_SEND = "nothing_to_send"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of one evaluation run, used for the SUMMARY line."""
    state: RunState
    due_count: int
    overdue_count: int
    sent: bool
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    subject: str | None = None
