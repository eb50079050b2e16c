from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON-lines error log.

One record per failed run. The key set is fixed; readers may rely on
exactly these keys being present.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        stage: Run state in which the failure happened (e.g. "scanned")
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error text as shown to the user
    """
    timestamp: str  # ISO8601 UTC
    stage: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(stage: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(timestamp=ts, stage=stage, error_type=error_type, message=message)

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
