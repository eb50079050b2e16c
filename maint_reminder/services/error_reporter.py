from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ReminderError, TransportError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..notify.smtp import NotificationTransport

"""Last-resort failure path.

Every failure of a run ends here exactly once. The error is recorded in the
JSON-lines error log and mailed to the configured (or fallback) recipient
with a link to that log. Transport failures are only logged locally, since
the channel that just failed cannot be trusted to deliver the report.
"""

__all__ = [
    "ERROR_SUBJECT",
    "ErrorReporter",
]

logger = logging.getLogger(__name__)

ERROR_SUBJECT = "ERROR in maintenance reminder"


class ErrorReporter:
    def __init__(
        self,
        transport: NotificationTransport,
        recipient: str | None,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        self.transport = transport
        self.recipient = recipient
        self.error_log = error_log if error_log is not None else ErrorLogBuffer()

    def _record(self, error: BaseException, stage: str) -> str:
        error_type = getattr(error, "error_type", "UNEXPECTED_ERROR")
        self.error_log.append(ErrorRecord.create(stage=stage, error_type=error_type, message=str(error)))
        try:
            path: Path = self.error_log.flush()
        except OSError as e:
            logger.warning(f"could not write error log: {e}")
            return "(error log unavailable)"
        return path.resolve().as_uri()

    def report(self, error: BaseException | str, fatal: bool = True, stage: str = "start") -> None:
        """Notify about ``error``; re-raise it afterwards when ``fatal``.

        Args:
            error: Exception (or plain message) describing the failure
            fatal: Propagate the error after notifying so the run fails
            stage: Run state in which the failure happened
        """
        exc = error if isinstance(error, BaseException) else ReminderError(error)
        link = self._record(exc, stage)
        logger.error(f"{stage}: {exc}")

        if isinstance(exc, TransportError):
            logger.error(f"notification channel failed; error not mailed (see {link})")
        elif not self.recipient:
            logger.error("Cannot send error email - no recipient configured")
        else:
            body = f"Maintenance reminder failed with error:\n{exc}\n\n{link}"
            try:
                self.transport.send(self.recipient, ERROR_SUBJECT, body)
            except TransportError as send_error:
                logger.error(f"failed to mail error report to {self.recipient}: {send_error}")

        if fatal:
            raise exc
