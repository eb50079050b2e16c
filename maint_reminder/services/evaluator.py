from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import read_log_range
from ..models.batch import LogTable
from ..models.config_models import ReminderConfig
from ..models.run_state import EvaluationResult, RunState
from ..notify.smtp import NotificationTransport
from .composer import compose
from .date_math import Clock, today_from
from .error_reporter import ErrorReporter
from .scanner import scan_log
from .summary import format_elapsed

"""Evaluation orchestration (run-evaluation-now).

Coordinates one run:
1. Read the configured range of the maintenance log
2. Scan and classify rows (today captured once from the clock)
3. Compose the reminder; send it unless there is nothing to send
4. Return an EvaluationResult for the SUMMARY line

Errors propagate; ``run_with_reporting`` routes them through ErrorReporter
exactly once. Either a complete message is sent or nothing is.
"""

__all__ = [
    "Evaluator",
    "SourceReader",
    "run_with_reporting",
]

logger = logging.getLogger(__name__)

SourceReader = Callable[[Path, str, str], LogTable]


class Evaluator:
    """One evaluation run over an already loaded configuration."""

    def __init__(
        self,
        config: ReminderConfig,
        transport: NotificationTransport,
        clock: Clock = datetime.now,
        reader: SourceReader = read_log_range,
    ) -> None:
        self.config = config
        self.transport = transport
        self.clock = clock
        self.reader = reader
        self.state = RunState.CONFIG_LOADED

    def _advance(self, state: RunState) -> None:
        logger.debug(f"state {self.state.value} -> {state.value}")
        self.state = state

    def mark_failed(self) -> None:
        self._advance(RunState.FAILED)

    def run(self) -> EvaluationResult:
        cfg = self.config
        start_time = datetime.now(UTC)
        logger.info("Starting maintenance log check")

        table = self.reader(Path(cfg.source.path), cfg.source.sheet_name, cfg.source.cell_range)
        batch = scan_log(
            table.header,
            table.rows,
            hints=cfg.columns,
            thresholds=cfg.thresholds,
            labels=cfg.templates.due_labels,
            today=today_from(self.clock),
            max_empty_rows=cfg.scan.max_empty_rows,
            sheet_name=cfg.source.sheet_name,
        )
        self._advance(RunState.SCANNED)
        logger.debug(
            f"scanned_rows={batch.scanned_rows} archived={batch.archived_rows} "
            f"due={len(batch.due)} overdue={len(batch.overdue)}"
        )

        notification = compose(batch.due, batch.overdue, cfg.templates, cfg.source.reference_url())
        sent = False
        subject = None
        if notification is None:
            self._advance(RunState.NOTHING_TO_SEND)
            logger.info("No tasks are currently due - Nice!")
        else:
            self._advance(RunState.COMPOSED)
            self.transport.send(cfg.recipient, notification.subject, notification.body)
            self._advance(RunState.SENT)
            sent = True
            subject = notification.subject
            logger.info(notification.subject)
            logger.info(notification.body)

        self._advance(RunState.DONE)
        end_time = datetime.now(UTC)
        elapsed = (end_time - start_time).total_seconds()
        logger.info(f"Maintenance log check complete, elapsed: {format_elapsed(elapsed)}")
        return EvaluationResult(
            state=self.state,
            due_count=len(batch.due),
            overdue_count=len(batch.overdue),
            sent=sent,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=elapsed,
            subject=subject,
        )


def run_with_reporting(evaluator: Evaluator, reporter: ErrorReporter) -> EvaluationResult:
    """Run ``evaluator``; any failure is reported once and then re-raised."""
    try:
        return evaluator.run()
    except Exception as e:
        stage = evaluator.state.value
        evaluator.mark_failed()
        reporter.report(e, fatal=True, stage=stage)
        raise  # report() re-raises when fatal; kept for type checkers
