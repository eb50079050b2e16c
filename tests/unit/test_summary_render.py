from __future__ import annotations

import re
from datetime import UTC, datetime

import pytest

from maint_reminder.models.run_state import EvaluationResult, RunState
from maint_reminder.services.summary import format_elapsed, render_summary_line

T = datetime(2024, 6, 15, 7, 0, tzinfo=UTC)


def _result(**kw) -> EvaluationResult:
    base = dict(
        state=RunState.DONE, due_count=1, overdue_count=1, sent=True,
        start_time=T, end_time=T, elapsed_seconds=0.5,
    )
    base.update(kw)
    return EvaluationResult(**base)


def test_render_summary_line():
    assert render_summary_line(_result()) == "SUMMARY due=1 overdue=1 sent=yes state=done elapsed=500 ms"


def test_render_summary_line_nothing_sent():
    line = render_summary_line(_result(due_count=0, overdue_count=0, sent=False, elapsed_seconds=2))
    assert line == "SUMMARY due=0 overdue=0 sent=no state=done elapsed=2 second"


@pytest.mark.parametrize(
    "seconds, text",
    [
        (0, "0 ms"),
        (0.0004, "0 ms"),
        (0.999, "999 ms"),
        (1, "1 second"),
        (1.5, "1.5 second"),
        (59.9, "59.9 second"),
        (60, "1.0 min"),
        (150, "2.5 min"),
    ],
)
def test_format_elapsed(seconds, text):
    assert format_elapsed(seconds) == text


def test_summary_line_matches_contract_regex():
    pattern = re.compile(
        r"^SUMMARY due=\d+ overdue=\d+ sent=(yes|no) state=[a-z_]+ elapsed=\d+(\.\d+)? (ms|second|min)$"
    )
    assert pattern.match(render_summary_line(_result(elapsed_seconds=75.3)))
