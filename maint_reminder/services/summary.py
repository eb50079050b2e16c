from __future__ import annotations

from ..models.run_state import EvaluationResult

"""SUMMARY line rendering for an evaluation run."""

__all__ = [
    "format_elapsed",
    "render_summary_line",
]

MS_PER_SECOND = 1000
MS_PER_MINUTE = MS_PER_SECOND * 60


def format_elapsed(seconds: float) -> str:
    """Render elapsed time as "<n> ms", "<n> second" or "<n> min"."""
    ms = round(seconds * MS_PER_SECOND)
    if ms >= MS_PER_MINUTE:
        return f"{ms / MS_PER_MINUTE:.1f} min"
    if ms >= MS_PER_SECOND:
        return f"{ms / MS_PER_SECOND:g} second"
    return f"{ms} ms"


def render_summary_line(result: EvaluationResult) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY due={due} overdue={overdue} sent={yes|no} state={state} elapsed={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> from maint_reminder.models.run_state import RunState
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = EvaluationResult(
        ...     state=RunState.DONE, due_count=1, overdue_count=2, sent=True,
        ...     start_time=t, end_time=t, elapsed_seconds=0.25,
        ... )
        >>> render_summary_line(result)
        'SUMMARY due=1 overdue=2 sent=yes state=done elapsed=250 ms'
    """
    return (
        f"SUMMARY due={result.due_count} "
        f"overdue={result.overdue_count} "
        f"sent={'yes' if result.sent else 'no'} "
        f"state={result.state.value} "
        f"elapsed={format_elapsed(result.elapsed_seconds)}"
    )
