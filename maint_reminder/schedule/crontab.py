from __future__ import annotations

import re
import shlex
from pathlib import Path

from ..errors import ConfigurationError
from ..services.schedule import WEEKDAYS, Trigger

"""Crontab-file backed trigger store.

Owned lines look like::

    0 7 * * 6 cd /home/me/house && maint-reminder run --config /home/me/house/config/reminder.yml  # maint-reminder:run

cron starts jobs in $HOME, so the command changes into the directory the
schedule was set up from and names the config file by absolute path.

The trailing marker scopes ownership per entry point; any other line in the
file (comments, env assignments, unrelated jobs) is preserved verbatim.
Install the result with ``crontab <file>``.
"""

__all__ = [
    "CRON_DAY_NUMBERS",
    "MARKER_PREFIX",
    "CrontabTriggerStore",
    "build_command",
]

MARKER_PREFIX = "# maint-reminder:"

# cron: 0 = Sunday
CRON_DAY_NUMBERS = {
    "SUNDAY": 0,
    "MONDAY": 1,
    "TUESDAY": 2,
    "WEDNESDAY": 3,
    "THURSDAY": 4,
    "FRIDAY": 5,
    "SATURDAY": 6,
}
_DAY_NAMES = {v: k for k, v in CRON_DAY_NUMBERS.items()}

_OWNED_LINE = re.compile(
    r"^0\s+(?P<hour>\d{1,2})\s+\*\s+\*\s+(?P<dow>\d)\s+.*"
    + re.escape(MARKER_PREFIX)
    + r"(?P<entry>\S+)\s*$"
)


def build_command(command: str, config_path: Path, workdir: Path) -> str:
    """Shell command for a cron line: run ``command`` from ``workdir`` against ``config_path``."""
    config = shlex.quote(str(config_path.resolve()))
    return f"cd {shlex.quote(str(workdir.resolve()))} && {command} --config {config}"


class CrontabTriggerStore:
    """Read-modify-write store over a single crontab file."""

    def __init__(self, path: Path, command: str) -> None:
        self.path = path
        self.command = command

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def _write_lines(self, lines: list[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = "\n".join(lines)
        self.path.write_text(text + "\n" if text else "", encoding="utf-8")

    @staticmethod
    def _parse(line: str) -> Trigger | None:
        m = _OWNED_LINE.match(line.strip())
        if m is None:
            return None
        dow = int(m.group("dow"))
        if dow not in _DAY_NAMES:
            return None
        return Trigger(entry_point=m.group("entry"), weekday=_DAY_NAMES[dow], hour=int(m.group("hour")))

    def render(self, trigger: Trigger) -> str:
        dow = CRON_DAY_NUMBERS[trigger.weekday]
        return f"0 {trigger.hour} * * {dow} {self.command}  {MARKER_PREFIX}{trigger.entry_point}"

    def list_triggers_for(self, entry_point: str) -> list[Trigger]:
        triggers = []
        for line in self._read_lines():
            t = self._parse(line)
            if t is not None and t.entry_point == entry_point:
                triggers.append(t)
        return triggers

    def delete(self, trigger: Trigger) -> None:
        kept = [line for line in self._read_lines() if self._parse(line) != trigger]
        self._write_lines(kept)

    def create(self, entry_point: str, weekday: str, hour: int) -> Trigger:
        if weekday not in WEEKDAYS:
            raise ConfigurationError(f"unknown weekday: {weekday!r}")
        trigger = Trigger(entry_point=entry_point, weekday=weekday, hour=hour)
        lines = self._read_lines()
        lines.append(self.render(trigger))
        self._write_lines(lines)
        return trigger
