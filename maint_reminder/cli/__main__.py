from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from maint_reminder.config.loader import (
    DEFAULT_CONFIG_PATH,
    build_smtp_config,
    load_config,
    read_raw_recipient,
)
from maint_reminder.errors import ConfigurationError, ReminderError
from maint_reminder.excel.reader import read_log_range
from maint_reminder.logging.init import log_summary, set_debug, setup_logging
from maint_reminder.models.config_models import ReminderConfig, SmtpConfig
from maint_reminder.models.run_state import RunState
from maint_reminder.notify.smtp import ConsoleTransport, NotificationTransport, SmtpTransport
from maint_reminder.schedule.crontab import CrontabTriggerStore, build_command
from maint_reminder.services.error_reporter import ErrorReporter
from maint_reminder.services.evaluator import Evaluator, run_with_reporting
from maint_reminder.services.scanner import resolve_columns
from maint_reminder.services.schedule import apply_schedule
from maint_reminder.services.summary import render_summary_line

"""CLI entrypoint.

Two commands:
- run       evaluate the maintenance log now and mail the reminder (default)
- schedule  replace the recurring schedule in the crontab file

Exit codes: 0 success (including nothing to send), 1 fatal failure.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv so SMTP_* settings win over the YAML file."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to reminder.yml")
    common.add_argument("--debug", action="store_true", help="Enable debug logging")

    p = argparse.ArgumentParser(prog="maint-reminder", description="Home maintenance log reminder")
    sub = p.add_subparsers(dest="command", required=True)
    run = sub.add_parser("run", parents=[common], help="Check the log now and send a reminder")
    run.add_argument("--dry-run", action="store_true", help="Print the message instead of mailing it")
    run.add_argument(
        "--inspect-data", action="store_true", help="Print header, resolved columns & first rows then exit"
    )
    sub.add_parser("schedule", parents=[common], help="Replace the recurring schedule")

    # サブコマンド省略時は run
    if not argv or (argv[0].startswith("-") and argv[0] not in ("-h", "--help")):
        argv = ["run", *argv]
    return p.parse_args(argv)


def _fallback_reporter(config_path: Path, transport: NotificationTransport | None) -> ErrorReporter:
    """Reporter for failures that happen before the config could be loaded."""
    if transport is None:
        try:
            smtp = build_smtp_config()
        except ConfigurationError:
            smtp = SmtpConfig(host=None, port=None, user=None, password=None, sender=None)
        transport = SmtpTransport(smtp)
    return ErrorReporter(transport, read_raw_recipient(config_path))


def _inspect_data(cfg: ReminderConfig) -> int:
    try:
        table = read_log_range(Path(cfg.source.path), cfg.source.sheet_name, cfg.source.cell_range)
    except ReminderError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"SOURCE: {cfg.source.path} sheet={cfg.source.sheet_name} range={cfg.source.cell_range}")
    print(f"  header={table.header}")
    try:
        cols = resolve_columns(table.header, cfg.columns, cfg.source.sheet_name)
    except ConfigurationError as e:
        print(f"  columns: {e}")
        return EXIT_FATAL
    print(f"  columns task={cols.task} due={cols.due} archived={cols.archived}")
    for row in table.rows[:INSPECT_SAMPLE_ROWS]:
        # datetime は isoformat で表示
        print("    row=", [v.isoformat() if hasattr(v, "isoformat") else v for v in row])
    return EXIT_SUCCESS


def _run(args: argparse.Namespace) -> int:
    transport: NotificationTransport | None = ConsoleTransport() if args.dry_run else None
    try:
        cfg = load_config(args.config)
    except ConfigurationError as e:
        reporter = _fallback_reporter(args.config, transport)
        try:
            reporter.report(e, fatal=True, stage=RunState.START.value)
        except ConfigurationError:
            pass
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    if transport is None:
        transport = SmtpTransport(cfg.smtp)
    evaluator = Evaluator(cfg, transport)
    reporter = ErrorReporter(transport, cfg.recipient)
    try:
        result = run_with_reporting(evaluator, reporter)
    except Exception:  # already reported
        return EXIT_FATAL

    # log_summary が "SUMMARY " を付与するので本文のみ渡す
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))
    return EXIT_SUCCESS


def _schedule(args: argparse.Namespace) -> int:
    config_path: Path = args.config.resolve()
    try:
        cfg = load_config(config_path)
    except ConfigurationError as e:
        _fallback_reporter(config_path, None).report(e, fatal=False, stage="config")
        return EXIT_FATAL

    # cron は $HOME で起動するため、作業ディレクトリと config を絶対パスで固定
    command = build_command(cfg.schedule.command, config_path, Path.cwd())
    store = CrontabTriggerStore(Path(cfg.schedule.crontab_path), command)
    try:
        created = apply_schedule(store, cfg.schedule.days, cfg.schedule.hours)
    except (ConfigurationError, OSError) as e:
        reporter = ErrorReporter(SmtpTransport(cfg.smtp), cfg.recipient)
        reporter.report(e, fatal=False, stage="schedule")
        return EXIT_FATAL

    log_summary(f"triggers={len(created)} crontab={store.path}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] が渡された場合に sys.argv (pytest の引数) を読まないよう None のときだけ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)

    if args.command == "schedule":
        return _schedule(args)
    return _run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
