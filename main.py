from __future__ import annotations

import argparse
import datetime as _dt
import sys

from config import ConfigurationError, env_any, load_config
from discord_delivery.embeds import build_error_embed
from discord_delivery.send_report import WebhookSender
from logger import get_logger
from run_daily import run


_LOG = get_logger()


def _parse_date(value: str) -> _dt.date:
    try:
        return _dt.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from e


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="algo-commit-bot")
    parser.add_argument(
        "--date",
        metavar="YYYY-MM-DD",
        type=_parse_date,
        default=None,
        help="Treat this UTC+9 calendar date as today (manual re-run)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build reports and log the webhook payloads without sending them",
    )
    return parser.parse_args(argv)


def _report_failure(error: Exception, *, dry_run: bool) -> None:
    webhook_url = env_any("DISCORD_WEBHOOK_URL")
    if not webhook_url:
        return
    try:
        res = WebhookSender(webhook_url, dry_run=dry_run)(build_error_embed(str(error) or type(error).__name__))
        if not res.ok:
            _LOG.error("Error notification failed (http=%s error=%s)", res.status_code, res.error)
    except Exception:
        _LOG.exception("Error notification raised, ignored")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        config = load_config()
    except ConfigurationError as e:
        _LOG.error("Configuration error: %s", e)
        return 2

    _LOG.info("Execution started (repos=%s dedupe=%s)", len(config.repositories), config.dedupe_enabled)
    try:
        run(
            config,
            local_date=args.date,
            sender=WebhookSender(config.webhook_url, dry_run=args.dry_run),
        )
    except Exception as e:
        _LOG.exception("Unhandled error: %s", e)
        _report_failure(e, dry_run=args.dry_run)
        return 1

    _LOG.info("Execution finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
