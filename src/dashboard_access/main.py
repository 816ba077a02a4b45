"""dashboard-access — audit which dashboard affordances a signed-in role can see."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Sequence

from playwright.async_api import async_playwright

from .audit import run_audit, summarize
from .config import Config
from .logging import setup_logging
from .metrics import get_metrics
from .rule_engine import VisibilityRuleEngine


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dashboard-access",
        description="Compare live dashboard affordances with the role's computed entitlements.",
    )
    parser.add_argument(
        "--affordance",
        action="append",
        choices=VisibilityRuleEngine().names(),
        help="Affordance to check (repeatable). Defaults to the whole catalog.",
    )
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Override DASHBOARD_ACCESS_HEADLESS.",
    )
    return parser


async def _run(args: argparse.Namespace, config: Config) -> int:
    headless = config.headless if args.headless is None else bool(args.headless)

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(storage_state=config.storage_state)
            page = await context.new_page()
            report = await run_audit(page, config, args.affordance)
        finally:
            await browser.close()

    summary = summarize(report)
    print(json.dumps(
        {"summary": summary, "results": report, "metrics": get_metrics()},
        indent=2,
        sort_keys=True,
    ))
    return 0 if summary["fail"] == 0 and summary["error"] == 0 else 1


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = Config.from_env()
    setup_logging(config.log_format)

    logger = logging.getLogger(__name__)
    logger.info("Dashboard access audit starting")
    logger.info("Base URL: %s", config.base_url)
    logger.info("Visibility timeout: %.1fs", config.visibility_timeout_seconds)

    raise SystemExit(asyncio.run(_run(args, config)))


if __name__ == "__main__":
    main()
