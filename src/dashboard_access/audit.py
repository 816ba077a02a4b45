"""Run a full access audit against one signed-in dashboard page.

Each affordance gets its own scenario: a fresh response stream, a fresh page
load and fresh backend snapshots. Failures are reported, never retried.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from playwright.async_api import Page

from .browser import PlaywrightProbe, attach_response_stream
from .config import Config
from .correlation import ResponseStream
from .errors import AccessCheckError, classify_error
from .rule_engine import VisibilityRuleEngine
from .scenario import Scenario
from .verifier import UIProbe

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


async def run_affordance(
    page: Page,
    probe: UIProbe,
    config: Config,
    engine: VisibilityRuleEngine,
    name: str,
) -> dict[str, Any]:
    stream = ResponseStream()
    detach = attach_response_stream(page, stream)
    try:
        await page.goto(f"{config.base_url}{DASHBOARD_PATH}")
        result = await Scenario(probe, stream, config, engine).check(name)
        return result.to_dict()
    except AccessCheckError as exc:
        return _error_entry(name, exc)
    except Exception as exc:
        # Navigation failures and precondition clicks that time out end this
        # scenario only.
        logger.exception(
            "Scenario for %s aborted", name, extra={"access_affordance": name}
        )
        return _error_entry(name, exc)
    finally:
        detach()


def _error_entry(name: str, exc: Exception) -> dict[str, Any]:
    return {
        "affordance": name,
        "outcome": "error",
        "error_class": classify_error(exc),
        "reason": str(exc),
    }


async def run_audit(
    page: Page,
    config: Config,
    names: Iterable[str] | None = None,
    probe: UIProbe | None = None,
    engine: VisibilityRuleEngine | None = None,
) -> list[dict[str, Any]]:
    engine = engine or VisibilityRuleEngine()
    probe = probe or PlaywrightProbe(page)
    selected = list(names) if names else engine.names()
    for name in selected:
        engine.rule(name)

    logger.info(
        "Auditing %d affordances as %s",
        len(selected),
        config.role.value,
        extra={"access_role": config.role.value},
    )
    report = []
    for name in selected:
        report.append(await run_affordance(page, probe, config, engine, name))
    return report


def summarize(report: list[dict[str, Any]]) -> dict[str, int]:
    summary = {"pass": 0, "fail": 0, "error": 0}
    for entry in report:
        summary[entry["outcome"]] += 1
    return summary
