"""One access-check scenario: gather evidence, compute, verify.

A ``Scenario`` owns the response stream of a single page session. Backend
snapshots are fetched lazily, only for the evidence a rule declares, and at
most once per exchange; they die with the scenario. Nothing here retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .config import ACTIVE_ENTITY_ATTRIBUTE, ACTIVE_ENTITY_TEST_ID, Config
from .correlation import EvidenceCorrelator, ResponseStream
from .entities import EntityId, parse_entity_id
from .errors import CorrelationTimeout, RuleResolutionError
from .metrics import (
    record_correlation_timeout,
    record_rule_resolution_error,
    record_verification,
)
from .models import parse_client_settings, parse_role, parse_user
from .rule_engine import EvidenceSnapshot, VisibilityRuleEngine, evaluate
from .rule_models import Evidence, VisibilityRule
from .verifier import UIProbe, VerificationResult, VisibilityVerifier

logger = logging.getLogger(__name__)

PROFILE_POPOVER = "Profile-PopOver"
AVATAR_DROPDOWN = "Avatar-Dropdown"


class Scenario:
    def __init__(
        self,
        probe: UIProbe,
        stream: ResponseStream,
        config: Config,
        engine: VisibilityRuleEngine | None = None,
    ) -> None:
        self.probe = probe
        self.config = config
        self.engine = engine or VisibilityRuleEngine()
        self.correlator = EvidenceCorrelator(stream)
        self.verifier = VisibilityVerifier(probe, config.poll_interval_seconds)
        self._fetches: dict[Evidence, asyncio.Task[Any]] = {}
        self._dropdown_open = False

    def test_id(self, relative: str) -> str:
        return f"{self.config.test_id_prefix}{relative}"

    async def _fetch_json(self, url_fragment: str) -> Any:
        return await self.correlator.await_json(
            url_fragment, timeout=self.config.correlation_timeout_seconds
        )

    async def _fetch(self, item: Evidence) -> Any:
        exchanges = self.config.exchanges
        if item == "client_settings":
            return parse_client_settings(await self._fetch_json(exchanges.client_settings))
        if item == "role":
            return parse_role(await self._fetch_json(exchanges.role))
        if item == "user":
            return parse_user(await self._fetch_json(exchanges.user))
        return await self.read_active_entity()

    async def _evidence(self, item: Evidence) -> Any:
        task = self._fetches.get(item)
        if task is None:
            task = asyncio.ensure_future(self._fetch(item))
            self._fetches[item] = task
        return await task

    async def read_active_entity(self) -> EntityId | None:
        """Read the selected organization/workspace id from the profile popover."""
        popover = self.test_id(PROFILE_POPOVER)
        await self.probe.click(popover)
        try:
            rendered = await self.verifier.wait_until_visible(
                ACTIVE_ENTITY_TEST_ID, self.config.active_entity_timeout_seconds
            )
            identifier = (
                await self.probe.attribute_of(ACTIVE_ENTITY_TEST_ID, ACTIVE_ENTITY_ATTRIBUTE)
                if rendered
                else None
            )
        finally:
            await self.probe.click(popover)

        if not rendered:
            raise RuleResolutionError(
                f"Active entity element {ACTIVE_ENTITY_TEST_ID!r} was not rendered"
            )
        entity = parse_entity_id(identifier)
        logger.debug("Active entity %s", entity, extra={"access_active_entity": identifier})
        return entity

    async def evidence_for(self, rule: VisibilityRule) -> EvidenceSnapshot:
        needed = rule.requires()
        values: dict[str, Any] = {}
        # Backend exchanges first; the active entity read clicks the UI.
        for item, field in (
            ("client_settings", "client_settings"),
            ("role", "privileges"),
            ("user", "user"),
            ("active_entity", "active_entity"),
        ):
            if item in needed:
                values[field] = await self._evidence(item)
        return EvidenceSnapshot(**values)

    async def open_dropdown(self) -> None:
        if not self._dropdown_open:
            await self.probe.click(self.test_id(AVATAR_DROPDOWN))
            self._dropdown_open = True

    async def check(self, name: str) -> VerificationResult:
        rule = self.engine.rule(name)
        try:
            evidence = await self.evidence_for(rule)
            expected = evaluate(rule, evidence)
        except CorrelationTimeout:
            record_correlation_timeout()
            logger.exception("Evidence for %s never arrived", name, extra={"access_affordance": name})
            raise
        except RuleResolutionError:
            record_rule_resolution_error()
            logger.exception("Could not resolve rule for %s", name, extra={"access_affordance": name})
            raise

        if rule.in_dropdown:
            await self.open_dropdown()

        result = await self.verifier.verify(
            name,
            expected,
            self.config.visibility_timeout_seconds,
            test_id=self.test_id(rule.test_id),
        )
        record_verification(name, result.elapsed_seconds * 1000, result.passed)
        return result
