"""Deadline-driven comparison of a computed expectation with the live UI.

Absence can only be proven by exhausting the deadline, so an affordance that
is expected hidden always costs the full wait. A single deadline is shared by
every affordance checked in a run.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from .errors import VerificationMismatch
from .rule_engine import Expectation

logger = logging.getLogger(__name__)


class UIProbe(Protocol):
    """What the verifier and scenario need from the page, addressed by full test id."""

    async def is_visible(self, test_id: str) -> bool: ...

    async def text_of(self, test_id: str) -> str: ...

    async def attribute_of(self, test_id: str, attribute: str) -> str | None: ...

    async def click(self, test_id: str) -> None: ...


@runtime_checkable
class WaitingProbe(Protocol):
    async def wait_visible(self, test_id: str, timeout_seconds: float) -> bool: ...


class Outcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"


@dataclass(frozen=True)
class VerificationResult:
    affordance: str
    outcome: Outcome
    expected: Expectation
    observed_visible: bool
    observed_text: str | None = None
    reason: str = ""
    elapsed_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASS

    def raise_for_outcome(self) -> None:
        if not self.passed:
            raise VerificationMismatch(self)

    def to_dict(self) -> dict:
        return {
            "affordance": self.affordance,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "expected_visible": self.expected.visible,
            "expected_text": self.expected.expected_text,
            "observed_visible": self.observed_visible,
            "observed_text": self.observed_text,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


class VisibilityVerifier:
    def __init__(self, probe: UIProbe, poll_interval_seconds: float = 0.1) -> None:
        self.probe = probe
        self.poll_interval_seconds = poll_interval_seconds

    async def wait_until_visible(self, test_id: str, deadline_seconds: float) -> bool:
        """Wait until the element is visible; False once the deadline has elapsed.

        Probes that can wait natively (``WaitingProbe``) do so; others are
        polled every ``poll_interval_seconds``.
        """
        if isinstance(self.probe, WaitingProbe):
            return await self.probe.wait_visible(test_id, deadline_seconds)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + deadline_seconds
        while True:
            if await self.probe.is_visible(test_id):
                return True
            remaining = deadline - loop.time()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(self.poll_interval_seconds, remaining))

    async def verify(
        self,
        affordance: str,
        expected: Expectation,
        deadline_seconds: float,
        test_id: str | None = None,
    ) -> VerificationResult:
        loop = asyncio.get_running_loop()
        started = loop.time()
        test_id = test_id or affordance

        visible = await self.wait_until_visible(test_id, deadline_seconds)
        observed_text = None
        if visible and expected.visible and expected.expected_text is not None:
            observed_text = await self.probe.text_of(test_id)

        outcome, reason = _judge(expected, visible, observed_text)
        result = VerificationResult(
            affordance=affordance,
            outcome=outcome,
            expected=expected,
            observed_visible=visible,
            observed_text=observed_text,
            reason=reason,
            elapsed_seconds=loop.time() - started,
        )

        log = logger.info if result.passed else logger.warning
        log(
            "Affordance %s: %s%s",
            affordance,
            outcome.value,
            f" ({reason})" if reason else "",
            extra={
                "access_affordance": affordance,
                "access_outcome": outcome.value,
                "access_elapsed_ms": round(result.elapsed_seconds * 1000, 1),
            },
        )
        return result


def _judge(
    expected: Expectation, visible: bool, observed_text: str | None
) -> tuple[Outcome, str]:
    if visible and not expected.visible:
        return Outcome.FAIL, "unexpectedly visible"
    if not visible and expected.visible:
        return Outcome.FAIL, "expected visible, not found"
    if not visible:
        return Outcome.PASS, ""
    if expected.expected_text is not None:
        if (observed_text or "").strip() != expected.expected_text:
            return Outcome.FAIL, "text mismatch"
    return Outcome.PASS, ""
