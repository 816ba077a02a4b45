"""Stable error taxonomy for access audits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .verifier import VerificationResult

AccessErrorClass = Literal[
    "correlation_timeout",
    "rule_resolution",
    "verification_mismatch",
    "other",
]


class AccessCheckError(Exception):
    error_class: AccessErrorClass = "other"


class CorrelationTimeout(AccessCheckError):
    """No matching backend exchange was observed within the allotted window."""

    error_class: AccessErrorClass = "correlation_timeout"

    def __init__(self, url_fragment: str, timeout_seconds: float | None) -> None:
        self.url_fragment = url_fragment
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"No successful response matching {url_fragment!r} within {timeout_seconds}s"
        )


class RuleResolutionError(AccessCheckError):
    """A structural element a rule depends on is absent from a fetched payload."""

    error_class: AccessErrorClass = "rule_resolution"


class VerificationMismatch(AccessCheckError):
    """Computed expectation disagrees with the observed UI state."""

    error_class: AccessErrorClass = "verification_mismatch"

    def __init__(self, result: VerificationResult) -> None:
        self.result = result
        super().__init__(
            f"{result.affordance}: {result.reason} "
            f"(expected visible={result.expected.visible}, text={result.expected.expected_text!r}; "
            f"observed visible={result.observed_visible}, text={result.observed_text!r})"
        )


def classify_error(exc: BaseException) -> AccessErrorClass:
    if isinstance(exc, AccessCheckError):
        return exc.error_class
    return "other"
