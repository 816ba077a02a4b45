"""In-memory audit metrics.

Asyncio is single-threaded, so plain dicts are safe — no locking needed.
"""

import time

_start_time = time.monotonic()

_metrics: dict = {
    "checks_passed": 0,
    "checks_failed": 0,
    "correlation_timeouts": 0,
    "rule_resolution_errors": 0,
    "affordances": {},
}


def record_verification(affordance: str, duration_ms: float, success: bool) -> None:
    """Record a single affordance verification with timing."""
    a = _metrics["affordances"].setdefault(affordance, {
        "checks": 0,
        "passes": 0,
        "failures": 0,
        "total_duration_ms": 0.0,
    })
    a["checks"] += 1
    a["total_duration_ms"] += duration_ms
    if success:
        a["passes"] += 1
        _metrics["checks_passed"] += 1
    else:
        a["failures"] += 1
        _metrics["checks_failed"] += 1


def record_correlation_timeout() -> None:
    _metrics["correlation_timeouts"] += 1


def record_rule_resolution_error() -> None:
    _metrics["rule_resolution_errors"] += 1


def reset_metrics() -> None:
    global _start_time
    _start_time = time.monotonic()
    for key in ("checks_passed", "checks_failed", "correlation_timeouts", "rule_resolution_errors"):
        _metrics[key] = 0
    _metrics["affordances"] = {}


def get_metrics() -> dict:
    """Return a snapshot of current metrics."""
    return {
        "uptime_seconds": round(time.monotonic() - _start_time, 1),
        "checks_passed": _metrics["checks_passed"],
        "checks_failed": _metrics["checks_failed"],
        "correlation_timeouts": _metrics["correlation_timeouts"],
        "rule_resolution_errors": _metrics["rule_resolution_errors"],
        "affordances": {
            name: dict(stats)
            for name, stats in _metrics["affordances"].items()
        },
    }
