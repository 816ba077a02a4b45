import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Evaluator signature: def evaluator(rule, evidence) -> Expectation
EvaluatorFn = Callable[[Any, Any], Any]

# One evaluator per rule kind
_registry: dict[str, EvaluatorFn] = {}


def register(kind: str) -> Callable[[EvaluatorFn], EvaluatorFn]:
    """Register the evaluator for a rule kind (e.g. 'permission')."""

    def decorator(fn: EvaluatorFn) -> EvaluatorFn:
        if kind in _registry:
            raise ValueError(f"Duplicate evaluator for kind={kind!r}")
        _registry[kind] = fn
        logger.debug("Registered evaluator for kind=%s", kind)
        return fn

    return decorator


def get_evaluator(kind: str) -> EvaluatorFn | None:
    return _registry.get(kind)


def registered_kinds() -> list[str]:
    return list(_registry.keys())
