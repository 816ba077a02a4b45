"""Visibility rule engine.

Computes, for one affordance, whether it must be visible and which label it
must show. Evaluation is a pure function of an ``EvidenceSnapshot``: it never
performs I/O and never waits. Gathering the evidence is the scenario's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .affordances import ADMIN_CATALOG
from .entities import EntityId
from .errors import RuleResolutionError
from .models import ClientSettings, PrivilegeIndex, User
from .registry import get_evaluator, register
from .rule_models import (
    AlwaysVisibleRule,
    EntityRoleActionRule,
    FixedHiddenRule,
    PermissionRule,
    RoleActionRule,
    UserAttributePresentRule,
    UserFieldRule,
    VisibilityRule,
)


@dataclass(frozen=True)
class Expectation:
    visible: bool
    expected_text: str | None = None


@dataclass(frozen=True)
class EvidenceSnapshot:
    """Backend and UI state a rule may depend on. Unfetched parts are None."""

    client_settings: ClientSettings | None = None
    privileges: PrivilegeIndex | None = None
    user: User | None = None
    active_entity: EntityId | None = None

    def require_client_settings(self) -> ClientSettings:
        if self.client_settings is None:
            raise RuleResolutionError("Rule needs client settings but none were fetched")
        return self.client_settings

    def require_privileges(self) -> PrivilegeIndex:
        if self.privileges is None:
            raise RuleResolutionError("Rule needs role privileges but none were fetched")
        return self.privileges

    def require_user(self) -> User:
        if self.user is None:
            raise RuleResolutionError("Rule needs the current user but it was not fetched")
        return self.user


def _expect(rule: VisibilityRule, visible: bool, text: str | None = None) -> Expectation:
    if not visible or not rule.validate_text:
        return Expectation(visible=visible)
    return Expectation(visible=True, expected_text=rule.label if text is None else text)


@register("always_visible")
def _always_visible(rule: AlwaysVisibleRule, evidence: EvidenceSnapshot) -> Expectation:
    return _expect(rule, True)


@register("fixed_hidden")
def _fixed_hidden(rule: FixedHiddenRule, evidence: EvidenceSnapshot) -> Expectation:
    return Expectation(visible=False)


@register("permission")
def _permission(rule: PermissionRule, evidence: EvidenceSnapshot) -> Expectation:
    settings = evidence.require_client_settings()
    return _expect(rule, settings.permission(rule.permission))


@register("role_action")
def _role_action(rule: RoleActionRule, evidence: EvidenceSnapshot) -> Expectation:
    privileges = evidence.require_privileges()
    return _expect(rule, privileges.toggle(rule.group, rule.action))


@register("entity_role_action")
def _entity_role_action(rule: EntityRoleActionRule, evidence: EvidenceSnapshot) -> Expectation:
    # Resolve the toggle first so a broken role payload surfaces regardless of context.
    enabled = evidence.require_privileges().toggle(rule.group, rule.action)

    active = evidence.active_entity
    if active is None or active.kind is not rule.entity_kind or not enabled:
        return Expectation(visible=False)

    if rule.excluded_names:
        name = evidence.require_user().entity_name(active.kind, active.value)
        if name in rule.excluded_names:
            return Expectation(visible=False)

    return _expect(rule, True)


@register("user_field")
def _user_field(rule: UserFieldRule, evidence: EvidenceSnapshot) -> Expectation:
    user = evidence.require_user()
    if rule.field == "initial":
        text = user.name[:1].upper()
    elif rule.field == "name":
        text = user.name
    else:
        text = user.email
    return _expect(rule, True, text)


@register("user_attribute_present")
def _user_attribute_present(
    rule: UserAttributePresentRule, evidence: EvidenceSnapshot
) -> Expectation:
    value = getattr(evidence.require_user(), rule.attribute)
    return _expect(rule, len(value or "") > 0)


def evaluate(rule: VisibilityRule, evidence: EvidenceSnapshot) -> Expectation:
    evaluator = get_evaluator(rule.kind)
    if evaluator is None:
        raise RuleResolutionError(f"No evaluator for rule kind={rule.kind!r}")
    return evaluator(rule, evidence)


class VisibilityRuleEngine:
    def __init__(self, catalog: Mapping[str, VisibilityRule] = ADMIN_CATALOG) -> None:
        self.catalog = catalog

    def rule(self, name: str) -> VisibilityRule:
        try:
            return self.catalog[name]
        except KeyError:
            raise RuleResolutionError(f"Unknown affordance {name!r}") from None

    def expectation_for(self, name: str, evidence: EvidenceSnapshot) -> Expectation:
        return evaluate(self.rule(name), evidence)

    def names(self) -> list[str]:
        return list(self.catalog.keys())
