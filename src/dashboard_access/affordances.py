"""Affordance catalog for the admin role tier of the dashboard.

Test ids are rendered as ``Dashboard-<role>-<test_id>``. A few avatar-dropdown
entries reuse the test id of a navigation entry, so the catalog is keyed by
``name`` rather than ``test_id``.
"""

from types import MappingProxyType
from typing import Any, Mapping

from .config import ORGANIZATION_NAMES
from .rule_models import VisibilityRule, validate_rule

_ADMIN_RULES: list[dict[str, Any]] = [
    # --- Navigation ---
    {"name": "dashboard", "kind": "always_visible", "label": "Home"},
    {"name": "videos", "kind": "always_visible", "label": "Videos"},
    {"name": "my-highlights", "kind": "always_visible", "label": "Highlights"},
    {"name": "rule-listing", "kind": "permission", "permission": "ruleManagement", "label": "Rules"},
    {"name": "archive", "kind": "permission", "permission": "showArchival", "label": "Archive"},
    {"name": "studio", "kind": "permission", "permission": "advanceEditor", "label": "Studio"},
    {
        "name": "configuration/category",
        "kind": "role_action",
        "action": "settings",
        "label": "Settings",
    },
    {"name": "overview", "kind": "fixed_hidden", "label": "Overview"},
    {"name": "organizations", "kind": "fixed_hidden", "label": "Organizations"},
    {"name": "users", "kind": "fixed_hidden", "label": "Users"},
    {"name": "ops", "kind": "fixed_hidden", "label": "Ops"},
    {"name": "Process", "kind": "always_visible", "label": "Process"},
    {"name": "Profile-PopOver", "kind": "always_visible", "validate_text": False},
    {"name": "Avatar-Dropdown", "kind": "always_visible", "validate_text": False},
    # --- Avatar dropdown ---
    {"name": "Logout", "kind": "always_visible", "label": "Logout", "in_dropdown": True},
    {
        "name": "profile",
        "kind": "role_action",
        "action": "profile",
        "label": "Profile",
        "in_dropdown": True,
    },
    {
        "name": "dropdown-overview",
        "kind": "entity_role_action",
        "action": "profile",
        "entity_kind": "organization",
        "excluded_names": [ORGANIZATION_NAMES["ZEE_AUTO_SHOW"]],
        "label": "Overview",
        "in_dropdown": True,
    },
    {
        "name": "organization-profile",
        "kind": "entity_role_action",
        "action": "user_management",
        "entity_kind": "organization",
        "label": "Organization Profile",
        "in_dropdown": True,
    },
    {
        "name": "workspace-profile",
        "kind": "entity_role_action",
        "action": "user_management",
        "entity_kind": "workspace",
        "label": "Workspace Profile",
        "in_dropdown": True,
    },
    {"name": "user-avatar", "kind": "user_field", "field": "initial", "in_dropdown": True},
    {"name": "user-userName", "kind": "user_field", "field": "name", "in_dropdown": True},
    {"name": "user-userEmail", "kind": "user_field", "field": "email", "in_dropdown": True},
    {
        "name": "roles-permission",
        "kind": "role_action",
        "action": "permission_management",
        "label": "Roles & Permission",
        "in_dropdown": True,
    },
    {
        "name": "dropdown-organizations",
        "test_id": "organizations",
        "kind": "fixed_hidden",
        "label": "Organization Management",
        "in_dropdown": True,
    },
    {
        "name": "workspace",
        "kind": "fixed_hidden",
        "label": "Workspace Management",
        "in_dropdown": True,
    },
    {
        "name": "user-management",
        "kind": "fixed_hidden",
        "label": "User Management",
        "in_dropdown": True,
    },
    {
        "name": "dropdown-ops",
        "test_id": "ops",
        "kind": "fixed_hidden",
        "label": "Ops Management",
        "in_dropdown": True,
    },
    {
        "name": "configuration",
        "kind": "fixed_hidden",
        "label": "Configuration",
        "in_dropdown": True,
    },
    {
        "name": "publish-history",
        "kind": "user_attribute_present",
        "attribute": "social_profile_key",
        "label": "Publish History",
        "in_dropdown": True,
    },
]


def build_catalog(rules: list[dict[str, Any]]) -> Mapping[str, VisibilityRule]:
    catalog: dict[str, VisibilityRule] = {}
    for data in rules:
        rule = validate_rule(data)
        if rule.name in catalog:
            raise ValueError(f"Duplicate affordance name={rule.name!r}")
        catalog[rule.name] = rule
    return MappingProxyType(catalog)


ADMIN_CATALOG: Mapping[str, VisibilityRule] = build_catalog(_ADMIN_RULES)
