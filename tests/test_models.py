import pytest
from hypothesis import given
from hypothesis import strategies as st

from dashboard_access.entities import EntityKind
from dashboard_access.errors import RuleResolutionError
from dashboard_access.models import (
    Action,
    PrivilegeIndex,
    RolePrivilege,
    parse_client_settings,
    parse_role,
    parse_user,
    resolve_toggle,
)

from conftest import client_settings_payload, role_payload, user_payload


class TestResolveToggle:
    def test_missing_toggle_is_disabled(self):
        assert resolve_toggle(Action.model_validate({"value": "settings"})) is False

    def test_null_toggle_is_disabled(self):
        assert resolve_toggle(Action.model_validate({"value": "settings", "toggle": None})) is False

    @given(st.booleans())
    def test_present_toggle_is_literal(self, toggle):
        assert resolve_toggle(Action(value="settings", toggle=toggle)) is toggle

    @given(st.one_of(st.none(), st.booleans()))
    def test_always_a_definite_bool(self, toggle):
        assert isinstance(resolve_toggle(Action(value="x", toggle=toggle)), bool)


class TestPrivilegeIndex:
    def test_lookup_by_group_and_action(self):
        index = parse_role(role_payload({"settings": True, "profile": False}))
        assert index.toggle("profile-dropdown", "settings") is True
        assert index.toggle("profile-dropdown", "profile") is False
        assert len(index) == 2

    def test_missing_toggle_field_defaults_false(self):
        index = parse_role(role_payload({"user_management": None}))
        assert index.toggle("profile-dropdown", "user_management") is False

    def test_missing_group_is_resolution_error(self):
        index = parse_role(role_payload({"settings": True}, group="sidebar"))
        with pytest.raises(RuleResolutionError, match="group 'profile-dropdown'"):
            index.toggle("profile-dropdown", "settings")

    def test_missing_action_is_resolution_error(self):
        index = parse_role(role_payload({"settings": True}))
        with pytest.raises(RuleResolutionError, match="Action 'profile'"):
            index.toggle("profile-dropdown", "profile")

    def test_group_with_no_actions_is_known(self):
        index = PrivilegeIndex([RolePrivilege(name="profile-dropdown")])
        assert index.groups == frozenset({"profile-dropdown"})
        with pytest.raises(RuleResolutionError):
            index.toggle("profile-dropdown", "settings")

    def test_first_duplicate_action_wins(self):
        index = PrivilegeIndex([
            RolePrivilege(name="g", actions=[Action(value="a", toggle=True)]),
            RolePrivilege(name="g", actions=[Action(value="a", toggle=False)]),
        ])
        assert index.toggle("g", "a") is True


class TestParsing:
    def test_client_settings(self):
        settings = parse_client_settings(client_settings_payload(ruleManagement=True))
        assert settings.permission("ruleManagement") is True
        assert settings.permission("showArchival") is False

    def test_null_permissions_are_empty(self):
        settings = parse_client_settings({"data": {"permissions": None}})
        assert settings.permissions == {}

    def test_missing_envelope_is_resolution_error(self):
        with pytest.raises(RuleResolutionError, match="'data' envelope"):
            parse_client_settings({"permissions": {}})

    def test_malformed_role_is_resolution_error(self):
        with pytest.raises(RuleResolutionError, match="get-role"):
            parse_role({"data": {"rolePrivileges": [{"actions": []}]}})

    def test_user_aliases(self):
        user = parse_user(user_payload(
            organizations=[("org_42", "FANCODE")],
            workspaces=[("ws_1", "Studio A")],
            social_profile_key="abc",
        ))
        assert user.entity.organizations[0].id == "org_42"
        assert user.entity.workspaces[0].id == "ws_1"
        assert user.social_profile_key == "abc"

    def test_user_accepts_plain_ids(self):
        user = parse_user({
            "data": {
                "name": "A",
                "email": "a@example.com",
                "entity": {"organizations": [{"id": "org_1", "name": "SONY"}]},
            }
        })
        assert user.entity_name(EntityKind.ORGANIZATION, "org_1") == "SONY"


class TestEntityName:
    def test_resolves_organization_and_workspace(self):
        user = parse_user(user_payload(
            organizations=[("org_42", "FANCODE")], workspaces=[("ws_1", "Studio A")]
        ))
        assert user.entity_name(EntityKind.ORGANIZATION, "org_42") == "FANCODE"
        assert user.entity_name(EntityKind.WORKSPACE, "ws_1") == "Studio A"

    def test_unlisted_entity_is_resolution_error(self):
        user = parse_user(user_payload(organizations=[("org_42", "FANCODE")]))
        with pytest.raises(RuleResolutionError, match="org_7"):
            user.entity_name(EntityKind.ORGANIZATION, "org_7")

    def test_unknown_kind_is_resolution_error(self):
        user = parse_user(user_payload())
        with pytest.raises(RuleResolutionError):
            user.entity_name(EntityKind.UNKNOWN, "abc")
