"""Tests for entity identifier classification."""

from hypothesis import given
from hypothesis import strategies as st

from dashboard_access.entities import (
    EntityKind,
    OpaqueId,
    OrganizationId,
    WorkspaceId,
    classify,
    parse_entity_id,
)

# Text that can never contain either prefix token.
_plain = st.text(alphabet=st.characters(exclude_characters="_"), max_size=20)


class TestClassify:
    def test_organization(self):
        assert classify("org_42") is EntityKind.ORGANIZATION

    def test_workspace(self):
        assert classify("ws_7f3a") is EntityKind.WORKSPACE

    def test_token_anywhere_in_identifier(self):
        assert classify("tenant-org_9") is EntityKind.ORGANIZATION
        assert classify("eu-ws_9") is EntityKind.WORKSPACE

    def test_none_and_empty_are_unknown(self):
        assert classify(None) is EntityKind.UNKNOWN
        assert classify("") is EntityKind.UNKNOWN

    def test_unrelated_identifier_is_unknown(self):
        assert classify("usr_12") is EntityKind.UNKNOWN
        assert classify("organization") is EntityKind.UNKNOWN

    def test_organization_token_checked_first(self):
        assert classify("org_ws_1") is EntityKind.ORGANIZATION
        assert classify("ws_org_1") is EntityKind.ORGANIZATION

    @given(_plain, _plain)
    def test_any_identifier_with_org_token_is_organization(self, head, tail):
        assert classify(f"{head}org_{tail}") is EntityKind.ORGANIZATION

    @given(_plain, _plain)
    def test_any_identifier_with_only_ws_token_is_workspace(self, head, tail):
        assert classify(f"{head}ws_{tail}") is EntityKind.WORKSPACE

    @given(_plain)
    def test_identifiers_without_tokens_are_unknown(self, identifier):
        assert classify(identifier) is EntityKind.UNKNOWN

    @given(st.one_of(st.none(), st.text(max_size=30)))
    def test_classification_is_total_and_deterministic(self, identifier):
        kind = classify(identifier)
        assert kind in set(EntityKind)
        assert classify(identifier) is kind


class TestParseEntityId:
    def test_variants(self):
        assert parse_entity_id("org_42") == OrganizationId("org_42")
        assert parse_entity_id("ws_1") == WorkspaceId("ws_1")
        assert parse_entity_id("abc") == OpaqueId("abc")

    def test_none_stays_none(self):
        assert parse_entity_id(None) is None

    @given(st.text(max_size=30))
    def test_variant_kind_agrees_with_classify(self, identifier):
        entity = parse_entity_id(identifier)
        assert entity is not None
        assert entity.kind is classify(identifier)
        assert entity.value == identifier
