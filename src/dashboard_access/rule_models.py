"""Visibility rule models — Pydantic validation for the affordance catalog.

Each affordance is declared as a plain dict and validated into one of the rule
models below. The ``kind`` field selects the model:

- always_visible: rendered for every user of the role tier
- fixed_hidden: never rendered for the role tier; needs no backend data
- permission: gated on a client-settings permission flag
- role_action: gated on a role privilege action toggle
- entity_role_action: role action toggle plus the kind (and name) of the
  active organization/workspace
- user_field: always rendered, text derived from the signed-in user
- user_attribute_present: rendered when a user attribute is non-empty
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from .entities import EntityKind

Evidence = Literal["client_settings", "role", "user", "active_entity"]

PROFILE_DROPDOWN_GROUP = "profile-dropdown"


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    test_id: str = ""
    label: str = ""
    validate_text: bool = True
    in_dropdown: bool = False

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @model_validator(mode="before")
    @classmethod
    def default_test_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("test_id"):
            data = {**data, "test_id": str(data.get("name", "")).strip()}
        return data

    def requires(self) -> frozenset[Evidence]:
        return frozenset()


class AlwaysVisibleRule(_Rule):
    kind: Literal["always_visible"]


class FixedHiddenRule(_Rule):
    kind: Literal["fixed_hidden"]


class PermissionRule(_Rule):
    kind: Literal["permission"]
    permission: str

    def requires(self) -> frozenset[Evidence]:
        return frozenset({"client_settings"})


class RoleActionRule(_Rule):
    kind: Literal["role_action"]
    group: str = PROFILE_DROPDOWN_GROUP
    action: str

    def requires(self) -> frozenset[Evidence]:
        return frozenset({"role"})


class EntityRoleActionRule(_Rule):
    """Role action that only applies while a given entity kind is active.

    Example: "Overview" shows for organizations with the profile action
    enabled, except for organizations listed in ``excluded_names``.
    """

    kind: Literal["entity_role_action"]
    group: str = PROFILE_DROPDOWN_GROUP
    action: str
    entity_kind: EntityKind
    excluded_names: frozenset[str] = frozenset()

    @field_validator("entity_kind")
    @classmethod
    def entity_kind_known(cls, v: EntityKind) -> EntityKind:
        if v is EntityKind.UNKNOWN:
            raise ValueError("entity_kind must be organization or workspace")
        return v

    def requires(self) -> frozenset[Evidence]:
        needed: set[Evidence] = {"role", "active_entity"}
        if self.excluded_names:
            needed.add("user")
        return frozenset(needed)


class UserFieldRule(_Rule):
    kind: Literal["user_field"]
    field: Literal["initial", "name", "email"]

    def requires(self) -> frozenset[Evidence]:
        return frozenset({"user"})


class UserAttributePresentRule(_Rule):
    kind: Literal["user_attribute_present"]
    attribute: Literal["social_profile_key"]

    def requires(self) -> frozenset[Evidence]:
        return frozenset({"user"})


VisibilityRule = Annotated[
    Union[
        AlwaysVisibleRule,
        FixedHiddenRule,
        PermissionRule,
        RoleActionRule,
        EntityRoleActionRule,
        UserFieldRule,
        UserAttributePresentRule,
    ],
    Field(discriminator="kind"),
]

_rule_adapter: TypeAdapter[VisibilityRule] = TypeAdapter(VisibilityRule)


def validate_rule(data: dict[str, Any]) -> VisibilityRule:
    """Validate and parse a rule dict into a typed model.

    Raises pydantic.ValidationError on invalid input, including an unknown kind.
    """
    return _rule_adapter.validate_python(data)
