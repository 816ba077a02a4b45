"""Wire models for the backend exchanges visibility rules depend on.

Three exchanges feed the rules:
- get-client-settings: feature permission flags
- get-role: privilege groups with per-action toggles
- me: the signed-in user with their organizations and workspaces

Every payload is wrapped in a ``{"data": ...}`` envelope. Parsing happens once
per exchange; rule evaluation only ever sees these typed snapshots.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .entities import EntityKind
from .errors import RuleResolutionError


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Action(_Snapshot):
    value: str
    toggle: bool | None = None


def resolve_toggle(action: Action) -> bool:
    """Default policy for role action toggles.

    A found action with no toggle (absent or null) is disabled. This is a
    legitimate default, unlike a missing group or action, which
    ``PrivilegeIndex.toggle`` reports as ``RuleResolutionError``.
    """
    return action.toggle is True


class RolePrivilege(_Snapshot):
    name: str
    actions: list[Action] = Field(default_factory=list)


class RoleDetails(_Snapshot):
    role_privileges: list[RolePrivilege] = Field(
        default_factory=list,
        validation_alias=AliasChoices("rolePrivileges", "role_privileges"),
    )


class ClientSettings(_Snapshot):
    permissions: dict[str, bool | None] = Field(default_factory=dict)

    @field_validator("permissions", mode="before")
    @classmethod
    def null_permissions_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    def permission(self, name: str) -> bool:
        return self.permissions.get(name) is True


class Organization(_Snapshot):
    id: str = Field(validation_alias=AliasChoices("organizationId", "id"))
    name: str


class Workspace(_Snapshot):
    id: str = Field(validation_alias=AliasChoices("workspaceId", "id"))
    name: str


class UserEntities(_Snapshot):
    organizations: list[Organization] = Field(default_factory=list)
    workspaces: list[Workspace] = Field(default_factory=list)


class User(_Snapshot):
    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "userId", "_id"))
    name: str
    email: str
    entity: UserEntities = Field(default_factory=UserEntities)
    social_profile_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("socialProfileKey", "social_profile_key"),
    )

    def entity_name(self, kind: EntityKind, identifier: str) -> str:
        """Look up the display name of one of the user's organizations or workspaces."""
        if kind is EntityKind.ORGANIZATION:
            candidates: list[Organization] | list[Workspace] = self.entity.organizations
        elif kind is EntityKind.WORKSPACE:
            candidates = self.entity.workspaces
        else:
            raise RuleResolutionError(f"Entity {identifier!r} has no resolvable kind")

        for candidate in candidates:
            if candidate.id == identifier:
                return candidate.name
        raise RuleResolutionError(
            f"Active {kind.value} {identifier!r} not found in the user's {kind.value}s"
        )


class PrivilegeIndex:
    """Role privileges indexed by (group name, action value) at ingestion time."""

    def __init__(self, privileges: list[RolePrivilege]) -> None:
        toggles: dict[tuple[str, str], bool] = {}
        groups: set[str] = set()
        for privilege in privileges:
            groups.add(privilege.name)
            for action in privilege.actions:
                # First occurrence wins, matching a linear search of the payload.
                toggles.setdefault((privilege.name, action.value), resolve_toggle(action))
        self._groups = frozenset(groups)
        self._toggles: Mapping[tuple[str, str], bool] = MappingProxyType(toggles)

    @classmethod
    def from_role(cls, role: RoleDetails) -> "PrivilegeIndex":
        return cls(role.role_privileges)

    @property
    def groups(self) -> frozenset[str]:
        return self._groups

    def toggle(self, group: str, action: str) -> bool:
        if group not in self._groups:
            raise RuleResolutionError(f"Role privilege group {group!r} missing from role payload")
        try:
            return self._toggles[(group, action)]
        except KeyError:
            raise RuleResolutionError(
                f"Action {action!r} missing from role privilege group {group!r}"
            ) from None

    def __len__(self) -> int:
        return len(self._toggles)


def _unwrap(payload: Any, exchange: str) -> Any:
    if not isinstance(payload, dict) or "data" not in payload:
        raise RuleResolutionError(f"{exchange} response has no 'data' envelope")
    return payload["data"]


def _parse(model: type[_Snapshot], payload: Any, exchange: str) -> Any:
    try:
        return model.model_validate(_unwrap(payload, exchange))
    except ValidationError as exc:
        raise RuleResolutionError(f"{exchange} response does not match its contract: {exc}") from exc


def parse_client_settings(payload: Any) -> ClientSettings:
    return _parse(ClientSettings, payload, "get-client-settings")


def parse_role(payload: Any) -> PrivilegeIndex:
    return PrivilegeIndex.from_role(_parse(RoleDetails, payload, "get-role"))


def parse_user(payload: Any) -> User:
    return _parse(User, payload, "me")
