"""Entity identifiers and their kinds.

Organization and workspace identifiers are opaque strings; the only thing
that tells them apart is the prefix token embedded in them (``org_`` or
``ws_``). Classification happens once, at the boundary where an identifier is
read from the UI, and everything downstream works with the tagged
``EntityId`` variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Union


class EntityKind(str, Enum):
    ORGANIZATION = "organization"
    WORKSPACE = "workspace"
    UNKNOWN = "unknown"


ORGANIZATION_TOKEN: Final = "org_"
WORKSPACE_TOKEN: Final = "ws_"


def classify(identifier: str | None) -> EntityKind:
    """Return the kind encoded in ``identifier``.

    The organization token is checked first.
    """
    if not identifier:
        return EntityKind.UNKNOWN
    if ORGANIZATION_TOKEN in identifier:
        return EntityKind.ORGANIZATION
    if WORKSPACE_TOKEN in identifier:
        return EntityKind.WORKSPACE
    return EntityKind.UNKNOWN


@dataclass(frozen=True)
class OrganizationId:
    value: str

    @property
    def kind(self) -> EntityKind:
        return EntityKind.ORGANIZATION


@dataclass(frozen=True)
class WorkspaceId:
    value: str

    @property
    def kind(self) -> EntityKind:
        return EntityKind.WORKSPACE


@dataclass(frozen=True)
class OpaqueId:
    value: str

    @property
    def kind(self) -> EntityKind:
        return EntityKind.UNKNOWN


EntityId = Union[OrganizationId, WorkspaceId, OpaqueId]


def parse_entity_id(identifier: str | None) -> EntityId | None:
    if identifier is None:
        return None
    kind = classify(identifier)
    if kind is EntityKind.ORGANIZATION:
        return OrganizationId(identifier)
    if kind is EntityKind.WORKSPACE:
        return WorkspaceId(identifier)
    return OpaqueId(identifier)
