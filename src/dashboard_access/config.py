import os
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Final


class Role(str, Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "superadmin"


# Organizations the dashboard special-cases by display name.
ORGANIZATION_NAMES: Final = MappingProxyType({
    "SONY": "SONY",
    "FANCODE": "FANCODE",
    "ZEE_AUTO_SHOW": "ZEE AUTO SHOW",
    "VIACOM": "Viacom",
})

ACTIVE_ENTITY_TEST_ID: Final = "Dashboard-active-organization"
ACTIVE_ENTITY_ATTRIBUTE: Final = "data-key"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ExchangeFragments:
    """URL fragments identifying the backend exchanges rules depend on."""

    client_settings: str = "get-client-settings"
    role: str = "get-role"
    user: str = "/me"


@dataclass(frozen=True)
class Config:
    base_url: str
    role: Role = Role.ADMIN
    storage_state: str = "playwright/.auth/user.json"
    visibility_timeout_seconds: float = 2.5
    poll_interval_seconds: float = 0.1
    correlation_timeout_seconds: float = 30.0
    active_entity_timeout_seconds: float = 1.0
    headless: bool = True
    log_format: str = "json"
    exchanges: ExchangeFragments = field(default_factory=ExchangeFragments)

    @property
    def test_id_prefix(self) -> str:
        return f"Dashboard-{self.role.value}-"

    @classmethod
    def from_env(cls) -> "Config":
        base_url = os.environ.get("DASHBOARD_ACCESS_BASE_URL")
        if not base_url:
            raise RuntimeError("DASHBOARD_ACCESS_BASE_URL must be set")

        return cls(
            base_url=base_url.rstrip("/"),
            role=Role(os.environ.get("DASHBOARD_ACCESS_ROLE", "admin")),
            storage_state=os.environ.get(
                "DASHBOARD_ACCESS_STORAGE_STATE", "playwright/.auth/user.json"
            ),
            visibility_timeout_seconds=float(
                os.environ.get("DASHBOARD_ACCESS_VISIBILITY_TIMEOUT", "2.5")
            ),
            poll_interval_seconds=float(os.environ.get("DASHBOARD_ACCESS_POLL_INTERVAL", "0.1")),
            correlation_timeout_seconds=float(
                os.environ.get("DASHBOARD_ACCESS_CORRELATION_TIMEOUT", "30.0")
            ),
            active_entity_timeout_seconds=float(
                os.environ.get("DASHBOARD_ACCESS_ACTIVE_ENTITY_TIMEOUT", "1.0")
            ),
            headless=_env_bool("DASHBOARD_ACCESS_HEADLESS", True),
            log_format=os.environ.get("DASHBOARD_ACCESS_LOG_FORMAT", "json"),
        )
