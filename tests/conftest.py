"""Shared fakes and payload builders for dashboard access tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from dashboard_access.config import Config
from dashboard_access.correlation import ObservedResponse
from dashboard_access.metrics import reset_metrics


class FakeProbe:
    """In-memory page: elements become visible after a delay, clicks are recorded."""

    def __init__(
        self,
        visible: dict[str, float] | None = None,
        texts: dict[str, str] | None = None,
        attributes: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self.visible = dict(visible or {})
        self.texts = dict(texts or {})
        self.attributes = dict(attributes or {})
        self.clicks: list[str] = []
        self.visibility_polls = 0
        self._started: float | None = None

    def _elapsed(self) -> float:
        loop = asyncio.get_running_loop()
        if self._started is None:
            self._started = loop.time()
        return loop.time() - self._started

    async def is_visible(self, test_id: str) -> bool:
        self.visibility_polls += 1
        elapsed = self._elapsed()
        delay = self.visible.get(test_id)
        return delay is not None and elapsed >= delay

    async def text_of(self, test_id: str) -> str:
        return self.texts.get(test_id, "")

    async def attribute_of(self, test_id: str, attribute: str) -> str | None:
        return self.attributes.get((test_id, attribute))

    async def click(self, test_id: str) -> None:
        self.clicks.append(test_id)


def observed(url: str, payload: Any, status: int = 200) -> ObservedResponse:
    calls = {"count": 0}

    async def loader() -> Any:
        calls["count"] += 1
        return payload

    response = ObservedResponse(url, status, loader)
    response.load_calls = calls  # type: ignore[attr-defined]
    return response


def client_settings_payload(**permissions: bool) -> dict:
    return {"data": {"permissions": permissions}}


def role_payload(actions: dict[str, bool | None], group: str = "profile-dropdown") -> dict:
    return {
        "data": {
            "rolePrivileges": [
                {
                    "name": group,
                    "actions": [
                        {"value": value} if toggle is None else {"value": value, "toggle": toggle}
                        for value, toggle in actions.items()
                    ],
                }
            ]
        }
    }


def user_payload(
    organizations: list[tuple[str, str]] | None = None,
    workspaces: list[tuple[str, str]] | None = None,
    social_profile_key: str | None = None,
) -> dict:
    data: dict[str, Any] = {
        "name": "priya rao",
        "email": "priya@example.com",
        "entity": {
            "organizations": [
                {"organizationId": oid, "name": name} for oid, name in organizations or []
            ],
            "workspaces": [
                {"workspaceId": wid, "name": name} for wid, name in workspaces or []
            ],
        },
    }
    if social_profile_key is not None:
        data["socialProfileKey"] = social_profile_key
    return {"data": data}


@pytest.fixture
def config() -> Config:
    return Config(
        base_url="https://dashboard.test",
        visibility_timeout_seconds=0.2,
        poll_interval_seconds=0.01,
        correlation_timeout_seconds=0.5,
        active_entity_timeout_seconds=0.1,
    )


@pytest.fixture(autouse=True)
def _fresh_metrics():
    reset_metrics()
    yield
    reset_metrics()
