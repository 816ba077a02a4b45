"""Playwright bindings for the probe and response stream interfaces.

Two affordances in navigation share their test id with avatar dropdown
entries, so a test id may resolve to several elements. The probe treats a
test id as visible when any of its elements is, and acts on the first visible
one; which element comes first in the DOM never decides an outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from playwright.async_api import Locator, Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .correlation import ObservedResponse, ResponseStream

logger = logging.getLogger(__name__)


class PlaywrightProbe:
    def __init__(self, page: Page) -> None:
        self.page = page

    def _visible(self, test_id: str) -> Locator:
        return self.page.get_by_test_id(test_id).filter(visible=True).first

    async def is_visible(self, test_id: str) -> bool:
        return await self.page.get_by_test_id(test_id).filter(visible=True).count() > 0

    async def wait_visible(self, test_id: str, timeout_seconds: float) -> bool:
        """Wait for any element with ``test_id`` to become visible."""
        if timeout_seconds <= 0:
            # Playwright reads a zero timeout as "wait forever".
            return await self.is_visible(test_id)
        try:
            await self._visible(test_id).wait_for(state="visible", timeout=timeout_seconds * 1000)
        except PlaywrightTimeoutError:
            return False
        return True

    async def text_of(self, test_id: str) -> str:
        return await self._visible(test_id).inner_text()

    async def attribute_of(self, test_id: str, attribute: str) -> str | None:
        return await self._visible(test_id).get_attribute(attribute)

    async def click(self, test_id: str) -> None:
        await self._visible(test_id).click()


def observe(response: Response) -> ObservedResponse:
    return ObservedResponse(response.url, response.status, response.json)


def attach_response_stream(page: Page, stream: ResponseStream) -> Callable[[], None]:
    """Publish every response the page receives to ``stream``; returns a detach callable."""

    def on_response(response: Response) -> None:
        logger.debug("Response %s %s", response.status, response.url)
        stream.publish(observe(response))

    page.on("response", on_response)

    def detach() -> None:
        page.remove_listener("response", on_response)

    return detach
