"""Correlate awaited backend exchanges with the live response stream.

UI actions trigger fetches whose completion order is not tied to rendering, so
a check cannot simply wait for "the next response". Instead every observed
response is appended to a scenario-scoped ``ResponseStream`` and each await
scans it for the first entry whose URL contains a fragment ending at a path,
query or anchor boundary and whose status satisfies a predicate. Entries are
never consumed: any number of awaits can match the same response, and an await
registered after the response arrived still finds it.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

from .errors import CorrelationTimeout, RuleResolutionError

logger = logging.getLogger(__name__)

StatusPredicate = Callable[[int], bool]
JsonLoader = Callable[[], Awaitable[Any]]

# A fragment must end at a path segment, query or anchor boundary, so "/me"
# matches "/me/" and "/me?x=1" but not "/media/..." or "/members".
_BOUNDARY = r"(?=[/?#]|$)"


def fragment_pattern(url_fragment: str) -> re.Pattern[str]:
    return re.compile(re.escape(url_fragment) + _BOUNDARY)


def status_is(*codes: int) -> StatusPredicate:
    allowed = frozenset(codes or (200,))

    def predicate(status: int) -> bool:
        return status in allowed

    return predicate


class ObservedResponse:
    """One backend response as seen by the page; its body is parsed at most once."""

    def __init__(self, url: str, status: int, loader: JsonLoader) -> None:
        self.url = url
        self.status = status
        self._loader = loader
        self._payload: asyncio.Future[Any] | None = None

    def matches(self, url_fragment: str, success: StatusPredicate) -> bool:
        return success(self.status) and fragment_pattern(url_fragment).search(self.url) is not None

    async def json(self) -> Any:
        if self._payload is None:
            self._payload = asyncio.ensure_future(self._loader())
        return await asyncio.shield(self._payload)

    def __repr__(self) -> str:
        return f"ObservedResponse(url={self.url!r}, status={self.status})"


class ResponseStream:
    """Append-only, fan-out record of responses observed during one scenario."""

    def __init__(self) -> None:
        self._responses: list[ObservedResponse] = []
        self._waiters: set[asyncio.Future[None]] = set()

    def __len__(self) -> int:
        return len(self._responses)

    def snapshot(self) -> tuple[ObservedResponse, ...]:
        return tuple(self._responses)

    def publish(self, response: ObservedResponse) -> None:
        self._responses.append(response)
        for waiter in self._waiters:
            if not waiter.done():
                waiter.set_result(None)

    async def first_match(
        self, url_fragment: str, success: StatusPredicate
    ) -> ObservedResponse:
        """Suspend until some response, past or future, matches."""
        scanned = 0
        while True:
            for response in self._responses[scanned:]:
                if response.matches(url_fragment, success):
                    return response
            scanned = len(self._responses)

            waiter = asyncio.get_running_loop().create_future()
            self._waiters.add(waiter)
            try:
                await waiter
            finally:
                self._waiters.discard(waiter)


class EvidenceCorrelator:
    def __init__(self, stream: ResponseStream) -> None:
        self.stream = stream

    async def await_response(
        self,
        url_fragment: str,
        success: StatusPredicate | None = None,
        timeout: float | None = None,
    ) -> ObservedResponse:
        success = success or status_is(200)
        try:
            async with asyncio.timeout(timeout):
                response = await self.stream.first_match(url_fragment, success)
        except TimeoutError:
            logger.warning(
                "Timed out waiting for %s",
                url_fragment,
                extra={"access_url_fragment": url_fragment, "access_timeout_s": timeout},
            )
            raise CorrelationTimeout(url_fragment, timeout) from None

        logger.debug(
            "Correlated %s with %s",
            url_fragment,
            response.url,
            extra={"access_url_fragment": url_fragment, "access_status": response.status},
        )
        return response

    async def await_json(
        self,
        url_fragment: str,
        success: StatusPredicate | None = None,
        timeout: float | None = None,
    ) -> Any:
        response = await self.await_response(url_fragment, success, timeout)
        try:
            return await response.json()
        except Exception as exc:
            # HTML error pages and truncated bodies are contract breaks.
            raise RuleResolutionError(
                f"{url_fragment} response from {response.url} is not valid JSON: {exc}"
            ) from exc
