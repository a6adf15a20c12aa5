"""Client-side capabilities injected into the services that need them.

The same service code runs during server rendering, where there is no
clipboard, geolocation or map SDK, and inside an interactive client. Those
capabilities are therefore passed in rather than reached for globally.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from ..core.config import settings
from ..schemas.tours import Coordinates

logger = logging.getLogger(__name__)


class MapSdkUnavailableError(RuntimeError):
    """Raised when the map SDK does not become ready in time."""


class ClientCapabilities(Protocol):
    async def copy_text(self, text: str) -> bool:
        ...

    async def current_position(self) -> Coordinates | None:
        ...


class NullCapabilities:
    """Capabilities of a non-interactive context: nothing is available."""

    async def copy_text(self, text: str) -> bool:
        logger.debug("Clipboard unavailable; not copying %d chars", len(text))
        return False

    async def current_position(self) -> Coordinates | None:
        return None


class SdkReadiness:
    """One-shot signal carrying the map SDK handle once it has loaded."""

    def __init__(self) -> None:
        self._future: asyncio.Future[Any] | None = None

    def _get_future(self) -> asyncio.Future[Any]:
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
        return self._future

    @property
    def is_ready(self) -> bool:
        return self._future is not None and self._future.done() and self._future.exception() is None

    def set_ready(self, handle: Any) -> None:
        future = self._get_future()
        if not future.done():
            future.set_result(handle)

    def set_failed(self, error: BaseException) -> None:
        future = self._get_future()
        if not future.done():
            future.set_exception(error)

    async def wait(self, timeout: float | None = None) -> Any:
        """Return the SDK handle, raising MapSdkUnavailableError on timeout or failure."""

        limit = settings.map_sdk_timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(asyncio.shield(self._get_future()), timeout=limit)
        except asyncio.TimeoutError as exc:
            raise MapSdkUnavailableError(f"Map SDK not ready after {limit}s") from exc
        except MapSdkUnavailableError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise MapSdkUnavailableError(f"Map SDK failed to load: {exc}") from exc
