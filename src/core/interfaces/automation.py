"""Contract of the desktop-automation client.

Why a Protocol:
- The workflows depend on a structural contract, not on the client library.
- `adapters.smooth_operator` implements it for the real server; tests use fakes.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Protocol, runtime_checkable

from core.domain.models import ActionResult, Overview, Screenshot, WindowDetails


class ChromeStrategy(IntEnum):
    """What to do when Chrome is already running."""

    THROW_ERROR = 0
    FORCE_CLOSE = 1
    START_WITHOUT_USER_PROFILE = 2


@runtime_checkable
class AutomationClient(Protocol):
    """Async surface of the automation server.

    Design rules:
    - every call is awaited before the next one starts;
    - UI actions return an `ActionResult` (status/message), queries return DTOs;
    - failures raise, the caller decides whether that aborts the run.
    """

    async def start_server(self) -> None: ...

    async def stop_server(self) -> None: ...

    async def open_application(self, name_or_path: str) -> ActionResult: ...

    async def open_chrome(
        self,
        url: str,
        strategy: ChromeStrategy = ChromeStrategy.THROW_ERROR,
    ) -> ActionResult: ...

    async def navigate(self, url: str) -> ActionResult: ...

    async def click_by_description(self, description: str) -> ActionResult: ...

    async def scroll(self, x: int, y: int, clicks: int, direction: str = "down") -> ActionResult: ...

    async def type_text(self, text: str) -> ActionResult: ...

    async def press(self, keys: str) -> ActionResult: ...

    async def take_screenshot(self) -> Screenshot: ...

    async def get_chrome_text(self) -> ActionResult: ...

    async def get_overview(self) -> Overview: ...

    async def get_window_details(self, window_id: str) -> WindowDetails: ...

    async def set_value(self, element_id: str, value: str) -> ActionResult: ...

    async def invoke(self, element_id: str) -> ActionResult: ...


# (api_key, server_url) -> client
AutomationFactory = Callable[[str, "str | None"], AutomationClient]

# (settings, api_key) -> AsyncOpenAI-compatible client
AIClientFactory = Callable[[Any, str], Any]
