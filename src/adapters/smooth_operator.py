"""Automation adapter over the Smooth Operator client library.

Responsibility:
- Implement `core.interfaces.automation.AutomationClient`.
- Run the library's blocking calls in a worker thread.
- Normalize the library's response objects into the domain DTOs.

The library (`smooth-operator-agent-tools`, Windows server) is imported when
a client is built, so the rest of the project works without it.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import re
from enum import Enum
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from core.domain.models import ActionResult, Overview, Screenshot, WindowDetails
from core.interfaces.automation import AutomationClient, ChromeStrategy

_T = TypeVar("_T", bound=BaseModel)

_WORD_RE = re.compile(r"(.)([A-Z][a-z]+)")
_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")


def snake_keys(value: Any) -> Any:
    """Rename the PascalCase keys the library serializes with to snake_case."""

    if isinstance(value, dict):
        return {_to_snake(str(k)): snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [snake_keys(v) for v in value]
    return value


def _to_snake(name: str) -> str:
    return _BOUNDARY_RE.sub(r"\1_\2", _WORD_RE.sub(r"\1_\2", name)).lower()


def to_plain(value: Any) -> Any:
    """Convert a library response object into JSON-compatible data."""

    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_plain(v) for v in value]
    to_json_string = getattr(value, "to_json_string", None)
    if callable(to_json_string):
        return snake_keys(json.loads(to_json_string()))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_plain(dataclasses.asdict(value))
    if hasattr(value, "__dict__"):
        return {k: to_plain(v) for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)


def _as_model(value: Any, model: type[_T]) -> _T:
    data = to_plain(value)
    if data is None:
        # The library answers None when the request failed.
        data = {"success": False, "message": "Error: no response from the automation server"}
    elif not isinstance(data, dict):
        data = {"message": str(data)}
    return model.model_validate(data)


class SmoothOperatorAutomation(AutomationClient):
    """`AutomationClient` backed by `SmoothOperatorClient`."""

    def __init__(self, client: Any, *, chrome_strategy_type: Callable[[int], Any] | None = None) -> None:
        self._client = client
        self._chrome_strategy_type = chrome_strategy_type

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        return await asyncio.to_thread(fn, *args)

    async def _action(self, fn: Callable[..., Any], *args: Any) -> ActionResult:
        return _as_model(await self._call(fn, *args), ActionResult)

    async def start_server(self) -> None:
        await self._call(self._client.start_server)

    async def stop_server(self) -> None:
        await self._call(self._client.stop_server)

    async def open_application(self, name_or_path: str) -> ActionResult:
        return await self._action(self._client.system.open_application, name_or_path)

    async def open_chrome(
        self,
        url: str,
        strategy: ChromeStrategy = ChromeStrategy.THROW_ERROR,
    ) -> ActionResult:
        native = self._chrome_strategy_type(int(strategy)) if self._chrome_strategy_type else int(strategy)
        return await self._action(self._client.chrome.open_chrome, url, native)

    async def navigate(self, url: str) -> ActionResult:
        return await self._action(self._client.chrome.navigate, url)

    async def click_by_description(self, description: str) -> ActionResult:
        return await self._action(self._client.mouse.click_by_description, description)

    async def scroll(self, x: int, y: int, clicks: int, direction: str = "down") -> ActionResult:
        return await self._action(self._client.mouse.scroll, x, y, clicks, direction)

    async def type_text(self, text: str) -> ActionResult:
        return await self._action(self._client.keyboard.type, text)

    async def press(self, keys: str) -> ActionResult:
        return await self._action(self._client.keyboard.press, keys)

    async def take_screenshot(self) -> Screenshot:
        return _as_model(await self._call(self._client.screenshot.take), Screenshot)

    async def get_chrome_text(self) -> ActionResult:
        return await self._action(self._client.chrome.get_text)

    async def get_overview(self) -> Overview:
        return _as_model(await self._call(self._client.system.get_overview), Overview)

    async def get_window_details(self, window_id: str) -> WindowDetails:
        return _as_model(await self._call(self._client.system.get_window_details, window_id), WindowDetails)

    async def set_value(self, element_id: str, value: str) -> ActionResult:
        return await self._action(self._client.automation.set_value, element_id, value)

    async def invoke(self, element_id: str) -> ActionResult:
        return await self._action(self._client.automation.invoke, element_id)


def build_smooth_operator_client(api_key: str, server_url: str | None = None) -> SmoothOperatorAutomation:
    """Build the real client (requires `smooth-operator-agent-tools`)."""

    from smooth_operator_agent_tools import (  # noqa: PLC0415
        ExistingChromeInstanceStrategy,
        SmoothOperatorClient,
    )

    client = SmoothOperatorClient(api_key=api_key, base_url=server_url)
    return SmoothOperatorAutomation(client, chrome_strategy_type=ExistingChromeInstanceStrategy)
