"""Shared fakes for the automation server and the chat-completion API."""

from __future__ import annotations

from collections import deque
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from core.config import AppSettings
from core.domain.models import ActionResult, Overview, Screenshot, WindowDetails
from core.interfaces.automation import AutomationClient, ChromeStrategy


class FakeAutomation(AutomationClient):
    """Records every call; answers come from overridable attributes."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.open_chrome_result = ActionResult(success=True, message="Chrome opened")
        self.chrome_texts: deque[ActionResult] = deque()
        self.screenshot = Screenshot(success=True, image_base64="aGVsbG8=")
        self.overview = Overview()
        self.window_details: dict[str, WindowDetails] = {}
        self.fail_on: dict[str, Exception] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise self.fail_on[name]

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def start_server(self) -> None:
        self._record("start_server")

    async def stop_server(self) -> None:
        self._record("stop_server")

    async def open_application(self, name_or_path: str) -> ActionResult:
        self._record("open_application", name_or_path)
        return ActionResult(success=True, message="opened")

    async def open_chrome(self, url: str, strategy: ChromeStrategy = ChromeStrategy.THROW_ERROR) -> ActionResult:
        self._record("open_chrome", url, strategy)
        return self.open_chrome_result

    async def navigate(self, url: str) -> ActionResult:
        self._record("navigate", url)
        return ActionResult()

    async def click_by_description(self, description: str) -> ActionResult:
        self._record("click_by_description", description)
        return ActionResult()

    async def scroll(self, x: int, y: int, clicks: int, direction: str = "down") -> ActionResult:
        self._record("scroll", x, y, clicks, direction)
        return ActionResult()

    async def type_text(self, text: str) -> ActionResult:
        self._record("type_text", text)
        return ActionResult()

    async def press(self, keys: str) -> ActionResult:
        self._record("press", keys)
        return ActionResult()

    async def take_screenshot(self) -> Screenshot:
        self._record("take_screenshot")
        return self.screenshot

    async def get_chrome_text(self) -> ActionResult:
        self._record("get_chrome_text")
        if self.chrome_texts:
            return self.chrome_texts.popleft()
        return ActionResult(success=False, message="no text")

    async def get_overview(self) -> Overview:
        self._record("get_overview")
        return self.overview

    async def get_window_details(self, window_id: str) -> WindowDetails:
        self._record("get_window_details", window_id)
        return self.window_details[window_id]

    async def set_value(self, element_id: str, value: str) -> ActionResult:
        self._record("set_value", element_id, value)
        return ActionResult()

    async def invoke(self, element_id: str) -> ActionResult:
        self._record("invoke", element_id)
        return ActionResult()


class FakeCompletions:
    def __init__(self, answers: list[Any]) -> None:
        self._answers = deque(answers)
        self.requests: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        answer = self._answers.popleft() if self._answers else None
        if isinstance(answer, Exception):
            raise answer
        message = SimpleNamespace(content=answer)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Minimal stand-in for `AsyncOpenAI` (only `chat.completions.create`)."""

    def __init__(self, *answers: Any) -> None:
        self.completions = FakeCompletions(list(answers))
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def requests(self) -> list[dict[str, Any]]:
        return self.completions.requests


def ai_factory_for(fake: FakeOpenAI, seen_keys: list[str] | None = None) -> Callable[[AppSettings, str], FakeOpenAI]:
    def factory(settings: AppSettings, api_key: str) -> FakeOpenAI:
        if seen_keys is not None:
            seen_keys.append(api_key)
        return fake

    return factory


def automation_factory_for(fake: FakeAutomation, seen: list[tuple[str, str | None]] | None = None):
    def factory(api_key: str, server_url: str | None) -> FakeAutomation:
        if seen is not None:
            seen.append((api_key, server_url))
        return fake

    return factory


@pytest.fixture
def make_settings(tmp_path, monkeypatch) -> Callable[..., AppSettings]:
    """Settings isolated from the developer's environment and .env files."""

    for name in ("SCREENGRASP_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    def _make(**overrides: Any) -> AppSettings:
        values: dict[str, Any] = {
            "screengrasp_api_key": "sg-test",
            "openai_api_key": None,
            "delay_scale": 0.0,
            "download_dir": tmp_path,
        }
        values.update(overrides)
        return AppSettings(_env_file=None, **values)

    return _make


@pytest.fixture
def automation() -> FakeAutomation:
    return FakeAutomation()
