from __future__ import annotations

import asyncio
import logging

import pytest

from core.errors import AutomationError, MissingCredentialError
from core.services.session import automation_session, optional_openai_key, require_automation_key


def test_require_automation_key(make_settings):
    assert require_automation_key(make_settings(screengrasp_api_key=" sg-1 ")) == "sg-1"

    with pytest.raises(MissingCredentialError) as info:
        require_automation_key(make_settings(screengrasp_api_key=None))
    assert info.value.variable == "SCREENGRASP_API_KEY"
    assert "screengrasp.com" in str(info.value)


def test_optional_openai_key_warns_when_missing(make_settings, caplog):
    caplog.set_level(logging.WARNING)

    assert optional_openai_key(make_settings(openai_api_key="")) is None
    assert "OPENAI_API_KEY not found" in caplog.text
    assert optional_openai_key(make_settings(openai_api_key="sk-x")) == "sk-x"


def test_session_stops_server_when_body_raises(automation):
    async def scenario() -> None:
        async with automation_session(automation):
            await automation.type_text("x")
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())

    assert automation.names() == ["start_server", "type_text", "stop_server"]


def test_session_start_failure_is_automation_error(automation):
    automation.fail_on["start_server"] = OSError("cannot install server")

    async def scenario() -> None:
        async with automation_session(automation):
            await automation.type_text("never")

    with pytest.raises(AutomationError, match="Failed to start server"):
        asyncio.run(scenario())

    assert automation.names() == ["start_server"]


def test_session_stop_failure_is_only_logged(automation, caplog):
    automation.fail_on["stop_server"] = OSError("gone")

    async def scenario() -> None:
        async with automation_session(automation):
            pass

    asyncio.run(scenario())

    assert "Could not stop server cleanly" in caplog.text
