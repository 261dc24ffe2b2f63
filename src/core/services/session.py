"""Credentials and automation-server lifecycle shared by every workflow."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from core.config import AppSettings
from core.errors import AutomationError, MissingCredentialError
from core.interfaces.automation import AutomationClient

logger = logging.getLogger(__name__)

SCREENGRASP_KEY_HINT = "Get a free key at https://screengrasp.com/api.html"
OPENAI_KEY_HINT = "Get a key at https://platform.openai.com/api-keys"


def require_automation_key(settings: AppSettings) -> str:
    """Return the ScreenGrasp key or abort the run before any call is made."""

    key = (settings.screengrasp_api_key or "").strip()
    if not key:
        raise MissingCredentialError("SCREENGRASP_API_KEY", SCREENGRASP_KEY_HINT)
    return key


def optional_openai_key(settings: AppSettings) -> str | None:
    key = (settings.openai_api_key or "").strip()
    if not key:
        logger.warning(
            "OPENAI_API_KEY not found in .env file or environment variables. "
            "OpenAI part will be skipped. %s",
            OPENAI_KEY_HINT,
        )
        return None
    return key


@asynccontextmanager
async def automation_session(client: AutomationClient) -> AsyncIterator[AutomationClient]:
    """Start the automation server and stop it again on every exit path.

    A failing start aborts the run (`AutomationError`); a failing stop is
    only logged.
    """

    logger.info(
        "Starting server (can take a while, especially on first run, because it's installing the server)..."
    )
    try:
        await client.start_server()
    except Exception as exc:
        raise AutomationError(f"Failed to start server: {exc}") from exc
    logger.info("Server started successfully.")

    try:
        yield client
    finally:
        logger.info("Stopping server...")
        try:
            await client.stop_server()
        except Exception as exc:
            logger.warning("Could not stop server cleanly: %s", exc)
