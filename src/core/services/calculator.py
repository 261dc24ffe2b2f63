"""Calculator demo.

Opens the Windows calculator, computes 3+4 through keyboard and mouse, then
optionally asks the AI what the calculator displays, reading either the
automation tree (default) or a screenshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from adapters.ai_assistant import ask_about_automation_tree, ask_about_screenshot, build_openai_client
from adapters.smooth_operator import build_smooth_operator_client
from core.config import AppSettings
from core.interfaces.automation import AIClientFactory, AutomationClient, AutomationFactory
from core.services.session import automation_session, optional_openai_key, require_automation_key

logger = logging.getLogger(__name__)


@dataclass
class CalculatorResult:
    """Output of a calculator run."""

    answer: str | None = None
    used_screenshot: bool = False


async def _interpret(
    client: AutomationClient,
    *,
    settings: AppSettings,
    openai_key: str | None,
    ai_factory: AIClientFactory,
    use_screenshot: bool,
) -> str | None:
    if use_screenshot:
        if not openai_key:
            logger.info("OpenAI key not provided, skipping screenshot analysis.")
            return None
        logger.info("Taking screenshot...")
        screenshot = await client.take_screenshot()
        if not screenshot.success or not screenshot.image_base64:
            logger.error("Could not take a screenshot to send to OpenAI.")
            return None
        logger.info("Asking OpenAI about the screenshot...")
        return await ask_about_screenshot(
            ai_factory(settings, openai_key),
            image_base64=screenshot.image_base64,
            model=settings.openai_model,
        )

    logger.info("Getting window overview...")
    overview = await client.get_overview()
    window = overview.focused_window

    if openai_key and window is not None:
        logger.info("Asking OpenAI about the result...")
        return await ask_about_automation_tree(
            ai_factory(settings, openai_key),
            window_json=window.to_json(),
            model=settings.openai_model,
        )
    if openai_key:
        logger.info("Could not get focused window information to send to OpenAI.")
    else:
        logger.info("OpenAI key not provided, skipping result verification.")
    return None


async def run_calculator_demo(
    *,
    settings: AppSettings,
    use_screenshot: bool = False,
    client_factory: AutomationFactory = build_smooth_operator_client,
    ai_factory: AIClientFactory = build_openai_client,
) -> CalculatorResult:
    logger.info("Starting Smooth Operator Python Example...")

    api_key = require_automation_key(settings)
    openai_key = optional_openai_key(settings)
    result = CalculatorResult(used_screenshot=use_screenshot)

    client = client_factory(api_key, settings.server_url)
    async with automation_session(client):
        try:
            logger.info("Opening calculator...")
            await client.open_application("calc")

            # Assumes the calculator window has focus.
            logger.info("Typing '3+4'...")
            await client.type_text("3+4")

            logger.info("Clicking equals sign...")
            await client.click_by_description("the equals sign")

            result.answer = await _interpret(
                client,
                settings=settings,
                openai_key=openai_key,
                ai_factory=ai_factory,
                use_screenshot=use_screenshot,
            )
            if openai_key:
                logger.info("OpenAI Result: %s", result.answer or "No result received.")
        except Exception as exc:
            logger.error("An error occurred during the example execution: %s", exc)

    logger.info("Example finished.")
    return result
