"""AI news checker.

Reads the latest posts of a few accounts on x.com through Chrome and asks
the AI for a short digest plus a breaking-news probability.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Sequence

from adapters.ai_assistant import build_openai_client, summarize_news
from adapters.smooth_operator import build_smooth_operator_client
from core.config import AppSettings
from core.domain.models import NewsDigest
from core.interfaces.automation import AIClientFactory, AutomationClient, AutomationFactory
from core.pacing import pause
from core.services.session import automation_session, optional_openai_key, require_automation_key

logger = logging.getLogger(__name__)

TIMELINE_SEPARATOR = "\n--------------------\n"
_SCROLL_STEPS = 3


@dataclass
class NewsCheckResult:
    """Output of a news-checker run."""

    tweets_text: str = ""
    digest: NewsDigest | None = None
    raw_response: str | None = None
    aborted: bool = False


def format_ai_response(raw: str | None) -> str:
    """Pretty-print the answer when it is valid JSON, otherwise return it as is."""

    try:
        return json.dumps(json.loads(raw or "{}"), indent=4, ensure_ascii=False)
    except json.JSONDecodeError:
        return raw or ""


async def collect_timelines(
    client: AutomationClient,
    *,
    accounts: Sequence[str],
    settings: AppSettings,
) -> str | None:
    """Visit every account and concatenate the visible page text.

    Returns `None` when Chrome could not be opened.
    """

    tweets_text = ""
    browser_open = False

    for account in accounts:
        url = f"https://x.com/{account}"

        if not browser_open:
            logger.info("Opening browser to %s...", url)
            opened = await client.open_chrome(url)
            logger.info(opened.message or "Attempted to open Chrome.")
            if opened.is_error:
                logger.error("Failed to open Chrome.")
                return None
            browser_open = True
            logger.info("Waiting for browser to load (7s)...")
            await pause(7, settings)
        else:
            logger.info("Navigating to %s, waiting (4s)...", url)
            await client.navigate(url)
            await pause(4, settings)

        logger.info("Scrolling down...")
        for _ in range(_SCROLL_STEPS):
            await client.scroll(200, 200, 20, "down")
            await pause(1, settings)

        logger.info("Getting text from %s...", url)
        response = await client.get_chrome_text()
        if response.success and response.result_value:
            tweets_text += response.result_value + TIMELINE_SEPARATOR
        else:
            logger.warning("Could not get text from %s. Message: %s", url, response.message)
        await pause(1, settings)

    return tweets_text


async def run_news_checker(
    *,
    settings: AppSettings,
    accounts: Sequence[str] | None = None,
    client_factory: AutomationFactory = build_smooth_operator_client,
    ai_factory: AIClientFactory = build_openai_client,
) -> NewsCheckResult:
    logger.info("Running Twitter AI News Checker Example...")

    api_key = require_automation_key(settings)
    openai_key = optional_openai_key(settings)
    accounts = list(accounts or settings.twitter_accounts)
    result = NewsCheckResult()

    client = client_factory(api_key, settings.server_url)
    async with automation_session(client):
        try:
            logger.info("Processing Twitter accounts...")
            collected = await collect_timelines(client, accounts=accounts, settings=settings)
            if collected is None:
                result.aborted = True
                return result
            result.tweets_text = collected

            if not collected.strip():
                logger.error("Could not retrieve any tweet text. Skipping OpenAI analysis.")
            elif not openai_key:
                logger.warning("Skipping OpenAI analysis as API key is missing.")
            else:
                logger.info("Asking OpenAI about the collected tweets...")
                result.digest, result.raw_response = await summarize_news(
                    ai_factory(settings, openai_key),
                    tweets_text=collected,
                    model=settings.openai_model,
                )
                if result.raw_response is not None:
                    logger.info("--- OpenAI Result ---\n%s", format_ai_response(result.raw_response))
        except Exception as exc:
            logger.error("An error occurred during execution: %s", exc)
        finally:
            logger.info("Twitter example finished.")

    return result
