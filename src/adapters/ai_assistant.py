"""Chat-completion adapter (OpenAI SDK).

Responsibility:
- Build the prompts the examples send (automation tree, screenshot, timeline text).
- Call the provider and hand back free text or a parsed model.
- Keep parsing pure and total: malformed output becomes `None`, never an exception.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from core.config import AppSettings
from core.domain.models import ErpElementIds, NewsDigest, Order, Screenshot
from core.errors import AIResponseError

logger = logging.getLogger(__name__)


ORDER_PROMPT = """Extract the order details from the email in the screenshot. Provide the output strictly in the following JSON format:
{
  "customerName": "name of the customer",
  "orderedArticles": [
    {
      "articleName": "name of the article",
      "quantity": quantity_as_number,
      "pricePerUnit": price_as_number
    }
    // ... more articles if present
  ]
}"""

ELEMENT_IDS_PROMPT = """Based on the following UI automation tree JSON for the 'Mini ERP Mock' application, identify the element IDs for the specified controls. Provide the output strictly in the following JSON format:
{
  "elementIdCustomerName": "ID_for_customer_name_input",
  "elementIdArticleName": "ID_for_article_name_input",
  "elementIdQuantity": "ID_for_quantity_input",
  "elementIdPricePerUnit": "ID_for_price_input",
  "elementIdAddItemButton": "ID_for_add_item_button",
  "elementIdSaveOrderButton": "ID_for_save_order_button"
}

UI Automation Tree JSON:
"""

NEWS_PROMPT = """These are the latest tweets of some twitter accounts that are typically very up-to-date on AI news. Give me a summary on the concrete topics they write about (3 bullet points, one short sentence, each) and a rating 0-100 if you have the impression that actual very big breaking news has just occurred within the last hour.
<tweets>{tweets}</tweets>
Answer with a JSON in this form:
{{
    "summaryBulletPoints": [
        "bullet point 1",
        "bullet point 2",
        "bullet point 3"
    ],
    "breakingNewsProbabilityInPercent": 50
}}"""

CALCULATOR_TREE_PROMPT = "What result does the calculator display? You can read it from its automation tree: "
CALCULATOR_SCREENSHOT_PROMPT = "What result does the calculator display based on the screenshot?"


_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)
_AI_ERRORS = (OpenAIError, AIResponseError)


def build_openai_client(settings: AppSettings, api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=api_key,
        base_url=settings.openai_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=settings.ai_max_retries,
    )


def _extract_json_object(text: str) -> str:
    """Return the first JSON object present in the provider response."""
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()

    stripped = text.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        return stripped

    start = stripped.find("{")
    end = stripped.rfind("}")
    if 0 <= start < end:
        candidate = stripped[start : end + 1]
        try:
            json.loads(candidate)
            return candidate
        except json.JSONDecodeError:
            pass

    raise ValueError("Could not locate a valid JSON object in the AI provider response.")


def _parse_model(text: str | None, model: type[BaseModel]) -> Any:
    if not text or not text.strip():
        return None
    try:
        data = json.loads(_extract_json_object(text))
        return model.model_validate(data)
    except (ValueError, ValidationError) as exc:
        logger.debug("Could not parse %s from AI response: %s", model.__name__, exc)
        return None


def parse_order_response(text: str | None) -> Order | None:
    """Parse the order JSON returned by the model.

    Empty, malformed or schema-violating responses yield `None`.
    """

    return _parse_model(text, Order)


def parse_element_ids_response(text: str | None) -> ErpElementIds | None:
    """Parse the element-id mapping returned by the model.

    A response without a customer-name id (or any other id) yields `None`.
    """

    return _parse_model(text, ErpElementIds)


def parse_news_digest(text: str | None) -> NewsDigest | None:
    return _parse_model(text, NewsDigest)


def image_content(image_base64: str) -> dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"},
    }


async def _complete(
    client: AsyncOpenAI,
    *,
    model: str,
    content: str | list[dict[str, Any]],
    json_mode: bool = False,
) -> str | None:
    kwargs: dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": content}],
    }
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    response = await client.chat.completions.create(**kwargs)
    if not response.choices:
        raise AIResponseError("AI provider returned no choices.")
    return response.choices[0].message.content


async def ask_about_automation_tree(
    client: AsyncOpenAI,
    *,
    window_json: str,
    model: str,
    question: str = CALCULATOR_TREE_PROMPT,
) -> str | None:
    """Ask a free-form question about a window's automation tree."""

    try:
        return await _complete(client, model=model, content=f"{question}{window_json}")
    except _AI_ERRORS as exc:
        logger.warning("AI interpretation skipped: %s", exc)
        return None


async def ask_about_screenshot(
    client: AsyncOpenAI,
    *,
    image_base64: str,
    model: str,
    question: str = CALCULATOR_SCREENSHOT_PROMPT,
) -> str | None:
    """Ask a free-form question about a screenshot.

    Less reliable and more costly than reading the automation tree.
    """

    content = [{"type": "text", "text": question}, image_content(image_base64)]
    try:
        return await _complete(client, model=model, content=content)
    except _AI_ERRORS as exc:
        logger.warning("Screenshot interpretation skipped, OpenAI call failed: %s", exc)
        return None


async def summarize_news(
    client: AsyncOpenAI,
    *,
    tweets_text: str,
    model: str,
) -> tuple[NewsDigest | None, str | None]:
    """Summarize timeline text; returns the parsed digest and the raw answer."""

    prompt = NEWS_PROMPT.format(tweets=tweets_text)
    try:
        raw = await _complete(client, model=model, content=[{"type": "text", "text": prompt}], json_mode=True)
    except _AI_ERRORS as exc:
        logger.warning("News summary skipped, OpenAI call failed: %s", exc)
        return None, None
    return parse_news_digest(raw), raw


async def extract_order_from_screenshot(
    client: AsyncOpenAI,
    *,
    screenshot: Screenshot,
    model: str,
) -> Order | None:
    if not screenshot.image_base64:
        logger.warning("Screenshot has no image data, skipping order extraction.")
        return None

    logger.info("Asking OpenAI to extract order data from screenshot...")
    content = [{"type": "text", "text": ORDER_PROMPT}, image_content(screenshot.image_base64)]
    try:
        raw = await _complete(client, model=model, content=content, json_mode=True)
    except _AI_ERRORS as exc:
        logger.warning("Order extraction skipped, OpenAI call failed: %s", exc)
        return None

    logger.info("OpenAI Order Extraction Response: %s", raw)
    if not raw:
        logger.warning("Empty response from OpenAI")
        return None

    order = parse_order_response(raw)
    if order is None:
        logger.warning("Could not parse order data from the OpenAI response")
        return None
    logger.info("Successfully extracted order for customer: %s", order.customer_name)
    return order


async def identify_erp_element_ids(
    client: AsyncOpenAI,
    *,
    window_json: str,
    model: str,
) -> ErpElementIds | None:
    logger.info("Asking OpenAI to identify ERP element IDs...")
    try:
        raw = await _complete(client, model=model, content=ELEMENT_IDS_PROMPT + window_json, json_mode=True)
    except _AI_ERRORS as exc:
        logger.warning("Element ID extraction skipped, OpenAI call failed: %s", exc)
        return None

    logger.info("OpenAI Element ID Response: %s", raw)
    if not raw:
        logger.warning("Empty response from OpenAI")
        return None

    element_ids = parse_element_ids_response(raw)
    if element_ids is None:
        logger.warning("Could not find the necessary element IDs")
        return None
    logger.info("Successfully identified ERP element IDs.")
    return element_ids
