"""Email-to-ERP workflow.

Flow:
1. Screenshot the order email (Gmail in Chrome, or local Outlook).
2. Download and launch the mock ERP.
3. AI extracts the order from the screenshot.
4. AI maps the ERP form controls to element ids from the automation tree.
5. The order is typed into the ERP through UI automation.

Each optional step logs and skips on failure; only a missing key, a server
that does not start or a missing screenshot abort the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from adapters.ai_assistant import build_openai_client, extract_order_from_screenshot, identify_erp_element_ids
from adapters.mock_erp import download_mock_erp
from adapters.smooth_operator import build_smooth_operator_client
from core.config import AppSettings
from core.domain.mail_source import MailSource
from core.domain.models import ErpElementIds, Order, Screenshot
from core.interfaces.automation import AIClientFactory, AutomationClient, AutomationFactory, ChromeStrategy
from core.pacing import pause
from core.services.session import automation_session, optional_openai_key, require_automation_key

logger = logging.getLogger(__name__)

GMAIL_URL = "https://mail.google.com/"

# Example email to send to your mailbox for testing:
#
# Subject: New Computerstuff.com Order
#
# Dear you,
#
# I just visited our customer Smith & Co. Ltd.
# They want to order:
#
# - Product Name: High-Speed Router X200
#   Quantity: 5 units
#   Price per unit: 120.00
#
# - Product Name: Cat6 Ethernet Cable (10m)
#   Quantity: 10 units
#   Price per unit: 15.00
#
# Best regards,
# John Doe


@dataclass
class OrderEntryResult:
    """Output of an email-to-ERP run."""

    screenshot_taken: bool = False
    erp_path: Path | None = None
    order: Order | None = None
    element_ids: ErpElementIds | None = None
    entered: bool = False


async def screenshot_from_gmail(client: AutomationClient, settings: AppSettings) -> Screenshot | None:
    logger.info("Opening Gmail in Chrome...")
    # Closes any running Chrome instance first.
    opened = await client.open_chrome(GMAIL_URL, ChromeStrategy.FORCE_CLOSE)
    logger.info(opened.message or "Attempted to open Chrome.")
    if opened.is_error:
        logger.error("Failed to open Chrome.")
        return None

    # Gmail load and potential login
    await pause(10, settings)

    logger.info("Searching for 'order' in Gmail...")
    await client.click_by_description("the search mail input field")
    await pause(1, settings)
    await client.type_text(settings.order_mail_subject)
    await pause(0.5, settings)
    await client.press("Enter")
    await pause(5, settings)

    logger.info("Clicking the first email in the search results...")
    await client.click_by_description("the first email result in the list")
    await pause(5, settings)

    logger.info("Taking screenshot of the email...")
    return await client.take_screenshot()


async def screenshot_from_outlook(client: AutomationClient, settings: AppSettings) -> Screenshot | None:
    logger.info("Opening Outlook...")
    try:
        await client.open_application("outlook")
    except Exception as exc:
        logger.error("Failed to open Outlook: %s. Make sure Outlook is installed.", exc)
        return None
    await pause(10, settings)

    logger.info("Searching for 'order' in Outlook...")
    await client.press("Ctrl+E")
    await pause(2, settings)
    await client.type_text(settings.order_mail_subject)
    await pause(5, settings)
    await client.press("Enter")
    await pause(5, settings)

    logger.info("Clicking the first email in the Outlook search results...")
    await client.click_by_description("the first email shown in the list pane")
    await pause(5, settings)

    logger.info("Taking screenshot of Outlook...")
    return await client.take_screenshot()


_SCREENSHOT_SOURCES: dict[MailSource, Callable[[AutomationClient, AppSettings], Awaitable[Screenshot | None]]] = {
    MailSource.GMAIL: screenshot_from_gmail,
    MailSource.OUTLOOK: screenshot_from_outlook,
}


async def find_erp_window_json(client: AutomationClient, settings: AppSettings) -> str | None:
    """Return the ERP window's automation tree as JSON, or `None` if not found."""

    logger.info("Getting system overview...")
    overview = await client.get_overview()
    title = settings.erp_window_title

    focused = overview.focused_window
    if focused is not None and focused.title == title:
        return focused.to_json()

    needle = title.lower()
    erp_window = next((w for w in overview.windows if w.title and needle in w.title.lower()), None)
    if erp_window is None:
        logger.error("Could not find the Mock ERP window.")
        return None

    logger.info("Found Mock ERP window: %s - %s", erp_window.id, erp_window.title)
    logger.info("Getting ERP window details...")
    details = await client.get_window_details(erp_window.id)
    if details is None or not details.user_interface_elements:
        logger.error("Could not get details for the Mock ERP window.")
        return None
    return details.to_json()


async def enter_order(
    client: AutomationClient,
    *,
    order: Order,
    element_ids: ErpElementIds,
    settings: AppSettings,
) -> None:
    """Type the order into the ERP form and save it."""

    logger.info(
        "Entering customer name: %s into element %s",
        order.customer_name,
        element_ids.element_id_customer_name,
    )
    await client.set_value(element_ids.element_id_customer_name, order.customer_name)
    await pause(0.5, settings)

    for article in order.ordered_articles:
        logger.info("Entering article: %s", article.article_name)
        await client.set_value(element_ids.element_id_article_name, article.article_name)
        await pause(0.2, settings)
        await client.set_value(element_ids.element_id_quantity, article.quantity_text())
        await pause(0.2, settings)
        await client.set_value(element_ids.element_id_price_per_unit, article.price_text())
        await pause(0.2, settings)

        logger.info("Clicking 'Add Item' button...")
        await client.invoke(element_ids.element_id_add_item_button)
        await pause(1, settings)

    logger.info("Clicking 'Save Order' button...")
    await client.invoke(element_ids.element_id_save_order_button)
    await pause(0.5, settings)


async def _launch_mock_erp(client: AutomationClient, settings: AppSettings) -> Path | None:
    try:
        logger.info("Downloading mock ERP application...")
        erp_path = await download_mock_erp(settings)
        if erp_path is None:
            logger.error("Failed to download mock ERP application.")
            return None
        logger.info("Mock ERP downloaded to: %s", erp_path)

        logger.info("Launching mock ERP application...")
        await client.open_application(str(erp_path))
        await pause(5, settings)
        logger.info("Mock ERP application launched.")
        return erp_path
    except Exception as exc:
        logger.error("Error with mock ERP application: %s", exc)
        return None


async def run_order_entry(
    *,
    settings: AppSettings,
    source: MailSource = MailSource.GMAIL,
    client_factory: AutomationFactory = build_smooth_operator_client,
    ai_factory: AIClientFactory = build_openai_client,
    launch_erp: Callable[[AutomationClient, AppSettings], Awaitable[Path | None]] = _launch_mock_erp,
) -> OrderEntryResult:
    logger.info("Starting Email-to-ERP Example...")

    api_key = require_automation_key(settings)
    openai_key = optional_openai_key(settings)
    result = OrderEntryResult()

    client = client_factory(api_key, settings.server_url)
    async with automation_session(client):
        try:
            await _order_workflow(
                client,
                settings=settings,
                source=source,
                openai_key=openai_key,
                ai_factory=ai_factory,
                launch_erp=launch_erp,
                result=result,
            )
        finally:
            logger.info("Email-to-ERP Example finished.")

    return result


async def _order_workflow(
    client: AutomationClient,
    *,
    settings: AppSettings,
    source: MailSource,
    openai_key: str | None,
    ai_factory: AIClientFactory,
    launch_erp: Callable[[AutomationClient, AppSettings], Awaitable[Path | None]],
    result: OrderEntryResult,
) -> None:
    try:
        logger.info("Attempting to get order email screenshot via %s...", source.label())
        screenshot = await _SCREENSHOT_SOURCES[source](client, settings)
    except Exception as exc:
        logger.error("Error getting email screenshot: %s", exc)
        return

    if screenshot is None or not screenshot.success:
        logger.error("Could not get email screenshot.")
        return
    result.screenshot_taken = True
    logger.info("Successfully captured email screenshot.")

    # The run continues even when the ERP is not available.
    result.erp_path = await launch_erp(client, settings)

    ai = ai_factory(settings, openai_key) if openai_key else None
    if ai is not None:
        result.order = await extract_order_from_screenshot(ai, screenshot=screenshot, model=settings.openai_model)
    else:
        logger.info("Skipping AI order extraction (OpenAI key missing or screenshot failed).")

    if ai is None or result.order is None or result.erp_path is None:
        logger.info("Skipping ERP data entry (AI steps failed or ERP not running).")
        return

    logger.info("Attempting to automate data entry into mock ERP...")
    try:
        window_json = await find_erp_window_json(client, settings)
        if window_json is None:
            return

        result.element_ids = await identify_erp_element_ids(ai, window_json=window_json, model=settings.openai_model)
        if result.element_ids is None:
            logger.error("Could not identify ERP element IDs.")
            return

        await enter_order(client, order=result.order, element_ids=result.element_ids, settings=settings)
        result.entered = True
        logger.info("Data entry automation complete.")
    except Exception as exc:
        logger.error("Error during ERP data entry automation: %s", exc)
