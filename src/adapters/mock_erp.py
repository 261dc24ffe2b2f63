"""Download of the mock ERP executable used by the email-to-ERP example.

Why in adapters:
- The download is plain HTTP (httpx) plus a file on disk.
- The workflow only asks for a path, or `None` when the ERP is unavailable.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings

logger = logging.getLogger(__name__)


def mock_erp_path(settings: AppSettings) -> Path:
    base = settings.download_dir or Path(tempfile.gettempdir())
    return base / settings.erp_file_name


async def download_mock_erp(
    settings: AppSettings,
    *,
    client: httpx.AsyncClient | None = None,
) -> Path | None:
    """Download the mock ERP to the download dir.

    Returns the local path, or `None` when the download failed. An existing
    file is reused without touching the network.
    """

    destination = mock_erp_path(settings)
    if destination.exists():
        logger.info("Mock ERP already exists, skipping download.")
        return destination

    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".part")
    logger.info("Downloading mock ERP application to %s...", destination)

    owns_client = client is None
    http = client or build_async_client(settings)
    try:
        async with http.stream("GET", settings.erp_download_url) as response:
            if response.status_code != 200:
                logger.error("Failed to download: HTTP %s", response.status_code)
                return None
            with partial.open("wb") as fh:
                async for chunk in response.aiter_bytes():
                    fh.write(chunk)
        partial.replace(destination)
    except httpx.HTTPError as exc:
        logger.error("Error downloading mock ERP: %s", exc)
        return None
    finally:
        # Only a complete download may take the final name.
        partial.unlink(missing_ok=True)
        if owns_client:
            await http.aclose()

    logger.info("Download completed.")
    return destination
