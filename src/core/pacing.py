"""Fixed waits between UI actions.

The examples synchronise with the desktop by sleeping a fixed amount of
time after each action; `delay_scale` stretches or disables those waits.
"""

from __future__ import annotations

import asyncio

from core.config import AppSettings


async def pause(seconds: float, settings: AppSettings) -> None:
    scaled = seconds * settings.delay_scale
    if scaled > 0:
        await asyncio.sleep(scaled)
