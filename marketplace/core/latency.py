import asyncio
from typing import Optional

from marketplace.core.config import settings


async def simulate_latency(latency_ms: Optional[int] = None):
    """Sleeps SIMULATED_LATENCY_MS (or the given value) to mimic a remote store."""
    delay = settings.SIMULATED_LATENCY_MS if latency_ms is None else latency_ms
    if delay > 0:
        await asyncio.sleep(delay / 1000)
