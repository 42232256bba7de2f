from dataclasses import dataclass
from typing import Optional

from marketplace.core.config import settings
from marketplace.core.logger import logger
from marketplace.core.seed_loader import load_seed
from marketplace.services.booking_service import BookingLedger
from marketplace.services.directory_service import DirectoryStore


@dataclass
class Marketplace:
    """Owns the per-process stores; built once at startup and handed to routes."""

    directory: DirectoryStore
    ledger: BookingLedger


def build_marketplace(seed_path: Optional[str] = None, commission_rate: Optional[float] = None,
                      latency_ms: Optional[int] = None) -> Marketplace:
    merchants, users = load_seed(seed_path)
    latency = settings.SIMULATED_LATENCY_MS if latency_ms is None else latency_ms
    directory = DirectoryStore(merchants, users, latency_ms=latency)
    ledger = BookingLedger(directory, commission_rate=commission_rate, latency_ms=latency)
    logger.info(f"🏪 Marketplace ready: {len(merchants)} merchants, {len(users)} users, "
                f"commission rate {ledger.commission_rate:.2%}")
    return Marketplace(directory=directory, ledger=ledger)
