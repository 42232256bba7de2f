import asyncio
import math
import uuid
from typing import Iterable, List, Optional

from marketplace.core.errors import NotFoundError, ValidationError
from marketplace.core.latency import simulate_latency
from marketplace.core.logger import logger
from marketplace.models.domain import Merchant, Service, User


def make_service_id(merchant_id: str) -> str:
    return f"s-{merchant_id}-{uuid.uuid4().hex[:8]}"


class DirectoryStore:
    """
    In-memory merchant and user directory.

    Reads hand out deep copies so callers can never mutate the catalog behind
    the store's back. The only write is a full catalog replacement, done
    under the store lock.
    """

    def __init__(self, merchants: Iterable[Merchant] = (), users: Iterable[User] = (),
                 latency_ms: Optional[int] = None):
        self._merchants: List[Merchant] = [m.model_copy(deep=True) for m in merchants]
        self._users: List[User] = [u.model_copy(deep=True) for u in users]
        self._lock = asyncio.Lock()
        self._latency_ms = latency_ms

    def _find_merchant(self, merchant_id: str) -> Merchant:
        for merchant in self._merchants:
            if merchant.id == merchant_id:
                return merchant
        raise NotFoundError(f"Merchant {merchant_id} not found")

    async def list_merchants(self) -> List[Merchant]:
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return [m.model_copy(deep=True) for m in self._merchants]

    async def get_merchant(self, merchant_id: str) -> Merchant:
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return self._find_merchant(merchant_id).model_copy(deep=True)

    async def list_users(self) -> List[User]:
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return [u.model_copy(deep=True) for u in self._users]

    async def get_user(self, user_id: str) -> User:
        """Lookup behind the pick-a-user login."""
        await simulate_latency(self._latency_ms)
        async with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user.model_copy(deep=True)
        raise NotFoundError(f"User {user_id} not found")

    async def resolve_services(self, merchant_id: str, service_ids: List[str]) -> List[Service]:
        """
        Maps selected service ids onto the merchant's current catalog,
        keeping selection order.
        """
        await simulate_latency(self._latency_ms)
        async with self._lock:
            merchant = self._find_merchant(merchant_id)
            catalog = {s.id: s for s in merchant.services}
            if len(set(service_ids)) != len(service_ids):
                raise ValidationError("A service can only be selected once")
            unknown = [sid for sid in service_ids if sid not in catalog]
            if unknown:
                raise ValidationError(f"Unknown service(s) for merchant {merchant_id}: {', '.join(unknown)}")
            return [catalog[sid].model_copy() for sid in service_ids]

    async def update_merchant_services(self, merchant_id: str, services: List[Service]) -> Merchant:
        """
        Replaces the merchant's whole catalog. No per-item diffing.
        Bookings keep their own snapshot, so history is unaffected.
        """
        await simulate_latency(self._latency_ms)
        new_services = [s.model_copy() for s in services]
        for service in new_services:
            if not service.name or not service.name.strip():
                raise ValidationError("Service name must not be blank")
            if service.price is None or not math.isfinite(service.price) or service.price < 0:
                raise ValidationError(f"Service {service.name!r} has an invalid price: {service.price}")
        ids = [s.id for s in new_services]
        if len(set(ids)) != len(ids):
            raise ValidationError("Service ids must be unique within a catalog")

        async with self._lock:
            merchant = self._find_merchant(merchant_id)
            old_count = len(merchant.services)
            merchant.services = new_services
            logger.info(f"🛠️ Merchant {merchant_id} catalog replaced ({old_count} -> {len(new_services)} services)")
            return merchant.model_copy(deep=True)
