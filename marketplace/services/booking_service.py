import asyncio
import math
import re
import time as clock
from datetime import datetime
from typing import List, Optional

from marketplace.core.config import settings
from marketplace.core.errors import InvalidStateTransition, NotFoundError, ValidationError
from marketplace.core.latency import simulate_latency
from marketplace.core.logger import logger
from marketplace.models.domain import BOOKING_TRANSITIONS, Booking, BookingStatus, Service
from marketplace.services.directory_service import DirectoryStore

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")


def split_commission(booking_cost: float, rate: float):
    """Returns (commission, merchant_payout) for a booking cost."""
    commission = booking_cost * rate
    return commission, booking_cost - commission


def newest_first(bookings: List[Booking]) -> List[Booking]:
    # Stable sort over the reversed ledger: equal timestamps keep later inserts first
    return sorted(reversed(bookings), key=lambda b: b.created_at, reverse=True)


class BookingLedger:
    """
    Append-only ledger of bookings.

    Owns the Pending -> Confirmed / Rejected state machine and the commission
    split, which is fixed at creation time. All mutations go through one
    asyncio lock.
    """

    def __init__(self, directory: DirectoryStore, commission_rate: Optional[float] = None,
                 latency_ms: Optional[int] = None):
        self.directory = directory
        self.commission_rate = settings.COMMISSION_RATE if commission_rate is None else commission_rate
        self._bookings: List[Booking] = []
        self._lock = asyncio.Lock()
        self._latency_ms = latency_ms
        self._last_id = 0

    def __len__(self):
        return len(self._bookings)

    def _next_id(self) -> str:
        # Time based, bumped on collision so ids stay unique
        candidate = max(clock.time_ns(), self._last_id + 1)
        self._last_id = candidate
        return str(candidate)

    def _find(self, booking_id: str) -> Booking:
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        raise NotFoundError(f"Booking {booking_id} not found")

    @staticmethod
    def _validate_request(date: str, time: str, guests: int, services: List[Service]):
        if not services:
            raise ValidationError("Please select at least one service")
        for service in services:
            if service.price is None or not math.isfinite(service.price) or service.price < 0:
                raise ValidationError(f"Service {service.name!r} has an invalid price: {service.price}")
        if isinstance(guests, bool) or not isinstance(guests, int) or guests < 1:
            raise ValidationError(f"Guest count must be at least 1, got {guests!r}")
        # strptime alone accepts unpadded values such as "9:5"
        if not (isinstance(date, str) and DATE_PATTERN.fullmatch(date)
                and isinstance(time, str) and TIME_PATTERN.fullmatch(time)):
            raise ValidationError(f"Invalid date or time: {date!r} {time!r}. Use YYYY-MM-DD and HH:MM.")
        try:
            datetime.strptime(f"{date} {time}", "%Y-%m-%d %H:%M")
        except ValueError:
            raise ValidationError(f"Invalid date or time: {date!r} {time!r}. Use YYYY-MM-DD and HH:MM.")

    async def create_booking(self, merchant_id: str, date: str, time: str, guests: int, notes: str,
                             selected_services: List[Service], customer_id: Optional[str] = None) -> Booking:
        """
        Creates a Pending booking for the selected services.

        Cost is the sum of prices, the service name is the names joined in
        selection order, and commission/payout are derived once here.
        A failed call leaves the ledger untouched.
        """
        services = list(selected_services or [])
        self._validate_request(date, time, guests, services)

        booking_cost = sum(s.price for s in services)
        if booking_cost <= 0:
            raise ValidationError("Booking cost must be greater than zero")

        # Snapshot is taken before the ledger lock; the two stores never lock together
        merchant = await self.directory.get_merchant(merchant_id)
        commission, merchant_payout = split_commission(booking_cost, self.commission_rate)

        await simulate_latency(self._latency_ms)
        async with self._lock:
            booking = Booking(
                id=self._next_id(),
                merchant_id=merchant.id,
                merchant=merchant,
                customer_id=customer_id,
                date=date,
                time=time,
                guests=guests,
                notes=notes or "",
                status=BookingStatus.PENDING,
                created_at=datetime.now(),
                service_name=", ".join(s.name for s in services),
                booking_cost=booking_cost,
                commission=commission,
                merchant_payout=merchant_payout,
            )
            self._bookings.append(booking)

        logger.info(f"📥 Booking {booking.id} created for merchant {merchant_id}: "
                    f"{booking.service_name} ({booking_cost:.2f}, commission {commission:.2f})")
        return booking.model_copy(deep=True)

    async def get_booking(self, booking_id: str) -> Booking:
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return self._find(booking_id).model_copy(deep=True)

    async def list_bookings(self) -> List[Booking]:
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return [b.model_copy(deep=True) for b in newest_first(self._bookings)]

    async def list_bookings_for_merchant(self, merchant_id: str) -> List[Booking]:
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return [b.model_copy(deep=True) for b in newest_first(self._bookings) if b.merchant_id == merchant_id]

    async def list_bookings_for_customer(self, customer_id: str) -> List[Booking]:
        """Bookings whose creator was this customer."""
        await simulate_latency(self._latency_ms)
        async with self._lock:
            return [b.model_copy(deep=True) for b in newest_first(self._bookings) if b.customer_id == customer_id]

    async def update_status(self, booking_id: str, new_status: BookingStatus) -> Booking:
        """
        Moves a Pending booking to Confirmed or Rejected.
        Terminal states stay terminal.
        """
        try:
            target = BookingStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown booking status: {new_status!r}")
        if target == BookingStatus.PENDING:
            raise ValidationError("A booking cannot be moved back to Pending")

        await simulate_latency(self._latency_ms)
        async with self._lock:
            booking = self._find(booking_id)
            if target not in BOOKING_TRANSITIONS[booking.status]:
                logger.warning(f"⚠️ Rejected transition for booking {booking_id}: "
                               f"{booking.status.value} -> {target.value}")
                raise InvalidStateTransition(
                    f"Booking {booking_id} is already {booking.status.value} and cannot become {target.value}"
                )
            booking.status = target
            logger.info(f"✅ Booking {booking_id} is now {target.value}")
            return booking.model_copy(deep=True)
