from typing import Iterable

from marketplace.models.domain import Booking, BookingStatus, FinancialSummary
from marketplace.services.booking_service import BookingLedger


def aggregate(bookings: Iterable[Booking]) -> FinancialSummary:
    """
    Sums revenue, commission and payout over Confirmed bookings only.
    Pending and Rejected bookings contribute nothing.
    """
    summary = FinancialSummary()
    for booking in bookings:
        if booking.status != BookingStatus.CONFIRMED:
            continue
        summary.total_revenue += booking.booking_cost
        summary.total_commission += booking.commission
        summary.total_payout += booking.merchant_payout
        summary.confirmed_bookings += 1
        summary.transactions.append(booking)
    return summary


async def merchant_financials(ledger: BookingLedger, merchant_id: str) -> FinancialSummary:
    return aggregate(await ledger.list_bookings_for_merchant(merchant_id))


async def platform_financials(ledger: BookingLedger) -> FinancialSummary:
    return aggregate(await ledger.list_bookings())
