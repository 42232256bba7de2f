from typing import List

from fastapi import APIRouter, Depends, status

from marketplace.core.security import ensure_merchant_access, get_current_user, get_marketplace, require_roles
from marketplace.models.api_models import CreateBookingRequest, UpdateStatusRequest
from marketplace.models.domain import Booking, Role, User
from marketplace.services.marketplace import Marketplace

router = APIRouter()

@router.get("/bookings", response_model=List[Booking])
async def list_bookings(
    user: User = Depends(get_current_user),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Admins see everything, merchants their own shop, customers what they booked."""
    if user.role == Role.ADMIN:
        return await marketplace.ledger.list_bookings()
    if user.role == Role.MERCHANT:
        return await marketplace.ledger.list_bookings_for_merchant(user.merchant_id)
    return await marketplace.ledger.list_bookings_for_customer(user.id)

@router.post("/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    req: CreateBookingRequest,
    user: User = Depends(require_roles(Role.CUSTOMER)),
    marketplace: Marketplace = Depends(get_marketplace),
):
    services = await marketplace.directory.resolve_services(req.merchant_id, req.service_ids)
    return await marketplace.ledger.create_booking(
        req.merchant_id, req.date, req.time, req.guests, req.notes, services, customer_id=user.id
    )

@router.patch("/bookings/{booking_id}/status", response_model=Booking)
async def update_booking_status(
    booking_id: str,
    req: UpdateStatusRequest,
    user: User = Depends(require_roles(Role.MERCHANT)),
    marketplace: Marketplace = Depends(get_marketplace),
):
    booking = await marketplace.ledger.get_booking(booking_id)
    ensure_merchant_access(user, booking.merchant_id)
    return await marketplace.ledger.update_status(booking_id, req.status)
