from typing import List

from fastapi import APIRouter, Depends

from marketplace.core.security import ensure_merchant_access, get_current_user, get_marketplace, require_roles
from marketplace.models.api_models import UpdateServicesRequest
from marketplace.models.domain import Booking, FinancialSummary, Merchant, Role, Service, User
from marketplace.services.directory_service import make_service_id
from marketplace.services.finance_service import merchant_financials
from marketplace.services.marketplace import Marketplace

router = APIRouter()

@router.get("/merchants", response_model=List[Merchant])
async def list_merchants(marketplace: Marketplace = Depends(get_marketplace)):
    return await marketplace.directory.list_merchants()

@router.get("/merchants/{merchant_id}", response_model=Merchant)
async def get_merchant(merchant_id: str, marketplace: Marketplace = Depends(get_marketplace)):
    return await marketplace.directory.get_merchant(merchant_id)

@router.put("/merchants/{merchant_id}/services", response_model=Merchant)
async def update_services(
    merchant_id: str,
    req: UpdateServicesRequest,
    user: User = Depends(require_roles(Role.MERCHANT)),
    marketplace: Marketplace = Depends(get_marketplace),
):
    ensure_merchant_access(user, merchant_id)
    services = [
        Service(id=item.id or make_service_id(merchant_id), name=item.name.strip(), price=item.price)
        for item in req.services
    ]
    return await marketplace.directory.update_merchant_services(merchant_id, services)

@router.get("/merchants/{merchant_id}/bookings", response_model=List[Booking])
async def merchant_bookings(
    merchant_id: str,
    user: User = Depends(get_current_user),
    marketplace: Marketplace = Depends(get_marketplace),
):
    ensure_merchant_access(user, merchant_id, allow_admin=True)
    # 404 for unknown merchants rather than an empty list
    await marketplace.directory.get_merchant(merchant_id)
    return await marketplace.ledger.list_bookings_for_merchant(merchant_id)

@router.get("/merchants/{merchant_id}/financials", response_model=FinancialSummary)
async def merchant_financial_summary(
    merchant_id: str,
    user: User = Depends(get_current_user),
    marketplace: Marketplace = Depends(get_marketplace),
):
    ensure_merchant_access(user, merchant_id, allow_admin=True)
    await marketplace.directory.get_merchant(merchant_id)
    return await merchant_financials(marketplace.ledger, merchant_id)
