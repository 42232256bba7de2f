from fastapi import APIRouter, Depends

from marketplace.core.security import get_marketplace, require_roles
from marketplace.models.domain import FinancialSummary, Role
from marketplace.services.finance_service import platform_financials
from marketplace.services.marketplace import Marketplace

router = APIRouter()

@router.get("/financials", response_model=FinancialSummary, dependencies=[Depends(require_roles(Role.ADMIN))])
async def platform_summary(marketplace: Marketplace = Depends(get_marketplace)):
    return await platform_financials(marketplace.ledger)
