from typing import List

from fastapi import APIRouter, Depends

from marketplace.core.logger import logger
from marketplace.core.security import get_marketplace
from marketplace.models.api_models import LoginRequest
from marketplace.models.domain import User
from marketplace.services.marketplace import Marketplace

router = APIRouter()

@router.get("/users", response_model=List[User])
async def list_users(marketplace: Marketplace = Depends(get_marketplace)):
    return await marketplace.directory.list_users()

@router.post("/login", response_model=User)
async def login(req: LoginRequest, marketplace: Marketplace = Depends(get_marketplace)):
    # No credentials; the returned id goes into X-User-Id on later calls
    user = await marketplace.directory.get_user(req.user_id)
    logger.info(f"🔑 {user.name} logged in as {user.role.value}")
    return user
