from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from marketplace.core.errors import NotFoundError
from marketplace.core.logger import logger
from marketplace.models.domain import Role, User
from marketplace.services.marketplace import Marketplace


def get_marketplace(request: Request) -> Marketplace:
    return request.app.state.marketplace


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    marketplace: Marketplace = Depends(get_marketplace),
) -> User:
    """
    Resolve the acting user from the X-User-Id header.
    There are no credentials: picking a seeded user is the whole login.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        return await marketplace.directory.get_user(x_user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail=f"Unknown user {x_user_id}")


def require_roles(*roles: Role):
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(f"⛔ {user.id} ({user.role.value}) tried a {'/'.join(r.value for r in roles)} action")
            raise HTTPException(status_code=403, detail=f"Role {user.role.value} is not allowed here")
        return user
    return checker


def ensure_merchant_access(user: User, merchant_id: str, allow_admin: bool = False):
    """Merchants act only on their own record; admins optionally read everything."""
    if user.role == Role.ADMIN and allow_admin:
        return
    if user.role == Role.MERCHANT and user.merchant_id == merchant_id:
        return
    logger.warning(f"⛔ {user.id} denied access to merchant {merchant_id}")
    raise HTTPException(status_code=403, detail=f"Not allowed to act on merchant {merchant_id}")
