import logging
from typing import List

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from foodhub.database import get_db
from foodhub.models.account import Account, AccountRole
from foodhub.utils.security import ACCESS_TOKEN, decode_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_account(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Account:
    """Get current authenticated account"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None or payload.get("type") != ACCESS_TOKEN:
        raise credentials_exception

    account_id = payload.get("sub")
    if account_id is None:
        raise credentials_exception

    account = db.query(Account).filter(Account.id == account_id).first()
    if account is None:
        raise credentials_exception

    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    return account


class RoleChecker:
    """
    Dependency that only lets accounts with one of ``allowed_roles`` through.

    Usage:
        account: Account = Depends(RoleChecker([AccountRole.ADMIN]))
    """

    def __init__(self, allowed_roles: List[AccountRole]):
        self.allowed_roles = allowed_roles

    async def __call__(self, current_account: Account = Depends(get_current_account)) -> Account:
        if current_account.role in self.allowed_roles:
            return current_account

        logger.warning("Account %s (%s) denied access", current_account.email, current_account.role.value)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have the required role to access this endpoint"
        )


require_cart_operator = RoleChecker([AccountRole.SERVICE, AccountRole.ADMIN])
require_admin = RoleChecker([AccountRole.ADMIN])
