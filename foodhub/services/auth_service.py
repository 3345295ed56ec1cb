from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from foodhub.models.account import Account, AccountRole
from foodhub.utils.security import get_password_hash, verify_password, create_access_token, create_refresh_token
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


def create_account(db: Session, email: str, password: str, name: str, role: AccountRole = AccountRole.SERVICE) -> Account:
    """Create an admin or service account"""
    if db.query(Account).filter(Account.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    account = Account(
        email=email,
        password_hash=get_password_hash(password),
        name=name,
        role=role
    )
    db.add(account)
    db.commit()
    db.refresh(account)

    logger.info("Created %s account %s", role.value, email)
    return account


def authenticate_account(db: Session, email: str, password: str) -> Account:
    """Authenticate account and return it"""
    account = db.query(Account).filter(Account.email == email).first()
    if not account or not verify_password(password, account.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    account.last_login = datetime.utcnow()
    db.commit()
    return account


def create_tokens(account: Account) -> dict:
    """Create access and refresh tokens for an account"""
    token_data = {
        "sub": str(account.id),
        "email": account.email,
        "role": account.role.value
    }
    return {
        "token": create_access_token(token_data),
        "refresh_token": create_refresh_token(token_data)
    }
