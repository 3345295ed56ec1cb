"""
Account Authentication Endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from foodhub.database import get_db
from foodhub.schemas.account import AccountLogin, AccountResponse, RefreshTokenRequest
from foodhub.schemas.common import ResponseModel
from foodhub.models.account import Account
from foodhub.services.auth_service import authenticate_account, create_tokens
from foodhub.utils.security import REFRESH_TOKEN, decode_token
from foodhub.api.deps import get_current_account

router = APIRouter()


@router.post("/login", response_model=ResponseModel)
def login(credentials: AccountLogin, db: Session = Depends(get_db)):
    """Account login"""
    account = authenticate_account(db, credentials.email, credentials.password)
    tokens = create_tokens(account)

    return ResponseModel(
        success=True,
        data={
            "token": tokens["token"],
            "refreshToken": tokens["refresh_token"],
            "account": AccountResponse.model_validate(account)
        },
        message="Login successful"
    )


@router.post("/refresh-token", response_model=ResponseModel)
def refresh_token(token_data: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new token pair"""
    payload = decode_token(token_data.refreshToken)
    if payload is None or payload.get("type") != REFRESH_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    account = db.query(Account).filter(Account.id == payload.get("sub")).first()
    if account is None or not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    tokens = create_tokens(account)
    return ResponseModel(
        success=True,
        data={"token": tokens["token"], "refreshToken": tokens["refresh_token"]},
        message="Token refreshed"
    )


@router.get("/me", response_model=ResponseModel)
def get_me(current_account: Account = Depends(get_current_account)):
    """Get the authenticated account"""
    return ResponseModel(success=True, data=AccountResponse.model_validate(current_account))
