from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime
from foodhub.models.account import AccountRole


class AccountLogin(BaseModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refreshToken: str


class AccountResponse(BaseModel):
    id: str
    email: str
    name: str
    role: AccountRole
    is_active: bool
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
