# models/account.py

"""
Account (credential set) models
"""

from pydantic import BaseModel, Field


class Account(BaseModel):
    id: str
    name: str
    api_key: str
    secret_key: str
    is_active: bool = False

    def public(self) -> "AccountPublic":
        return AccountPublic(**self.model_dump(exclude={"secret_key"}))


class AccountPublic(BaseModel):
    """Account as returned to callers, without the secret key."""

    id: str
    name: str
    api_key: str
    is_active: bool


class NewAccountRequest(BaseModel):
    name: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1, description="Publishable key")
    secret_key: str = Field(..., min_length=1, description="Secret key used for API calls")


class AccountIdRequest(BaseModel):
    id: str = Field(..., min_length=1)
