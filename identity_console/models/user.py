# models/user.py

"""
User record models
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional


class UserRecord(BaseModel):
    """One user entry parsed from the bulk input text."""

    model_config = ConfigDict(frozen=True)

    email: str = Field(..., description="User email address", pattern=r".*@.*")
    first_name: str = ""
    last_name: str = ""
    password: Optional[str] = None


class ImportUserRequest(BaseModel):
    account_id: str = Field(..., description="Account to import the user into")
    user: UserRecord
    send_invites: bool = Field(True, description="Send an invitation instead of creating the user")


class UserInput(BaseModel):
    """Pre-parsed user in a start request; unusable emails are dropped later"""

    email: Optional[str] = None
    first_name: Optional[str] = Field(None, validation_alias=AliasChoices("first_name", "firstName"))
    last_name: Optional[str] = Field(None, validation_alias=AliasChoices("last_name", "lastName"))
    password: Optional[str] = None
