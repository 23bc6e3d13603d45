from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


# Owned by the server, never taken from a signup body
USER_SERVER_FIELDS = {"_id", "uid", "verified", "created_at"}


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    uid: str = Field(..., min_length=1)  # external auth subject id
    roles: List[Role] = [Role.BUYER]
    name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None

    @field_validator("roles")
    @classmethod
    def no_self_assigned_admin(cls, v):
        if Role.ADMIN in v:
            raise ValueError("admin role cannot be requested at signup")
        if not v:
            raise ValueError("at least one role is required")
        return list(dict.fromkeys(v))

    def profile_fields(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump(mode="json").items() if k not in USER_SERVER_FIELDS}


class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    uid: str
    roles: List[str] = []
    verified: bool = False
    name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class UserVerifyUpdate(BaseModel):
    uid: str
    verified: bool


class TokenData(BaseModel):
    uid: str
    roles: List[str] = []
