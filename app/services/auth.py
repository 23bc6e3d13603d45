from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Iterable, Optional
from fastapi import Depends, Header

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, WrongRoleError
from app.models.user import Role, TokenData

def create_access_token(uid: str, roles: Iterable[str], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = {"uid": uid, "roles": [str(getattr(r, "value", r)) for r in roles]}
    if expires_delta is None and settings.ACCESS_TOKEN_EXPIRE_MINUTES > 0:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    if expires_delta:
        to_encode["exp"] = datetime.utcnow() + expires_delta
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)

def decode_access_token(token: Optional[str]) -> TokenData:
    if not token:
        raise InvalidTokenError("Unauthorized action attempted")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidTokenError()

    uid = payload.get("uid")
    roles = payload.get("roles") or []
    if not uid or not isinstance(roles, list):
        raise InvalidTokenError()
    return TokenData(uid=uid, roles=roles)

def check_role(decoded: TokenData, role: Role) -> TokenData:
    """Exact membership only: admin does not stand in for seller or buyer."""
    if role.value not in decoded.roles:
        raise WrongRoleError(role.value)
    return decoded

async def get_token_data(authtoken: Optional[str] = Header(None)) -> TokenData:
    return decode_access_token(authtoken)

def require_role(role: Role):
    async def role_gate(decoded: TokenData = Depends(get_token_data)) -> TokenData:
        return check_role(decoded, role)
    return role_gate

require_buyer = require_role(Role.BUYER)
require_seller = require_role(Role.SELLER)
require_admin = require_role(Role.ADMIN)
