from fastapi import APIRouter, Depends, Header
from typing import Optional
import logging

from jose import JWTError
from pymongo.errors import PyMongoError

from app.core.exceptions import InvalidTokenError, StoreError
from app.db.session import get_db
from app.services.auth import create_access_token
from app.services.lifecycle import get_user_roles

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/auth")
async def issue_token(uid: Optional[str] = Header(None), db=Depends(get_db)):
    """Sign a token for the uid header, carrying the roles stored for that user"""
    if not uid:
        raise InvalidTokenError("Unauthorized action attempted")
    try:
        roles = await get_user_roles(db, uid)
        authtoken = create_access_token(uid, roles)
    except (JWTError, PyMongoError) as e:
        logger.error(f"Token signing failed for {uid}: {str(e)}")
        raise StoreError("TOKEN SIGNING FAILED")
    return {"error": False, "authtoken": authtoken}
