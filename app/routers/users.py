from fastapi import APIRouter, Depends
from typing import List, Optional
import logging

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.db.session import get_db
from app.models.response import write_result
from app.models.user import Role, TokenData, User, UserCreate, UserVerifyUpdate
from app.services import lifecycle
from app.services.auth import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/users", response_model=List[User])
async def get_users(role: Optional[Role] = None, db=Depends(get_db)):
    try:
        return await lifecycle.list_users(db, role.value if role else None)
    except PyMongoError as e:
        logger.error(f"Failed to list users: {str(e)}")
        raise StoreError("USERS GET FAILED!!")

@router.get("/users/{uid}", response_model=User)
async def get_user(uid: str, db=Depends(get_db)):
    try:
        return await lifecycle.get_user(db, uid)
    except PyMongoError as e:
        logger.error(f"Failed to fetch user {uid}: {str(e)}")
        raise StoreError("USER GET FAILED!!")

@router.post("/users")
async def create_user(user_data: UserCreate, db=Depends(get_db)):
    try:
        result = await lifecycle.create_user(db, user_data)
    except PyMongoError as e:
        logger.error(f"Failed to create user {user_data.uid}: {str(e)}")
        raise StoreError("USER POST FAILED!!")
    return write_result(result)

@router.patch("/users")
async def verify_seller(
    update: UserVerifyUpdate,
    admin: TokenData = Depends(require_admin),
    db=Depends(get_db)
):
    """Set a seller's verified flag and mirror it onto their products"""
    try:
        result = await lifecycle.set_verified(db, update.uid, update.verified)
    except PyMongoError as e:
        logger.error(f"Failed to verify user {update.uid}: {str(e)}")
        raise StoreError("USER VERIFICATION FAILED!!")
    return write_result(result)

async def _delete_user(db, uid: str, role: Role):
    try:
        counts = await lifecycle.delete_user(db, uid, role)
    except PyMongoError as e:
        logger.error(f"Failed to delete {role.value} {uid}: {str(e)}")
        raise StoreError(f"{role.value.upper()} DELETE FAILED!!")
    return {"error": False, "acknowledged": True, "deleted_count": counts.get("users", 0), "deleted": counts}

@router.delete("/delete-buyer")
async def delete_buyer(uid: str, admin: TokenData = Depends(require_admin), db=Depends(get_db)):
    return await _delete_user(db, uid, Role.BUYER)

@router.delete("/delete-seller")
async def delete_seller(uid: str, admin: TokenData = Depends(require_admin), db=Depends(get_db)):
    return await _delete_user(db, uid, Role.SELLER)
