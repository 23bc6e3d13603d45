from fastapi import APIRouter, Depends
from typing import List
import logging

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.db.session import get_db
from app.models.product import Product
from app.models.response import write_result
from app.models.user import TokenData
from app.models.wishlist import WishlistCreate
from app.services import lifecycle
from app.services.auth import require_buyer

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/wishlist", response_model=List[Product])
async def get_wishlist(buyer: TokenData = Depends(require_buyer), db=Depends(get_db)):
    """Products the buyer has wishlisted"""
    try:
        return await lifecycle.list_buyer_wishlist(db, buyer.uid)
    except PyMongoError as e:
        logger.error(f"Failed to list wishlist of {buyer.uid}: {str(e)}")
        raise StoreError("WISHLIST GET FAILED!!")

@router.post("/wishlist")
async def add_to_wishlist(entry: WishlistCreate, buyer: TokenData = Depends(require_buyer), db=Depends(get_db)):
    try:
        result = await lifecycle.add_to_wishlist(db, entry.product_id, entry.seller_uid, buyer.uid, entry.details())
    except PyMongoError as e:
        logger.error(f"Failed to wishlist product {entry.product_id} for {buyer.uid}: {str(e)}")
        raise StoreError("WISHLIST POST FAILED!!")
    return write_result(result)

@router.delete("/wishlist")
async def remove_from_wishlist(product_id: str, buyer: TokenData = Depends(require_buyer), db=Depends(get_db)):
    try:
        result = await lifecycle.remove_from_wishlist(db, product_id, buyer.uid)
    except PyMongoError as e:
        logger.error(f"Failed to remove {product_id} from wishlist of {buyer.uid}: {str(e)}")
        raise StoreError("WISHLIST DELETE FAILED!!")
    return write_result(result)
