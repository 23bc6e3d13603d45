from fastapi import APIRouter, Depends
from typing import List
import logging

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.db.session import get_db
from app.models.booking import Booking, BookingCreate
from app.models.response import write_result
from app.models.user import TokenData
from app.services import lifecycle
from app.services.auth import require_buyer

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/bookings", response_model=List[Booking])
async def get_bookings(buyer: TokenData = Depends(require_buyer), db=Depends(get_db)):
    try:
        return await lifecycle.list_buyer_bookings(db, buyer.uid)
    except PyMongoError as e:
        logger.error(f"Failed to list bookings of {buyer.uid}: {str(e)}")
        raise StoreError("BOOKINGS GET FAILED!!")

@router.post("/bookings")
async def book_product(booking: BookingCreate, buyer: TokenData = Depends(require_buyer), db=Depends(get_db)):
    try:
        result = await lifecycle.book_product(db, booking.product_id, buyer.uid, booking.details())
    except PyMongoError as e:
        logger.error(f"Failed to book product {booking.product_id} for {buyer.uid}: {str(e)}")
        raise StoreError("BOOKING POST FAILED!!")
    return write_result(result)
