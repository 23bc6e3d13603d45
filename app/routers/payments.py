from fastapi import APIRouter, Depends
import logging

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.db.session import get_db
from app.models.payment import PaymentCreate, PaymentIntentRequest, PaymentIntentResponse
from app.models.response import write_result
from app.services import lifecycle
from app.services.payment import create_payment_intent

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def payment_intent(intent: PaymentIntentRequest):
    return await create_payment_intent(intent.price, intent.currency)

@router.post("/payment")
async def record_payment(payment: PaymentCreate, db=Depends(get_db)):
    """Called by the client once Stripe confirmed the card payment"""
    try:
        result = await lifecycle.record_payment(db, payment.product_id, payment.payload())
    except PyMongoError as e:
        logger.error(f"Failed to record payment for {payment.product_id}: {str(e)}")
        raise StoreError("PAYMENT POST FAILED!!")
    return write_result(result)
