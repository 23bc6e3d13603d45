import logging

import stripe
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import PaymentProviderError, ValidationError

logger = logging.getLogger(__name__)

def to_minor_units(price: float) -> int:
    return int(round(price * 100))

async def create_payment_intent(price: float, currency: str = "") -> dict:
    """Ask Stripe for a card PaymentIntent and hand back its client secret"""
    if price is None or price <= 0:
        raise ValidationError("Price must be greater than zero")

    currency = (currency or settings.PAYMENT_CURRENCY).lower()
    stripe.api_key = settings.STRIPE_API_KEY
    try:
        intent = await run_in_threadpool(
            stripe.PaymentIntent.create,
            amount=to_minor_units(price),
            currency=currency,
            payment_method_types=["card"],
        )
    except stripe.StripeError as e:
        logger.error(f"Stripe PaymentIntent creation failed: {str(e)}")
        raise PaymentProviderError(details={"provider_message": getattr(e, "user_message", None) or str(e)})

    return {"clientSecret": intent["client_secret"]}
