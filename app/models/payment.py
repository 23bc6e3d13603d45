from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict
import uuid
from datetime import datetime

class Payment(BaseModel):
    """Append-only record of a completed transaction; provider fields are kept as sent"""
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_id: str
    paid_at: datetime = Field(default_factory=datetime.utcnow)

# Payment keys the server fills in itself
PROVIDER_RENAMES = {"id": "provider_id", "paid_at": "provider_paid_at"}

class PaymentCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    product_id: str

    def payload(self) -> Dict[str, Any]:
        """Provider fields as sent; ones that clash with the record's own keys get a provider_ prefix"""
        payload = {}
        for k, v in self.model_dump().items():
            if k in ("_id", "product_id"):
                continue
            payload[PROVIDER_RENAMES.get(k, k)] = v
        return payload

class PaymentIntentRequest(BaseModel):
    price: float
    currency: str = ""

class PaymentIntentResponse(BaseModel):
    clientSecret: str
