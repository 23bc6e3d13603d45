from pydantic import BaseModel, ConfigDict
from typing import Any, Dict

# Fields owned by the booking identity; never taken from client details
RESERVED_BOOKING_FIELDS = {"_id", "id", "product_id", "buyer_uid", "paid"}

class Booking(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    product_id: str
    buyer_uid: str
    paid: bool = False

class BookingCreate(BaseModel):
    """product_id plus any booking details (meeting place, phone, price...)"""
    model_config = ConfigDict(extra="allow")

    product_id: str

    def details(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if k not in RESERVED_BOOKING_FIELDS}
