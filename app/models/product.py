from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
import uuid
from datetime import datetime

class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    seller_uid: str
    category_id: str
    price: float
    name: str = ""
    seller_name: Optional[str] = ""
    condition: Optional[str] = ""
    location: Optional[str] = ""
    image: Optional[str] = ""
    original_price: Optional[float] = None
    years_of_use: Optional[float] = None
    description: Optional[str] = ""
    phone: Optional[str] = ""
    posted_time: datetime = Field(default_factory=datetime.utcnow)
    booked: bool = False
    advertised: bool = False
    paid: bool = False
    verified: bool = False  # mirrors the seller's verified flag

# Set by the server, never accepted from the listing form
PRODUCT_SERVER_FIELDS = {"_id", "id", "seller_uid", "posted_time", "booked", "advertised", "paid", "verified"}

class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    category_id: str
    price: float = Field(..., gt=0)
    name: str
    seller_name: Optional[str] = ""
    condition: Optional[str] = ""
    location: Optional[str] = ""
    image: Optional[str] = ""
    original_price: Optional[float] = None
    years_of_use: Optional[float] = None
    description: Optional[str] = ""
    phone: Optional[str] = ""

    def listing_fields(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if k not in PRODUCT_SERVER_FIELDS}

class ProductAdvertiseUpdate(BaseModel):
    product_id: str
    advertised: bool
