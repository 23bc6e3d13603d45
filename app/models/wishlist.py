from pydantic import BaseModel, ConfigDict
from typing import Any, Dict

RESERVED_WISHLIST_FIELDS = {"_id", "id", "product_id", "seller_uid", "buyer_uid", "paid"}

class WishlistEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    product_id: str
    seller_uid: str
    buyer_uid: str
    paid: bool = False

class WishlistCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    product_id: str
    seller_uid: str

    def details(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if k not in RESERVED_WISHLIST_FIELDS}
