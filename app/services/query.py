from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ProductQuery:
    """
    Named, independently optional product predicates combined with AND.

    Paid products drop out of every listing unless a specific product_id is
    asked for (receipt views) or include_paid is set (a seller's own list).
    """
    category_id: Optional[str] = None
    advertised: Optional[bool] = None
    product_id: Optional[str] = None
    seller_uid: Optional[str] = None
    include_paid: bool = False

    def to_filter(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if self.product_id is not None:
            query["id"] = self.product_id
        if self.category_id is not None:
            query["category_id"] = self.category_id
        if self.advertised is not None:
            query["advertised"] = self.advertised
        if self.seller_uid is not None:
            query["seller_uid"] = self.seller_uid
        if self.product_id is None and not self.include_paid:
            query["paid"] = {"$ne": True}
        return query
