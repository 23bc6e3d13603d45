from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.db.session import get_db
from app.models.product import Product, ProductAdvertiseUpdate, ProductCreate
from app.models.response import write_result
from app.models.user import TokenData
from app.services import lifecycle
from app.services.auth import require_seller
from app.services.query import ProductQuery

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/products", response_model=Product)
async def create_product(
    product_data: ProductCreate,
    seller: TokenData = Depends(require_seller),
    db=Depends(get_db)
):
    try:
        product = await lifecycle.create_product(db, seller.uid, product_data)
    except PyMongoError as e:
        logger.error(f"Failed to create product for {seller.uid}: {str(e)}")
        raise StoreError("PRODUCT POST FAILED!!")
    logger.info(f"Product {product.id} listed by {seller.uid}")
    return product

@router.get("/products", response_model=List[Product])
async def get_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    advertised: Optional[bool] = None,
    product_id: Optional[str] = None,
    db=Depends(get_db)
):
    query = ProductQuery(category_id=category_id, advertised=advertised, product_id=product_id)
    try:
        return await lifecycle.list_products(db, query)
    except PyMongoError as e:
        logger.error(f"Failed to list products: {str(e)}")
        raise StoreError("PRODUCTS GET FAILED!!")

@router.get("/my-products", response_model=List[Product])
async def get_my_products(seller: TokenData = Depends(require_seller), db=Depends(get_db)):
    try:
        return await lifecycle.list_seller_products(db, seller.uid)
    except PyMongoError as e:
        logger.error(f"Failed to list products of {seller.uid}: {str(e)}")
        raise StoreError("MY PRODUCTS GET FAILED!!")

@router.patch("/products")
async def advertise_product(
    update: ProductAdvertiseUpdate,
    seller: TokenData = Depends(require_seller),
    db=Depends(get_db)
):
    try:
        result = await lifecycle.set_advertised(db, update.product_id, update.advertised, seller.uid)
    except PyMongoError as e:
        logger.error(f"Failed to advertise product {update.product_id}: {str(e)}")
        raise StoreError("PRODUCT PATCH FAILED!!")
    return write_result(result)

@router.delete("/delete-products")
async def delete_product(product_id: str, seller: TokenData = Depends(require_seller), db=Depends(get_db)):
    try:
        counts = await lifecycle.delete_product(db, product_id, seller.uid)
    except PyMongoError as e:
        logger.error(f"Failed to delete product {product_id}: {str(e)}")
        raise StoreError("PRODUCT DELETE FAILED!!")
    return {"error": False, "acknowledged": True, "deleted_count": counts["products"], "deleted": counts}
