"""
Product lifecycle: Listed -> Booked -> Paid, with advertised and verified as
independent flags, and deletion allowed from any state.

Each operation is a sequence of single-document or update_many writes.
There is no multi-document transaction; the $set steps are idempotent so an
operation that failed half way can simply be sent again.
"""
from typing import Any, Dict, List, Optional
from datetime import datetime
import logging
import uuid

from pymongo.errors import PyMongoError

from app.core.exceptions import OwnershipError, ResourceNotFoundError, StoreError
from app.models.payment import Payment
from app.models.product import Product, ProductCreate
from app.models.user import Role, UserCreate
from app.services.query import ProductQuery

logger = logging.getLogger(__name__)

NO_ID = {"_id": 0}


# Users

async def create_user(db, user_data: UserCreate):
    """
    Signup. Keyed by uid and insert-only: signing up again with a known uid
    matches the existing user and changes nothing, roles included.
    """
    doc = user_data.profile_fields()
    doc.update(verified=False, created_at=datetime.utcnow())
    return await db.users.update_one({"uid": user_data.uid}, {"$setOnInsert": doc}, upsert=True)

async def list_users(db, role: Optional[str] = None) -> List[dict]:
    query = {"roles": role} if role else {}
    return await db.users.find(query, NO_ID).to_list(None)

async def get_user(db, uid: str) -> dict:
    user = await db.users.find_one({"uid": uid}, NO_ID)
    if not user:
        raise ResourceNotFoundError("User not found")
    return user

async def get_user_roles(db, uid: str) -> List[str]:
    user = await db.users.find_one({"uid": uid}, {"_id": 0, "roles": 1})
    return list(user.get("roles", [])) if user else []

async def set_verified(db, uid: str, verified: bool):
    """Set the seller's verified flag, then mirror it onto every product they list"""
    result = await db.users.update_one({"uid": uid}, {"$set": {"verified": verified}})
    if result.matched_count == 0:
        raise ResourceNotFoundError("User not found")

    products = await db.products.update_many({"seller_uid": uid}, {"$set": {"verified": verified}})
    logger.info(f"User {uid} verified={verified}; {products.modified_count} products updated")
    return result

async def delete_user(db, uid: str, role: Role) -> Dict[str, int]:
    """
    Remove a user and whatever hangs off them.

    seller: their products, and every booking or wishlist entry that points
    at those products or names them as seller.
    buyer: only the bookings and wishlist entries they made.
    """
    user = await db.users.find_one({"uid": uid}, {"_id": 0, "uid": 1})
    if not user:
        raise ResourceNotFoundError("User not found")

    counts: Dict[str, int] = {}
    if role == Role.SELLER:
        product_ids = await db.products.distinct("id", {"seller_uid": uid})
        counts["products"] = (await db.products.delete_many({"seller_uid": uid})).deleted_count
        counts["bookings"] = (
            await db.bookings.delete_many({"product_id": {"$in": product_ids}})
        ).deleted_count
        counts["wishlist"] = (await db.wishlist.delete_many({
            "$or": [{"product_id": {"$in": product_ids}}, {"seller_uid": uid}]
        })).deleted_count
    else:
        counts["bookings"] = (await db.bookings.delete_many({"buyer_uid": uid})).deleted_count
        counts["wishlist"] = (await db.wishlist.delete_many({"buyer_uid": uid})).deleted_count

    counts["users"] = (await db.users.delete_one({"uid": uid})).deleted_count
    logger.info(f"Deleted {role.value} {uid}: {counts}")
    return counts


# Categories

async def list_categories(db, category_id: Optional[str] = None) -> List[dict]:
    query = {"id": category_id} if category_id else {}
    return await db.categories.find(query, NO_ID).to_list(None)


# Products

async def create_product(db, seller_uid: str, product_data: ProductCreate) -> Product:
    seller = await db.users.find_one({"uid": seller_uid}, {"_id": 0, "verified": 1})
    product = Product(
        **product_data.listing_fields(),
        seller_uid=seller_uid,
        verified=bool(seller and seller.get("verified")),
    )
    await db.products.insert_one(product.model_dump())
    return product

async def list_products(db, query: ProductQuery) -> List[dict]:
    cursor = db.products.find(query.to_filter(), NO_ID).sort("posted_time", -1)
    return await cursor.to_list(None)

async def list_seller_products(db, seller_uid: str) -> List[dict]:
    return await list_products(db, ProductQuery(seller_uid=seller_uid, include_paid=True))

async def set_advertised(db, product_id: str, advertised: bool, requester_uid: str):
    product = await db.products.find_one({"id": product_id}, {"_id": 0, "seller_uid": 1})
    if not product:
        raise ResourceNotFoundError("Product not found")
    if product["seller_uid"] != requester_uid:
        raise OwnershipError("You can only advertise your own products")

    return await db.products.update_one({"id": product_id}, {"$set": {"advertised": advertised}})

async def delete_product(db, product_id: str, requester_uid: str) -> Dict[str, int]:
    product = await db.products.find_one({"id": product_id}, {"_id": 0, "seller_uid": 1})
    if not product:
        raise ResourceNotFoundError("Product not found")
    if product["seller_uid"] != requester_uid:
        raise OwnershipError("You can only delete your own products")

    counts = {
        "products": (await db.products.delete_one({"id": product_id})).deleted_count,
        "bookings": (await db.bookings.delete_many({"product_id": product_id})).deleted_count,
        "wishlist": (await db.wishlist.delete_many({"product_id": product_id})).deleted_count,
    }
    logger.info(f"Product {product_id} deleted by {requester_uid}: {counts}")
    return counts


# Bookings

async def book_product(db, product_id: str, buyer_uid: str, details: Dict[str, Any]):
    """
    Mark the product booked and upsert this buyer's booking.

    A product already booked by someone else is booked again; every buyer
    keeps their own booking record.
    """
    result = await db.products.update_one({"id": product_id}, {"$set": {"booked": True}})
    if result.matched_count == 0:
        raise ResourceNotFoundError("Product not found")

    update: Dict[str, Any] = {"$setOnInsert": {"id": str(uuid.uuid4()), "paid": False}}
    if details:
        update["$set"] = details
    booking = await db.bookings.update_one(
        {"product_id": product_id, "buyer_uid": buyer_uid},
        update,
        upsert=True
    )
    logger.info(f"Product {product_id} booked by {buyer_uid}")
    return booking

async def list_buyer_bookings(db, buyer_uid: str) -> List[dict]:
    return await db.bookings.find({"buyer_uid": buyer_uid}, NO_ID).to_list(None)


# Wishlist

async def add_to_wishlist(db, product_id: str, seller_uid: str, buyer_uid: str, details: Dict[str, Any]):
    update: Dict[str, Any] = {"$setOnInsert": {"id": str(uuid.uuid4()), "paid": False}}
    if details:
        update["$set"] = details
    return await db.wishlist.update_one(
        {"product_id": product_id, "seller_uid": seller_uid, "buyer_uid": buyer_uid},
        update,
        upsert=True
    )

async def remove_from_wishlist(db, product_id: str, buyer_uid: str):
    return await db.wishlist.delete_many({"product_id": product_id, "buyer_uid": buyer_uid})

async def list_buyer_wishlist(db, buyer_uid: str) -> List[dict]:
    """The products behind the buyer's wishlist entries"""
    product_ids = await db.wishlist.distinct("product_id", {"buyer_uid": buyer_uid})
    if not product_ids:
        return []
    return await db.products.find({"id": {"$in": product_ids}}, NO_ID).to_list(None)


# Payment

async def record_payment(db, product_id: str, payload: Dict[str, Any]):
    """
    Settle a product after the provider confirmed the charge.

    Steps run in order: product, bookings, wishlist, payment record. On a
    store failure the StoreError lists which steps had already committed.
    """
    completed: List[str] = []

    async def mark_product():
        result = await db.products.update_one({"id": product_id}, {"$set": {"paid": True}})
        if result.matched_count == 0:
            raise ResourceNotFoundError("Product not found")

    async def mark_bookings():
        await db.bookings.update_many({"product_id": product_id}, {"$set": {"paid": True}})

    async def mark_wishlist():
        await db.wishlist.update_many({"product_id": product_id}, {"$set": {"paid": True}})

    async def append_payment():
        payment = Payment(**payload, product_id=product_id)
        return await db.payments.insert_one(payment.model_dump())

    steps = [
        ("product", mark_product),
        ("bookings", mark_bookings),
        ("wishlist", mark_wishlist),
        ("payment", append_payment),
    ]
    result = None
    for name, step in steps:
        try:
            result = await step()
        except PyMongoError as e:
            logger.error(f"Payment for product {product_id} failed at step '{name}': {str(e)}")
            raise StoreError(
                "PAYMENT POST FAILED!!",
                details={"failed_step": name, "completed_steps": completed}
            )
        completed.append(name)

    logger.info(f"Payment recorded for product {product_id}")
    return result
