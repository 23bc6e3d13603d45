import logging

logger = logging.getLogger(__name__)

async def create_indexes(db):
    """
    Create lookup indexes. Idempotent, safe to run on every startup.

    Booking and wishlist identities are kept by upsert-by-filter, so their
    compound indexes are not unique.
    """
    await db.users.create_index("uid", unique=True, name="uid_unique")
    await db.users.create_index("roles", name="roles_idx")

    await db.categories.create_index("id", unique=True, name="id_unique")

    await db.products.create_index("id", unique=True, name="id_unique")
    await db.products.create_index("seller_uid", name="seller_uid_idx")
    await db.products.create_index([("category_id", 1), ("paid", 1)], name="category_paid_idx")
    await db.products.create_index([("advertised", 1), ("paid", 1)], name="advertised_paid_idx")

    await db.bookings.create_index([("product_id", 1), ("buyer_uid", 1)], name="product_buyer_idx")
    await db.bookings.create_index("buyer_uid", name="buyer_uid_idx")

    await db.wishlist.create_index(
        [("product_id", 1), ("seller_uid", 1), ("buyer_uid", 1)],
        name="product_seller_buyer_idx"
    )
    await db.wishlist.create_index("buyer_uid", name="buyer_uid_idx")

    await db.payments.create_index("product_id", name="product_id_idx")
    logger.info("Database indexes ensured")
