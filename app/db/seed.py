import logging
import uuid

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ["Smartphones", "Laptops", "Tablets", "Smartwatches", "Cameras", "Accessories"]

async def seed_categories(db, names=DEFAULT_CATEGORIES) -> int:
    """Insert missing categories by name. Existing ids are left untouched."""
    inserted = 0
    for name in names:
        result = await db.categories.update_one(
            {"name": name},
            {"$setOnInsert": {"id": str(uuid.uuid4()), "name": name, "image": ""}},
            upsert=True
        )
        if result.upserted_id is not None:
            inserted += 1
    logger.info(f"Seeded {inserted} new categories")
    return inserted

async def grant_admin(db, uid: str) -> bool:
    """Admins cannot sign up as such; an operator grants the role here."""
    result = await db.users.update_one({"uid": uid}, {"$addToSet": {"roles": "admin"}})
    if result.matched_count == 0:
        logger.warning(f"No user with uid {uid}; admin role not granted")
        return False
    logger.info(f"Granted admin role to {uid}")
    return True
