"""
Database initialization script

Creates indexes, seeds the device categories and optionally grants the
admin role to an existing user:
    python scripts/init_db.py
    python scripts/init_db.py --admin <uid>
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.logging import setup_logging
from app.db.indexes import create_indexes
from app.db.seed import grant_admin, seed_categories
from app.db.session import close_mongo_connection, connect_to_mongo, get_db


async def main(admin_uid=None):
    await connect_to_mongo()
    try:
        db = get_db()
        await create_indexes(db)
        await seed_categories(db)
        if admin_uid:
            await grant_admin(db, admin_uid)
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the ResellHub database")
    parser.add_argument("--admin", dest="admin_uid", help="uid of an existing user to make admin")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(main(args.admin_uid))
