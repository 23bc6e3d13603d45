from typing import Optional
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None

async def connect_to_mongo():
    """Open the pooled client. Called once from the application lifespan."""
    global _client, _database
    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    _client = AsyncIOMotorClient(
        settings.MONGO_URL,
        maxPoolSize=settings.MONGO_MAX_POOL_SIZE,
        minPoolSize=settings.MONGO_MIN_POOL_SIZE,
    )
    _database = _client[settings.DB_NAME]
    logger.info(f"Connected to MongoDB database '{settings.DB_NAME}'")

async def close_mongo_connection():
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")

async def check_database_health() -> bool:
    if _client is None:
        return False
    try:
        await _client.admin.command("ping")
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False

def get_db() -> AsyncIOMotorDatabase:
    if _database is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo() during startup.")
    return _database
