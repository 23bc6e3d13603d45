from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging
from app.db.indexes import create_indexes
from app.db.session import check_database_health, close_mongo_connection, connect_to_mongo, get_db
from app.routers import auth, bookings, categories, payments, products, users, wishlist

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_to_mongo()
    await create_indexes(get_db())
    logger.info(f"ResellHub API started ({settings.ENVIRONMENT})")
    yield
    await close_mongo_connection()

app = FastAPI(title="ResellHub API", version="1.0.0", lifespan=lifespan)

add_exception_handlers(app)

app.include_router(auth.router, tags=["Auth"])
app.include_router(users.router, tags=["Users"])
app.include_router(categories.router, tags=["Categories"])
app.include_router(products.router, tags=["Products"])
app.include_router(bookings.router, tags=["Bookings"])
app.include_router(wishlist.router, tags=["Wishlist"])
app.include_router(payments.router, tags=["Payments"])

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health", tags=["Health"])
async def health_check():
    healthy = await check_database_health()
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "healthy" if healthy else "unhealthy", "database": healthy}
    )

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
