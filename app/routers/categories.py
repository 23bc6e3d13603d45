from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.db.session import get_db
from app.models.category import Category
from app.services.lifecycle import list_categories

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/categories", response_model=List[Category])
async def get_categories(category_id: Optional[str] = Query(None, alias="categoryId"), db=Depends(get_db)):
    try:
        return await list_categories(db, category_id)
    except PyMongoError as e:
        logger.error(f"Failed to list categories: {str(e)}")
        raise StoreError("CATEGORIES GET FAILED!!")
