from pydantic import BaseModel
from typing import Any, Dict, Optional


class ErrorResponse(BaseModel):
    error: bool = True
    message: str
    details: Optional[Any] = None


def write_result(result) -> Dict[str, Any]:
    """Flatten a pymongo insert/update/delete result into a JSON body"""
    body: Dict[str, Any] = {"error": False, "acknowledged": getattr(result, "acknowledged", True)}
    if hasattr(result, "inserted_id"):
        body["inserted_id"] = str(result.inserted_id)
    if hasattr(result, "matched_count"):
        body["matched_count"] = result.matched_count
        body["modified_count"] = result.modified_count
        upserted_id = result.upserted_id
        body["upserted_id"] = str(upserted_id) if upserted_id is not None else None
    if hasattr(result, "deleted_count"):
        body["deleted_count"] = result.deleted_count
    return body
