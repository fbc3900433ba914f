from datetime import datetime
from typing import Any, Optional
from bson import ObjectId
from fastapi.responses import JSONResponse


def serialize_mongo_doc(doc):
    """Recursively convert ObjectIds and datetimes in a MongoDB document."""
    if not doc:
        return doc

    if isinstance(doc, list):
        return [serialize_mongo_doc(d) for d in doc]

    if isinstance(doc, dict):
        clean = {}
        for k, v in doc.items():
            if isinstance(v, ObjectId):
                clean[k] = str(v)
            elif isinstance(v, datetime):
                clean[k] = v.isoformat()
            elif isinstance(v, (dict, list)):
                clean[k] = serialize_mongo_doc(v)
            else:
                clean[k] = v
        return clean

    return doc


def success_response(
    data: Optional[Any] = None,
    message: Optional[str] = None,
    code: int = 200,
    **extra: Any,
) -> JSONResponse:
    """
    Standard success JSON response.

    Extra keyword arguments land at the top level, e.g. ``user=...`` for
    ``/api/auth/me``.
    """
    content: dict[str, Any] = {"success": True}
    if data is not None:
        content["data"] = data
    if message is not None:
        content["message"] = message
    content.update(extra)
    return JSONResponse(status_code=code, content=content)


def error_response(message: str, code: int = 400) -> JSONResponse:
    """Standard error JSON response: ``{"success": false, "message": ...}``."""
    return JSONResponse(status_code=code, content={"success": False, "message": message})
