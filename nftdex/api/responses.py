# /nftdex/api/responses.py
import math
from typing import Any, Dict, List

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nftdex.core.errors import AppError
from nftdex.core.logger import get_logger

log = get_logger(__name__)


def success_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def paginated_response(items: List[Any], total: int, limit: int, offset: int, message: str = "Success") -> Dict[str, Any]:
    return success_response(
        {
            "items": items,
            "pagination": {
                "total": total,
                "page": offset // limit + 1,
                "limit": limit,
                "offset": offset,
                "totalPages": math.ceil(total / limit),
            },
        },
        message,
    )


def error_body(message: str, code: int, error_type: str, details: Any = None) -> Dict[str, Any]:
    error = {"message": message, "code": code, "type": error_type}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    level = log.error if exc.status_code >= 500 else log.warning
    level("REQUEST_FAILED", error_type=type(exc).__name__, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.status_code, type(exc).__name__))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg")}
        for e in exc.errors()
    ]
    log.warning("REQUEST_VALIDATION_FAILED", details=details)
    return JSONResponse(status_code=400, content=error_body("Validation failed", 400, "ValidationError", details))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("UNHANDLED_REQUEST_ERROR", error=str(exc))
    return JSONResponse(status_code=500, content=error_body("Internal server error", 500, "InternalError"))
