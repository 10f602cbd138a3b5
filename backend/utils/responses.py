from typing import Any, Dict, Iterable, Optional, Type

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

BASE_SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "accelerometer=(), camera=(), geolocation=(), gyroscope=(), magnetometer=(), microphone=(), payment=(), usb=()",
    "X-XSS-Protection": "0",
}

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}


def build_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = {**BASE_SECURITY_HEADERS, **NO_CACHE_HEADERS}
    if extra:
        headers.update(extra)
    return headers


def serialize(schema: Type[BaseModel], obj) -> Dict[str, Any]:
    """Validate an ORM object (or dict) into `schema` and dump it camelCased, dropping absent fields."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True, exclude_none=True)


def serialize_many(schema: Type[BaseModel], objs: Iterable) -> list:
    return [serialize(schema, obj) for obj in objs]


def json_success(data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
        headers=build_headers(headers),
    )


def json_error(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": code, "message": message}},
        headers=build_headers(),
    )
