from typing import Any, Dict, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Single source of truth for scan/report API responses.
    Pydantic payloads are dumped by alias so the wire format stays camelCase.
    """
    if hasattr(data, "model_dump"):
        data = data.model_dump(by_alias=True, exclude_none=True)
    content = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def error_response(
    message: str,
    *,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    retry_after: Optional[int] = None,
) -> JSONResponse:
    """Failure envelope: {"success": false, "error": ...} plus retry hint for 429s."""
    content: Dict[str, Any] = {"success": False, "error": message}
    headers = None
    if retry_after is not None:
        content["retryAfter"] = retry_after
        headers = {"Retry-After": str(retry_after)}
    return api_response(data=content, status_code=status_code, headers=headers)
