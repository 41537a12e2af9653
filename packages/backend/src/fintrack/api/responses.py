"""JSON envelope for every response body.

Learn: Success → {"status_code": 200, "data": ...}
       Failure → {"status_code": 401, "error": "short reason"}
Pydantic models are dumped in JSON mode so Decimals stay strings.
"""

from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


def envelope(data: Any = None, status_code: int = 200) -> dict:
    return {"status_code": status_code, "data": _dump(data)}


def error_response(
    status_code: int, message: str, headers: Optional[dict] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status_code": status_code, "error": message},
        headers=headers,
    )
