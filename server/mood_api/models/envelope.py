"""Response envelope shared by every API route."""
from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """One validation failure."""

    field: str
    constraint: str
    message: str


class ApiResponse(BaseModel):
    """`{success, message?, data?, errors?}`; absent parts are omitted."""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    errors: Optional[list[ErrorDetail]] = None


def envelope(
    success: bool = True,
    data: Any = None,
    message: Optional[str] = None,
    errors: Optional[list[ErrorDetail]] = None,
    status_code: int = 200,
    include_data: bool = False,
) -> JSONResponse:
    """
    Build an enveloped JSON response.

    Pydantic models inside `data` are dumped by alias. `include_data` keeps
    an explicit `data: null`.
    """
    body: dict = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None or include_data:
        body["data"] = _dump(data)
    if errors is not None:
        body["errors"] = [e.model_dump() for e in errors]
    return JSONResponse(status_code=status_code, content=body)


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value
