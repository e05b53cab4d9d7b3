"""Error response schemas.

Every error response uses the same envelope: {"error": {"code": "...", "message": "..."}}.
Request validation errors (422) keep FastAPI's default body.
"""

from typing import Literal

from pydantic import BaseModel

ErrorCode = Literal["not_found", "domain_error", "internal_error"]


class ErrorDetail(BaseModel):
    code: ErrorCode
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
