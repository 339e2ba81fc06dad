from pydantic import BaseModel
from typing import Optional


class SubmitResponse(BaseModel):
    ok: bool = True
    id: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
