"""Pydantic schemas для API."""

from typing import List, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Ответ health check."""

    status: str = "ok"
    version: str
    uptime: float
    devices: int = 0
    modules: List[str] = []


class ErrorResponse(BaseModel):
    """Ответ с ошибкой."""

    success: bool = False
    error: str
    detail: Optional[str] = None
