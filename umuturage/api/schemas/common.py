"""Common schemas for the Umuturage API."""

from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""
    message: str
    code: Optional[str] = None