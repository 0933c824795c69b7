"""
Common API schemas.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ResponseStatus(str, Enum):
    """Response status enum."""

    SUCCESS = "success"
    ERROR = "error"


class BaseResponse(BaseModel):
    """Base response model."""

    status: ResponseStatus = ResponseStatus.SUCCESS
    message: Optional[str] = None


class CommandResponse(BaseResponse):
    """Outcome of an accepted session command."""

    data: Optional[Any] = None
