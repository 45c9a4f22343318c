"""
Response models for the Farm2Home functions.

Callable functions return one of these; the HTTP layer serializes them with
camelCase keys (``to_result``). Trigger and scheduled functions return a
TriggerResult / SweepResult, which the host only logs.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class FunctionResponse(BaseModel):
    """Base for all function return values."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_result(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; unset optional fields are dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Callable responses
# =============================================================================

class GreetingResponse(FunctionResponse):
    message: str
    timestamp: str
    success: bool = True


class SumResponse(FunctionResponse):
    a: Number
    b: Number
    sum: Number
    timestamp: str
    success: bool = True


class ServerTimeResponse(FunctionResponse):
    timestamp: str = Field(..., description="ISO-8601 UTC, millisecond precision")
    unix_time: int = Field(..., description="Whole seconds since the epoch")
    success: bool = True


class ProcessImageResponse(FunctionResponse):
    processed_image_url: str
    filter: str
    processing_time: int = Field(..., description="Elapsed milliseconds")
    timestamp: str
    success: bool = True


class WelcomeMessageResponse(FunctionResponse):
    message: str
    timestamp: str
    success: bool = True


# =============================================================================
# Trigger and schedule results
# =============================================================================

class TriggerResult(FunctionResponse):
    """
    Outcome of a record-creation trigger.

    Consumed only for logging: the host treats the event as handled either
    way and does not retry on ``success=False``.
    """
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class SweepResult(FunctionResponse):
    """Outcome of one retention sweep run."""
    success: bool
    deleted_count: Optional[int] = None
    error: Optional[str] = None
