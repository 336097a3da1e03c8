"""Common Pydantic schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

__all__ = ["Violation", "Problem", "MessageResponse", "PROBLEM_RESPONSES"]


class Violation(BaseModel):
    """Validation error violation."""

    path: str = Field(..., description="Location of the invalid field")
    message: str = Field(..., description="Validation error message")


class Problem(BaseModel):
    """RFC 9457 Problem Details response."""

    type: Optional[str] = Field(None, description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference for this occurrence")
    code: Optional[str] = Field(None, description="Application-specific error code")
    error_id: Optional[str] = Field(None, description="Correlates a 500 response with the server log")
    violations: Optional[List[Violation]] = Field(None, description="Validation errors")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Human-readable outcome")


# OpenAPI documentation of the error bodies shared by the API routers
PROBLEM_RESPONSES = {
    400: {"model": Problem, "description": "Invalid input or a booking rule was broken"},
    404: {"model": Problem, "description": "Referenced resource does not exist"},
    500: {"model": Problem, "description": "Unexpected or database failure"},
}
