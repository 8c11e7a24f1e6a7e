"""Uniform error envelope returned by every failing request."""

from pydantic import BaseModel, Field


class ErrorTypeDto(BaseModel):
    id: str = Field(..., description="Stable error id", examples=["SVC0007"])
    text: str = Field(..., description="Error text")


class ExceptionBody(BaseModel):
    statusCode: int
    error: ErrorTypeDto
    variables: list[str] = Field(default_factory=list)


class ExceptionResponse(BaseModel):
    """{"exception": {"statusCode": ..., "error": {"id", "text"}, "variables": [...]}}"""

    exception: ExceptionBody
