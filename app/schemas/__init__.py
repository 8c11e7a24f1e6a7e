"""Pydantic request/response schemas."""

from app.schemas.auth import LoginRequest, RegisterRequest, UserWrapperResponse
from app.schemas.error import ErrorTypeDto, ExceptionBody, ExceptionResponse
from app.schemas.health import HealthResponse
from app.schemas.user import (
    MessageResponse,
    RoleResponse,
    UpdateUserRequest,
    UserResponse,
)

__all__ = [
    "ErrorTypeDto",
    "ExceptionBody",
    "ExceptionResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "RoleResponse",
    "UpdateUserRequest",
    "UserResponse",
    "UserWrapperResponse",
]
