"""Schemas for user profile endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from app.models import User


class RoleResponse(BaseModel):
    name: str = Field(..., description="Role name", examples=["ROLE_USER"])


class UserResponse(BaseModel):
    """Public view of a user (no password, no id)."""

    name: str
    username: str
    email: str
    roles: list[RoleResponse]

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            name=user.name,
            username=user.username,
            email=user.email,
            roles=[RoleResponse(name=role.name.value) for role in user.roles],
        )


class UpdateUserRequest(BaseModel):
    """Partial profile update; password requires a matching password_confirmation."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, examples=["Anil"])
    password: str | None = Field(default=None, examples=["Anil123"])
    password_confirmation: str | None = Field(default=None, examples=["Anil123"])


class MessageResponse(BaseModel):
    message: str
