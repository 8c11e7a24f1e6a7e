"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Credentials for login. Fields are checked by app.services.validation, not here."""

    model_config = ConfigDict(extra="ignore")

    username: str | None = Field(default=None, description="Username", examples=["asenocak"])
    password: str | None = Field(default=None, description="Password", examples=["asenocak"])


class RegisterRequest(BaseModel):
    """New account details."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, description="Full name", examples=["Lorem Ipsum"])
    username: str | None = Field(default=None, description="Unique username", examples=["asenocak"])
    email: str | None = Field(default=None, description="Unique email", examples=["lorem@ipsum.com"])
    password: str | None = Field(default=None, description="Password", examples=["asenocak"])


class UserWrapperResponse(BaseModel):
    """User profile plus, after login/register, the issued bearer token."""

    user: UserResponse
    token: str | None = Field(default=None, description="JWT bearer token")
