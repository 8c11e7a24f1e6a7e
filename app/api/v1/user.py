"""Profile endpoints for the logged-in user (USER or ADMIN role)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_account_service, guard
from app.core.authorization import ADMIN, USER, SecurityContext
from app.schemas.auth import UserWrapperResponse
from app.schemas.error import ExceptionResponse
from app.schemas.user import MessageResponse, UpdateUserRequest, UserResponse
from app.services.accounts import AccountService

router = APIRouter()

ERROR_RESPONSES = {
    401: {"model": ExceptionResponse, "description": "Missing, invalid or expired token"},
    403: {"model": ExceptionResponse, "description": "Role not allowed"},
}


@router.get(
    "/me",
    response_model=UserWrapperResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
def get_me(
    context: Annotated[SecurityContext, guard("user.me", roles=[ADMIN, USER])],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserWrapperResponse:
    """Return the current user's profile (no token)."""
    user = accounts.current_user(context)
    return UserWrapperResponse(user=UserResponse.from_user(user))


@router.patch(
    "/me",
    response_model=MessageResponse,
    responses={**ERROR_RESPONSES, 400: {"model": ExceptionResponse, "description": "Invalid update"}},
)
def patch_me(
    body: UpdateUserRequest,
    context: Annotated[SecurityContext, guard("user.patch_me", roles=[ADMIN, USER])],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Update name and/or password; a new password needs password_confirmation."""
    accounts.update_current_user(context, body)
    return MessageResponse(message="User updated.")
