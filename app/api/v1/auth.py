"""Login and registration endpoints; both return the user profile with a JWT."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_account_service, guard
from app.core.authorization import SecurityContext
from app.schemas.auth import LoginRequest, RegisterRequest, UserWrapperResponse
from app.schemas.error import ExceptionResponse
from app.services.accounts import AccountService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ExceptionResponse, "description": "Validation failed or bad credentials"},
    500: {"model": ExceptionResponse, "description": "Internal server error"},
}


@router.post(
    "/login",
    response_model=UserWrapperResponse,
    responses={**ERROR_RESPONSES, 404: {"model": ExceptionResponse, "description": "Unknown user"}},
)
def login(
    body: LoginRequest,
    context: Annotated[SecurityContext, guard("auth.login")],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserWrapperResponse:
    """
    Authenticate with username and password; returns the profile and a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    return accounts.login(context, body)


@router.post(
    "/register",
    response_model=UserWrapperResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def register(
    body: RegisterRequest,
    context: Annotated[SecurityContext, guard("auth.register")],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserWrapperResponse:
    """Create an account with the USER role, then log it in."""
    return accounts.register(context, body)
