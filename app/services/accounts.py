"""Account flows behind the auth and user endpoints: login, register, profile update."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.core.authorization import SecurityContext
from app.core.errors import (
    DuplicateUserError,
    ErrorType,
    InvalidParameterError,
    RoleNotFoundError,
    ServiceError,
    UnauthenticatedError,
)
from app.core.security import hash_password, issue_token
from app.models import RoleName, User
from app.schemas.auth import LoginRequest, RegisterRequest, UserWrapperResponse
from app.schemas.user import UpdateUserRequest, UserResponse
from app.services.authentication import AuthenticationManager
from app.services.users import (
    EMAIL_TAKEN_MESSAGE,
    USERNAME_TAKEN_MESSAGE,
    RoleStore,
    UserStore,
)
from app.services.validation import (
    ensure_valid,
    validate_login,
    validate_register,
    validate_update_user,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        user_store: UserStore,
        role_store: RoleStore,
        authentication_manager: AuthenticationManager,
        settings: Settings,
    ) -> None:
        self.user_store = user_store
        self.role_store = role_store
        self.authentication_manager = authentication_manager
        self.settings = settings

    def login(self, context: SecurityContext, body: LoginRequest) -> UserWrapperResponse:
        """Check credentials, then return the user's profile with a fresh token."""
        ensure_valid(validate_login(body))
        principal = self.authentication_manager.authenticate(
            context, body.username, body.password
        )
        user = self.user_store.get_by_username(principal.username)
        token = issue_token(principal.username, principal.roles, settings=self.settings)
        logger.info("User logged in", extra={"username": principal.username})
        return UserWrapperResponse(user=UserResponse.from_user(user), token=token)

    def register(self, context: SecurityContext, body: RegisterRequest) -> UserWrapperResponse:
        """
        Create a user with the baseline ROLE_USER and log them in.

        The exists-checks give friendly errors for the common case; the unique
        constraints behind UserStore.save catch concurrent duplicates.
        """
        ensure_valid(validate_register(body))
        if self.user_store.exists_by_username(body.username):
            logger.error("Username:%s is already taken!", body.username)
            raise DuplicateUserError("username", USERNAME_TAKEN_MESSAGE)
        if self.user_store.exists_by_email(body.email):
            logger.error("Email Address:%s is already taken!", body.email)
            raise DuplicateUserError("email", EMAIL_TAKEN_MESSAGE)

        user_role = self.role_store.find_by_name(RoleName.ROLE_USER)
        if user_role is None:
            logger.error("User Role is not found")
            raise RoleNotFoundError("User Role is not found")

        user = User(
            name=body.name,
            username=body.username,
            email=body.email,
            password_hash=hash_password(body.password, self.settings.BCRYPT_ROUNDS),
            roles=[user_role],
        )
        self.user_store.save(user)
        logger.info("User created", extra={"user_id": user.id, "username": user.username})

        try:
            return self.login(
                context, LoginRequest(username=body.username, password=body.password)
            )
        except ServiceError as e:
            logger.exception("Login after registration failed for %s", body.username)
            raise ServiceError(
                "Error occurred for generating jwt attempt",
                "500 INTERNAL_SERVER_ERROR",
                error_type=ErrorType.GENERIC_SERVICE_ERROR,
                status_code=500,
            ) from e

    def current_user(self, context: SecurityContext) -> User:
        if not context.is_authenticated:
            raise UnauthenticatedError("Authentication error")
        return self.user_store.get_by_username(context.principal.username)

    def update_current_user(self, context: SecurityContext, body: UpdateUserRequest) -> User:
        """
        Update name and/or password of the logged-in user.

        All checks run before the entity is touched, so a rejected request
        persists nothing.
        """
        ensure_valid(validate_update_user(body))
        if body.password:
            if not body.password_confirmation:
                message = "Password confirmation not provided"
                logger.error(message)
                raise InvalidParameterError(message)
            if body.password_confirmation != body.password:
                message = "Password and confirmation not matched"
                logger.error(message)
                raise InvalidParameterError(message)

        user = self.current_user(context)
        if body.name:
            user.name = body.name
        if body.password:
            user.password_hash = hash_password(body.password, self.settings.BCRYPT_ROUNDS)
        self.user_store.save(user)
        logger.info("User updated", extra={"username": user.username})
        return user
