"""Authentication: check credentials against the user store and publish the principal."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.core.authorization import USER, Principal, SecurityContext
from app.core.errors import CredentialsInvalidError, UserNotFoundError
from app.core.security import verify_password
from app.services.users import UserStore

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Username or password invalid"


class AuthenticationManager:
    """Validates username/password pairs and resolves the caller's roles."""

    def __init__(self, user_store: UserStore, settings: Settings) -> None:
        self.user_store = user_store
        self.settings = settings

    def authenticate(
        self,
        context: SecurityContext,
        username: str,
        password: str | None = None,
    ) -> Principal:
        """
        Authenticate username (and password, when given) and set context.principal.

        password=None skips the password check; the token filter uses that after
        it has already verified the bearer token. The returned principal always
        holds USER in addition to the user's stored roles.
        """
        try:
            user = self.user_store.get_by_username(username)
        except UserNotFoundError:
            logger.warning("Authentication failed: unknown user", extra={"username": username})
            if self.settings.AUTH_HIDE_UNKNOWN_USERS:
                raise CredentialsInvalidError(INVALID_CREDENTIALS_MESSAGE) from None
            raise

        if password is not None and not verify_password(password, user.password_hash):
            logger.error("Authentication failed: bad credentials", extra={"username": username})
            raise CredentialsInvalidError(INVALID_CREDENTIALS_MESSAGE)

        roles = {USER}
        roles.update(role.name.role for role in user.roles)
        principal = Principal(username=user.username, roles=frozenset(roles))
        context.principal = principal
        context.failure_reason = None
        logger.debug("Principal set on security context", extra={"username": user.username})
        return principal
