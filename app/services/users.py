"""Credential store: lookups, existence checks and saves for users and roles."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateUserError, UserNotFoundError
from app.models import Role, RoleName, User

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "Username is already taken!"
EMAIL_TAKEN_MESSAGE = "Email Address already in use!"
# Also used for username lookups; clients match on this exact text.
USER_NOT_FOUND_MESSAGE = "User not found with email"


class UserStore:
    """Users table access bound to one request's session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.scalars(select(User).where(User.username == username)).first()

    def find_by_email(self, email: str) -> User | None:
        return self.session.scalars(select(User).where(User.email == email)).first()

    def get_by_username(self, username: str) -> User:
        """Like find_by_username but raises UserNotFoundError."""
        user = self.find_by_username(username)
        if user is None:
            raise UserNotFoundError(USER_NOT_FOUND_MESSAGE)
        return user

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def save(self, user: User) -> User:
        """
        Insert or update a user and commit.

        New users get a UUID4 id here. A unique-constraint violation (e.g. two
        concurrent registrations racing past the existence pre-checks) is
        rolled back and raised as DuplicateUserError.
        """
        if user.id is None:
            user.id = str(uuid.uuid4())
            self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Unique constraint violated while saving user: %s", e.orig)
            raise self._duplicate_error(user) from e
        self.session.refresh(user)
        return user

    def _duplicate_error(self, user: User) -> DuplicateUserError:
        # After rollback the winning row is visible; report whichever field collided.
        if user.email and self.exists_by_email(user.email) and not (
            user.username and self.exists_by_username(user.username)
        ):
            return DuplicateUserError("email", EMAIL_TAKEN_MESSAGE)
        return DuplicateUserError("username", USERNAME_TAKEN_MESSAGE)


class RoleStore:
    """Roles table access; rows are seeded by migrations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_name(self, name: RoleName) -> Role | None:
        return self.session.scalars(select(Role).where(Role.name == name)).first()

    def missing_roles(self) -> list[RoleName]:
        """RoleName members with no row yet, i.e. migrations have not seeded them."""
        present = set(self.session.scalars(select(Role.name)))
        return [name for name in RoleName if name not in present]
