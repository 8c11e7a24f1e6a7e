"""Password hashing and JWT issuance/verification for authentication."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import get_settings

if TYPE_CHECKING:
    from app.core.config import Settings

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Base class for token verification failures; reason is for logs only."""

    reason = "invalid"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TokenMalformedError(TokenError):
    """Token cannot be parsed or lacks the expected claims."""

    reason = "malformed"


class TokenSignatureError(TokenError):
    """Token signature does not match the server key."""

    reason = "signature invalid"


class TokenExpiredError(TokenError):
    """Token signature is valid but exp has passed."""

    reason = "expired"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Verified contents of a bearer token."""

    subject: str
    roles: frozenset[str]
    issued_at: datetime
    expires_at: datetime


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords.

    Raises ValueError when the cost is outside what bcrypt supports; that is a
    configuration problem, not a credential problem.
    """
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. False on any mismatch."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def issue_token(
    subject: str,
    roles: Iterable[str],
    *,
    settings: Settings | None = None,
    issued_at: datetime | None = None,
) -> str:
    """Create a signed JWT carrying sub, roles, iat and exp = iat + JWT_EXPIRE_MINUTES."""
    settings = settings or get_settings()
    now = issued_at or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": subject,
        "roles": sorted(set(roles)),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str, *, settings: Settings | None = None) -> TokenClaims:
    """
    Decode and validate a JWT and return its claims.

    Raises TokenSignatureError, TokenExpiredError or TokenMalformedError.
    The signature is checked before expiry, so a forged expired token is
    reported as a signature failure.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "roles", "iat", "exp"]},
        )
    except jwt.InvalidSignatureError as e:
        raise TokenSignatureError(str(e)) from e
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError(str(e)) from e
    except jwt.InvalidTokenError as e:
        raise TokenMalformedError(str(e)) from e

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise TokenMalformedError("Invalid token subject")
    roles = payload["roles"]
    if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
        raise TokenMalformedError("Invalid token roles")

    return TokenClaims(
        subject=subject,
        roles=frozenset(roles),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )

