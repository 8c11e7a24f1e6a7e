"""ORM model and closed enumeration for user roles."""

import enum
import uuid

from sqlalchemy import Column, Enum, String

from app.models.base import Base


class RoleName(str, enum.Enum):
    """Stored role names. The short form (USER, ADMIN) is what routes declare."""

    ROLE_USER = "ROLE_USER"
    ROLE_ADMIN = "ROLE_ADMIN"

    @property
    def role(self) -> str:
        return self.value.removeprefix("ROLE_")


class Role(Base):
    """A named permission tag; one row per RoleName, immutable once created."""

    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(
        Enum(RoleName, name="role_name", native_enum=False, length=32),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"Role(name={self.name.value if self.name else None!r})"
