"""User database models."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gatehouse.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from gatehouse.core.database.base import Base, IntegerIdMixin, TimestampMixin


class User(Base, IntegerIdMixin, TimestampMixin):
    """User model representing an authenticated principal.

    Users receive permissions through role memberships and through
    direct grants.

    Attributes:
        name: Display name
        email: Unique email address used to log in
        password_hash: Bcrypt-hashed password
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
