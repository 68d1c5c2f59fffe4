"""User factory for tests."""

from functools import lru_cache
from uuid import uuid4

from polyfactory.factories.pydantic_factory import ModelFactory
from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from gatehouse.core.auth.backend import hash_password
from gatehouse.modules.users.models import User
from gatehouse.modules.users.schemas import UserCreate


# Satisfies the password complexity rules
TEST_PASSWORD = "Correct-Horse-42"


@lru_cache
def _test_password_hash() -> str:
    return hash_password(TEST_PASSWORD)


class UserFactory(SQLAlchemyFactory[User]):
    """Factory for creating test User instances."""

    __model__ = User
    __set_primary_key__ = False
    __set_relationships__ = False

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def name(cls) -> str:
        """Generate a display name."""
        return f"Test User {uuid4().hex[:4]}"

    @classmethod
    def password_hash(cls) -> str:
        """Bcrypt hash of TEST_PASSWORD."""
        return _test_password_hash()


class UserCreateFactory(ModelFactory[UserCreate]):
    """Factory for creating UserCreate schemas."""

    __model__ = UserCreate

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def name(cls) -> str:
        """Generate a display name."""
        return f"Test User {uuid4().hex[:4]}"

    @classmethod
    def password(cls) -> str:
        """A password that passes validation."""
        return TEST_PASSWORD
