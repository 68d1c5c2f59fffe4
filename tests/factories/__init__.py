"""Test factories for generating test data."""

from tests.factories.item import ItemFactory
from tests.factories.role import RoleFactory
from tests.factories.user import UserCreateFactory, UserFactory


__all__ = [
    "ItemFactory",
    "RoleFactory",
    "UserCreateFactory",
    "UserFactory",
]
