"""Item database models."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from gatehouse.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ITEM_NAME_LENGTH
from gatehouse.core.database.base import Base, IntegerIdMixin, TimestampMixin


class Item(Base, IntegerIdMixin, TimestampMixin):
    """Item model, the stock example of a protected entity set.

    Attributes:
        name: Display name
        description: Optional free text
        owner_id: User who created the item; NULL once that user is deleted
    """

    __tablename__ = "items"

    name: Mapped[str] = mapped_column(
        String(MAX_ITEM_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    owner_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name})>"
