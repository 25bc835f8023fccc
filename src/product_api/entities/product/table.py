"""Product database table model."""

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel


class ProductTable(SQLModel, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        # Never hand out the id of a deleted row again
        {"sqlite_autoincrement": True},
    )

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    price: float = Field(nullable=False)
    availability: bool = Field(default=True, nullable=False)
