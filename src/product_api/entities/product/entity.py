"""Entity: Product."""

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    """Fields a client supplies when creating a product."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(min_length=1, description="The Product name")
    price: float = Field(gt=0, description="The Product price")


class ProductUpdate(ProductCreate):
    """Fields a client supplies when fully overwriting a product."""

    availability: bool = Field(description="The Product availability")


class Product(BaseModel):
    """Product entity representing an item for sale.

    This is the domain model returned by the API. The identifier is assigned
    by the database on insert and never changes afterwards.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Curved Monitor 49 Inches",
                "price": 300,
                "availability": True,
            }
        }
    )

    id: int = Field(description="The Product ID")
    name: str = Field(description="The Product name")
    price: float = Field(description="The Product price")
    availability: bool = Field(default=True, description="The Product availability")
