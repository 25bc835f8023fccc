"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and request payloads
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductTable,
    ProductUpdate,
)

__all__ = [
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductRepository",
    "ProductTable",
]
