"""Product repository for data access operations."""

from sqlmodel import Session, select

from .entity import Product, ProductCreate, ProductUpdate
from .table import ProductTable

# Ids outside a signed 64-bit INTEGER column can never match a row
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


class ProductRepository:
    """Data-access layer for products.

    The repository never commits; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_row(self, product_id: int) -> ProductTable | None:
        if not MIN_ID <= product_id <= MAX_ID:
            return None
        return self._session.get(ProductTable, product_id)

    def list_all(self) -> list[Product]:
        """Return every product ordered by id."""
        statement = select(ProductTable).order_by(ProductTable.id)
        rows = self._session.exec(statement).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def get(self, product_id: int) -> Product | None:
        """Return the product with ``product_id`` or ``None``."""
        row = self._get_row(product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def create(self, data: ProductCreate) -> Product:
        """Insert a new product; availability starts out true."""
        row = ProductTable(name=data.name, price=data.price, availability=True)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def update(self, product_id: int, data: ProductUpdate) -> Product | None:
        """Overwrite name, price and availability of an existing product."""
        row = self._get_row(product_id)
        if row is None:
            return None

        row.name = data.name
        row.price = data.price
        row.availability = data.availability
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row, from_attributes=True)

    def toggle_availability(self, product_id: int) -> Product | None:
        """Flip the availability flag of an existing product."""
        row = self._get_row(product_id)
        if row is None:
            return None

        row.availability = not row.availability
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row, from_attributes=True)

    def delete(self, product_id: int) -> bool:
        """Remove a product. Returns ``False`` when it did not exist."""
        row = self._get_row(product_id)
        if row is None:
            return False

        self._session.delete(row)
        self._session.flush()
        return True
