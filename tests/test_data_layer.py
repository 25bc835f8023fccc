"""Data layer tests.

This module covers:
- Product entity and request payload validation
- Product table persistence and constraints
- Product repository operations (using in-memory SQLite for fast, real database testing)
"""

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.product_api.entities.product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductTable,
    ProductUpdate,
)


class TestProductEntity:
    """Test Product domain entity and payloads."""

    def test_product_defaults_to_available(self):
        product = Product(id=1, name="Monitor", price=300)

        assert product.availability is True
        assert product.price == 300

    def test_entity_from_table_model(self):
        """Product entity should be created from ProductTable."""
        table = ProductTable(id=7, name="Keyboard", price=49.9, availability=False)

        product = Product.model_validate(table, from_attributes=True)

        assert product.id == 7
        assert product.name == "Keyboard"
        assert product.price == 49.9
        assert product.availability is False

    def test_create_payload_coerces_wire_values(self):
        """Numeric strings and numeric names arrive as their declared types."""
        payload = ProductCreate.model_validate({"name": 1080, "price": "300"})

        assert payload.name == "1080"
        assert payload.price == 300.0

    @pytest.mark.parametrize("price", [0, -1, -0.01])
    def test_create_payload_rejects_non_positive_price(self, price):
        with pytest.raises(ValidationError):
            ProductCreate(name="Monitor", price=price)

    def test_create_payload_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="", price=10)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(True, True), (False, False), ("true", True), ("false", False), ("1", True), ("0", False)],
    )
    def test_update_payload_accepts_boolean_forms(self, raw, expected):
        payload = ProductUpdate(name="Monitor", price=10, availability=raw)
        assert payload.availability is expected


class TestProductTable:
    """Test Product database table operations."""

    def test_product_table_creation(self, session: Session):
        row = ProductTable(name="Database Monitor", price=120)
        session.add(row)
        session.commit()

        saved = session.get(ProductTable, row.id)
        assert saved is not None
        assert saved.id == 1
        assert saved.availability is True

    def test_price_must_be_positive(self, session: Session):
        """The table itself refuses a non-positive price."""
        session.add(ProductTable(name="Broken", price=0))

        with pytest.raises(IntegrityError):
            session.flush()

    def test_ids_are_not_reused_after_delete(self, session: Session):
        first = ProductTable(name="First", price=1)
        second = ProductTable(name="Second", price=2)
        session.add_all([first, second])
        session.commit()

        session.delete(second)
        session.commit()

        third = ProductTable(name="Third", price=3)
        session.add(third)
        session.commit()

        assert third.id == 3


class TestProductRepository:
    """Test Product repository operations."""

    @pytest.fixture
    def repository(self, session: Session) -> ProductRepository:
        return ProductRepository(session)

    def test_create_assigns_id_and_availability(self, repository: ProductRepository):
        product = repository.create(ProductCreate(name="Monitor", price=300))

        assert product.id is not None
        assert product.name == "Monitor"
        assert product.price == 300
        assert product.availability is True

    def test_get_product_by_id(self, repository: ProductRepository):
        created = repository.create(ProductCreate(name="Mouse", price=25))

        retrieved = repository.get(created.id)

        assert retrieved == created

    def test_get_nonexistent_product(self, repository: ProductRepository):
        assert repository.get(999) is None

    def test_list_all_is_ordered_by_id(self, repository: ProductRepository):
        for name in ("Zeta", "Alpha", "Mid"):
            repository.create(ProductCreate(name=name, price=10))

        products = repository.list_all()

        assert [p.name for p in products] == ["Zeta", "Alpha", "Mid"]
        assert [p.id for p in products] == sorted(p.id for p in products)

    def test_list_all_empty(self, repository: ProductRepository):
        assert repository.list_all() == []

    def test_update_overwrites_all_fields(self, repository: ProductRepository, session: Session):
        created = repository.create(ProductCreate(name="Original", price=10))

        updated = repository.update(
            created.id, ProductUpdate(name="Updated", price=20.5, availability=False)
        )

        assert updated == Product(id=created.id, name="Updated", price=20.5, availability=False)
        row = session.exec(select(ProductTable).where(ProductTable.id == created.id)).one()
        assert row.name == "Updated"
        assert row.availability is False

    def test_update_missing_product_creates_nothing(self, repository: ProductRepository):
        result = repository.update(42, ProductUpdate(name="Ghost", price=1, availability=True))

        assert result is None
        assert repository.list_all() == []

    def test_toggle_availability_twice_restores_value(self, repository: ProductRepository):
        created = repository.create(ProductCreate(name="Lamp", price=15))

        first = repository.toggle_availability(created.id)
        second = repository.toggle_availability(created.id)

        assert first is not None and first.availability is False
        assert second is not None and second.availability is True

    def test_toggle_missing_product(self, repository: ProductRepository):
        assert repository.toggle_availability(3) is None

    def test_ids_outside_column_range_are_missing(self, repository: ProductRepository):
        huge_id = 2**63

        assert repository.get(huge_id) is None
        assert repository.update(-huge_id - 1, ProductUpdate(name="X", price=1, availability=True)) is None
        assert repository.toggle_availability(huge_id) is None
        assert repository.delete(huge_id) is False

    def test_delete_product(self, repository: ProductRepository):
        created = repository.create(ProductCreate(name="Desk", price=150))

        assert repository.delete(created.id) is True
        assert repository.get(created.id) is None
        assert repository.delete(created.id) is False
