"""Product API router with CRUD operations.

Each route runs its validation rules through the gate before the handler is
called, so handlers only ever see well-formed ids and bodies.
"""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.product_api.api.http.deps import get_db_session
from src.product_api.api.http.openapi import openapi_for
from src.product_api.api.http.validation import (
    ValidatedRequest,
    ValidationErrorResponse,
    body,
    is_boolean,
    is_int,
    is_numeric,
    is_positive,
    not_empty,
    param,
    payload_from,
    validate_request,
)
from src.product_api.entities.product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductUpdate,
)


class ErrorDetail(BaseModel):
    detail: str


class MessageResponse(BaseModel):
    message: str


# --- Validation rules ---

PRODUCT_ID_RULES = (
    param(
        "id",
        is_int,
        "Invalid ID",
        schema={"type": "integer", "example": 1},
        description="The ID of the product",
    ),
)

PRODUCT_FIELD_RULES = (
    body(
        "name",
        not_empty,
        "Product name cannot be empty",
        schema={"type": "string", "example": "Curved Monitor 49 Inches"},
    ),
    body(
        "price",
        is_numeric,
        "Invalid price",
        schema={"type": "number", "example": 399},
    ),
    body("price", not_empty, "Product price cannot be empty"),
    body("price", is_positive, "Invalid price"),
)

AVAILABILITY_RULES = (
    body(
        "availability",
        is_boolean,
        "Invalid availability value",
        schema={"type": "boolean", "example": True},
    ),
)

CREATE_RULES = PRODUCT_FIELD_RULES
UPDATE_RULES = PRODUCT_ID_RULES + PRODUCT_FIELD_RULES + AVAILABILITY_RULES

NOT_FOUND = {404: {"model": ErrorDetail, "description": "Product not found"}}
BAD_ID = {400: {"model": ValidationErrorResponse, "description": "Bad Request - Invalid ID"}}
BAD_INPUT = {
    400: {"model": ValidationErrorResponse, "description": "Bad Request - Invalid input data"}
}


router = APIRouter(tags=["Products"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Product not found")


@router.get(
    "",
    response_model=list[Product],
    summary="Get a list of products",
    description="Return a list of products",
)
@router.get("/", response_model=list[Product], include_in_schema=False)
def list_products(session: Session = Depends(get_db_session)) -> list[Product]:
    repository = ProductRepository(session)
    return repository.list_all()


@router.get(
    "/{id}",
    response_model=Product,
    summary="Get a product by ID",
    description="Return a product based on its unique ID",
    responses={**NOT_FOUND, **BAD_ID},
    openapi_extra=openapi_for(*PRODUCT_ID_RULES),
)
def get_product(
    validated: ValidatedRequest = Depends(validate_request(*PRODUCT_ID_RULES)),
    session: Session = Depends(get_db_session),
) -> Product:
    repository = ProductRepository(session)
    product = repository.get(validated.int_param("id"))
    if product is None:
        raise _not_found()
    return product


@router.post(
    "",
    response_model=Product,
    status_code=201,
    summary="Creates a new product",
    description="Return a new record in the database",
    responses=BAD_INPUT,
    openapi_extra=openapi_for(*CREATE_RULES),
)
@router.post("/", response_model=Product, status_code=201, include_in_schema=False)
def create_product(
    validated: ValidatedRequest = Depends(validate_request(*CREATE_RULES)),
    session: Session = Depends(get_db_session),
) -> Product:
    data = payload_from(ProductCreate, validated.body)
    repository = ProductRepository(session)
    product = repository.create(data)
    session.commit()
    logger.info("Created product {}", product.id)
    return product


@router.put(
    "/{id}",
    response_model=Product,
    summary="Updates a product with user input",
    description="Returns the updated product",
    responses={
        **NOT_FOUND,
        400: {
            "model": ValidationErrorResponse,
            "description": "Bad Request - Invalid ID or Invalid input data",
        },
    },
    openapi_extra=openapi_for(*UPDATE_RULES),
)
def update_product(
    validated: ValidatedRequest = Depends(validate_request(*UPDATE_RULES)),
    session: Session = Depends(get_db_session),
) -> Product:
    data = payload_from(ProductUpdate, validated.body)
    repository = ProductRepository(session)
    product = repository.update(validated.int_param("id"), data)
    if product is None:
        raise _not_found()
    session.commit()
    return product


@router.patch(
    "/{id}",
    response_model=Product,
    summary="Updates a product availability",
    description="Returns the updated availability",
    responses={**NOT_FOUND, **BAD_ID},
    openapi_extra=openapi_for(*PRODUCT_ID_RULES),
)
def update_availability(
    validated: ValidatedRequest = Depends(validate_request(*PRODUCT_ID_RULES)),
    session: Session = Depends(get_db_session),
) -> Product:
    repository = ProductRepository(session)
    product = repository.toggle_availability(validated.int_param("id"))
    if product is None:
        raise _not_found()
    session.commit()
    return product


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    summary="Deletes a product",
    description="Returns a confirmation message",
    responses={**NOT_FOUND, **BAD_ID},
    openapi_extra=openapi_for(*PRODUCT_ID_RULES),
)
def delete_product(
    validated: ValidatedRequest = Depends(validate_request(*PRODUCT_ID_RULES)),
    session: Session = Depends(get_db_session),
) -> MessageResponse:
    product_id = validated.int_param("id")
    repository = ProductRepository(session)
    if not repository.delete(product_id):
        raise _not_found()
    session.commit()
    logger.info("Deleted product {}", product_id)
    return MessageResponse(message="Product deleted")
