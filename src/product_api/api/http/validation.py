"""Declarative request validation.

Every route declares an ordered tuple of :class:`FieldRule` objects. Each rule
points at one path parameter or body field, applies a predicate to it and
carries the message reported when the predicate fails. The gate returned by
:func:`validate_request` runs all rules of a route, collects the failures and
aborts the request with a 400 response when there is at least one.

Rules never modify the request; they only report.
"""

from __future__ import annotations

import math
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ValidationError

Location = Literal["params", "body"]
ModelT = TypeVar("ModelT", bound=BaseModel)

_INT = re.compile(r"^[-+]?[0-9]+$")
_NUMERIC = re.compile(r"^[-+]?([0-9]*[.])?[0-9]+$")
_BOOLEAN_STRINGS = frozenset({"true", "false", "0", "1"})


# --- Predicates ---


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a number on the wire
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: int | float) -> bool:
    # Python ints are unbounded; math.isfinite overflows on very large ones
    return isinstance(value, int) or math.isfinite(value)


def is_int(value: Any) -> bool:
    if _is_number(value):
        return isinstance(value, int) or (math.isfinite(value) and value.is_integer())
    return isinstance(value, str) and _INT.match(value) is not None


def is_numeric(value: Any) -> bool:
    if _is_number(value):
        return _is_finite(value)
    return isinstance(value, str) and _NUMERIC.match(value) is not None


def is_positive(value: Any) -> bool:
    if _is_number(value):
        return _is_finite(value) and value > 0
    return is_numeric(value) and float(value) > 0


def not_empty(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    return True


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return value in (0, 1)
    return isinstance(value, str) and value in _BOOLEAN_STRINGS


# --- Rules and failures ---


@dataclass(frozen=True)
class FieldRule:
    """One predicate applied to one field of the request."""

    location: Location
    field: str
    check: Callable[[Any], bool]
    message: str
    # OpenAPI fragment describing the field; used only for documentation
    schema: Mapping[str, Any] = field(default_factory=dict)
    description: str | None = None

    def evaluate(self, params: Mapping[str, Any], body: Mapping[str, Any]) -> FieldError | None:
        source = params if self.location == "params" else body
        value = source.get(self.field)
        if self.check(value):
            return None
        return FieldError(
            field=self.field, message=self.message, location=self.location, value=value
        )


def param(
    name: str,
    check: Callable[[Any], bool],
    message: str,
    *,
    schema: Mapping[str, Any] | None = None,
    description: str | None = None,
) -> FieldRule:
    """Declare a rule on a path parameter."""
    return FieldRule("params", name, check, message, dict(schema or {}), description)


def body(
    name: str,
    check: Callable[[Any], bool],
    message: str,
    *,
    schema: Mapping[str, Any] | None = None,
    description: str | None = None,
) -> FieldRule:
    """Declare a rule on a JSON body field."""
    return FieldRule("body", name, check, message, dict(schema or {}), description)


class FieldError(BaseModel):
    """A single failed rule as reported to the client."""

    field: str
    message: str
    location: Location
    value: Any = None


class ValidationErrorResponse(BaseModel):
    errors: list[FieldError]


class RequestValidationFailed(Exception):
    """Raised by the gate when at least one rule failed."""

    def __init__(self, errors: list[FieldError]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


def check_rules(
    rules: Iterable[FieldRule],
    params: Mapping[str, Any],
    body: Mapping[str, Any],
) -> list[FieldError]:
    """Run every rule in order and return the failures."""
    return [
        error
        for error in (rule.evaluate(params, body) for rule in rules)
        if error is not None
    ]


# --- Gate ---


@dataclass(frozen=True)
class ValidatedRequest:
    """Raw path parameters and body of a request that passed its rules."""

    params: dict[str, Any]
    body: dict[str, Any]

    def int_param(self, name: str) -> int:
        return int(self.params[name])


async def read_json_body(request: Request) -> dict[str, Any]:
    """Return the JSON object sent with ``request``; anything else reads as ``{}``."""
    if not (await request.body()).strip():
        return {}
    try:
        payload = await request.json()
    except ValueError:
        raise RequestValidationFailed(
            [FieldError(field="body", message="Malformed JSON body", location="body")]
        ) from None
    return payload if isinstance(payload, dict) else {}


def validate_request(
    *rules: FieldRule,
) -> Callable[[Request], Awaitable[ValidatedRequest]]:
    """Build the FastAPI dependency that gates a route on ``rules``."""
    reads_body = any(rule.location == "body" for rule in rules)

    async def gate(request: Request) -> ValidatedRequest:
        params = dict(request.path_params)
        payload = await read_json_body(request) if reads_body else {}
        errors = check_rules(rules, params=params, body=payload)
        if errors:
            raise RequestValidationFailed(errors)
        return ValidatedRequest(params=params, body=payload)

    return gate


def payload_from(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Convert a validated body into ``model``, reporting leftovers as failures."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationFailed(
            [
                FieldError(
                    field=".".join(str(part) for part in error["loc"]) or "body",
                    message=error["msg"],
                    location="body",
                    value=data.get(str(error["loc"][0])) if error["loc"] else None,
                )
                for error in exc.errors()
            ]
        ) from exc


async def validation_failed_handler(
    request: Request, exc: RequestValidationFailed
) -> JSONResponse:
    """Render gate failures as a 400 response."""
    logger.bind(errors=len(exc.errors)).info(
        "request.rejected {} {}", request.method, request.url.path
    )
    return JSONResponse(
        status_code=400,
        content=ValidationErrorResponse(errors=exc.errors).model_dump(mode="json"),
    )
