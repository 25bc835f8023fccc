"""OpenAPI fragments generated from the route validation rules.

Routes read their inputs through the validation gate rather than through
FastAPI parameters, so the parameters and request bodies shown at ``/docs``
are derived here from the very same rule declarations.
"""

from typing import Any

from src.product_api.api.http.validation import FieldRule


def _field_schemas(rules: tuple[FieldRule, ...], location: str) -> dict[str, dict[str, Any]]:
    schemas: dict[str, dict[str, Any]] = {}
    for rule in rules:
        if rule.location != location:
            continue
        schema = schemas.setdefault(rule.field, {})
        for key, value in rule.schema.items():
            schema.setdefault(key, value)
        if rule.description:
            schema.setdefault("description", rule.description)
    return schemas


def openapi_for(*rules: FieldRule) -> dict[str, Any]:
    """Describe the path parameters and JSON body checked by ``rules``."""
    extra: dict[str, Any] = {}

    parameters = [
        {
            "in": "path",
            "name": name,
            "required": True,
            "description": schema.pop("description", None) or f"The {name} parameter",
            "schema": schema,
        }
        for name, schema in _field_schemas(rules, "params").items()
    ]
    if parameters:
        extra["parameters"] = parameters

    properties = _field_schemas(rules, "body")
    if properties:
        extra["requestBody"] = {
            "required": True,
            "content": {
                "application/json": {
                    "schema": {
                        "type": "object",
                        "required": list(properties),
                        "properties": properties,
                    }
                }
            },
        }

    return extra
