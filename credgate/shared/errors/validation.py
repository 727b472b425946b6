# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    errors_list = []
    fields_set = set()

    for error in exc.errors(include_input=False, include_url=False):
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)

        if field_path:
            fields_set.add(field_path)

        errors_list.append(
            {
                "field": field_path or "unknown",
                "type": error.get("type", "value_error"),
            }
        )

    return {
        "fields": sorted(fields_set),
        "errors": errors_list,
    }


def raise_validation_error(exc: PydanticValidationError) -> None:
    context = format_pydantic_errors(exc)
    raise ValidationError(context=context) from exc


def require_fields(*, keep_whitespace: Collection[str] = (), **values: object) -> None:
    """Raise ``ValidationError`` naming every missing or empty field.

    Fields listed in ``keep_whitespace`` only need to be non-empty; all
    others must contain something besides whitespace.
    """
    missing = []
    for name, value in values.items():
        if not isinstance(value, str) or not value:
            missing.append(name)
        elif name not in keep_whitespace and not value.strip():
            missing.append(name)

    if missing:
        missing.sort()
        raise ValidationError(
            context={
                "fields": missing,
                "errors": [{"field": name, "type": "missing"} for name in missing],
            }
        )


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
    "require_fields",
]
