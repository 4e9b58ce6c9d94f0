# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError

_MISSING_TYPES = frozenset({"missing", "string_too_short"})


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    errors_list = []
    fields_set = set()

    for error in exc.errors(include_url=False, include_input=False):
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)

        if field_path:
            fields_set.add(field_path)

        error_entry: dict[str, Any] = {
            "field": field_path or "unknown",
            "type": error.get("type", "value_error"),
        }

        if "ctx" in error:
            error_entry["ctx"] = {k: str(v) for k, v in error["ctx"].items()}

        errors_list.append(error_entry)

    return {
        "fields": sorted(fields_set),
        "errors": errors_list,
    }


def describe_errors(context: dict[str, Any]) -> str:
    missing = sorted(
        {e["field"] for e in context["errors"] if e["type"] in _MISSING_TYPES}
    )
    if missing:
        return f"Campos obrigatórios ausentes: {', '.join(missing)}"
    return f"Campos inválidos: {', '.join(context['fields']) or 'corpo da requisição'}"


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    context = format_pydantic_errors(exc)
    raise ValidationError(context=context, message=describe_errors(context)) from exc


__all__ = [
    "describe_errors",
    "format_pydantic_errors",
    "raise_validation_error",
]
