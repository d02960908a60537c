"""JSON-schema validation for comparison reports."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping

from jsonschema import Draft202012Validator

from .error import InvariantError

REPORT_SCHEMA_RESOURCE = "report_schema.json"


@lru_cache(maxsize=1)
def load_report_schema() -> dict[str, Any]:
    schema_resource = resources.files("mapscope.contracts") / REPORT_SCHEMA_RESOURCE
    with schema_resource.open(encoding="utf-8") as stream:
        return json.load(stream)


def report_errors(payload: Mapping[str, Any]) -> list[str]:
    validator = Draft202012Validator(load_report_schema())
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    return [f"{err.message} @ {list(err.path)}" for err in errors]


def validate_report(payload: Mapping[str, Any]) -> None:
    """Raise :class:`InvariantError` when ``payload`` violates the report schema."""

    errors = report_errors(payload)
    if errors:
        raise InvariantError(
            f"report failed schema validation: {errors[0]}",
            hint=f"{len(errors)} violation(s) in total",
        )


__all__ = ["REPORT_SCHEMA_RESOURCE", "load_report_schema", "report_errors", "validate_report"]
