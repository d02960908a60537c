"""Contract helpers for mapscope."""

from .error import (
    BadInputError,
    CapacityExhaustedError,
    EnvelopeError,
    ErrorEnvelope,
    InvariantError,
    envelope_for,
)
from .schema import REPORT_SCHEMA_RESOURCE, load_report_schema, report_errors, validate_report

__all__ = [
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "CapacityExhaustedError",
    "envelope_for",
    "REPORT_SCHEMA_RESOURCE",
    "load_report_schema",
    "report_errors",
    "validate_report",
]
