"""Error envelope helpers and exception taxonomy for mapscope."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable error record attached to comparison rows."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_dict(self) -> dict[str, str]:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return payload


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class BadInputError(EnvelopeError):
    """Raised for malformed keys, values or configuration."""


class InvariantError(EnvelopeError):
    """Raised when internal consistency checks fail."""


class CapacityExhaustedError(InvariantError):
    """Raised when a fixed-capacity table has no slot left for a new key.

    The table is not repaired afterwards; callers must discard it.
    """


_EXCEPTION_ORDER: tuple[tuple[type[EnvelopeError], str], ...] = (
    (CapacityExhaustedError, "CapacityExhausted"),
    (BadInputError, "BadInput"),
    (InvariantError, "Invariant"),
)


def envelope_for(exc: BaseException) -> ErrorEnvelope:
    """Map an exception onto its envelope label."""

    if isinstance(exc, EnvelopeError):
        for exc_type, label in _EXCEPTION_ORDER:
            if isinstance(exc, exc_type):
                return ErrorEnvelope(error=label, detail=str(exc), hint=exc.hint)
        return ErrorEnvelope(error="UnhandledEnvelope", detail=str(exc), hint=exc.hint)
    logger.debug("Wrapping foreign exception %s", type(exc).__name__)
    return ErrorEnvelope(error="Unhandled", detail=f"{type(exc).__name__}: {exc}")


__all__ = [
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "CapacityExhaustedError",
    "envelope_for",
]
