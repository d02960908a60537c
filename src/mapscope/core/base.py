"""Shared contract, key/value coercion and hashing for the map containers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from hashlib import blake2b
from typing import Any, Iterator, Optional, Union

from mapscope.contracts.error import BadInputError

U32_MAX: int = 0xFFFF_FFFF

KeyLike = Union[bytes, bytearray, memoryview, str]


def coerce_key(key: KeyLike) -> bytes:
    """Return ``key`` as immutable bytes; ``str`` keys are UTF-8 encoded."""

    if isinstance(key, bytes):
        return key
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    raise BadInputError(
        f"keys must be bytes or str, got {type(key).__name__}",
        hint="encode structured keys to bytes before inserting",
    )


def check_value(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadInputError(f"values must be int, got {type(value).__name__}")
    if not 0 <= value <= U32_MAX:
        raise BadInputError(f"value {value} outside unsigned 32-bit range")
    return value


def hash64(key: bytes) -> int:
    """Uniform, process-stable 64-bit hash of ``key``."""

    return int.from_bytes(blake2b(key, digest_size=8).digest(), "little")


class AssocMap(ABC):
    """Abstract key -> value map with self-instrumented metrics."""

    __slots__ = ()

    name: str = "map"

    @abstractmethod
    def insert(self, key: KeyLike, value: int) -> None:
        """Create ``key`` or overwrite its value."""

    @abstractmethod
    def get(self, key: KeyLike) -> Optional[int]:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def delete(self, key: KeyLike) -> Any:
        """Remove ``key``; the return shape is container specific."""

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def metrics(self) -> Any:
        """Immutable snapshot of the container's metric record."""

    def is_empty(self) -> bool:
        return len(self) == 0

    def __contains__(self, key: object) -> bool:
        """Membership is a full ``get``, so it updates lookup metrics too."""

        return self.get(key) is not None  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} size={len(self)}>"


class OrderedAssocMap(AssocMap):
    """Map whose keys can be walked in ascending byte order."""

    __slots__ = ()

    @abstractmethod
    def keys_in_order(self) -> Iterator[bytes]:
        """Yield keys in strictly ascending order (inspection helper)."""


__all__ = [
    "AssocMap",
    "KeyLike",
    "OrderedAssocMap",
    "U32_MAX",
    "check_value",
    "coerce_key",
    "hash64",
]
