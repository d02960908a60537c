"""Typed configuration loader for the mapscope comparison harness.

Containers never read configuration; only :mod:`mapscope.workloads.compare`
consumes it.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _coerce_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in _TRUTHY:
            return True
        if normalized in _FALSY:
            return False
    raise BadInputError(f"{name} must be boolean")


def _parse_sizes(raw: str) -> list[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise BadInputError(f"Invalid sizes list {raw!r}", hint="use e.g. 100,1000,10000") from exc


@dataclass
class WorkloadPolicy:
    sizes: list[int] = field(default_factory=lambda: [100, 500, 1000, 5000, 10000])
    key_prefix: str = "key"
    shuffle: bool = False
    seed: int | None = None
    delete_fraction: float = 0.0
    lookup_misses: int = 0

    def validate(self) -> None:
        if not self.sizes:
            raise BadInputError("workload.sizes must not be empty")
        for size in self.sizes:
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                raise BadInputError(f"workload.sizes entries must be positive ints, got {size!r}")
        if not 0.0 <= self.delete_fraction <= 1.0:
            raise BadInputError("workload.delete_fraction must be within [0, 1]")
        if self.lookup_misses < 0:
            raise BadInputError("workload.lookup_misses must be >= 0")


@dataclass
class OpenAddressingPolicy:
    capacity: int = 16384

    def validate(self) -> None:
        if self.capacity <= 0:
            raise BadInputError("open_addressing.capacity must be > 0")


@dataclass
class LoggingPolicy:
    level: str = "INFO"
    json: bool = False
    file: str | None = None

    def validate(self) -> None:
        if self.level.upper() not in _LOG_LEVELS:
            raise BadInputError(
                f"logging.level must be one of {sorted(_LOG_LEVELS)}, got {self.level!r}"
            )


@dataclass
class AppConfig:
    workload: WorkloadPolicy = field(default_factory=WorkloadPolicy)
    open_addressing: OpenAddressingPolicy = field(default_factory=OpenAddressingPolicy)
    logging: LoggingPolicy = field(default_factory=LoggingPolicy)

    @classmethod
    def load(cls, path: Path | None, env: Mapping[str, str] | None = None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ if env is None else env)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        sections: dict[str, dict[str, Any]] = {}
        for name in ("workload", "open_addressing", "logging"):
            section = data.get(name, {})
            if not isinstance(section, dict):
                raise BadInputError(f"[{name}] section must be a table")
            sections[name] = dict(section)
        unknown = set(data) - set(sections)
        if unknown:
            raise BadInputError(f"Unknown config sections: {sorted(unknown)}")

        workload_data = sections["workload"]
        if "shuffle" in workload_data:
            workload_data["shuffle"] = _coerce_bool("workload.shuffle", workload_data["shuffle"])
        if isinstance(workload_data.get("seed"), str):
            raw_seed = workload_data["seed"].strip().lower()
            if raw_seed in {"none", "null", ""}:
                workload_data["seed"] = None
            else:
                raise BadInputError("workload.seed must be an integer or 'none'")
        logging_data = sections["logging"]
        if "json" in logging_data:
            logging_data["json"] = _coerce_bool("logging.json", logging_data["json"])

        try:
            return cls(
                workload=WorkloadPolicy(**workload_data),
                open_addressing=OpenAddressingPolicy(**sections["open_addressing"]),
                logging=LoggingPolicy(**logging_data),
            )
        except TypeError as exc:
            raise BadInputError(f"Unknown config key: {exc}") from exc

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        raw_sizes = env.get("MAPSCOPE_SIZES")
        if raw_sizes is not None:
            self.workload.sizes = _parse_sizes(raw_sizes)

        raw_seed = env.get("MAPSCOPE_SEED")
        if raw_seed is not None:
            try:
                self.workload.seed = int(raw_seed)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override MAPSCOPE_SEED={raw_seed!r}") from exc

        raw_shuffle = env.get("MAPSCOPE_SHUFFLE")
        if raw_shuffle is not None:
            self.workload.shuffle = _coerce_bool("MAPSCOPE_SHUFFLE", raw_shuffle)

        raw_capacity = env.get("MAPSCOPE_OA_CAPACITY")
        if raw_capacity is not None:
            try:
                self.open_addressing.capacity = int(raw_capacity)
            except ValueError as exc:
                raise BadInputError(
                    f"Invalid env override MAPSCOPE_OA_CAPACITY={raw_capacity!r}"
                ) from exc

        raw_level = env.get("MAPSCOPE_LOG_LEVEL")
        if raw_level is not None:
            self.logging.level = raw_level.strip().upper()

        raw_json = env.get("MAPSCOPE_LOG_JSON")
        if raw_json is not None:
            self.logging.json = _coerce_bool("MAPSCOPE_LOG_JSON", raw_json)

        raw_log_file = env.get("MAPSCOPE_LOG_FILE")
        if raw_log_file is not None:
            self.logging.file = raw_log_file.strip() or None

    def validate(self) -> None:
        self.workload.validate()
        self.open_addressing.validate()
        self.logging.validate()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)
