from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from recordsmith.errors import format_actionable_error

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class EngineConfig:
    # nulls
    default_nullable_rate: float = 0.1

    # numeric ranges
    int_min: int = 0
    int_max: int = 1000
    float_min: float = 0.0
    float_max: float = 1000.0
    float_precision: int = 2
    max_float_precision: int = 10

    # text
    paragraph_count: int = 1
    paragraph_min_sentences: int = 3
    paragraph_max_sentences: int = 6

    # composites
    default_array_count: int = 1

    # resource ceilings
    max_schema_fields: int = 200
    max_total_items: int = 10000

    # financial / file / date defaults
    price_min: float = 0.0
    price_max: float = 10000.0
    price_currency: str = "$"
    file_size_min: int = 1
    file_size_max: int = 10485760  # 10 MB
    date_span_days: int = 5 * 365

    seed: Optional[int] = None  # None = fresh entropy per call

    def with_overrides(self, **overrides) -> "EngineConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown EngineConfig option(s): {unknown}. Known: {sorted(known)}")
        return replace(self, **overrides)


@dataclass(frozen=True)
class AppConfig:
    debug: bool = False
    log_level: str = "INFO"
    default_count: int = 1
    indent: int = 2

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ

        level = env.get("RECORDSMITH_LOG_LEVEL", cls.log_level).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                format_actionable_error(
                    "RECORDSMITH_LOG_LEVEL",
                    f"unsupported log level '{level}'",
                    f"use one of {', '.join(_LOG_LEVELS)}",
                )
            )

        debug_raw = env.get("RECORDSMITH_DEBUG", "").strip().lower()
        if debug_raw in _TRUTHY:
            debug = True
        elif debug_raw in _FALSY:
            debug = False
        else:
            raise ValueError(
                format_actionable_error(
                    "RECORDSMITH_DEBUG",
                    f"cannot interpret '{debug_raw}' as a boolean",
                    "use 1/0, true/false, yes/no or on/off",
                )
            )

        count_raw = env.get("RECORDSMITH_DEFAULT_COUNT", str(cls.default_count)).strip()
        try:
            default_count = int(count_raw)
        except ValueError as exc:
            raise ValueError(
                format_actionable_error(
                    "RECORDSMITH_DEFAULT_COUNT",
                    f"'{count_raw}' is not an integer",
                    "set it to a whole number >= 1",
                )
            ) from exc
        if default_count < 1:
            raise ValueError(
                format_actionable_error(
                    "RECORDSMITH_DEFAULT_COUNT",
                    "must be >= 1",
                    "set it to a whole number >= 1",
                )
            )

        return cls(debug=debug, log_level=level, default_count=default_count)
