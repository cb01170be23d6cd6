from __future__ import annotations

import logging
import random
from collections import ChainMap
from typing import Any, Callable, Dict, List, Mapping, Optional

from recordsmith.config import EngineConfig
from recordsmith.errors import (
    GenerationError,
    InternalError,
    RecordsmithError,
    SchemaValidationError,
    format_actionable_error,
)
from recordsmith.generators import GenContext, GeneratorFn, builtin_registry
from recordsmith.limits import check_limits
from recordsmith.reference_data import ReferenceData, load_reference_data
from recordsmith.schema_io import parse_schema
from recordsmith.schema_model import FieldSpec, Schema, child_path, validate_schema

logger = logging.getLogger("engine")

Record = Dict[str, Any]
TelemetrySink = Callable[[int], Any]


class Engine:
    """
    Validates a schema, checks resource limits, then builds `count` records.

    An instance holds only immutable state after construction (its registry is
    copied from the module registry), so one engine can serve concurrent calls.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        reference: Optional[ReferenceData] = None,
        telemetry: Optional[TelemetrySink] = None,
    ):
        self.config = config or EngineConfig()
        self.reference = reference or load_reference_data()
        self.telemetry = telemetry
        self._registry: Dict[str, GeneratorFn] = builtin_registry()

    # ------------------------------------------------------------------
    # registry
    # ------------------------------------------------------------------
    @property
    def data_types(self) -> List[str]:
        return sorted(self._registry)

    def register_generator(self, data_type: str, fn: GeneratorFn, *, replace: bool = False) -> None:
        if not isinstance(data_type, str) or not data_type.strip():
            raise ValueError(
                format_actionable_error(
                    "Engine.register_generator",
                    "data_type must be a non-empty string",
                    "pass the dataType tag the generator handles",
                )
            )
        if data_type in self._registry and not replace:
            raise KeyError(
                f"Generator '{data_type}' is already registered. Existing: {sorted(self._registry.keys())}"
            )
        self._registry[data_type] = fn
        logger.info("Registered generator for dataType '%s'", data_type)

    # ------------------------------------------------------------------
    # generation
    # ------------------------------------------------------------------
    def validate(self, schema: Mapping[str, FieldSpec], count: int = 1) -> int:
        """Run validation and limit checks; return the projected items per record."""
        self._check_count(count)
        validate_schema(schema, known_types=self._registry.keys(), config=self.config, reference=self.reference)
        return check_limits(
            schema,
            count,
            max_fields=self.config.max_schema_fields,
            max_items=self.config.max_total_items,
            default_array_count=self.config.default_array_count,
        )

    def generate(self, schema: Mapping[str, FieldSpec], count: int = 1) -> List[Record]:
        per_record = self.validate(schema, count)

        rng = random.Random(self.config.seed)
        base = GenContext(rng=rng, engine=self, config=self.config, reference=self.reference)

        records: List[Record] = []
        for _ in range(count):
            records.append(self.generate_scope(schema, base.scoped("", {})))

        logger.info("Generated %d records (%d items per record)", count, per_record)
        self._notify(count)
        return records

    def generate_records(self, raw_schema: Any, count: int = 1) -> List[Record]:
        schema = parse_schema(
            raw_schema,
            known_types=self._registry.keys(),
            config=self.config,
            reference=self.reference,
        )
        return self.generate(schema, count)

    def generate_scope(self, fields: Mapping[str, FieldSpec], ctx: GenContext) -> Record:
        """Generate fields in declared order; each sees its earlier siblings and the enclosing scopes."""
        result: Record = {}
        visible = ChainMap(result, ctx.values)
        for name, spec in fields.items():
            result[name] = self.generate_field(spec, ctx.scoped(child_path(ctx.path, name), visible))
        return result

    def generate_field(self, spec: FieldSpec, ctx: GenContext) -> Any:
        # Nulls (probabilistic); evaluated once, before any type-specific work
        if spec.nullable:
            rate = spec.null_rate(self.config.default_nullable_rate)
            if ctx.rng.random() < rate:
                return None

        fn = self._registry.get(spec.data_type)
        if fn is None:
            raise GenerationError(
                ctx.path,
                f"no generator registered for dataType '{spec.data_type}'",
                "register a generator for this dataType on the engine before generating",
            )
        try:
            return fn(spec, ctx)
        except RecordsmithError:
            raise
        except Exception as exc:
            raise InternalError(ctx.path, f"{spec.data_type} generator failed: {exc}") from exc

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _check_count(count: Any) -> None:
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise SchemaValidationError(
                "",
                f"record count must be an integer >= 1 (got {count!r})",
                "request at least one record",
            )

    def _notify(self, count: int) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry(count)
        except Exception as exc:
            logger.warning("Telemetry sink failed after generating %d records: %s", count, exc)


def generate(schema: Mapping[str, FieldSpec], count: int = 1, *, config: Optional[EngineConfig] = None) -> List[Record]:
    return Engine(config=config).generate(schema, count)


def generate_records(raw_schema: Any, count: int = 1, *, config: Optional[EngineConfig] = None) -> List[Record]:
    return Engine(config=config).generate_records(raw_schema, count)
