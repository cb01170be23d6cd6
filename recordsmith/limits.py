import logging
from typing import Mapping

from recordsmith.errors import ResourceLimitExceeded
from recordsmith.schema_model import FieldSpec

logger = logging.getLogger("limits")


def _field_count(spec: FieldSpec) -> int:
    n = 1
    if spec.data_type == "object" and spec.fields:
        n += count_fields(spec.fields)
    if spec.data_type == "array" and spec.item is not None:
        # the item is one schema node no matter how many copies are generated
        n += _field_count(spec.item)
    return n


def count_fields(schema: Mapping[str, FieldSpec]) -> int:
    return sum(_field_count(spec) for spec in schema.values())


def _item_count(spec: FieldSpec, default_array_count: int) -> int:
    if spec.data_type == "object":
        return count_items(spec.fields or {}, default_array_count)
    if spec.data_type == "array":
        if spec.data is not None:
            return min(spec.pick_count or 0, len(spec.data))
        if spec.item is None:
            return 0
        repeat = spec.count if spec.count is not None else default_array_count
        return repeat * _item_count(spec.item, default_array_count)
    return 1


def count_items(schema: Mapping[str, FieldSpec], default_array_count: int = 1) -> int:
    return sum(_item_count(spec, default_array_count) for spec in schema.values())


def check_limits(
    schema: Mapping[str, FieldSpec],
    count: int,
    *,
    max_fields: int,
    max_items: int,
    default_array_count: int = 1,
) -> int:
    """
    Reject schemas whose field count or projected item count exceeds the ceilings.
    Returns the per-record item count.
    """
    total_fields = count_fields(schema)
    if total_fields > max_fields:
        raise ResourceLimitExceeded(
            f"Schema has {total_fields} fields, which exceeds the maximum allowed limit of {max_fields} fields",
            "split the schema or remove fields",
            total=total_fields,
            limit=max_fields,
        )

    per_record = count_items(schema, default_array_count)
    total_items = per_record * count
    if total_items > max_items:
        raise ResourceLimitExceeded(
            f"Schema would generate {total_items} total items "
            f"({per_record} items per request x {count} requests), "
            f"which exceeds the maximum allowed limit of {max_items} items",
            "lower the record count or the array counts",
            total=total_items,
            limit=max_items,
            per_record=per_record,
            count=count,
        )

    logger.debug("Limits ok: fields=%d items=%d (per record %d)", total_fields, total_items, per_record)
    return per_record
