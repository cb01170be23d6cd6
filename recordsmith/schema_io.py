import json
from typing import Any, Dict, Iterable, Mapping, Optional

from recordsmith.config import EngineConfig
from recordsmith.errors import SchemaValidationError
from recordsmith.reference_data import ReferenceData
from recordsmith.schema_model import FieldSpec, Schema, check_depth, child_path, item_path, validate_schema

# JSON keys that map onto FieldSpec attributes; everything else is a type parameter.
_STRUCTURAL_KEYS = ("dataType", "nullable", "nullableRate", "fields", "item", "count", "data", "pickCount")


def _decode_field(raw: Any, path: str, depth: int, max_depth: int) -> FieldSpec:
    check_depth(depth, max_depth, path)
    if not isinstance(raw, Mapping):
        raise SchemaValidationError(path, f"expected an object, got {type(raw).__name__}", "describe the field as an object with a dataType")
    data_type = raw.get("dataType")
    if not isinstance(data_type, str) or not data_type:
        raise SchemaValidationError(path, "dataType is missing", "add a dataType such as 'string' or 'int'")

    fields = None
    if "fields" in raw:
        fields = _decode_scope(raw["fields"], path, depth + 1, max_depth)

    item = None
    if "item" in raw:
        item = _decode_field(raw["item"], item_path(path), depth + 1, max_depth)

    nullable = raw.get("nullable", False)
    return FieldSpec(
        data_type=data_type,
        nullable=nullable,
        nullable_rate=raw.get("nullableRate"),
        params={k: v for k, v in raw.items() if k not in _STRUCTURAL_KEYS},
        fields=fields,
        item=item,
        count=raw.get("count"),
        data=raw.get("data"),
        pick_count=raw.get("pickCount"),
    )


def _decode_scope(raw: Any, path: str, depth: int, max_depth: int) -> Dict[str, FieldSpec]:
    if not isinstance(raw, Mapping):
        raise SchemaValidationError(path, "fields must be an object of named field definitions", "wrap the fields in an object")
    fields: Dict[str, FieldSpec] = {}
    for name, value in raw.items():
        fields[name] = _decode_field(value, child_path(path, str(name)), depth, max_depth)
    return fields


def parse_schema(
    raw: Any,
    *,
    known_types: Optional[Iterable[str]] = None,
    config: Optional[EngineConfig] = None,
    reference: Optional[ReferenceData] = None,
) -> Schema:
    """Decode an untrusted JSON-shaped mapping and validate it."""
    cfg = config or EngineConfig()
    schema = _decode_scope(raw, "", 1, cfg.max_schema_fields)
    validate_schema(schema, known_types=known_types, config=config, reference=reference)
    return schema


def field_to_dict(spec: FieldSpec) -> Dict[str, Any]:
    out: Dict[str, Any] = {"dataType": spec.data_type}
    if spec.nullable:
        out["nullable"] = True
    if spec.nullable_rate is not None:
        out["nullableRate"] = spec.nullable_rate
    out.update(spec.params)
    if spec.fields is not None:
        out["fields"] = schema_to_dict(spec.fields)
    if spec.item is not None:
        out["item"] = field_to_dict(spec.item)
    if spec.count is not None:
        out["count"] = spec.count
    if spec.data is not None:
        out["data"] = spec.data
    if spec.pick_count is not None:
        out["pickCount"] = spec.pick_count
    return out


def schema_to_dict(schema: Mapping[str, FieldSpec]) -> Dict[str, Any]:
    return {name: field_to_dict(spec) for name, spec in schema.items()}


def save_schema_to_json(schema: Schema, path: str) -> None:
    validate_schema(schema)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema_to_dict(schema), f, indent=2, ensure_ascii=False)


def load_schema_from_json(path: str, **kwargs) -> Schema:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SchemaValidationError(
                "",
                f"{path} is not valid JSON ({exc.msg} at line {exc.lineno} column {exc.colno})",
                "fix the JSON syntax and reload",
            ) from exc
        except RecursionError as exc:
            raise SchemaValidationError(
                "",
                f"{path} nests too deeply to parse",
                "flatten the schema or remove nested objects and arrays",
            ) from exc
    return parse_schema(data, **kwargs)
