from recordsmith.config import AppConfig, EngineConfig
from recordsmith.engine import Engine, generate, generate_records
from recordsmith.errors import (
    GenerationError,
    InternalError,
    RecordsmithError,
    ResourceLimitExceeded,
    SchemaValidationError,
)
from recordsmith.generators import GenContext, get_generator, register
from recordsmith.schema_io import load_schema_from_json, parse_schema
from recordsmith.schema_model import DATA_TYPES, FieldSpec, validate_schema

__all__ = [
    "AppConfig",
    "EngineConfig",
    "Engine",
    "generate",
    "generate_records",
    "GenerationError",
    "InternalError",
    "RecordsmithError",
    "ResourceLimitExceeded",
    "SchemaValidationError",
    "GenContext",
    "get_generator",
    "register",
    "load_schema_from_json",
    "parse_schema",
    "DATA_TYPES",
    "FieldSpec",
    "validate_schema",
]
