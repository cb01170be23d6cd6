from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Literal, Mapping, Optional, Tuple

from recordsmith.config import EngineConfig
from recordsmith.errors import ResourceLimitExceeded, SchemaValidationError
from recordsmith.reference_data import (
    CONTINENTS,
    NAME_LANGUAGES,
    PRODUCT_CATEGORIES,
    SHORT_LANGUAGES,
    TEXT_LANGUAGES,
    ReferenceData,
    load_reference_data,
)

logger = logging.getLogger("schema_model")

DataType = Literal[
    "int", "float", "string", "boolean",
    "name", "email", "phone", "username",
    "url", "ip", "mac", "uuid",
    "price", "currency", "iban",
    "date", "hash",
    "country", "city", "location", "zipCode", "street",
    "cryptoAddress", "cryptoHash",
    "color",
    "fileSize", "fileName",
    "product",
    "object", "array",
]

# tag -> (category, description)
DATA_TYPE_INFO: Dict[str, Tuple[str, str]] = {
    "int": ("primitive", "Integer drawn uniformly from [min, max]"),
    "float": ("primitive", "Float drawn uniformly from [min, max], rounded to precision"),
    "string": ("primitive", "Words, a curated sentence, or paragraphs of sentences"),
    "boolean": ("primitive", "True or false with equal probability"),
    "name": ("person", "First, last or full person name in a chosen language"),
    "email": ("person", "Email address, optionally derived from a name field"),
    "phone": ("person", "International phone number +CCC-AAA-PPP-LLLL"),
    "username": ("person", "Username, optionally derived from a name field"),
    "url": ("internet", "Website or platform profile URL"),
    "ip": ("internet", "IPv4 or IPv6 address"),
    "mac": ("internet", "MAC address"),
    "uuid": ("internet", "Random version 4 UUID"),
    "price": ("financial", "Price with two decimals and a currency symbol"),
    "currency": ("financial", "ISO 4217 currency code"),
    "iban": ("financial", "IBAN-shaped account number"),
    "date": ("utility", "Date within the last five years, ISO string or epoch milliseconds"),
    "hash": ("utility", "Hex digest of random input"),
    "country": ("location", "Country name, filterable by continent or country code"),
    "city": ("location", "City name, filterable by continent, country code or a country field"),
    "location": ("location", "'City, Country' string"),
    "zipCode": ("location", "Five digit postal code"),
    "street": ("location", "House number and street name"),
    "cryptoAddress": ("crypto", "Wallet address or private key for eth, btc or sol"),
    "cryptoHash": ("crypto", "Transaction hash for eth, btc or sol"),
    "color": ("media", "Color as hex, rgb() or hsl()"),
    "fileSize": ("file", "Human readable file size"),
    "fileName": ("file", "File name with extension"),
    "product": ("commerce", "Product name from one or more categories"),
    "object": ("composite", "Nested record built from its own fields"),
    "array": ("composite", "List of generated items or a pick from literal data"),
}

DATA_TYPES: Tuple[str, ...] = tuple(DATA_TYPE_INFO)

# Type-specific parameters; anything else on a node is rejected.
TYPE_PARAMS: Dict[str, Tuple[str, ...]] = {
    "int": ("min", "max"),
    "float": ("min", "max", "precision"),
    "string": ("kind", "lang", "min", "max", "paragraphs"),
    "boolean": (),
    "name": ("lang", "format", "gender", "tripleNameRate"),
    "email": ("domains", "basedOn"),
    "phone": (),
    "username": ("lang", "basedOn"),
    "url": ("platform", "basedOn"),
    "ip": ("version",),
    "mac": (),
    "uuid": (),
    "price": ("min", "max", "currency"),
    "currency": (),
    "iban": (),
    "date": ("format",),
    "hash": ("algorithm",),
    "country": ("continents", "countries", "basedOn"),
    "city": ("continents", "countries", "basedOn"),
    "location": ("continents", "countries", "basedOn"),
    "zipCode": (),
    "street": ("lang",),
    "cryptoAddress": ("platform", "isPrivate"),
    "cryptoHash": ("platform", "min", "max"),
    "color": ("format",),
    "fileSize": ("min", "max", "unit"),
    "fileName": ("lang", "extension", "extensions", "basedOn"),
    "product": ("categories", "lang"),
    "object": (),
    "array": (),
}

STRING_KINDS = ("word", "sentence", "paragraph")
NAME_FORMATS = ("first", "last", "full")
GENDER_OPTIONS = ("male", "female", "any")
IP_VERSIONS = ("v4", "v6")
DATE_FORMATS = ("iso", "timestamp")
HASH_ALGORITHMS = ("md5", "sha1", "sha256", "sha512")
CRYPTO_PLATFORMS = ("eth", "btc", "sol")
COLOR_FORMATS = ("hex", "rgb", "hsl")
FILE_SIZE_UNITS = ("B", "KB", "MB", "GB")

_DOMAIN_RE = re.compile(
    r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?)*\.[a-zA-Z]{2,}$"
)
_EXTENSION_RE = re.compile(r"^[A-Za-z0-9]{1,10}$")
_DANGEROUS_PATTERNS = (
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
)


@dataclass(frozen=True)
class FieldSpec:
    data_type: str
    nullable: bool = False
    nullable_rate: Optional[float] = None
    params: Dict[str, Any] = field(default_factory=dict)

    # object
    fields: Optional[Dict[str, "FieldSpec"]] = None

    # array: item + count, or data + pick_count
    item: Optional["FieldSpec"] = None
    count: Optional[int] = None
    data: Optional[List[Any]] = None
    pick_count: Optional[int] = None

    @property
    def based_on(self) -> Optional[str]:
        return self.params.get("basedOn")

    def null_rate(self, default: float) -> float:
        if not self.nullable:
            return 0.0
        return default if self.nullable_rate is None else float(self.nullable_rate)


Schema = Dict[str, FieldSpec]


def child_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


def item_path(parent: str) -> str:
    return f"{parent}[]"


def check_depth(depth: int, max_depth: int, path: str) -> None:
    """Each nesting level adds a field, so a tree deeper than the field ceiling is over the limit."""
    if depth > max_depth:
        raise ResourceLimitExceeded(
            f"Schema nests deeper than {max_depth} levels at '{path}', "
            f"which exceeds the maximum allowed limit of {max_depth} fields",
            "flatten the schema or remove nested objects and arrays",
            total=depth,
            limit=max_depth,
        )


def contains_dangerous_content(value: Any) -> bool:
    if isinstance(value, str):
        return any(p.search(value) for p in _DANGEROUS_PATTERNS)
    if isinstance(value, (list, tuple)):
        return any(contains_dangerous_content(v) for v in value)
    if isinstance(value, dict):
        return any(contains_dangerous_content(k) or contains_dangerous_content(v) for k, v in value.items())
    return False


def sanitize_domain(domain: Any) -> str:
    """Return the domain without a leading '@'; raise ValueError if it is not a plain hostname."""
    if not isinstance(domain, str) or not domain.strip():
        raise ValueError("domain must be a non-empty string")
    cleaned = domain.strip()
    if cleaned.startswith("@"):
        cleaned = cleaned[1:]
    if contains_dangerous_content(domain):
        raise ValueError(f"domain '{domain}' contains potentially dangerous content")
    if not _DOMAIN_RE.match(cleaned):
        raise ValueError(f"domain '{domain}' must contain only letters, numbers, dots and hyphens")
    return cleaned


# ---------------------------------------------------------------------------
# validation helpers
# ---------------------------------------------------------------------------

def _fail(path: str, issue: str, hint: str) -> None:
    raise SchemaValidationError(path, issue, hint)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_enum(params: Mapping[str, Any], path: str, key: str, allowed: Iterable[str]) -> None:
    if key not in params:
        return
    allowed = tuple(allowed)
    if params[key] not in allowed:
        _fail(path, f"{key} '{params[key]}' is not supported", f"use one of {', '.join(allowed)}")


def _check_int_param(params: Mapping[str, Any], path: str, key: str, *, minimum: Optional[int] = None, maximum: Optional[int] = None) -> None:
    if key not in params:
        return
    v = params[key]
    if not _is_int(v):
        _fail(path, f"{key} must be an integer", f"set {key} to a whole number")
    if minimum is not None and v < minimum:
        _fail(path, f"{key} must be >= {minimum}", f"set {key} to at least {minimum}")
    if maximum is not None and v > maximum:
        _fail(path, f"{key} must be <= {maximum}", f"set {key} to at most {maximum}")


def _check_number_param(params: Mapping[str, Any], path: str, key: str, *, minimum: Optional[float] = None) -> None:
    if key not in params:
        return
    v = params[key]
    if not _is_number(v):
        _fail(path, f"{key} must be a finite number", f"set {key} to a numeric value")
    if minimum is not None and v < minimum:
        _fail(path, f"{key} must be >= {minimum}", f"set {key} to at least {minimum}")


def _check_min_le_max(params: Mapping[str, Any], path: str) -> None:
    if "min" in params and "max" in params and params["min"] > params["max"]:
        _fail(
            path,
            f"min ({params['min']}) is greater than max ({params['max']})",
            "set min <= max",
        )


def _check_string_list(
    params: Mapping[str, Any],
    path: str,
    key: str,
    *,
    allowed: Optional[Iterable[str]] = None,
    normalize: Callable[[str], str] = lambda s: s,
) -> None:
    if key not in params:
        return
    values = params[key]
    if not isinstance(values, (list, tuple)) or len(values) == 0:
        _fail(path, f"{key} must be a non-empty list", f"list one or more {key} values or remove {key}")
    allowed_set = None if allowed is None else set(allowed)
    for v in values:
        if not isinstance(v, str) or not v.strip():
            _fail(path, f"{key} contains a non-string or empty entry", f"use non-empty strings in {key}")
        if allowed_set is not None and normalize(v) not in allowed_set:
            _fail(
                path,
                f"{key} entry '{v}' is not supported",
                f"use values from: {', '.join(sorted(allowed_set))}",
            )


def _check_lang(params: Mapping[str, Any], path: str, languages: Tuple[str, ...]) -> None:
    _check_enum(params, path, "lang", languages + ("any",))


# ---------------------------------------------------------------------------
# per-type parameter rules
# ---------------------------------------------------------------------------

def _check_int(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_int_param(p, path, "min")
    _check_int_param(p, path, "max")
    _check_min_le_max(p, path)
    lo = p.get("min", cfg.int_min)
    hi = p.get("max", cfg.int_max)
    if lo > hi:
        _fail(
            path,
            f"the effective range [{lo}, {hi}] is empty once defaults are applied",
            "set both min and max explicitly",
        )


def _check_float(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_number_param(p, path, "min")
    _check_number_param(p, path, "max")
    _check_min_le_max(p, path)
    _check_int_param(p, path, "precision", minimum=0, maximum=cfg.max_float_precision)
    lo = p.get("min", cfg.float_min)
    hi = p.get("max", cfg.float_max)
    if lo > hi:
        _fail(
            path,
            f"the effective range [{lo}, {hi}] is empty once defaults are applied",
            "set both min and max explicitly",
        )


def _check_string(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    if "kind" not in p:
        _fail(path, "string fields require kind", f"set kind to one of {', '.join(STRING_KINDS)}")
    _check_enum(p, path, "kind", STRING_KINDS)
    _check_lang(p, path, TEXT_LANGUAGES)
    kind = p["kind"]
    if "paragraphs" in p and kind != "paragraph":
        _fail(path, f"paragraphs is not applicable when kind is '{kind}'", "remove paragraphs or set kind to 'paragraph'")
    _check_int_param(p, path, "paragraphs", minimum=1)
    for key in ("min", "max"):
        if key in p and kind != "word":
            _fail(path, f"{key} (word count) is only applicable when kind is 'word'", f"remove {key} or set kind to 'word'")
        _check_int_param(p, path, key, minimum=1)
    _check_min_le_max(p, path)


def _check_name(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_lang(p, path, NAME_LANGUAGES)
    _check_enum(p, path, "format", NAME_FORMATS)
    _check_enum(p, path, "gender", GENDER_OPTIONS)
    if "tripleNameRate" in p:
        rate = p["tripleNameRate"]
        if not _is_number(rate) or not 0.0 <= rate <= 1.0:
            _fail(path, "tripleNameRate must be a number between 0 and 1", "set tripleNameRate within [0, 1]")
        if p.get("format", "full") != "full":
            _fail(
                path,
                f"tripleNameRate can only be used when format is 'full' or unset (got '{p['format']}')",
                "remove tripleNameRate or set format to 'full'",
            )


def _check_email(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    if "domains" not in p:
        return
    domains = p["domains"]
    if not isinstance(domains, (list, tuple)) or len(domains) == 0:
        _fail(path, "domains must be a non-empty list", "list one or more domains such as 'example.com' or remove domains")
    for d in domains:
        try:
            sanitize_domain(d)
        except ValueError as exc:
            raise SchemaValidationError(path, str(exc), "use plain hostnames such as 'example.com'") from exc


def _check_username(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_lang(spec.params, path, SHORT_LANGUAGES)


def _check_url(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_enum(spec.params, path, "platform", sorted(ref.url_platforms))


def _check_ip(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_enum(spec.params, path, "version", IP_VERSIONS)


def _check_price(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_number_param(p, path, "min")
    _check_number_param(p, path, "max")
    _check_min_le_max(p, path)
    if p.get("min", cfg.price_min) > p.get("max", cfg.price_max):
        _fail(path, "the effective price range is empty once defaults are applied", "set both min and max explicitly")
    if "currency" in p and (not isinstance(p["currency"], str) or not p["currency"].strip()):
        _fail(path, "currency must be a non-empty string", "set currency to a symbol such as '$' or 'EUR'")


def _check_date(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_enum(spec.params, path, "format", DATE_FORMATS)


def _check_hash(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_enum(spec.params, path, "algorithm", HASH_ALGORITHMS)


def _check_geo(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    if "continents" in p and "countries" in p:
        _fail(path, "cannot filter by both continents and countries", "choose either continents or countries")
    _check_string_list(p, path, "continents", allowed=CONTINENTS)
    _check_string_list(p, path, "countries", allowed=ref.country_codes(), normalize=str.upper)
    if spec.data_type in ("city", "location") and "basedOn" in p and ("continents" in p or "countries" in p):
        _fail(
            path,
            "basedOn cannot be combined with continents or countries filters",
            "remove the filters or remove basedOn",
        )


def _check_street(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_lang(spec.params, path, SHORT_LANGUAGES)


def _check_crypto_address(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_enum(p, path, "platform", CRYPTO_PLATFORMS)
    if "isPrivate" in p and not isinstance(p["isPrivate"], bool):
        _fail(path, "isPrivate must be a boolean", "set isPrivate to true or false")


def _check_crypto_hash(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_enum(p, path, "platform", CRYPTO_PLATFORMS)
    _check_int_param(p, path, "min", minimum=1)
    _check_int_param(p, path, "max", minimum=1)
    _check_min_le_max(p, path)


def _check_color(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    _check_enum(spec.params, path, "format", COLOR_FORMATS)


def _check_file_size(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_int_param(p, path, "min", minimum=1)
    _check_int_param(p, path, "max", minimum=1)
    _check_min_le_max(p, path)
    if p.get("min", cfg.file_size_min) > p.get("max", cfg.file_size_max):
        _fail(path, "the effective size range is empty once defaults are applied", "set both min and max explicitly")
    _check_enum(p, path, "unit", FILE_SIZE_UNITS)


def _check_file_name(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_lang(p, path, SHORT_LANGUAGES)
    if "extension" in p and (not isinstance(p["extension"], str) or not _EXTENSION_RE.match(p["extension"])):
        _fail(path, "extension must be 1-10 letters or digits without a dot", "set extension such as 'pdf'")
    _check_string_list(p, path, "extensions")
    for ext in p.get("extensions", ()):
        if not _EXTENSION_RE.match(ext):
            _fail(path, f"extensions entry '{ext}' must be 1-10 letters or digits without a dot", "use entries such as 'pdf'")


def _check_product(spec: FieldSpec, path: str, cfg: EngineConfig, ref: ReferenceData) -> None:
    p = spec.params
    _check_string_list(p, path, "categories", allowed=PRODUCT_CATEGORIES)
    _check_lang(p, path, TEXT_LANGUAGES)


_PARAM_RULES: Dict[str, Callable[[FieldSpec, str, EngineConfig, ReferenceData], None]] = {
    "int": _check_int,
    "float": _check_float,
    "string": _check_string,
    "name": _check_name,
    "email": _check_email,
    "username": _check_username,
    "url": _check_url,
    "ip": _check_ip,
    "price": _check_price,
    "date": _check_date,
    "hash": _check_hash,
    "country": _check_geo,
    "city": _check_geo,
    "location": _check_geo,
    "street": _check_street,
    "cryptoAddress": _check_crypto_address,
    "cryptoHash": _check_crypto_hash,
    "color": _check_color,
    "fileSize": _check_file_size,
    "fileName": _check_file_name,
    "product": _check_product,
}


# ---------------------------------------------------------------------------
# structural validation
# ---------------------------------------------------------------------------

class _Walk:
    def __init__(self, known_types: Iterable[str], cfg: EngineConfig, ref: ReferenceData):
        self.known_types = set(known_types)
        self.cfg = cfg
        self.ref = ref

    def scope(self, fields: Any, parent_path: str, inherited: Tuple[str, ...], depth: int = 1) -> None:
        if not isinstance(fields, Mapping):
            _fail(parent_path, "fields must be a mapping of field name to field definition", "provide an object of named fields")
        if len(fields) == 0:
            _fail(parent_path, "no fields are declared", "declare at least one field")

        declared: list[str] = []
        for name, spec in fields.items():
            if not isinstance(name, str) or not name.strip():
                _fail(parent_path, "field names must be non-empty strings", "rename the offending field")
            path = child_path(parent_path, name)
            self.node(spec, path, inherited + tuple(declared), depth)
            declared.append(name)

    def node(self, spec: Any, path: str, visible: Tuple[str, ...], depth: int = 1) -> None:
        check_depth(depth, self.cfg.max_schema_fields, path)
        if not isinstance(spec, FieldSpec):
            _fail(path, f"expected a field definition, got {type(spec).__name__}", "describe the field with a dataType")

        if spec.data_type not in self.known_types:
            _fail(
                path,
                f"unknown dataType '{spec.data_type}'",
                f"use one of: {', '.join(sorted(self.known_types))}",
            )
        if not isinstance(spec.nullable, bool):
            _fail(path, "nullable must be a boolean", "set nullable to true or false")
        if spec.nullable_rate is not None:
            if not _is_number(spec.nullable_rate) or not 0.0 <= spec.nullable_rate <= 1.0:
                _fail(path, f"nullableRate must be a number between 0 and 1 (got {spec.nullable_rate!r})", "set nullableRate within [0, 1]")

        if spec.data_type in TYPE_PARAMS:
            unknown = sorted(set(spec.params) - set(TYPE_PARAMS[spec.data_type]))
            if unknown:
                allowed = TYPE_PARAMS[spec.data_type]
                _fail(
                    path,
                    f"unsupported parameter(s) for {spec.data_type}: {', '.join(unknown)}",
                    f"remove them; allowed parameters are: {', '.join(allowed) if allowed else 'none'}",
                )
            rule = _PARAM_RULES.get(spec.data_type)
            if rule is not None:
                rule(spec, path, self.cfg, self.ref)

        self.based_on(spec, path, visible)

        if spec.data_type == "object":
            self.object(spec, path, visible, depth)
        elif spec.data_type == "array":
            self.array(spec, path, visible, depth)
        elif spec.fields is not None or spec.item is not None or spec.data is not None:
            _fail(path, f"{spec.data_type} fields cannot declare fields, item or data", "remove the composite attributes")

    def based_on(self, spec: FieldSpec, path: str, visible: Tuple[str, ...]) -> None:
        if "basedOn" not in spec.params:
            return
        ref = spec.params["basedOn"]
        if not isinstance(ref, str) or not ref.strip():
            _fail(path, "basedOn must be a non-empty field name", "set basedOn to the name of an earlier field")
        if ref not in visible:
            _fail(
                path,
                f"basedOn references '{ref}', which is not declared before this field in an enclosing scope",
                "declare the referenced field earlier or remove basedOn",
            )

    def object(self, spec: FieldSpec, path: str, visible: Tuple[str, ...], depth: int) -> None:
        if spec.item is not None or spec.data is not None or spec.count is not None or spec.pick_count is not None:
            _fail(path, "object fields cannot declare item, count, data or pickCount", "move those attributes to an array field")
        if spec.fields is None:
            _fail(path, "object fields require fields", "declare nested fields under fields")
        self.scope(spec.fields, path, visible, depth + 1)

    def array(self, spec: FieldSpec, path: str, visible: Tuple[str, ...], depth: int) -> None:
        if spec.fields is not None:
            _fail(path, "array fields cannot declare fields", "wrap the fields in an object item")
        has_item = spec.item is not None
        has_data = spec.data is not None
        if has_item == has_data:
            _fail(
                path,
                "array must have either (item + optional count) or (data + pickCount)",
                "declare exactly one of item or data",
            )

        if has_item:
            if spec.pick_count is not None:
                _fail(path, "pickCount is only valid together with data", "remove pickCount or use data")
            if spec.count is not None and (not _is_int(spec.count) or spec.count < 1):
                _fail(path, f"count must be a positive integer (got {spec.count!r})", "set count >= 1")
            self.node(spec.item, item_path(path), visible, depth + 1)
            return

        if spec.count is not None:
            _fail(path, "count is only valid together with item", "remove count or use pickCount")
        if spec.pick_count is None:
            _fail(path, "pickCount is required when data is provided", "set pickCount to the number of values to pick")
        if not _is_int(spec.pick_count) or spec.pick_count < 1:
            _fail(path, f"pickCount must be a positive integer (got {spec.pick_count!r})", "set pickCount >= 1")
        self.literal_data(spec.data, path)

    def literal_data(self, data: Any, path: str) -> None:
        if not isinstance(data, list) or len(data) == 0:
            _fail(path, "data must be a non-empty list", "list the values to pick from")
        try:
            json.loads(json.dumps(data, allow_nan=False))
        except (TypeError, ValueError, RecursionError) as exc:
            raise SchemaValidationError(
                path,
                "array data must be JSON-serializable",
                "use only strings, numbers, booleans, null, lists and objects",
            ) from exc
        if contains_dangerous_content(data):
            _fail(path, "array data contains potentially dangerous content", "remove script tags, javascript: URLs and on*= handlers")


def validate_schema(
    schema: Mapping[str, FieldSpec],
    *,
    known_types: Optional[Iterable[str]] = None,
    config: Optional[EngineConfig] = None,
    reference: Optional[ReferenceData] = None,
) -> None:
    """
    Check the whole tree before any value is generated.
    Raises SchemaValidationError naming the dotted field path of the first violation.
    """
    types = DATA_TYPES if known_types is None else tuple(known_types)
    walk = _Walk(types, config or EngineConfig(), reference or load_reference_data())
    walk.scope(schema, "", ())
    logger.debug("Schema validated (%d top-level fields)", len(schema))


def describe_data_types() -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for tag, (category, description) in DATA_TYPE_INFO.items():
        params = list(TYPE_PARAMS[tag])
        if tag == "object":
            params = ["fields"]
        elif tag == "array":
            params = ["item", "count", "data", "pickCount"]
        out.append(
            {
                "dataType": tag,
                "category": category,
                "description": description,
                "parameters": ["nullable", "nullableRate"] + params,
            }
        )
    return out
