from __future__ import annotations

import copy
import hashlib
import random
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, MutableMapping, Optional, Sequence

from recordsmith.config import EngineConfig
from recordsmith.errors import GenerationError
from recordsmith.reference_data import (
    GENDERS,
    NAME_LANGUAGES,
    PRODUCT_CATEGORIES,
    SHORT_LANGUAGES,
    TEXT_LANGUAGES,
    City,
    ReferenceData,
)
from recordsmith.schema_model import FieldSpec, item_path, sanitize_domain
from recordsmith.text_normalizer import (
    ParsedName,
    parse_name_from_context,
    to_file_name,
    to_username,
)

##----------------FUNCTIONAL----------------##
@dataclass
class GenContext:
    """
    Per-scope generation state handed to every generator.
    - rng: one Random per generate() call, shared by the whole batch
    - engine: exposes generate_field / generate_scope for composite types
    - values: already-generated values visible to this field (own scope + ancestors)
    - path: dotted field path used in error messages
    """
    rng: random.Random
    engine: Any
    config: EngineConfig
    reference: ReferenceData
    values: Mapping[str, Any] = field(default_factory=dict)
    path: str = ""

    def scoped(self, path: str, values: Optional[Mapping[str, Any]] = None) -> "GenContext":
        return replace(self, path=path, values=self.values if values is None else values)


GeneratorFn = Callable[[FieldSpec, GenContext], Any]

REGISTRY: Dict[str, GeneratorFn] = {}


def register(name: str):
    def deco(fn: GeneratorFn) -> GeneratorFn:
        if name in REGISTRY:
            raise KeyError(
                f"Generator '{name}' is already registered. Existing: {sorted(REGISTRY.keys())}"
            )
        REGISTRY[name] = fn
        return fn
    return deco


def get_generator(name: str) -> GeneratorFn:
    if name not in REGISTRY:
        raise KeyError(f"Unknown generator '{name}'. Registered: {sorted(REGISTRY.keys())}")
    return REGISTRY[name]


def _pool(ctx: GenContext, values: Sequence[Any], what: str) -> Sequence[Any]:
    if not values:
        raise GenerationError(
            ctx.path,
            f"no {what} available for the requested filters",
            "widen the filters or supply reference data that covers them",
        )
    return values


def _pick(ctx: GenContext, values: Sequence[Any], what: str) -> Any:
    return ctx.rng.choice(_pool(ctx, values, what))


def _resolve_lang(ctx: GenContext, lang: Optional[str], languages: Sequence[str]) -> str:
    if lang in languages:
        return lang
    return ctx.rng.choice(languages)


def _digits(rng: random.Random, n: int) -> str:
    return "".join(str(rng.randint(0, 9)) for _ in range(n))


def _hex(rng: random.Random, n: int) -> str:
    if n <= 0:
        return ""
    return f"{rng.getrandbits(4 * n):0{n}x}"


_BASE58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _base58(rng: random.Random, n: int) -> str:
    return "".join(rng.choice(_BASE58) for _ in range(n))


# ---------------------------------------------------------------------------
# primitives
# ---------------------------------------------------------------------------

@register("int")
def gen_int(spec: FieldSpec, ctx: GenContext) -> int:
    lo = spec.params.get("min", ctx.config.int_min)
    hi = spec.params.get("max", ctx.config.int_max)
    return ctx.rng.randint(lo, hi)


@register("float")
def gen_float(spec: FieldSpec, ctx: GenContext) -> float:
    lo = float(spec.params.get("min", ctx.config.float_min))
    hi = float(spec.params.get("max", ctx.config.float_max))
    precision = int(spec.params.get("precision", ctx.config.float_precision))
    factor = 10 ** precision
    v = round(ctx.rng.uniform(lo, hi) * factor) / factor
    # rounding can step just outside a bound that is finer than the precision
    return min(max(v, lo), hi)


@register("boolean")
def gen_boolean(spec: FieldSpec, ctx: GenContext) -> bool:
    return ctx.rng.random() < 0.5


@register("string")
def gen_string(spec: FieldSpec, ctx: GenContext) -> str:
    p = spec.params
    ref = ctx.reference
    lang = _resolve_lang(ctx, p.get("lang"), TEXT_LANGUAGES)
    kind = p.get("kind", "word")

    if kind == "word":
        words = _pool(ctx, ref.words.get(lang, ()), f"words for language '{lang}'")
        n = ctx.rng.randint(p.get("min", 1), p.get("max", p.get("min", 1)))
        return " ".join(ctx.rng.choice(words) for _ in range(n))

    sentences = _pool(ctx, ref.sentences.get(lang, ()), f"sentences for language '{lang}'")
    if kind == "sentence":
        return ctx.rng.choice(sentences)

    joiner = "" if lang == "zh" else " "
    paragraphs = []
    for _ in range(p.get("paragraphs", ctx.config.paragraph_count)):
        n = ctx.rng.randint(ctx.config.paragraph_min_sentences, ctx.config.paragraph_max_sentences)
        if n <= len(sentences):
            chosen = ctx.rng.sample(list(sentences), n)
        else:
            chosen = [ctx.rng.choice(sentences) for _ in range(n)]
        paragraphs.append(joiner.join(chosen))
    return "\n\n".join(paragraphs)


# ---------------------------------------------------------------------------
# person
# ---------------------------------------------------------------------------

def _first_name(ctx: GenContext, lang: str, gender: Optional[str]) -> str:
    g = gender if gender in GENDERS else ctx.rng.choice(GENDERS)
    return _pick(ctx, ctx.reference.first_names.get((lang, g), ()), f"{g} first names for language '{lang}'")


def _last_name(ctx: GenContext, lang: str) -> str:
    return _pick(ctx, ctx.reference.last_names.get(lang, ()), f"last names for language '{lang}'")


@register("name")
def gen_name(spec: FieldSpec, ctx: GenContext) -> str:
    p = spec.params
    lang = _resolve_lang(ctx, p.get("lang"), NAME_LANGUAGES)
    fmt = p.get("format", "full")
    if fmt == "last":
        return _last_name(ctx, lang)

    gender = p.get("gender")
    if gender not in GENDERS:
        gender = ctx.rng.choice(GENDERS)
    first = _first_name(ctx, lang, gender)
    triple_rate = p.get("tripleNameRate", 0.0)
    if triple_rate and ctx.rng.random() < triple_rate:
        first = f"{first} {_first_name(ctx, lang, gender)}"
    if fmt == "first":
        return first
    return f"{first} {_last_name(ctx, lang)}"


def _random_latin_name(ctx: GenContext) -> ParsedName:
    first = to_username(_first_name(ctx, "en", None))
    last = to_username(_last_name(ctx, "en"))
    return ParsedName(first_name=first, last_name=last)


@register("email")
def gen_email(spec: FieldSpec, ctx: GenContext) -> str:
    raw_domains = spec.params.get("domains")
    if raw_domains:
        domains = [sanitize_domain(d) for d in raw_domains]
    else:
        domains = list(ctx.reference.email_domains)

    name = parse_name_from_context(spec.based_on, ctx.values) or _random_latin_name(ctx)
    first, last = name.first_name, name.last_name
    rng = ctx.rng
    formats = [
        lambda: f"{first}.{last}",
        lambda: f"{first}_{last}",
        lambda: f"{first}{last}",
        lambda: f"{first}{rng.randint(1, 999)}",
        lambda: f"{last}{rng.randint(1, 999)}",
        lambda: f"{first[:1]}.{last}",
        lambda: f"{first}.{last}{rng.randint(1, 99)}",
        lambda: first,
        lambda: last,
    ]
    local = rng.choice(formats)()
    return f"{local}@{_pick(ctx, domains, 'email domains')}"


@register("phone")
def gen_phone(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    return f"+{rng.randint(1, 999)}-{_digits(rng, 3)}-{_digits(rng, 3)}-{_digits(rng, 4)}"


def _handle_from_name(rng: random.Random, name: ParsedName, *, dashed: bool) -> str:
    first = to_username(name.first_name)
    last = to_username(name.last_name)
    formats = [
        lambda: f"{first}{last}",
        lambda: f"{first}_{last}",
        lambda: f"{first}.{last}",
        lambda: f"{first[:1]}{last}",
        lambda: f"{first}{last[:1]}",
        lambda: f"{first}{rng.randint(1, 999)}",
        lambda: f"{last}{rng.randint(1, 999)}",
        lambda: first,
        lambda: last,
    ]
    if dashed:
        formats += [
            lambda: f"{first}-{last}",
            lambda: f"{first}-{rng.randint(1, 999)}",
            lambda: f"{first}_{rng.randint(1, 999)}",
        ]
    return rng.choice(formats)()


@register("username")
def gen_username(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    name = parse_name_from_context(spec.based_on, ctx.values)
    if name is not None:
        return _handle_from_name(rng, name, dashed=False)

    lang = _resolve_lang(ctx, spec.params.get("lang"), SHORT_LANGUAGES)
    words = _pool(ctx, ctx.reference.username_words.get(lang, ()), f"username words for language '{lang}'")
    w1 = to_username(rng.choice(words))
    w2 = to_username(rng.choice(words))
    num = rng.randint(1, 9999)
    formats = [
        lambda: f"{w1}{num}",
        lambda: f"{w1}_{w2}",
        lambda: f"{w1}{w2}",
        lambda: f"{w1}.{w2}",
        lambda: f"{w1}_{num}",
        lambda: w1,
    ]
    return rng.choice(formats)()


# ---------------------------------------------------------------------------
# internet
# ---------------------------------------------------------------------------

@register("url")
def gen_url(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    ref = ctx.reference
    platform = spec.params.get("platform")
    if platform:
        base = ref.url_platforms[platform]
        name = parse_name_from_context(spec.based_on, ctx.values)
        if name is not None:
            return f"{base}{_handle_from_name(rng, name, dashed=True)}"
        return f"{base}{_pick(ctx, ref.url_words, 'url words')}{rng.randint(0, 999)}"
    return f"https://{_pick(ctx, ref.url_words, 'url words')}{rng.randint(0, 99)}.com"


@register("ip")
def gen_ip(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    if spec.params.get("version", "v4") == "v6":
        return ":".join(f"{rng.randint(0, 0xFFFF):04x}" for _ in range(8))
    return ".".join(str(rng.randint(0, 255)) for _ in range(4))


@register("mac")
def gen_mac(spec: FieldSpec, ctx: GenContext) -> str:
    return ":".join(f"{ctx.rng.randint(0, 255):02x}" for _ in range(6))


@register("uuid")
def gen_uuid(spec: FieldSpec, ctx: GenContext) -> str:
    return str(uuid.UUID(int=ctx.rng.getrandbits(128), version=4))


# ---------------------------------------------------------------------------
# financial
# ---------------------------------------------------------------------------

@register("price")
def gen_price(spec: FieldSpec, ctx: GenContext) -> str:
    lo = float(spec.params.get("min", ctx.config.price_min))
    hi = float(spec.params.get("max", ctx.config.price_max))
    currency = spec.params.get("currency", ctx.config.price_currency)
    return f"{ctx.rng.uniform(lo, hi):.2f}{currency}"


@register("currency")
def gen_currency(spec: FieldSpec, ctx: GenContext) -> str:
    return _pick(ctx, ctx.reference.currencies, "currency codes")


@register("iban")
def gen_iban(spec: FieldSpec, ctx: GenContext) -> str:
    country = _pick(ctx, ctx.reference.iban_countries, "IBAN country codes")
    return f"{country}{ctx.rng.randint(0, 99):02d}{_digits(ctx.rng, 20)}"


# ---------------------------------------------------------------------------
# utility
# ---------------------------------------------------------------------------

@register("date")
def gen_date(spec: FieldSpec, ctx: GenContext):
    now = datetime.now(timezone.utc)
    span_ms = ctx.config.date_span_days * 24 * 60 * 60 * 1000
    offset_ms = ctx.rng.randint(0, span_ms)
    moment = now - timedelta(milliseconds=offset_ms)
    if spec.params.get("format", "iso") == "timestamp":
        return int(moment.timestamp() * 1000)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@register("hash")
def gen_hash(spec: FieldSpec, ctx: GenContext) -> str:
    algorithm = spec.params.get("algorithm", "sha256")
    payload = ctx.rng.getrandbits(256).to_bytes(32, "big")
    return hashlib.new(algorithm, payload).hexdigest()


# ---------------------------------------------------------------------------
# location
# ---------------------------------------------------------------------------

def _match_country(ctx: GenContext, value: str):
    """Exact code or name first, then substring either way."""
    needle = value.strip().lower()
    if not needle:
        return None
    for country in ctx.reference.countries:
        if needle in (country.code.lower(), country.name.lower()):
            return country
    for country in ctx.reference.countries:
        name = country.name.lower()
        if needle in name or name in needle:
            return country
    return None


def _filtered_cities(spec: FieldSpec, ctx: GenContext) -> Sequence[City]:
    ref = ctx.reference
    p = spec.params
    based = ctx.values.get(spec.based_on) if spec.based_on else None
    if isinstance(based, str):
        country = _match_country(ctx, based)
        if country is not None:
            return ref.cities_in_countries([country.code])
        return ref.cities
    if p.get("continents"):
        return ref.cities_in_continents(p["continents"])
    if p.get("countries"):
        return ref.cities_in_countries(p["countries"])
    return ref.cities


@register("country")
def gen_country(spec: FieldSpec, ctx: GenContext) -> str:
    ref = ctx.reference
    p = spec.params
    based = ctx.values.get(spec.based_on) if spec.based_on else None
    if isinstance(based, str):
        wanted = based.strip().lower()
        for city in ref.cities:
            if city.name.lower() == wanted:
                country = ref.country_by_code(city.country_code)
                if country is not None:
                    return country.name
        country = _match_country(ctx, based)
        if country is not None:
            return country.name

    countries = ref.countries
    if p.get("continents"):
        countries = ref.countries_in_continents(p["continents"])
    elif p.get("countries"):
        wanted_codes = {c.upper() for c in p["countries"]}
        countries = tuple(c for c in ref.countries if c.code in wanted_codes)
    return _pick(ctx, countries, "countries").name


@register("city")
def gen_city(spec: FieldSpec, ctx: GenContext) -> str:
    return _pick(ctx, _filtered_cities(spec, ctx), "cities").name


@register("location")
def gen_location(spec: FieldSpec, ctx: GenContext) -> str:
    city = _pick(ctx, _filtered_cities(spec, ctx), "cities")
    country = ctx.reference.country_by_code(city.country_code)
    return f"{city.name}, {country.name if country else city.country_code}"


@register("zipCode")
def gen_zip_code(spec: FieldSpec, ctx: GenContext) -> str:
    return str(ctx.rng.randint(10000, 99999))


@register("street")
def gen_street(spec: FieldSpec, ctx: GenContext) -> str:
    lang = _resolve_lang(ctx, spec.params.get("lang"), SHORT_LANGUAGES)
    street = _pick(ctx, ctx.reference.streets.get(lang, ()), f"street names for language '{lang}'")
    return f"{ctx.rng.randint(1, 999)} {street}"


# ---------------------------------------------------------------------------
# crypto
# ---------------------------------------------------------------------------

@register("cryptoAddress")
def gen_crypto_address(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    platform = spec.params.get("platform", "eth")
    if spec.params.get("isPrivate", False):
        if platform == "btc":
            return rng.choice("5KL") + _base58(rng, 50)
        return _hex(rng, 64)
    if platform == "btc":
        return "1" + _base58(rng, rng.randint(25, 34))
    if platform == "sol":
        return _base58(rng, rng.randint(32, 44))
    return "0x" + _hex(rng, 40)


@register("cryptoHash")
def gen_crypto_hash(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    p = spec.params
    if "min" in p or "max" in p:
        # a lone bound widens or narrows the default 32..64 range to include it
        hi = p.get("max", max(64, p.get("min", 32)))
        lo = p.get("min", min(32, hi))
        return _hex(rng, rng.randint(lo, hi))
    platform = p.get("platform", "eth")
    if platform == "btc":
        return _hex(rng, 64)
    if platform == "sol":
        return _base58(rng, 88)
    return "0x" + _hex(rng, 64)


# ---------------------------------------------------------------------------
# media / files / commerce
# ---------------------------------------------------------------------------

@register("color")
def gen_color(spec: FieldSpec, ctx: GenContext) -> str:
    rng = ctx.rng
    fmt = spec.params.get("format", "hex")
    if fmt == "rgb":
        return f"rgb({rng.randint(0, 255)}, {rng.randint(0, 255)}, {rng.randint(0, 255)})"
    if fmt == "hsl":
        return f"hsl({rng.randint(0, 359)}, {rng.randint(0, 100)}%, {rng.randint(0, 100)}%)"
    return "#" + "".join(f"{rng.randint(0, 255):02X}" for _ in range(3))


_UNIT_BYTES = {"B": 1, "KB": 1024, "MB": 1024 ** 2, "GB": 1024 ** 3}


def format_file_size(size_bytes: int, unit: str) -> str:
    text = f"{size_bytes / _UNIT_BYTES[unit]:.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {unit}"


@register("fileSize")
def gen_file_size(spec: FieldSpec, ctx: GenContext) -> str:
    lo = spec.params.get("min", ctx.config.file_size_min)
    hi = spec.params.get("max", ctx.config.file_size_max)
    return format_file_size(ctx.rng.randint(lo, hi), spec.params.get("unit", "MB"))


COMMON_EXTENSIONS = (
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt", "jpg", "jpeg",
    "png", "gif", "svg", "mp4", "mp3", "zip", "rar", "json", "xml", "csv",
)


def _random_file_base(ctx: GenContext, lang: str) -> str:
    rng = ctx.rng
    words = ctx.reference.file_name_words

    def w(kind: str) -> str:
        return _pick(ctx, words.get((lang, kind), ()), f"file name {kind} words for language '{lang}'")

    patterns = [
        lambda: f"{w('category')}-{rng.randint(1, 9999)}",
        lambda: f"{w('descriptor')}-{w('category')}",
        lambda: f"{w('category')}-{w('time')}",
        lambda: f"{w('context')}-{w('category')}",
        lambda: f"{w('category')}-{w('context')}-{rng.randint(1, 99)}",
        lambda: f"{w('descriptor')}-{w('category')}-{rng.randint(1, 99)}",
        lambda: f"{w('category')}-backup-{rng.randint(1, 9)}",
        lambda: f"{w('time')}-{w('category')}",
        lambda: f"{w('category')}-final-v{rng.randint(1, 5)}",
        lambda: f"{w('category')}-copy-{rng.randint(1, 9)}",
    ]
    return to_file_name(rng.choice(patterns)(), "-")


@register("fileName")
def gen_file_name(spec: FieldSpec, ctx: GenContext) -> str:
    p = spec.params
    base = ""
    source = ctx.values.get(spec.based_on) if spec.based_on else None
    if isinstance(source, str) and source.strip():
        base = to_file_name(source, "-")
    if not base:
        base = _random_file_base(ctx, _resolve_lang(ctx, p.get("lang"), SHORT_LANGUAGES))

    if p.get("extensions"):
        ext = ctx.rng.choice(p["extensions"])
    elif p.get("extension"):
        ext = p["extension"]
    else:
        ext = ctx.rng.choice(COMMON_EXTENSIONS)
    return f"{base}.{ext}"


@register("product")
def gen_product(spec: FieldSpec, ctx: GenContext) -> str:
    lang = spec.params.get("lang") or "en"
    if lang == "any":
        lang = ctx.rng.choice(TEXT_LANGUAGES)
    categories = spec.params.get("categories") or PRODUCT_CATEGORIES
    return _pick(ctx, ctx.reference.products_for(categories, lang), f"products for language '{lang}'")


# ---------------------------------------------------------------------------
# composites
# ---------------------------------------------------------------------------

@register("object")
def gen_object(spec: FieldSpec, ctx: GenContext) -> Dict[str, Any]:
    return ctx.engine.generate_scope(spec.fields or {}, ctx)


@register("array")
def gen_array(spec: FieldSpec, ctx: GenContext) -> list:
    if spec.data is not None:
        k = min(spec.pick_count or 0, len(spec.data))
        # records must not share mutable elements with the schema or each other
        return copy.deepcopy(ctx.rng.sample(list(spec.data), k))

    count = spec.count if spec.count is not None else ctx.config.default_array_count
    item_ctx = ctx.scoped(item_path(ctx.path))
    return [ctx.engine.generate_field(spec.item, item_ctx) for _ in range(count)]


def builtin_registry() -> MutableMapping[str, GeneratorFn]:
    return dict(REGISTRY)
