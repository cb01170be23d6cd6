from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

from recordsmith.value_pools import load_csv_column, load_csv_column_by_match, load_csv_rows

logger = logging.getLogger("reference_data")

DATA_DIR = Path(__file__).resolve().parent / "data"

CONTINENTS = ("africa", "asia", "europe", "north-america", "south-america", "oceania")
NAME_LANGUAGES = ("en", "tr", "zh", "ru")
TEXT_LANGUAGES = NAME_LANGUAGES
SHORT_LANGUAGES = ("en", "tr")
GENDERS = ("male", "female")
PRODUCT_CATEGORIES = (
    "electronics",
    "clothing",
    "books",
    "home",
    "sports",
    "toys",
    "food",
    "beauty",
    "automotive",
    "garden",
)
FILE_NAME_KINDS = ("category", "descriptor", "context", "time")


class Country(NamedTuple):
    code: str
    name: str
    continent: str


class City(NamedTuple):
    name: str
    country_code: str


def data_path(filename: str) -> str:
    return str(DATA_DIR / filename)


@dataclass(frozen=True)
class ReferenceData:
    """
    Read-only lookup tables consumed by generators.
    Build a custom instance to narrow pools in tests; the engine never mutates it.
    """

    first_names: Dict[Tuple[str, str], Tuple[str, ...]]  # (lang, gender) -> names
    last_names: Dict[str, Tuple[str, ...]]
    words: Dict[str, Tuple[str, ...]]
    sentences: Dict[str, Tuple[str, ...]]
    countries: Tuple[Country, ...]
    cities: Tuple[City, ...]
    currencies: Tuple[str, ...] = ()
    iban_countries: Tuple[str, ...] = ()
    email_domains: Tuple[str, ...] = ()
    url_platforms: Dict[str, str] = field(default_factory=dict)
    url_words: Tuple[str, ...] = ()
    username_words: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    streets: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    file_name_words: Dict[Tuple[str, str], Tuple[str, ...]] = field(default_factory=dict)
    products: Dict[Tuple[str, str], Tuple[str, ...]] = field(default_factory=dict)  # (category, lang)

    def country_by_code(self, code: str) -> Optional[Country]:
        wanted = code.upper()
        for country in self.countries:
            if country.code == wanted:
                return country
        return None

    def country_codes(self) -> Tuple[str, ...]:
        return tuple(c.code for c in self.countries)

    def countries_in_continents(self, continents: Iterable[str]) -> Tuple[Country, ...]:
        wanted = set(continents)
        return tuple(c for c in self.countries if c.continent in wanted)

    def cities_in_countries(self, codes: Iterable[str]) -> Tuple[City, ...]:
        wanted = {c.upper() for c in codes}
        return tuple(city for city in self.cities if city.country_code in wanted)

    def cities_in_continents(self, continents: Iterable[str]) -> Tuple[City, ...]:
        codes = [c.code for c in self.countries_in_continents(continents)]
        return self.cities_in_countries(codes)

    def products_for(self, categories: Iterable[str], lang: str) -> Tuple[str, ...]:
        out: list[str] = []
        for category in categories:
            out.extend(self.products.get((category, lang), ()))
        return tuple(out)


def _grouped(filename: str, column_index: int, match_columns: Tuple[int, ...]):
    raw = load_csv_column_by_match(data_path(filename), column_index, match_columns)
    if len(match_columns) == 1:
        return {k[0]: tuple(v) for k, v in raw.items()}
    return {k: tuple(v) for k, v in raw.items()}


@lru_cache(maxsize=1)
def load_reference_data() -> ReferenceData:
    """Load the bundled CSV tables once per process."""
    countries = tuple(Country(code, name, continent) for code, name, continent in load_csv_rows(data_path("countries.csv")))
    cities = tuple(City(name, code) for name, code in load_csv_rows(data_path("cities.csv")))

    data = ReferenceData(
        first_names=_grouped("first_names.csv", 2, (0, 1)),
        last_names=_grouped("last_names.csv", 1, (0,)),
        words=_grouped("words.csv", 1, (0,)),
        sentences=_grouped("sentences.csv", 1, (0,)),
        countries=countries,
        cities=cities,
        currencies=tuple(load_csv_column(data_path("currencies.csv"), 0)),
        iban_countries=tuple(load_csv_column(data_path("iban_countries.csv"), 0)),
        email_domains=tuple(load_csv_column(data_path("email_domains.csv"), 0)),
        url_platforms={platform: url for platform, url in load_csv_rows(data_path("url_platforms.csv"))},
        url_words=tuple(load_csv_column(data_path("url_words.csv"), 1)),
        username_words=_grouped("username_words.csv", 1, (0,)),
        streets=_grouped("streets.csv", 1, (0,)),
        file_name_words=_grouped("file_name_words.csv", 2, (0, 1)),
        products=_grouped("products.csv", 2, (0, 1)),
    )
    logger.debug(
        "Loaded reference data: %d countries, %d cities, %d url platforms",
        len(data.countries),
        len(data.cities),
        len(data.url_platforms),
    )
    return data
