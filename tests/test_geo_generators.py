import unittest

from recordsmith.config import EngineConfig
from recordsmith.engine import Engine
from recordsmith.errors import GenerationError
from recordsmith.reference_data import City, Country, ReferenceData, load_reference_data
from recordsmith.schema_io import parse_schema


def _records(raw, n=200, seed=23, reference=None):
    engine = Engine(config=EngineConfig(seed=seed), reference=reference)
    return engine.generate_records(raw, n)


class TestCountryAndCity(unittest.TestCase):
    def setUp(self):
        self.ref = load_reference_data()

    def test_country_continent_filter(self):
        europe = {c.name for c in self.ref.countries_in_continents(["europe"])}
        values = {r["c"] for r in _records({"c": {"dataType": "country", "continents": ["europe"]}})}
        self.assertTrue(values)
        self.assertTrue(values <= europe)

    def test_country_code_filter_is_case_insensitive(self):
        values = {r["c"] for r in _records({"c": {"dataType": "country", "countries": ["jp", "DE"]}})}
        self.assertEqual(values, {"Japan", "Germany"})

    def test_city_country_filter(self):
        french = {c.name for c in self.ref.cities_in_countries(["FR"])}
        values = {r["c"] for r in _records({"c": {"dataType": "city", "countries": ["FR"]}})}
        self.assertTrue(values <= french)

    def test_city_continent_filter(self):
        asian = {c.name for c in self.ref.cities_in_continents(["asia"])}
        for record in _records({"c": {"dataType": "city", "continents": ["asia"]}}):
            self.assertIn(record["c"], asian)

    def test_city_based_on_country(self):
        raw = {
            "country": {"dataType": "country", "continents": ["south-america"]},
            "city": {"dataType": "city", "basedOn": "country"},
        }
        for record in _records(raw):
            country = next(c for c in self.ref.countries if c.name == record["country"])
            cities = {c.name for c in self.ref.cities_in_countries([country.code])}
            self.assertIn(record["city"], cities)

    def test_country_based_on_city(self):
        raw = {
            "city": {"dataType": "city", "countries": ["JP"]},
            "country": {"dataType": "country", "basedOn": "city"},
        }
        for record in _records(raw, n=50):
            self.assertEqual(record["country"], "Japan")

    def test_unmatched_based_on_value_falls_back_to_all_cities(self):
        engine = Engine(config=EngineConfig(seed=3))
        engine.register_generator("fixed", lambda spec, ctx: "Atlantis")
        schema = parse_schema(
            {"home": {"dataType": "fixed"}, "city": {"dataType": "city", "basedOn": "home"}},
            known_types=engine.data_types,
        )
        all_cities = {c.name for c in self.ref.cities}
        for record in engine.generate(schema, 30):
            self.assertIn(record["city"], all_cities)


class TestLocation(unittest.TestCase):
    def test_location_is_city_comma_country(self):
        ref = load_reference_data()
        pairs = {(c.name, ref.country_by_code(c.country_code).name) for c in ref.cities}
        for record in _records({"l": {"dataType": "location"}}):
            city, country = record["l"].split(", ")
            self.assertIn((city, country), pairs)

    def test_location_country_filter(self):
        for record in _records({"l": {"dataType": "location", "countries": ["TR"]}}, n=50):
            self.assertTrue(record["l"].endswith(", Turkey"))


class TestAddressFields(unittest.TestCase):
    def test_zip_code_is_five_digits(self):
        for record in _records({"z": {"dataType": "zipCode"}}):
            self.assertRegex(record["z"], r"^[1-9]\d{4}$")

    def test_street_has_house_number(self):
        streets = set(load_reference_data().streets["en"])
        for record in _records({"s": {"dataType": "street", "lang": "en"}}):
            number, name = record["s"].split(" ", 1)
            self.assertTrue(1 <= int(number) <= 999)
            self.assertIn(name, streets)


class TestEmptyPools(unittest.TestCase):
    def _reference(self):
        base = load_reference_data()
        return ReferenceData(
            first_names=base.first_names,
            last_names=base.last_names,
            words=base.words,
            sentences=base.sentences,
            countries=(Country("DE", "Germany", "europe"), Country("FR", "France", "europe")),
            cities=(City("Berlin", "DE"), City("Munich", "DE")),
        )

    def test_filter_with_no_cities_raises_generation_error(self):
        with self.assertRaises(GenerationError) as cm:
            _records(
                {"addr": {"dataType": "object", "fields": {"city": {"dataType": "city", "countries": ["FR"]}}}},
                n=1,
                reference=self._reference(),
            )
        err = cm.exception
        self.assertEqual(err.path, "addr.city")
        self.assertIn("Field 'addr.city'", str(err))
        self.assertIn("no cities available", str(err))
        self.assertIn("Fix:", str(err))

    def test_missing_optional_table_raises_generation_error(self):
        with self.assertRaises(GenerationError) as cm:
            _records({"c": {"dataType": "currency"}}, n=1, reference=self._reference())
        self.assertIn("currency codes", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
