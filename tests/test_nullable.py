import math
import unittest

from recordsmith.config import EngineConfig
from recordsmith.engine import Engine
from recordsmith.schema_io import parse_schema

# One non-nullable descriptor per leaf dataType.
ALL_LEAF_FIELDS = {
    "int": {"dataType": "int"},
    "float": {"dataType": "float"},
    "string": {"dataType": "string", "kind": "paragraph", "paragraphs": 2},
    "boolean": {"dataType": "boolean"},
    "name": {"dataType": "name"},
    "email": {"dataType": "email", "basedOn": "name"},
    "phone": {"dataType": "phone"},
    "username": {"dataType": "username"},
    "url": {"dataType": "url"},
    "ip": {"dataType": "ip", "version": "v6"},
    "mac": {"dataType": "mac"},
    "uuid": {"dataType": "uuid"},
    "price": {"dataType": "price"},
    "currency": {"dataType": "currency"},
    "iban": {"dataType": "iban"},
    "date": {"dataType": "date"},
    "hash": {"dataType": "hash"},
    "country": {"dataType": "country"},
    "city": {"dataType": "city", "basedOn": "country"},
    "location": {"dataType": "location"},
    "zipCode": {"dataType": "zipCode"},
    "street": {"dataType": "street"},
    "cryptoAddress": {"dataType": "cryptoAddress"},
    "cryptoHash": {"dataType": "cryptoHash"},
    "color": {"dataType": "color"},
    "fileSize": {"dataType": "fileSize"},
    "fileName": {"dataType": "fileName"},
    "product": {"dataType": "product", "lang": "any"},
}


def _null_fraction(field, n, seed=5):
    engine = Engine(config=EngineConfig(seed=seed))
    records = engine.generate(parse_schema({"v": field}), n)
    return sum(1 for r in records if r["v"] is None) / n


class TestNullable(unittest.TestCase):
    def test_non_nullable_fields_never_null(self):
        engine = Engine(config=EngineConfig(seed=99))
        records = engine.generate(parse_schema(ALL_LEAF_FIELDS), 100)
        for record in records:
            for key, value in record.items():
                self.assertIsNotNone(value, f"Field '{key}' produced null while nullable is false")

    def test_rate_one_is_always_null(self):
        self.assertEqual(_null_fraction({"dataType": "uuid", "nullable": True, "nullableRate": 1.0}, 1000), 1.0)

    def test_rate_zero_is_never_null(self):
        self.assertEqual(_null_fraction({"dataType": "uuid", "nullable": True, "nullableRate": 0.0}, 1000), 0.0)

    def test_rate_is_ignored_when_not_nullable(self):
        self.assertEqual(_null_fraction({"dataType": "uuid", "nullableRate": 1.0}, 200), 0.0)

    def test_observed_rate_within_binomial_interval(self):
        n = 2000
        for rate in (0.1, 0.3, 0.75):
            with self.subTest(rate=rate):
                observed = _null_fraction({"dataType": "int", "nullable": True, "nullableRate": rate}, n)
                margin = 4 * math.sqrt(rate * (1 - rate) / n)
                self.assertLessEqual(abs(observed - rate), margin)

    def test_default_rate_applies_when_only_nullable_is_set(self):
        n = 3000
        observed = _null_fraction({"dataType": "int", "nullable": True}, n)
        margin = 4 * math.sqrt(0.1 * 0.9 / n)
        self.assertLessEqual(abs(observed - 0.1), margin)

    def test_default_rate_comes_from_config(self):
        engine = Engine(config=EngineConfig(seed=1, default_nullable_rate=1.0))
        records = engine.generate(parse_schema({"v": {"dataType": "int", "nullable": True}}), 50)
        self.assertTrue(all(r["v"] is None for r in records))

    def test_null_short_circuits_before_generator(self):
        calls = []
        engine = Engine(config=EngineConfig(seed=2))
        engine.register_generator("tracked", lambda spec, ctx: calls.append(1) or "x")
        schema = parse_schema(
            {"v": {"dataType": "tracked", "nullable": True, "nullableRate": 1.0}},
            known_types=engine.data_types,
        )
        records = engine.generate(schema, 25)
        self.assertEqual(calls, [])
        self.assertTrue(all(r["v"] is None for r in records))

    def test_nullable_object_and_array(self):
        schema = parse_schema(
            {
                "o": {"dataType": "object", "nullable": True, "nullableRate": 1.0, "fields": {"x": {"dataType": "int"}}},
                "a": {"dataType": "array", "nullable": True, "nullableRate": 1.0, "item": {"dataType": "int"}},
            }
        )
        for record in Engine().generate(schema, 10):
            self.assertIsNone(record["o"])
            self.assertIsNone(record["a"])


if __name__ == "__main__":
    unittest.main()
