import json
import tempfile
import unittest
from pathlib import Path

from recordsmith.errors import SchemaValidationError, is_actionable_message
from recordsmith.schema_io import load_schema_from_json, parse_schema, save_schema_to_json, schema_to_dict
from recordsmith.schema_model import FieldSpec

RAW = {
    "id": {"dataType": "uuid"},
    "name": {"dataType": "name", "lang": "zh", "nullable": True, "nullableRate": 0.25},
    "profile": {
        "dataType": "object",
        "fields": {
            "country": {"dataType": "country", "continents": ["asia"]},
            "city": {"dataType": "city", "basedOn": "country"},
        },
    },
    "scores": {"dataType": "array", "count": 4, "item": {"dataType": "float", "min": 0, "max": 1, "precision": 3}},
    "flags": {"dataType": "array", "data": ["x", {"y": 1}], "pickCount": 1},
}


class TestSchemaIO(unittest.TestCase):
    def test_decode_maps_structural_keys(self):
        schema = parse_schema(RAW)
        name = schema["name"]
        self.assertTrue(name.nullable)
        self.assertEqual(name.nullable_rate, 0.25)
        self.assertEqual(name.params, {"lang": "zh"})

        scores = schema["scores"]
        self.assertEqual(scores.count, 4)
        self.assertIsInstance(scores.item, FieldSpec)
        self.assertEqual(scores.item.params, {"min": 0, "max": 1, "precision": 3})

        flags = schema["flags"]
        self.assertEqual(flags.data, ["x", {"y": 1}])
        self.assertEqual(flags.pick_count, 1)
        self.assertEqual(list(schema["profile"].fields), ["country", "city"])

    def test_schema_to_dict_restores_raw_shape(self):
        self.assertEqual(schema_to_dict(parse_schema(RAW)), RAW)

    def test_save_and_load(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "schema.json"
            save_schema_to_json(parse_schema(RAW), str(path))
            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), RAW)
            loaded = load_schema_from_json(str(path))
        self.assertEqual(list(loaded), list(RAW))
        self.assertEqual(loaded["profile"].fields["city"].based_on, "country")

    def test_save_refuses_invalid_schema(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "schema.json"
            with self.assertRaises(SchemaValidationError):
                save_schema_to_json({"v": FieldSpec("int", params={"min": 5, "max": 1})}, str(path))
            self.assertFalse(path.exists())

    def test_bad_json_is_actionable(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.json"
            path.write_text('{"id": {"dataType": "uuid"', encoding="utf-8")
            with self.assertRaises(SchemaValidationError) as cm:
                load_schema_from_json(str(path))
        msg = str(cm.exception)
        self.assertIn("is not valid JSON", msg)
        self.assertTrue(is_actionable_message(msg))

    def test_non_object_nodes_rejected(self):
        with self.assertRaises(SchemaValidationError) as cm:
            parse_schema({"id": "uuid"})
        self.assertIn("Field 'id'", str(cm.exception))
        with self.assertRaises(SchemaValidationError):
            parse_schema(["not", "a", "mapping"])
        with self.assertRaises(SchemaValidationError) as cm:
            parse_schema({"o": {"dataType": "object", "fields": [1, 2]}})
        self.assertIn("Field 'o'", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
