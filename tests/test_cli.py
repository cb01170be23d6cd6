import json
import logging
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from recordsmith.cli import EXIT_GENERATION, EXIT_INVALID, app

SCHEMA = {
    "id": {"dataType": "uuid"},
    "name": {"dataType": "name", "lang": "en"},
    "email": {"dataType": "email", "basedOn": "name"},
    "tags": {"dataType": "array", "data": ["a", "b", "c"], "pickCount": 2},
}


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler.get_name() == "recordsmith":
                root.removeHandler(handler)
        self._tmp.cleanup()

    def _schema_file(self, data, name="schema.json"):
        path = self.tmp / name
        path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
        return str(path)

    def _invoke(self, *args):
        return self.runner.invoke(app, list(args), env={"RECORDSMITH_LOG_LEVEL": "WARNING"})

    def test_generate_prints_json_array(self):
        result = self._invoke("generate", self._schema_file(SCHEMA), "--count", "3", "--log-level", "WARNING")
        self.assertEqual(result.exit_code, 0, result.output)
        records = json.loads(result.stdout)
        self.assertEqual(len(records), 3)
        self.assertEqual(list(records[0]), ["id", "name", "email", "tags"])

    def test_generate_with_seed_is_repeatable(self):
        path = self._schema_file(SCHEMA)
        first = self._invoke("generate", path, "-n", "4", "--seed", "9", "--log-level", "WARNING")
        second = self._invoke("generate", path, "-n", "4", "--seed", "9", "--log-level", "WARNING")
        self.assertEqual(first.exit_code, 0, first.output)
        self.assertEqual(json.loads(first.stdout), json.loads(second.stdout))

    def test_generate_to_output_file(self):
        out = self.tmp / "out.json"
        result = self._invoke(
            "generate", self._schema_file(SCHEMA), "-n", "2", "--indent", "0", "-o", str(out), "--log-level", "WARNING"
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(len(json.loads(out.read_text(encoding="utf-8"))), 2)

    def test_invalid_schema_exits_with_validation_code(self):
        path = self._schema_file({"age": {"dataType": "int", "min": 9, "max": 1}})
        result = self._invoke("generate", path, "--log-level", "WARNING")
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("Field 'age'", result.output)
        self.assertIn("Fix:", result.output)

    def test_limit_breach_exits_with_validation_code(self):
        path = self._schema_file({"vals": {"dataType": "array", "count": 100, "item": {"dataType": "int"}}})
        result = self._invoke("generate", path, "-n", "150", "--log-level", "WARNING")
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("15000", result.output)

    def test_malformed_json_exits_with_validation_code(self):
        result = self._invoke("generate", self._schema_file("{not json"), "--log-level", "WARNING")
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("is not valid JSON", result.output)

    def test_generation_error_code_constant(self):
        self.assertEqual(EXIT_GENERATION, 3)

    def test_validate_reports_counts(self):
        schema = {
            "id": {"dataType": "uuid"},
            "rows": {"dataType": "array", "count": 5, "item": {"dataType": "int"}},
        }
        result = self._invoke("validate", self._schema_file(schema), "-n", "2")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("OK fields=3 items=12", result.stdout)

    def test_types_lists_every_builtin(self):
        result = self._invoke("types")
        self.assertEqual(result.exit_code, 0, result.output)
        for tag in ("int", "cryptoAddress", "fileName", "object", "array"):
            self.assertIn(tag, result.stdout)
        self.assertIn("nullableRate", result.stdout)

    def test_bad_environment_exits_with_validation_code(self):
        result = self.runner.invoke(
            app, ["validate", self._schema_file(SCHEMA)], env={"RECORDSMITH_DEFAULT_COUNT": "lots"}
        )
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("RECORDSMITH_DEFAULT_COUNT", result.output)

    def test_missing_schema_file_is_usage_error(self):
        result = self._invoke("generate", str(self.tmp / "nope.json"))
        self.assertNotEqual(result.exit_code, 0)


if __name__ == "__main__":
    unittest.main()
