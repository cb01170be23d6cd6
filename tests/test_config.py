import dataclasses
import io
import logging
import unittest

from recordsmith.config import AppConfig, EngineConfig
from recordsmith.errors import is_actionable_message
from recordsmith.logging_setup import LOG_FORMAT, setup_logging


class TestEngineConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = EngineConfig()
        self.assertEqual(cfg.default_nullable_rate, 0.1)
        self.assertEqual((cfg.int_min, cfg.int_max), (0, 1000))
        self.assertEqual(cfg.float_precision, 2)
        self.assertEqual((cfg.max_schema_fields, cfg.max_total_items), (200, 10000))
        self.assertIsNone(cfg.seed)

    def test_frozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            EngineConfig().seed = 3

    def test_with_overrides(self):
        cfg = EngineConfig().with_overrides(seed=7, max_total_items=50)
        self.assertEqual((cfg.seed, cfg.max_total_items), (7, 50))
        with self.assertRaises(TypeError) as cm:
            EngineConfig().with_overrides(max_items=5)
        self.assertIn("max_items", str(cm.exception))


class TestAppConfig(unittest.TestCase):
    def test_defaults_from_empty_env(self):
        self.assertEqual(AppConfig.from_env({}), AppConfig())

    def test_reads_environment(self):
        cfg = AppConfig.from_env(
            {"RECORDSMITH_LOG_LEVEL": "debug", "RECORDSMITH_DEBUG": "yes", "RECORDSMITH_DEFAULT_COUNT": "25"}
        )
        self.assertEqual(cfg, AppConfig(debug=True, log_level="DEBUG", default_count=25))

    def test_invalid_values_are_actionable(self):
        bad_envs = (
            {"RECORDSMITH_LOG_LEVEL": "loud"},
            {"RECORDSMITH_DEBUG": "maybe"},
            {"RECORDSMITH_DEFAULT_COUNT": "ten"},
            {"RECORDSMITH_DEFAULT_COUNT": "0"},
        )
        for env in bad_envs:
            with self.subTest(env=env):
                with self.assertRaises(ValueError) as cm:
                    AppConfig.from_env(env)
                self.assertTrue(is_actionable_message(str(cm.exception)))
                self.assertIn(next(iter(env)), str(cm.exception))


class TestLoggingSetup(unittest.TestCase):
    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler.get_name() == "recordsmith":
                root.removeHandler(handler)
        root.setLevel(logging.WARNING)

    def test_handler_formats_lines(self):
        stream = io.StringIO()
        handler = setup_logging("DEBUG", stream=stream)
        self.assertEqual(handler.formatter._fmt, LOG_FORMAT)
        logging.getLogger("engine").debug("hello %s", "there")
        line = stream.getvalue().strip()
        self.assertTrue(line.endswith("| DEBUG | engine | hello there"), line)

    def test_repeat_calls_do_not_stack_handlers(self):
        setup_logging("INFO", stream=io.StringIO())
        setup_logging("WARNING", stream=io.StringIO())
        root = logging.getLogger()
        named = [h for h in root.handlers if h.get_name() == "recordsmith"]
        self.assertEqual(len(named), 1)
        self.assertEqual(root.level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
