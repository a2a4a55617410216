"""Tests for config file loading and priority."""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from zipspan import config, runtime_config
from zipspan.errors import ConfigError


class TestConfigFileLoading(unittest.TestCase):
    """Test TOML config file loading."""

    def test_load_toml_config_basic(self):
        """Test loading a basic TOML config file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
            f.write("""
[model]
strict_trace_id = false

[logging]
debug = true
log_level = "info"
""")
            f.flush()

            try:
                loaded = config.load_toml_config(f.name)

                self.assertFalse(loaded["model"]["strict_trace_id"])
                self.assertTrue(loaded["logging"]["debug"])
                self.assertEqual(loaded["logging"]["log_level"], "info")
            finally:
                os.unlink(f.name)

    def test_load_toml_config_missing_file(self):
        """Test that loading missing file returns empty dict."""
        loaded = config.load_toml_config("/nonexistent/file.toml")
        self.assertEqual(loaded, {})

    def test_load_toml_config_invalid_toml(self):
        """Test that invalid TOML raises ConfigError."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
            f.write("invalid [toml content")
            f.flush()

            try:
                with self.assertRaises(ConfigError):
                    config.load_toml_config(f.name)
            finally:
                os.unlink(f.name)

    def test_find_config_file_current_directory(self):
        """Test finding config file in current directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "zipspan.toml"
            config_path.write_text("[logging]\ndebug = true")

            original_cwd = os.getcwd()
            try:
                os.chdir(tmpdir)

                found = config.find_config_file()
                self.assertIsNotNone(found)
                self.assertEqual(Path(found).name, "zipspan.toml")
            finally:
                os.chdir(original_cwd)

    def test_unknown_key_rejected(self):
        """Test that a misspelled key is reported instead of ignored."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
            f.write("[logging]\ndebgu = true\n")
            f.flush()

            try:
                with self.assertRaises(ConfigError):
                    config.load_config(f.name)
            finally:
                os.unlink(f.name)


class TestConfigPriority(unittest.TestCase):
    """Test configuration loading priority."""

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            cfg = config.load_config("/nonexistent/file.toml")

        self.assertFalse(cfg.debug)
        self.assertTrue(cfg.strict_trace_id)
        self.assertEqual(cfg.log_level, "WARNING")

    def test_env_override_config_file(self):
        """Test that environment variables override config file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
            f.write("[logging]\nlog_level = \"error\"\n")
            f.flush()

            try:
                with mock.patch.dict(os.environ, {"ZIPSPAN_LOG_LEVEL": "debug"}):
                    cfg = config.load_config(f.name)

                self.assertEqual(cfg.log_level, "DEBUG")
            finally:
                os.unlink(f.name)

    def test_overrides_win(self):
        with mock.patch.dict(os.environ, {"ZIPSPAN_DEBUG": "false"}):
            cfg = config.load_config("/nonexistent/file.toml", overrides={"debug": True})

        self.assertTrue(cfg.debug)

    def test_env_boolean_conversion(self):
        env = {"ZIPSPAN_DEBUG": "yes", "ZIPSPAN_STRICT_TRACE_ID": "0"}
        with mock.patch.dict(os.environ, env):
            self.assertEqual(
                config.load_config_from_env(), {"debug": "yes", "strict_trace_id": "0"}
            )
            cfg = config.load_config("/nonexistent/file.toml")

        self.assertTrue(cfg.debug)
        self.assertFalse(cfg.strict_trace_id)

    def test_invalid_values(self):
        with self.assertRaises(ConfigError):
            config.validate_config({"log_level": "loud"})
        with self.assertRaises(ConfigError):
            config.validate_config({"debug": "maybe"})


class TestApplyConfig(unittest.TestCase):
    """Test pushing settings into runtime state."""

    def tearDown(self):
        runtime_config.reset()
        logging.getLogger("zipspan").setLevel(logging.NOTSET)

    def test_apply_config(self):
        config.apply_config(
            config.validate_config({"debug": True, "strict_trace_id": False, "log_level": "debug"})
        )

        self.assertTrue(runtime_config.get_debug())
        self.assertFalse(runtime_config.get_strict_trace_id())
        self.assertEqual(logging.getLogger("zipspan").level, logging.DEBUG)

    def test_non_strict_trace_id_applies_to_builder(self):
        from zipspan import Span

        config.apply_config(config.validate_config({"strict_trace_id": False}))
        span = Span.builder().trace_id("463ac35c9f6413ad48485a3953bb6124").id("1").build()

        self.assertEqual(span.trace_id, "48485a3953bb6124")


if __name__ == "__main__":
    unittest.main()
