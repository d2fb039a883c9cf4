"""Tests for component wiring at the entry point."""
import unittest
from dataclasses import replace
from unittest import mock

from smsflow import main as main_module
from smsflow.config import AppSettings, Config
from smsflow.store import XlsDBStore, build_store


class TestWiring(unittest.TestCase):
    """Test store selection and orchestrator construction."""

    def setUp(self):
        self.settings = AppSettings.load()

    def test_development_uses_dev_url(self):
        store = build_store(Config(sheet_id="s", sheet_name="t"), self.settings)
        self.assertIsInstance(store, XlsDBStore)
        self.assertEqual(store.base_url, "http://localhost:5050/xlsDB")

    def test_production_prefers_configured_url(self):
        config = Config(sheet_id="s", sheet_name="t", environment="production", xlsdb_prod_url="https://xls.example.com/xlsDB")
        store = build_store(config, self.settings)
        self.assertEqual(store.base_url, "https://xls.example.com/xlsDB")

    def test_sheets_backend_requires_credentials(self):
        settings = replace(self.settings, store_backend="sheets")
        with self.assertRaises(ValueError):
            build_store(Config(sheet_id="s", sheet_name="t"), settings)

    def test_build_orchestrator_without_api_key(self):
        config = Config(sheet_id="s", sheet_name="t")
        orchestrator = main_module.build_orchestrator(config, self.settings)

        self.assertIsNone(orchestrator.classifier.client)
        self.assertEqual(orchestrator.confidence_threshold, 0.5)
        self.assertEqual(orchestrator.duplicate_guard.window.total_seconds(), 60)
        self.assertIs(orchestrator.duplicate_guard.store, orchestrator.store)

    def test_check_config_strict_mode_fails(self):
        env = {"NODE_ENV": "production"}
        with mock.patch.dict("os.environ", env, clear=True), \
                mock.patch.object(main_module, "load_dotenv"):
            self.assertEqual(main_module.check_config_command(), 1)

    def test_check_config_development_passes(self):
        with mock.patch.dict("os.environ", {}, clear=True), \
                mock.patch.object(main_module, "load_dotenv"):
            self.assertEqual(main_module.check_config_command(), 0)


if __name__ == "__main__":
    unittest.main()
