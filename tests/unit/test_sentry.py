"""
Тесты интеграции Sentry
"""
import pytest

from custody.core.config import Config
from custody.utils.sentry import SERVICE_TAG, init_sentry


class TestInitSentry:
    """Тесты инициализации Sentry"""

    def test_disabled_without_dsn(self, mock_config, monkeypatch):
        """Тест: без DSN Sentry не инициализируется"""
        monkeypatch.setattr(Config, "SENTRY_DSN", "")
        assert init_sentry() is None

    def test_init_with_service_tags(self, mock_config, monkeypatch):
        """Тест: события помечаются тегами сервиса и режима расчетной сети"""
        sentry_sdk = pytest.importorskip("sentry_sdk")
        options = {}
        tags = {}
        monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: options.update(kwargs))
        monkeypatch.setattr(sentry_sdk, "set_tag", lambda key, value: tags.update({key: value}))
        monkeypatch.setattr(Config, "SENTRY_DSN", "https://key@sentry.test/1")
        monkeypatch.setattr(Config, "ENVIRONMENT", "staging")

        assert init_sentry() == "https://key@sentry.test/1"
        assert options["environment"] == "staging"
        assert options["send_default_pii"] is False
        assert tags == {"service": SERVICE_TAG, "settlement_mode": "dry_run", "asset_prefix": "ODOO"}

    def test_explicit_arguments_override_config(self, mock_config, monkeypatch):
        """Тест: аргументы важнее конфигурации"""
        sentry_sdk = pytest.importorskip("sentry_sdk")
        options = {}
        monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: options.update(kwargs))
        monkeypatch.setattr(sentry_sdk, "set_tag", lambda key, value: None)
        monkeypatch.setattr(Config, "SENTRY_DSN", "")

        assert init_sentry(dsn="https://other@sentry.test/2", environment="production")
        assert options["dsn"] == "https://other@sentry.test/2"
        assert options["environment"] == "production"
