"""Unit tests for configuration loading and the factory helpers in src/main.py."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src import main
from src.config.loader import load_config
from src.config.settings import Settings
from src.main import _build_all, _build_feedback_store, _lifespan, create_app
from src.providers.exposure.google_pollen_provider import GooglePollenProvider
from src.providers.feedback.memory_feedback_store import MemoryFeedbackStore
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from src.services.analysis_service import AnalysisService
from src.services.feedback_service import FeedbackService
from src.utils.errors import ConfigurationError


def _settings(**overrides) -> Settings:
    defaults = {
        "google_pollen_api_key": "",
        "store_backend": "memory",
        "auth_secret": "",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestBuildFeedbackStore:
    def test_sqlite_backend(self, tmp_path):
        store = _build_feedback_store({"backend": "sqlite", "db_path": str(tmp_path / "f.db")})
        assert isinstance(store, SQLiteFeedbackStore)
        assert store._db_path == tmp_path / "f.db"

    def test_memory_backend_is_case_insensitive(self):
        assert isinstance(_build_feedback_store({"backend": "Memory"}), MemoryFeedbackStore)

    def test_unknown_backend_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown store backend"):
            _build_feedback_store({"backend": "firestore"})


class TestBuildAll:
    @pytest.mark.asyncio
    async def test_wires_every_component(self):
        components = _build_all(
            _settings(auth_secret="s3cret"),
            config={"exposure": {"info_fields": ["plantInfo"]}, "store": {"backend": "memory"}},
        )
        try:
            assert isinstance(components["feedback_store"], MemoryFeedbackStore)
            assert isinstance(components["exposure_provider"], GooglePollenProvider)
            assert isinstance(components["feedback_service"], FeedbackService)
            assert isinstance(components["analysis_service"], AnalysisService)
            assert components["auth_secret"] == "s3cret"
            assert components["exposure_provider"].is_available() is False
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_reads_merged_store_and_exposure_sections(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("exposure:\n  info_fields: [plantInfo]\n")
        app_settings = _settings(
            store_backend="sqlite",
            feedback_db_path=str(tmp_path / "merged.db"),
            pollen_api_url="https://pollen.example/forecast",
            pollen_forecast_days=3,
            http_timeout=4.0,
        )

        components = _build_all(app_settings, config=load_config(str(config_file), settings=app_settings))
        try:
            store = components["feedback_store"]
            provider = components["exposure_provider"]
            assert isinstance(store, SQLiteFeedbackStore)
            assert store._db_path == tmp_path / "merged.db"
            assert provider._api_url == "https://pollen.example/forecast"
            assert provider._days == 3
            assert provider._info_fields == ("plantInfo",)
            assert components["http_client"].timeout.read == 4.0
        finally:
            await components["http_client"].aclose()


class TestLifespan:
    @pytest.fixture
    def owned_components(self, monkeypatch):
        http_client = MagicMock()
        http_client.aclose = AsyncMock()
        store = MemoryFeedbackStore()
        components = {
            "http_client": http_client,
            "feedback_store": store,
            "feedback_service": MagicMock(),
            "analysis_service": MagicMock(),
            "auth_secret": "",
        }
        monkeypatch.setattr(main, "_build_all", lambda app_settings: components)
        return components

    def test_http_client_closed_on_shutdown(self, owned_components):
        with TestClient(create_app(app_settings=_settings())):
            owned_components["http_client"].aclose.assert_not_awaited()
        owned_components["http_client"].aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_http_client_closed_when_serving_fails(self, owned_components):
        application = create_app(app_settings=_settings())

        with pytest.raises(RuntimeError, match="interrupted"):
            async with _lifespan(application):
                raise RuntimeError("interrupted")

        owned_components["http_client"].aclose.assert_awaited_once()

    def test_injected_components_are_left_open(self):
        http_client = MagicMock()
        http_client.aclose = AsyncMock()
        components = {"http_client": http_client, "feedback_store": MemoryFeedbackStore()}

        with TestClient(create_app(app_settings=_settings(), components=components)):
            pass

        http_client.aclose.assert_not_awaited()


class TestLoadConfig:
    def test_yaml_values_merged_with_settings(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "exposure:\n"
            "  info_fields: [plantInfo]\n"
            "  forecast_days: 5\n"
            "store:\n"
            "  backend: sqlite\n"
        )

        config = load_config(
            str(config_file),
            settings=_settings(store_backend="memory", pollen_forecast_days=2),
        )

        assert config["exposure"]["info_fields"] == ["plantInfo"]
        assert config["exposure"]["forecast_days"] == 2
        assert config["store"]["backend"] == "memory"

    def test_missing_file_uses_settings_only(self, tmp_path):
        config = load_config(
            str(tmp_path / "absent.yaml"),
            settings=_settings(
                feedback_db_path="elsewhere.db",
                http_timeout=7.5,
                pollen_api_url="https://pollen.example/forecast",
                pollen_forecast_days=1,
            ),
        )
        assert config == {
            "exposure": {
                "api_url": "https://pollen.example/forecast",
                "forecast_days": 1,
                "timeout": 7.5,
            },
            "store": {"backend": "memory", "db_path": "elsewhere.db"},
        }

    def test_repository_config_parses(self, project_root):
        config = load_config(str(project_root / "config" / "config.yaml"), settings=_settings())
        assert config["exposure"]["info_fields"] == ["pollenTypeInfo", "plantInfo"]


class TestSettings:
    def test_cors_origins_split(self):
        settings = _settings(cors_allowed_origins="https://a.example, https://b.example,")
        assert settings.cors_origins() == ["https://a.example", "https://b.example"]

    def test_pollen_lookup_enabled(self):
        assert _settings(google_pollen_api_key="k").pollen_lookup_enabled() is True
        assert _settings().pollen_lookup_enabled() is False
