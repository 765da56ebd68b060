"""Tests for configuration module."""

from realty_site.config import (
    SITE_CONFIG,
    ApiConfig,
    SearchConfig,
    SiteSettings,
    StoreConfig,
    build_site_config,
    get_site_settings,
)


def test_site_config_exists():
    """Test that SITE_CONFIG dictionary is properly defined."""
    assert isinstance(SITE_CONFIG, dict)
    assert "site_name" in SITE_CONFIG
    assert "store" in SITE_CONFIG
    assert "search" in SITE_CONFIG
    assert "api" in SITE_CONFIG


def test_defaults_without_environment(monkeypatch):
    for name in (
        "SITE_NAME", "STORE_URL", "STORE_ANON_KEY", "STORE_BACKEND", "STORE_SEED_FILE",
        "STORE_TIMEOUT_SECONDS", "IMAGE_BUCKET", "SUGGESTION_MIN_CHARS",
        "FEATURED_FALLBACK_LIMIT", "MAX_PROPERTY_IMAGES", "API_HOST", "API_PORT", "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_site_settings(build_site_config())

    assert settings.site_name == "Realty Site"
    assert settings.store.backend == "rest"
    assert settings.store.timeout_seconds == 15.0
    assert settings.search.suggestion_min_chars == 3
    assert settings.search.featured_fallback_limit == 6
    assert settings.search.max_property_images == 10
    assert settings.api.port == 8000
    assert settings.api.cors_origins == ["*"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STORE_URL", "https://project.example.co/")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SUGGESTION_MIN_CHARS", "2")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example ,")

    settings = get_site_settings(build_site_config())

    assert settings.store.url == "https://project.example.co"
    assert settings.store.backend == "memory"
    assert settings.search.suggestion_min_chars == 2
    assert settings.api.cors_origins == ["https://a.example", "https://b.example"]


def test_site_settings_with_custom_values():
    """Test that SiteSettings fills in nested configs it was not given."""
    settings = SiteSettings(site_name="Imóveis Prime", search=SearchConfig(suggestion_min_chars=4))

    assert settings.search.suggestion_min_chars == 4
    assert isinstance(settings.store, StoreConfig)
    assert isinstance(settings.api, ApiConfig)
    assert settings.store.image_bucket == "properties"
