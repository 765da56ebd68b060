"""Configuration module for the realty site."""

from .site_config import (
    SITE_CONFIG,
    SiteSettings,
    StoreConfig,
    SearchConfig,
    ApiConfig,
    build_site_config,
    get_site_settings,
)

__all__ = [
    'SITE_CONFIG',
    'SiteSettings',
    'StoreConfig',
    'SearchConfig',
    'ApiConfig',
    'build_site_config',
    'get_site_settings',
]
