"""Site configuration settings for the realty site."""

from dataclasses import dataclass, field
from typing import Any, Dict, List
import os


@dataclass
class StoreConfig:
    """External data store connection configuration."""
    url: str = "http://localhost:54321"
    anon_key: str = ""
    backend: str = "rest"
    seed_file: str = ""
    timeout_seconds: float = 15.0
    image_bucket: str = "properties"


@dataclass
class SearchConfig:
    """Search form behavior configuration."""
    suggestion_min_chars: int = 3
    featured_fallback_limit: int = 6
    max_property_images: int = 10


@dataclass
class ApiConfig:
    """HTTP API configuration."""
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class SiteSettings:
    """Main site configuration settings."""
    site_name: str = "Realty Site"
    store: StoreConfig = None
    search: SearchConfig = None
    api: ApiConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.store is None:
            self.store = StoreConfig()
        if self.search is None:
            self.search = SearchConfig()
        if self.api is None:
            self.api = ApiConfig()


def build_site_config() -> Dict[str, Any]:
    """Read site configuration from the environment."""
    return {
        "site_name": os.getenv("SITE_NAME", "Realty Site"),
        "store": {
            "url": os.getenv("STORE_URL", "http://localhost:54321").rstrip("/"),
            "anon_key": os.getenv("STORE_ANON_KEY", ""),
            "backend": os.getenv("STORE_BACKEND", "rest"),
            "seed_file": os.getenv("STORE_SEED_FILE", ""),
            "timeout_seconds": float(os.getenv("STORE_TIMEOUT_SECONDS", "15")),
            "image_bucket": os.getenv("IMAGE_BUCKET", "properties"),
        },
        "search": {
            "suggestion_min_chars": int(os.getenv("SUGGESTION_MIN_CHARS", "3")),
            "featured_fallback_limit": int(os.getenv("FEATURED_FALLBACK_LIMIT", "6")),
            "max_property_images": int(os.getenv("MAX_PROPERTY_IMAGES", "10")),
        },
        "api": {
            "host": os.getenv("API_HOST", "127.0.0.1"),
            "port": int(os.getenv("API_PORT", "8000")),
            "cors_origins": [
                origin.strip()
                for origin in os.getenv("CORS_ORIGINS", "*").split(",")
                if origin.strip()
            ],
        },
    }


# Default site configuration
SITE_CONFIG = build_site_config()


def get_site_settings(config: Dict[str, Any] = None) -> SiteSettings:
    """Get site settings from configuration."""
    config = config if config is not None else SITE_CONFIG
    return SiteSettings(
        site_name=config["site_name"],
        store=StoreConfig(**config["store"]),
        search=SearchConfig(**config["search"]),
        api=ApiConfig(**config["api"]),
    )
