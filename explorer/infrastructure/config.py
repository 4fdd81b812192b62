"""Application configuration.

Loads settings from environment variables (prefixed with `EXPLORER_`)
with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Catalog sources: http(s) URLs or local file paths
    base_data_source: str = "data/base.json"
    full_data_source: str = "data/full.json"
    fetch_timeout: float = 30.0

    # Catalog
    default_foundation: str = ""
    maturity_order: list[str] = ["graduated", "incubating", "sandbox"]

    # Search
    search_max_results: int = 30

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "EXPLORER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
