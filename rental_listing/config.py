"""Application configuration via environment variables.

Default values are intended for local development only.
Production deployments should override via .env file or environment variables.

Security considerations:
- search_api_key: Store securely, never commit to version control
- api_host: Consider restricting to specific IPs in production
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # External machine search index
    search_api_url: str = "https://kimber-rubbl-search.search.windows.net"
    search_api_key: str | None = None
    search_index: str = "machines"
    search_api_version: str = "2020-06-30"
    search_timeout: float = 30.0
    search_max_retries: int = 3
    search_retry_base_delay: float = 0.25
    search_cache_ttl: float = 300.0

    # Service area
    service_city: str = "Lafayette"
    service_state: str = "LA"
    service_latitude: float = 30.2241
    service_longitude: float = -92.0198
    service_radius_miles: float = 50.0

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 9019

    # Listing
    default_page_size: int = 9
    listing_fetch_limit: int = 200

    @property
    def search_url(self) -> str:
        return f"{self.search_api_url.rstrip('/')}/indexes/{self.search_index}/docs"


settings = Settings()
