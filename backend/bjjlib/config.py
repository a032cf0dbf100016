from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Environment
    environment: str = "local"  # local, production

    # Application
    app_name: str = "BJJ Library API"
    debug: bool = False
    log_level: str = "INFO"  # DEBUG when debug is on
    api_prefix: str = "/api"

    # Database
    database_url: str = "sqlite:///./bjjlib.db"
    auto_create_tables: bool = True

    # Redis (empty disables caching)
    redis_url: str = "redis://localhost:6379/0"

    # Admin sessions
    admin_password: str = ""  # Empty disables admin login
    session_ttl_hours: int = 24
    session_cookie_name: str = "adminSessionId"

    # YouTube Data API (duration lookup only)
    youtube_api_key: str = ""

    # CORS
    cors_origins: list[str] = ["http://localhost:5000"]

    # Public site URL (sitemap links)
    site_url: str = "https://bjjlib.com"

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 1000

    # Thumbnail analysis
    thumbnail_allowed_hosts: list[str] = [
        "i.ytimg.com",
        "img.youtube.com",
        "i.vimeocdn.com",
        "vumbnail.com",
    ]
    thumbnail_cache_ttl_seconds: int = 86400
    thumbnail_fetch_timeout_seconds: int = 10

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.environment == "local"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


settings = Settings()
