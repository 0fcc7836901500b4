"""
Application configuration settings.
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - PostgreSQL for production, SQLite for local
    DATABASE_URL: str = ""  # PostgreSQL connection string (production)
    DATABASE_PATH: str = "data/water_meter.db"  # SQLite path (local fallback)
    USE_POSTGRES: bool = False  # Set to True to use PostgreSQL

    # Connection pool (PostgreSQL only)
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: float = 2.0  # seconds to wait for a free connection
    DB_POOL_RECYCLE: int = 1800

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Water Meter Analytics API"
    VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:4200",
        "http://127.0.0.1:4200",
    ]

    # Requests exceeding this are answered with 408
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 1000

    # Logging
    LOG_LEVEL: str = "INFO"

    # Client (dashboard data layer)
    API_BASE_URL: str = "http://localhost:3000"
    CLIENT_TIMEOUT_SECONDS: float = 10.0
    DASHBOARD_TIMEOUT_SECONDS: float = 15.0
    HEALTH_TIMEOUT_SECONDS: float = 5.0
    REFERENCE_CACHE_TTL_SECONDS: float = 300.0
    REFERENCE_RETRY_COUNT: int = 2
    REFERENCE_RETRY_DELAY_SECONDS: float = 2.0
    CHART_OUTPUT_DIR: str = "data/charts"

    @property
    def database_url(self) -> str:
        """Get database URL - PostgreSQL if configured, else SQLite."""
        if self.USE_POSTGRES and self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.DATABASE_PATH}"

    @property
    def is_postgres(self) -> bool:
        """Check if using PostgreSQL."""
        return self.USE_POSTGRES and bool(self.DATABASE_URL)

    @property
    def base_dir(self) -> Path:
        """Get base directory of the project."""
        return Path(__file__).parent.parent

    class Config:
        env_file = ".env"
        extra = "allow"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Create the SQLite fallback directory if it doesn't exist."""
    if not settings.is_postgres:
        Path(settings.DATABASE_PATH).parent.mkdir(parents=True, exist_ok=True)
