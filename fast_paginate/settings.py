from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    ENVIRONMENT: str = "development"

    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    DB_ECHO: bool = False
    # Pool settings are ignored for SQLite URLs
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    # Pagination defaults
    DEFAULT_PAGE_SIZE: int = 15

    # Turns the deferred-join rewrite off; every call uses the standard
    # pagination primitive instead
    FAST_PAGINATE_ENABLED: bool = True

    # Query monitoring
    SLOW_QUERY_THRESHOLD_MS: int = 100

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str | None = None

    @field_validator("DEFAULT_PAGE_SIZE")
    @classmethod
    def validate_default_page_size(cls, v: int) -> int:
        """Reject page sizes that can never produce a page."""
        if v < 1:
            raise ValueError("DEFAULT_PAGE_SIZE must be a positive integer")
        return v

    @property
    def is_sqlite(self) -> bool:
        """Whether DATABASE_URL points at a SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")


app_settings = Settings()
