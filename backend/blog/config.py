from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Application settings
    ENV: str = "dev"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database settings
    DATABASE_URL: str = "sqlite:///./blog.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Ingestion
    BULK_ATOMIC: bool = False

    # Presentation
    STATIC_DIR: Optional[str] = None

    # Rate limiting (limits syntax: "<count>/<n> <unit>")
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/15 minutes"
    RATE_LIMIT_API: str = "10/15 minutes"
    RATE_LIMIT_POST: str = "20/15 minutes"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

settings = Settings()
