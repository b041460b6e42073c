from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "orders"
    POSTGRES_USER: str = "orders"
    POSTGRES_PASSWORD: str = "orders"
    # Full SQLAlchemy URL; takes precedence over the POSTGRES_* parts
    DATABASE_URL: Optional[str] = None

    # Shared operator key and the session tokens issued for it
    APP_ACCESS_KEY: Optional[str] = None
    SESSION_SECRET: str = "change-me"
    SESSION_ALG: str = "HS256"
    SESSION_TTL_MINUTES: int = 12 * 60

    SERVICE_NAME: str = "isopod-orders"
    SERVICE_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"
    RUN_MIGRATIONS: bool = False
    EXPORT_FILENAME_PREFIX: str = "isopod_orders"
    # Calendar dates (ship date, export file name) follow the shop's clock
    SHOP_TIMEZONE: str = "Asia/Kolkata"

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()
