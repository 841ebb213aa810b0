"""
config.py
ZONE_API_* settings for the zones service: HTTP bind address, the Mongo
connection (URI, database, pool sizes, startup retry budget), CORS origins
and log level. Values come from the environment or a local .env file.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", alias="ZONE_API_HOST")
    port: int = Field(default=8000, alias="ZONE_API_PORT")

    mongo_uri: str = Field(default="mongodb://127.0.0.1:27017", alias="ZONE_API_MONGO_URI")
    mongo_db: str = Field(default="zones", alias="ZONE_API_MONGO_DB")
    mongo_min_pool_size: int = Field(default=0, alias="ZONE_API_MONGO_MIN_POOL_SIZE")
    mongo_max_pool_size: int = Field(default=100, alias="ZONE_API_MONGO_MAX_POOL_SIZE")
    mongo_connect_attempts: int = Field(default=8, alias="ZONE_API_MONGO_CONNECT_ATTEMPTS")
    mongo_connect_backoff_max_s: float = Field(default=6.0, alias="ZONE_API_MONGO_CONNECT_BACKOFF_MAX_S")

    cors_allow_origins: str = Field(default="*", alias="ZONE_API_CORS_ALLOW_ORIGINS")
    log_level: str = Field(default="INFO", alias="ZONE_API_LOG_LEVEL")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


settings = Settings()
