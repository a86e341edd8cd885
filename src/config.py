# src/config.py

from functools import lru_cache
from typing import List, Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """
    Central application settings (Pydantic v2).

    - Aliases match the .env keys of the deployment:
      APP_NAME, ENV, PORT, DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD, DB_SSL
    - DATABASE_URL, when set, wins over the discrete DB_* keys.
    """

    # ------------------------------------------------------------------------------------
    # App / API
    # ------------------------------------------------------------------------------------
    PROJECT_NAME: str = Field(default="multicrm-backend", alias="APP_NAME")
    ENVIRONMENT: str = Field(default="dev", alias="ENV")  # dev|staging|prod
    PROJECT_VERSION: str = Field(default="1.0.0")
    SERVER_HOST: str = Field(default="0.0.0.0", alias="HOST")
    SERVER_PORT: int = Field(default=3001, alias="PORT")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: Optional[str] = Field(default=None, description="json | console")

    # ------------------------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------------------------
    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy URL (postgresql+asyncpg); overrides DB_* when set",
    )
    TEST_DATABASE_URL: Optional[str] = Field(default=None)
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=5432)
    DB_NAME: str = Field(default="multicrm")
    DB_USER: str = Field(default="postgres")
    DB_PASSWORD: str = Field(default="password")
    DB_SSL: Optional[bool] = Field(default=None, description="Defaults to on in prod")

    # Master (registry) pool
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)
    # Per-tenant pools; kept small since there is one per tenant
    TENANT_POOL_SIZE: int = Field(default=2)
    TENANT_MAX_OVERFLOW: int = Field(default=5)

    DB_POOL_TIMEOUT: int = Field(default=30, description="Seconds to wait for a pooled connection")
    DB_POOL_RECYCLE: int = Field(default=3600)
    DB_CONNECT_TIMEOUT: int = Field(default=10)
    DB_STATEMENT_TIMEOUT_MS: int = Field(default=30000)

    # ------------------------------------------------------------------------------------
    # JWT (carried for the auth layer; nothing signs tokens yet)
    # ------------------------------------------------------------------------------------
    JWT_SECRET: str = Field(default="default-secret-change-in-production")
    JWT_EXPIRES_IN: str = Field(default="7d")

    # ------------------------------------------------------------------------------------
    # CORS / Web
    # ------------------------------------------------------------------------------------
    BACKEND_CORS_ORIGINS: Union[List[str], str] = Field(default="*")

    # ------------------------------------------------------------------------------------
    # Feature Flags / Misc
    # ------------------------------------------------------------------------------------
    TESTING: bool = Field(default=False)

    # ------------------------------------------------------------------------------------
    # Helper properties
    # ------------------------------------------------------------------------------------
    @property
    def is_dev(self) -> bool:
        return self.ENVIRONMENT.lower() in {"dev", "development", "local"}

    @property
    def is_staging(self) -> bool:
        return self.ENVIRONMENT.lower() in {"stage", "staging"}

    @property
    def is_prod(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    @property
    def log_format(self) -> str:
        if self.LOG_FORMAT in ("json", "console"):
            return self.LOG_FORMAT
        return "console" if self.is_dev else "json"

    @property
    def database_ssl(self) -> bool:
        if self.DB_SSL is not None:
            return self.DB_SSL
        return self.is_prod

    def cors_origins(self) -> List[str]:
        if isinstance(self.BACKEND_CORS_ORIGINS, list):
            return self.BACKEND_CORS_ORIGINS
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            return [o.strip() for o in self.BACKEND_CORS_ORIGINS.split(",") if o.strip()]
        return []

    @property
    def effective_database_url(self) -> URL:
        raw = self.TEST_DATABASE_URL if (self.TESTING and self.TEST_DATABASE_URL) else self.DATABASE_URL
        if raw:
            url = make_url(raw)
            if url.drivername in ("postgresql", "postgres"):
                url = url.set(drivername="postgresql+asyncpg")
            return url
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    # ------------------------------------------------------------------------------------
    # Pydantic v2 settings config
    # ------------------------------------------------------------------------------------
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "populate_by_name": True,   # enable aliases
        "extra": "ignore",          # don't crash on unrelated env keys
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
