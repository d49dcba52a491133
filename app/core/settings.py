from __future__ import annotations

from typing import Annotated, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Încarcă variabilele din .env (pe host). În Docker vin din env_file/environment.
load_dotenv()


class Settings(BaseSettings):
    # App
    APP_TITLE: str = "products-api"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "API pentru gestionarea produselor."
    LOG_LEVEL: str = "INFO"
    ROOT_PATH: Optional[str] = None
    DISABLE_DOCS: bool = False
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default_factory=list)
    TRUSTED_HOSTS: Annotated[List[str], NoDecode] = Field(default_factory=list)
    MAX_BODY_SIZE_BYTES: int = 0  # 0 = dezactivat

    # DB
    DATABASE_URL: str = Field("sqlite:///./app.db", description="postgresql+psycopg://appuser:<PASS>@db:5432/appdb")
    DB_SCHEMA: Optional[str] = None
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 1800  # sec (30 min)
    DB_POOL_TIMEOUT: int = 30    # sec
    DB_CREATE_SCHEMA_IF_MISSING: bool = False
    # Fără migrații: tabelele se creează la pornire
    SQLALCHEMY_CREATE_ALL: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("CORS_ORIGINS", "TRUSTED_HOSTS", mode="before")
    @classmethod
    def _split_csv(cls, v):
        # "http://localhost:3000,https://example.com" -> listă
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("ROOT_PATH", "DB_SCHEMA", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def _database_url_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("DATABASE_URL este gol. Setează o valoare validă.")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
