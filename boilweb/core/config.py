"""Application configuration using pydantic settings with structured sections."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADDR = ":8777"


def parse_address(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host means all interfaces."""
    host, sep, port = addr.strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {addr!r}, expected [host]:port")
    number = int(port)
    if not 0 < number < 65536:
        raise ValueError(f"port out of range in listen address {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, number


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8777

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class DatabaseSettings(BaseModel):
    driver: str = "postgres"
    url: str = ""
    echo: bool = False


class AssetSettings(BaseModel):
    backend: Literal["package", "directory"] = "package"
    package: str = "boilweb"
    package_dir: str = "bundle"
    directory: Path = Path("boilweb/bundle")


class StaticSettings(BaseModel):
    public_prefix: str = "/s/"
    internal_prefix: str = "/static/"
    favicon_path: str = "static/favicon.ico"

    @field_validator("public_prefix", "internal_prefix")
    @classmethod
    def _slash_delimited(cls, value: str) -> str:
        if len(value) < 2 or not value.startswith("/") or not value.endswith("/"):
            raise ValueError("prefix must start and end with '/' and name a directory")
        return value


class TemplateSettings(BaseModel):
    pattern: str = "templates/*.html"
    index: str = "index.html"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="BOILWEB_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    project_name: str = "boilweb"
    prod: bool = Field(default=False, description="use minimized js, turn off debugging, etc")
    log_level: str = "INFO"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    assets: AssetSettings = AssetSettings()
    static: StaticSettings = StaticSettings()
    templates: TemplateSettings = TemplateSettings()

    @property
    def debug(self) -> bool:
        return not self.prod

    @property
    def database_url(self) -> str:
        return self.database.url

    def with_overrides(
        self,
        *,
        addr: Optional[str] = None,
        prod: Optional[bool] = None,
        sql_driver: Optional[str] = None,
        sql_db: Optional[str] = None,
    ) -> "Settings":
        """Return a copy with command line values applied; ``None`` keeps the current value."""
        update: dict[str, object] = {}
        if addr is not None:
            host, port = parse_address(addr)
            update["server"] = self.server.model_copy(update={"host": host, "port": port})
        if prod is not None:
            update["prod"] = prod
        database: dict[str, object] = {}
        if sql_driver is not None:
            database["driver"] = sql_driver
        if sql_db is not None:
            database["url"] = sql_db
        if database:
            update["database"] = self.database.model_copy(update=database)
        return self.model_copy(update=update)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
