"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .parsers.options import DEFAULT_MAX_SIZE, JsonParseOptions


class Settings(BaseSettings):
    """jsonguard configuration — loaded from env vars / .env file.

    Only the CLI reads these; the parsing functions keep their fixed
    defaults unless options are passed explicitly.
    """

    model_config = SettingsConfigDict(env_prefix="JSONGUARD_", env_file=".env", extra="ignore")

    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0, description="Byte ceiling for a JSON document or NDJSON line")
    allow_prototype: bool = Field(default=False, description="Accept top-level __proto__/constructor/prototype keys")
    log_level: str = Field(default="WARNING", description="Root log level for the CLI")

    def parse_options(self) -> JsonParseOptions:
        return JsonParseOptions(max_size=self.max_size, allow_prototype=self.allow_prototype)


settings = Settings()
