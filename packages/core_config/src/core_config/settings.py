from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
from core_config.constants import (
    DEFAULT_DEPTH,
    DEFAULT_MAX_ARRAY_LENGTH,
    DEFAULT_REMOVE_FIELDS,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = Field(default="dev", alias="ENVIRONMENT")
    service_log_level: str = Field(default="INFO", alias="SERVICE_LOG_LEVEL")

    # Decorator defaults (merged into DecoratorConfig on first use / reset)
    decorator_debug: bool = Field(default=True, alias="DECORATOR_DEBUG")
    decorator_depth: Optional[int] = Field(default=DEFAULT_DEPTH, alias="DECORATOR_DEPTH")
    decorator_max_array_length: int = Field(default=DEFAULT_MAX_ARRAY_LENGTH, alias="DECORATOR_MAX_ARRAY_LENGTH")

    # Accepts a comma string via env, e.g. DECORATOR_REMOVE_FIELDS="password,token,secret"
    decorator_remove_fields_raw: str = Field(
        default=",".join(sorted(DEFAULT_REMOVE_FIELDS)), alias="DECORATOR_REMOVE_FIELDS"
    )

    @property
    def decorator_remove_fields(self) -> frozenset[str]:  # noqa: D401
        """Redacted field names, parsed from the comma separated env value."""
        return frozenset(x.strip() for x in (self.decorator_remove_fields_raw or "").split(",") if x.strip())


def get_settings() -> "Settings":
    return Settings()  # type: ignore
