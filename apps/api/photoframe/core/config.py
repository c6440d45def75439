from collections.abc import Callable, Sequence
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

SettingsSourceCallable = Callable[[], dict[str, Any]]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Photoframe API"
    redis_url: str = ""
    cors_origins: list[str] = ["http://localhost:3000"]

    cache_ttl_seconds: int = 3600
    cache_socket_timeout_seconds: float = 0.3

    listing_timeout_seconds: float = 10.0
    listing_retries: int = 3

    default_album_name: str = "Google Photos Shared Album"

    brightness_enabled: bool = False
    brightness_timeout_seconds: float = 1.0
    brightness_edge_fraction: float = 0.1

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Sequence[str] | str) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return list(value)

    @field_validator("brightness_edge_fraction")
    @classmethod
    def check_edge_fraction(cls, value: float) -> float:
        if not 0 < value <= 0.5:
            raise ValueError("brightness_edge_fraction must be in (0, 0.5]")
        return value

    @classmethod
    def settings_customise_sources(  # type: ignore[override]
        cls: type["Settings"],
        settings_cls: type["Settings"],
        init_settings: SettingsSourceCallable,
        env_settings: SettingsSourceCallable,
        dotenv_settings: SettingsSourceCallable,
        file_secret_settings: SettingsSourceCallable,
    ) -> tuple[SettingsSourceCallable, ...]:
        class CorsEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name: str, field: Any, value: Any) -> Any:
                if field_name == "cors_origins" and isinstance(value, str):
                    return value
                return super().decode_complex_value(field_name, field, value)

        return (
            init_settings,
            CorsEnvSettingsSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
