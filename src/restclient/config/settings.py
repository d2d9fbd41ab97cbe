from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_log_level(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError('log_level must be a non-empty string')
    level = value.strip().upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f'unknown log level {value!r}')
    return level


def _parse_base_url(value: Any) -> str | None:
    if value in (None, ''):
        return None
    return str(value).strip()


LogLevel = Annotated[str, BeforeValidator(_parse_log_level)]
OptionalBaseURL = Annotated[str | None, BeforeValidator(_parse_base_url)]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_prefix='RESTCLIENT_',
        extra='ignore',
    )

    base_url: OptionalBaseURL = None
    timeout_seconds: Annotated[float, Field(gt=0)] = 10.0
    log_level: LogLevel = 'INFO'


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
