from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    log_level: str = Field("INFO", alias="BILLSPLIT_LOG_LEVEL")
    log_format: Literal["json", "console"] = Field("json", alias="BILLSPLIT_LOG_FORMAT")
    max_share_weight: Decimal = Field(Decimal("100"), gt=0, alias="BILLSPLIT_MAX_SHARE_WEIGHT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
