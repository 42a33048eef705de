from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class GeminiConnectionSetting(BaseSettings):
    token: Optional[str] = None
    model: str = Field(default="gemini-1.5-flash", description="chat model used when llm_engine is gemini")
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="gemini_connection_config_",
        extra="ignore",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.token)
