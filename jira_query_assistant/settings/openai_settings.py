from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from jira_query_assistant.utils.pydantic_advanced_settings import CustomizedSettings


class OpenAISettings(CustomizedSettings):
    token: Optional[str] = Field(default=None, description="token of openai")
    model: str = Field(default="gpt-4o-mini", description="chat model used for JQL and summaries")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="openai_",
        extra="ignore",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.token)
