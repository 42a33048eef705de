from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from jira_query_assistant.entities.intent import IntentKeywords
from jira_query_assistant.utils.pydantic_advanced_settings import CustomizedSettings


class QuerySettings(CustomizedSettings):
    data_dir: Path = Field(default=Path("./data"), description="history and phrase storage")
    request_timeout_seconds: float = Field(
        default=120.0,
        description="deadline for a whole search pipeline run",
    )
    intent_keywords: IntentKeywords = Field(default_factory=IntentKeywords)
    llm_engine: Literal["openai", "gemini"] = Field(
        default="openai",
        description="chat engine behind JQL derivation, summaries and follow-ups",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="query_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @property
    def history_file(self) -> Path:
        return self.data_dir / "history.json"

    @property
    def phrases_file(self) -> Path:
        return self.data_dir / "phrases.json"
