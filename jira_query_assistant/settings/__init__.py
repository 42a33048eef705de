from __future__ import annotations

from jira_query_assistant.settings.gemini_settings import GeminiConnectionSetting
from jira_query_assistant.settings.jira_board_config import JiraBoardSettings
from jira_query_assistant.settings.jira_settings import JiraConnectionSettings
from jira_query_assistant.settings.openai_settings import OpenAISettings
from jira_query_assistant.settings.query_settings import QuerySettings

__all__ = [
    "GeminiConnectionSetting",
    "JiraBoardSettings",
    "JiraConnectionSettings",
    "OpenAISettings",
    "QuerySettings",
]
