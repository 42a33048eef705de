from __future__ import annotations

from jira_query_assistant.adapters.ai_models.ai_agents.prompts.query_prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    FOLLOW_UP_SYSTEM_PROMPT,
    JQL_SYSTEM_PROMPT,
    analysis_prompt,
    follow_up_prompt,
    jql_prompt,
)

__all__ = [
    "ANALYSIS_SYSTEM_PROMPT",
    "FOLLOW_UP_SYSTEM_PROMPT",
    "JQL_SYSTEM_PROMPT",
    "analysis_prompt",
    "follow_up_prompt",
    "jql_prompt",
]
