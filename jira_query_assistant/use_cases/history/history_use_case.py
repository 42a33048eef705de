"""Browsing and follow-up actions over stored search history."""

from __future__ import annotations

import json
from typing import Any
from typing import List
from typing import Optional

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.api_schemas.search import HistorySearchResponse
from jira_query_assistant.entities.constants import StepName
from jira_query_assistant.entities.history import HistoryEntry
from jira_query_assistant.entities.history import IssueSnapshot
from jira_query_assistant.use_cases.interfaces.history_repository_interface import (
    HistoryRepositoryInterface,
)
from jira_query_assistant.use_cases.interfaces.query_assistant_interface import (
    QueryAssistantInterface,
)
from jira_query_assistant.utils.exceptions import AssistantNotConfiguredError
from jira_query_assistant.utils.exceptions import ExternalServiceError
from jira_query_assistant.utils.exceptions import HistoryEntryNotFoundError
from jira_query_assistant.utils.exceptions import InvalidCommandError

DEFAULT_HISTORY_LIMIT = 20
CONTEXT_ISSUE_LIMIT = 6
CONTEXT_RAW_LIMIT = 2000
CONTEXT_LIMIT = 4000


def truncate_text(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit]


def _raw_as_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, ensure_ascii=False, default=str)


def build_follow_up_context(entry: HistoryEntry) -> str:
    """Plain-text context for follow-up questions about a stored search."""
    lines: List[str] = []
    if entry.query:
        lines.append(f"Original query: {entry.query}")
    if entry.jql:
        lines.append(f"Executed JQL: {entry.jql}")
    if entry.analysis:
        lines.append(f"Analysis: {entry.analysis}")
    if entry.issues:
        lines.append("Issues:")
        for issue in entry.issues[:CONTEXT_ISSUE_LIMIT]:
            lines.append(f"- {issue.key}: {issue.title} ({issue.url})")
    raw = entry.find_step_result(StepName.EXECUTE_SEARCH.value)
    if raw:
        lines.append("Raw JSON:")
        lines.append(truncate_text(_raw_as_text(raw), CONTEXT_RAW_LIMIT))
    text = "\n".join(lines) + "\n" if lines else ""
    return truncate_text(text, CONTEXT_LIMIT)


def match_issues(entry: HistoryEntry, text: str) -> List[IssueSnapshot]:
    needle = (text or "").strip().lower()
    if not needle:
        return []
    return [
        issue
        for issue in entry.issues
        if needle in f"{issue.key} {issue.title} {issue.url}".lower()
    ]


class HistoryUseCase:
    def __init__(
        self,
        history_repository: HistoryRepositoryInterface,
        assistant: Optional[QueryAssistantInterface] = None,
    ):
        self.history_repository = history_repository
        self.assistant = assistant

    async def latest(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryEntry]:
        return await self.history_repository.latest(limit)

    async def get(self, entry_id: str) -> HistoryEntry:
        entry = await self.history_repository.get(entry_id)
        if entry is None:
            raise HistoryEntryNotFoundError(entry_id)
        return entry

    async def search(self, entry_id: str, text: str) -> HistorySearchResponse:
        entry = await self.get(entry_id)
        return HistorySearchResponse(entry=entry, matches=match_issues(entry, text))

    async def follow_up(self, entry_id: str, command: str) -> str:
        if self.assistant is None:
            raise AssistantNotConfiguredError()
        entry = await self.get(entry_id)
        command = (command or "").strip()
        if not command:
            raise InvalidCommandError("command is required")

        context = build_follow_up_context(entry)
        try:
            return await self.assistant.follow_up(context, command)
        except Exception as e:
            LOGGER.error(f"Follow-up on history entry {entry_id} failed: {e}", exc_info=True)
            raise ExternalServiceError(f"llm: {e}") from e
