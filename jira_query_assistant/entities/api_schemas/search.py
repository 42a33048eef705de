"""API schema models for the search pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from jira_query_assistant.entities.history import HistoryEntry, IssueSnapshot, Phrase, PipelineStep


class SearchRequest(BaseModel):
    """Search request as received from the client.

    Args:
        query: Natural language request or partial JQL
        jql: Explicit JQL override, used verbatim
        max_results: Result limit, clamped to 1..300
        fields: Jira fields to return
        projects: Project keys to restrict the search to
        users: Logins used as assignees, reporters or worklog authors depending on intent
        dry_run: Return the resolved JQL without calling Jira
        analysis: Ask the LLM to summarize the results
        sprint_id: Explicit sprint to take the date window from
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    query: str = Field(default="", description="Natural language request or JQL")
    jql: str = Field(default="", description="Explicit JQL override")
    max_results: int = Field(default=0, alias="maxResults", description="Result limit")
    fields: List[str] = Field(default_factory=list, description="Jira fields to return")
    projects: List[str] = Field(default_factory=list, description="Project keys")
    users: List[str] = Field(default_factory=list, description="User logins")
    dry_run: bool = Field(default=False, alias="dryRun", description="Return the JQL only")
    analysis: bool = Field(default=False, description="Summarize results with the LLM")
    sprint_id: int = Field(default=0, alias="sprintId", description="Explicit sprint id")


class IssueLink(IssueSnapshot):
    """Issue key, summary and browse URL extracted from a search payload."""


class SearchResult(BaseModel):
    """Response of the search endpoint.

    Args:
        jql: Final query sent (or, on dry run, that would be sent) to Jira
        raw: Raw Jira search payload
        history: Latest history entries, newest first
        executed_at: Execution timestamp
        analysis: Worklog total or LLM summary
        total: Total number of matching issues reported by Jira
        issues: Issue links
        steps: Pipeline steps recorded for this run
        history_id: Identifier of the stored history entry
        intents: Intent flags derived for the request
    """
    model_config = ConfigDict(populate_by_name=True)

    jql: str
    raw: Any = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)
    executed_at: datetime = Field(alias="executedAt")
    analysis: str = ""
    total: int = 0
    issues: List[IssueLink] = Field(default_factory=list)
    steps: List[PipelineStep] = Field(default_factory=list)
    history_id: str = Field(default="", alias="historyId")
    intents: Dict[str, bool] = Field(default_factory=dict)


class HistorySearchRequest(BaseModel):
    query: str = ""


class HistorySearchResponse(BaseModel):
    entry: HistoryEntry
    matches: List[IssueSnapshot] = Field(default_factory=list)


class FollowUpRequest(BaseModel):
    command: str = ""


class FollowUpResponse(BaseModel):
    result: str


class ProjectSummary(BaseModel):
    key: str
    name: str = ""


class SprintSummary(BaseModel):
    id: int
    name: str = ""
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")

    model_config = ConfigDict(populate_by_name=True)


class PhrasesUpdateRequest(BaseModel):
    """Replacement list of saved phrases; plain strings are accepted as phrase texts."""

    phrases: List[Union[Phrase, str]] = Field(default_factory=list)

    def as_phrases(self) -> List[Phrase]:
        return [Phrase(text=item) if isinstance(item, str) else item for item in self.phrases]
