from __future__ import annotations

from typing import Any
from typing import Dict
from typing import List

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.api_schemas.search import ProjectSummary
from jira_query_assistant.entities.api_schemas.search import SprintSummary
from jira_query_assistant.entities.constants import SPRINT_LIST_PAGE_SIZE
from jira_query_assistant.entities.sprint import Sprint
from jira_query_assistant.settings.jira_board_config import JiraBoardSettings
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import BoardResolver
from jira_query_assistant.utils.exceptions import ExternalServiceError

DEFAULT_SPRINT_LIMIT = 5
SPRINT_LISTING_STATES = ("active", "future")


def clamp_sprint_limit(limit: int) -> int:
    if limit <= 0 or limit > SPRINT_LIST_PAGE_SIZE:
        return DEFAULT_SPRINT_LIMIT
    return limit


def _end_date_key(sprint: Sprint):
    return sprint.end_date.timestamp() if sprint.end_date else float("-inf")


class ProjectCatalogUseCase:
    """Projects, sprints and current user as seen by the configured Jira account."""

    def __init__(
        self,
        issue_tracker: IssueTrackerRepositoryInterface,
        board_resolver: BoardResolver,
        board_settings: JiraBoardSettings,
    ):
        self.issue_tracker = issue_tracker
        self.board_resolver = board_resolver
        self.board_settings = board_settings

    async def projects(self) -> List[ProjectSummary]:
        hidden = {key.strip().upper() for key in self.board_settings.hidden_projects}
        summaries = []
        for project in await self.issue_tracker.projects():
            key = (project.get("key") or "").strip()
            if not key or key.upper() in hidden:
                continue
            summaries.append(ProjectSummary(key=key, name=project.get("name") or ""))
        return summaries

    async def sprints(self, project_key: str, limit: int = DEFAULT_SPRINT_LIMIT) -> List[SprintSummary]:
        limit = clamp_sprint_limit(limit)
        board_id = await self.board_resolver.board_for_project(project_key)
        if not board_id:
            LOGGER.info(f"No board configured for project {project_key}")
            return []

        collected: List[Sprint] = []
        failures = []
        for state in SPRINT_LISTING_STATES:
            try:
                collected.extend(
                    await self.issue_tracker.list_sprints(board_id, state, SPRINT_LIST_PAGE_SIZE)
                )
            except ExternalServiceError as e:
                LOGGER.warning(f"Listing {state} sprints of board {board_id} failed: {e.reason}")
                failures.append(e)
        if len(failures) == len(SPRINT_LISTING_STATES):
            raise failures[-1]

        collected.sort(key=_end_date_key, reverse=True)
        return [
            SprintSummary(
                id=sprint.id,
                name=sprint.name,
                start_date=sprint.start_date,
                end_date=sprint.end_date,
            )
            for sprint in collected[:limit]
        ]

    async def myself(self) -> Dict[str, Any]:
        return await self.issue_tracker.myself()
