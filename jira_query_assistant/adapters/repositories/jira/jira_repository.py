"""Jira REST repository backed by the synchronous ``jira`` client.

Every call is pushed to a worker thread with ``asyncio.to_thread`` so the
event loop never blocks on HTTP.
"""

from __future__ import annotations

import asyncio
from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from jira import JIRA
from jira.exceptions import JIRAError
from requests.exceptions import RequestException

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.sprint import Board
from jira_query_assistant.entities.sprint import Sprint
from jira_query_assistant.settings.jira_settings import JiraConnectionSettings
from jira_query_assistant.settings.jira_settings import JiraConnectionType
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.utils.exceptions import ExternalServiceError

ACTIVE_SPRINT_PAGE_SIZE = 50


def build_client(settings: JiraConnectionSettings) -> JIRA:
    options = {"server": settings.server}
    if settings.connection_type == JiraConnectionType.CLOUD:
        return JIRA(
            options=options,
            basic_auth=(settings.email, settings.token),
            timeout=settings.timeout,
            get_server_info=False,
        )
    if settings.password:
        return JIRA(
            options=options,
            basic_auth=(settings.username, settings.password),
            timeout=settings.timeout,
            get_server_info=False,
        )
    return JIRA(
        options=options,
        token_auth=settings.token,
        timeout=settings.timeout,
        get_server_info=False,
    )


def to_external_error(action: str, error: Exception) -> ExternalServiceError:
    if isinstance(error, JIRAError):
        status_code = error.status_code
        body = error.text or (error.response.text if error.response is not None else None)
        return ExternalServiceError(f"jira {action} failed", upstream_status=status_code, body=body)
    response = getattr(error, "response", None)
    if response is not None:
        return ExternalServiceError(
            f"jira {action} failed",
            upstream_status=response.status_code,
            body=response.text,
        )
    return ExternalServiceError(f"jira {action} failed: {error}")


class JiraRepository(IssueTrackerRepositoryInterface):
    def __init__(self, settings: JiraConnectionSettings, client: Optional[JIRA] = None):
        self.settings = settings
        self.jira = client if client is not None else build_client(settings)

    @property
    def base_url(self) -> str:
        return self.settings.server

    @property
    def username(self) -> str:
        return self.settings.username or ""

    async def _call(self, action: str, function: Callable, *args, **kwargs) -> Any:
        try:
            return await asyncio.to_thread(function, *args, **kwargs)
        except (JIRAError, RequestException, ValueError) as e:
            LOGGER.error(f"Jira {action} failed: {e}", exc_info=True)
            raise to_external_error(action, e) from e

    async def search(
        self,
        query: str,
        max_results: int,
        start_at: int = 0,
        fields: Optional[Sequence[str]] = None,
    ) -> Tuple[Dict[str, Any], int]:
        LOGGER.debug(f"Searching Jira: startAt={start_at} maxResults={max_results} jql={query}")
        payload = await self._call(
            "search",
            self.jira.search_issues,
            query,
            startAt=start_at,
            maxResults=max_results,
            fields=",".join(fields) if fields else None,
            json_result=True,
        )
        payload = payload or {}
        return payload, int(payload.get("total") or 0)

    def _get_path(self, path: str) -> Any:
        if not path.startswith("/"):
            path = f"/{path}"
        response = self.jira._session.get(f"{self.base_url}{path}", timeout=self.settings.timeout)
        response.raise_for_status()
        return response.json()

    async def get(self, path: str) -> Any:
        return await self._call(f"GET {path}", self._get_path, path)

    async def list_sprints(self, board_id: int, state: str, max_results: int) -> List[Sprint]:
        sprints = await self._call(
            f"sprint listing of board {board_id}",
            self.jira.sprints,
            board_id,
            maxResults=max_results,
            state=state,
        )
        return [Sprint.from_raw(sprint.raw) for sprint in sprints]

    async def get_sprint(self, sprint_id: int) -> Sprint:
        sprint = await self._call(f"sprint {sprint_id} lookup", self.jira.sprint, sprint_id)
        return Sprint.from_raw(sprint.raw)

    async def active_sprints(self, board_id: int) -> List[Sprint]:
        return await self.list_sprints(board_id, "active", ACTIVE_SPRINT_PAGE_SIZE)

    async def boards_for_project(self, project_key: str) -> List[Board]:
        boards = await self._call(
            f"board lookup for {project_key}",
            self.jira.boards,
            projectKeyOrID=project_key,
            type="scrum",
        )
        return [Board.from_raw(board.raw) for board in boards]

    async def myself(self) -> Dict[str, Any]:
        return await self._call("current user lookup", self.jira.myself)

    async def projects(self) -> List[Dict[str, Any]]:
        projects = await self._call("project listing", self.jira.projects)
        return [project.raw for project in projects]
