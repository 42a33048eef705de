from __future__ import annotations

import re
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import List
from typing import Optional

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.api_schemas.search import SearchRequest
from jira_query_assistant.entities.constants import SPRINT_SEARCH_PAGE_SIZE
from jira_query_assistant.entities.date_range import DateRange
from jira_query_assistant.entities.date_range import DateRangeSource
from jira_query_assistant.entities.sprint import Sprint
from jira_query_assistant.settings.jira_board_config import JiraBoardSettings
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.query_pipeline.clause_utils import ensure_valid_fields
from jira_query_assistant.utils.exceptions import SprintScopeError
from jira_query_assistant.utils.jira_time import utc_now

SPRINT_NUMBER = re.compile(r"(?:спринт|sprint)\s*(\d+)|(\d+)\s*(?:спринт|sprint)", re.IGNORECASE)
SPRINT_NUMBER_STATES = ("active", "future", "closed")


def parse_sprint_number(text: str) -> Optional[int]:
    match = SPRINT_NUMBER.search(text or "")
    if match is None:
        return None
    number = int(match.group(1) or match.group(2))
    return number if number > 0 else None


def fallback_sprint_range(now: datetime) -> DateRange:
    """Thursday 00:00 UTC of the current sprint week through Wednesday 23:59:59 UTC."""
    now = now.astimezone(timezone.utc)
    days_since_thursday = (now.weekday() - 3) % 7
    start = datetime(now.year, now.month, now.day, tzinfo=timezone.utc) - timedelta(days=days_since_thursday)
    end = start + timedelta(days=6, hours=23, minutes=59, seconds=59)
    return DateRange(start=start, end=end, source=DateRangeSource.FALLBACK_HEURISTIC)


def _sprint_range(sprint: Sprint, source: DateRangeSource) -> Optional[DateRange]:
    if not sprint.has_dates:
        return None
    return DateRange(start=sprint.start_date, end=sprint.end_date, source=source)


def _matches_number(sprint: Sprint, number: int) -> bool:
    if sprint.id == number:
        return True
    return re.search(rf"(?<!\d){number}(?!\d)", sprint.name or "") is not None


class BoardResolver:
    """Maps a request's project selection to the scrum board used for sprint lookups."""

    def __init__(
        self,
        issue_tracker: IssueTrackerRepositoryInterface,
        board_settings: JiraBoardSettings,
    ):
        self.issue_tracker = issue_tracker
        self.board_settings = board_settings

    async def board_for_projects(self, projects: List[str]) -> Optional[int]:
        """Board for the selected project, or the configured default without one.

        Args:
            projects: Project keys of the request

        Returns:
            Board id, or None when nothing is configured or found

        Raises:
            SprintScopeError: more than one project is selected
        """
        projects = ensure_valid_fields(projects)
        if len(projects) > 1:
            raise SprintScopeError(projects)
        if projects:
            return await self.board_for_project(projects[0])
        return self.board_settings.default_board_id

    async def board_for_project(self, project_key: str) -> Optional[int]:
        board_id = self.board_settings.board_for(project_key)
        if board_id is not None:
            return board_id
        try:
            boards = await self.issue_tracker.boards_for_project(project_key)
        except Exception as e:
            LOGGER.warning(f"Board lookup for project {project_key} failed: {e}")
            return self.board_settings.default_board_id
        if not boards:
            LOGGER.info(f"No scrum board found for project {project_key}")
            return self.board_settings.default_board_id
        return boards[0].id


class SprintRangeResolver:
    """Resolves the concrete date window of a sprint-scoped request.

    Order: explicit sprint id, sprint number found in the text, first active
    sprint of the board, deterministic Thursday-to-Wednesday week. A failing
    lookup only moves resolution to the next step.
    """

    def __init__(self, issue_tracker: IssueTrackerRepositoryInterface):
        self.issue_tracker = issue_tracker

    async def resolve(
        self,
        request: SearchRequest,
        board_id: Optional[int],
        query: str = "",
        now: Optional[datetime] = None,
    ) -> DateRange:
        """Window of the requested sprint, never None.

        Args:
            request: Search request; its sprint_id wins over everything else
            board_id: Board searched for sprint numbers and the active sprint
            query: JQL so far, scanned for a sprint number with the request text
            now: Reference time for the fallback week, defaults to the current time

        Returns:
            The sprint dates, or the Thursday-to-Wednesday week around ``now``
        """
        date_range = None
        if request.sprint_id and request.sprint_id > 0:
            date_range = await self.by_id(request.sprint_id)
        elif board_id:
            number = parse_sprint_number(f"{request.query} {query}")
            if number:
                date_range = await self.by_number(board_id, number)
            else:
                date_range = await self.active(board_id)
        if date_range is None:
            date_range = fallback_sprint_range(now or utc_now())
            LOGGER.info(
                f"Using fallback sprint window {date_range.start_literal}..{date_range.end_literal}"
            )
        return date_range

    async def by_id(self, sprint_id: int) -> Optional[DateRange]:
        try:
            sprint = await self.issue_tracker.get_sprint(sprint_id)
        except Exception as e:
            LOGGER.warning(f"Sprint {sprint_id} lookup failed: {e}")
            return None
        date_range = _sprint_range(sprint, DateRangeSource.EXPLICIT_ID)
        if date_range is None:
            LOGGER.warning(f"Sprint {sprint_id} has no usable dates")
        return date_range

    async def by_number(self, board_id: int, number: int) -> Optional[DateRange]:
        """Find sprint ``number`` on the board by id or by number in its name.

        Active sprints are searched first, then future, then closed ones.

        Args:
            board_id: Scrum board id
            number: Sprint number from the request text

        Returns:
            Dates of the first matching sprint that has both dates, else None
        """
        for state in SPRINT_NUMBER_STATES:
            try:
                sprints = await self.issue_tracker.list_sprints(
                    board_id, state, SPRINT_SEARCH_PAGE_SIZE
                )
            except Exception as e:
                LOGGER.warning(f"Listing {state} sprints of board {board_id} failed: {e}")
                continue
            for sprint in sprints:
                if not _matches_number(sprint, number):
                    continue
                date_range = _sprint_range(sprint, DateRangeSource.EXPLICIT_NUMBER)
                if date_range is not None:
                    return date_range
        LOGGER.info(f"Sprint {number} not found on board {board_id}")
        return None

    async def active(self, board_id: int) -> Optional[DateRange]:
        """Dates of the first active sprint of the board that has both dates."""
        try:
            sprints = await self.issue_tracker.active_sprints(board_id)
        except Exception as e:
            LOGGER.warning(f"Active sprint lookup for board {board_id} failed: {e}")
            return None
        for sprint in sprints:
            date_range = _sprint_range(sprint, DateRangeSource.ACTIVE_LOOKUP)
            if date_range is not None:
                return date_range
        LOGGER.info(f"Board {board_id} has no active sprint with dates")
        return None
