from __future__ import annotations

import unittest
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from unittest.mock import AsyncMock
from unittest.mock import MagicMock

from jira_query_assistant.entities.api_schemas.search import SearchRequest
from jira_query_assistant.entities.date_range import DateRangeSource
from jira_query_assistant.entities.sprint import Board
from jira_query_assistant.entities.sprint import Sprint
from jira_query_assistant.settings.jira_board_config import JiraBoardSettings
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import BoardResolver
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import SprintRangeResolver
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import fallback_sprint_range
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import parse_sprint_number
from jira_query_assistant.utils.exceptions import ExternalServiceError
from jira_query_assistant.utils.exceptions import SprintScopeError


def sprint(sprint_id: int, name: str, start: str = None, end: str = None) -> Sprint:
    return Sprint.from_raw({"id": sprint_id, "name": name, "startDate": start, "endDate": end})


class TestSprintHelpers(unittest.TestCase):
    def test_parse_sprint_number(self):
        self.assertEqual(parse_sprint_number("задачи спринт 42"), 42)
        self.assertEqual(parse_sprint_number("tasks of 7 sprint"), 7)
        self.assertEqual(parse_sprint_number("Sprint12 bugs"), 12)
        self.assertIsNone(parse_sprint_number("current sprint"))
        self.assertIsNone(parse_sprint_number("sprint 0"))

    def test_fallback_starts_on_thursday(self):
        # 2025-01-06 is a Monday; the sprint week started on Thursday 2025-01-02.
        date_range = fallback_sprint_range(datetime(2025, 1, 6, 15, 30, tzinfo=timezone.utc))
        self.assertEqual(date_range.start, datetime(2025, 1, 2, tzinfo=timezone.utc))
        self.assertEqual(date_range.end, datetime(2025, 1, 8, 23, 59, 59, tzinfo=timezone.utc))
        self.assertEqual(date_range.source, DateRangeSource.FALLBACK_HEURISTIC)

    def test_fallback_on_thursday_is_same_day(self):
        date_range = fallback_sprint_range(datetime(2025, 1, 9, 0, 0, 1, tzinfo=timezone.utc))
        self.assertEqual(date_range.start_literal, "2025-01-09")
        self.assertEqual(date_range.end_literal, "2025-01-15")

    def test_fallback_spans_seven_days(self):
        for offset in range(7):
            now = datetime(2025, 3, 1, 12, tzinfo=timezone.utc) + timedelta(days=offset)
            date_range = fallback_sprint_range(now)
            self.assertEqual(date_range.start.weekday(), 3)
            self.assertTrue(date_range.contains(now))


class TestSprintRangeResolver(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.issue_tracker = MagicMock(spec=IssueTrackerRepositoryInterface)
        self.issue_tracker.get_sprint = AsyncMock()
        self.issue_tracker.list_sprints = AsyncMock(return_value=[])
        self.issue_tracker.active_sprints = AsyncMock(return_value=[])
        self.resolver = SprintRangeResolver(self.issue_tracker)
        self.now = datetime(2025, 1, 6, tzinfo=timezone.utc)

    async def test_explicit_sprint_id(self):
        self.issue_tracker.get_sprint.return_value = sprint(
            77, "Sprint 77", "2025-01-02T10:00:00.000+03:00", "2025-01-08T18:00:00.000+03:00"
        )
        date_range = await self.resolver.resolve(SearchRequest(sprint_id=77), board_id=209, now=self.now)
        self.assertEqual(date_range.source, DateRangeSource.EXPLICIT_ID)
        self.assertEqual((date_range.start_literal, date_range.end_literal), ("2025-01-02", "2025-01-08"))
        self.issue_tracker.list_sprints.assert_not_called()

    async def test_sprint_id_failure_falls_back(self):
        self.issue_tracker.get_sprint.side_effect = ExternalServiceError("jira sprint lookup failed", 404)
        date_range = await self.resolver.resolve(SearchRequest(sprint_id=77), board_id=209, now=self.now)
        self.assertEqual(date_range.source, DateRangeSource.FALLBACK_HEURISTIC)
        self.assertEqual(date_range.start_literal, "2025-01-02")

    async def test_sprint_number_searches_states_in_order(self):
        self.issue_tracker.list_sprints.side_effect = [
            ExternalServiceError("jira sprint listing failed", 500),
            [sprint(5, "CE Sprint 140", "2025-02-01T00:00:00Z", "2025-02-07T00:00:00Z")],
            [sprint(6, "CE Sprint 14", "2024-12-01T00:00:00Z", "2024-12-07T00:00:00Z")],
        ]
        date_range = await self.resolver.resolve(
            SearchRequest(query="задачи спринт 14"), board_id=209, now=self.now
        )
        self.assertEqual(date_range.source, DateRangeSource.EXPLICIT_NUMBER)
        self.assertEqual(date_range.start_literal, "2024-12-01")
        states = [call.args[1] for call in self.issue_tracker.list_sprints.await_args_list]
        self.assertEqual(states, ["active", "future", "closed"])

    async def test_active_sprint(self):
        self.issue_tracker.active_sprints.return_value = [
            sprint(1, "no dates"),
            sprint(2, "Sprint 2", "2025-01-02T00:00:00Z", "2025-01-08T23:00:00Z"),
        ]
        date_range = await self.resolver.resolve(SearchRequest(query="sprint tasks"), board_id=209, now=self.now)
        self.assertEqual(date_range.source, DateRangeSource.ACTIVE_LOOKUP)
        self.assertEqual(date_range.end_literal, "2025-01-08")

    async def test_every_lookup_failing_uses_fallback(self):
        self.issue_tracker.active_sprints.side_effect = ExternalServiceError("jira down", 503)
        date_range = await self.resolver.resolve(SearchRequest(query="sprint tasks"), board_id=209, now=self.now)
        self.assertEqual(date_range.source, DateRangeSource.FALLBACK_HEURISTIC)

    async def test_no_board_uses_fallback(self):
        date_range = await self.resolver.resolve(SearchRequest(query="sprint 3"), board_id=None, now=self.now)
        self.assertEqual(date_range.source, DateRangeSource.FALLBACK_HEURISTIC)
        self.issue_tracker.list_sprints.assert_not_called()


class TestBoardResolver(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.issue_tracker = MagicMock(spec=IssueTrackerRepositoryInterface)
        self.issue_tracker.boards_for_project = AsyncMock(return_value=[])
        self.settings = JiraBoardSettings(project_boards={"CE": 209}, default_board_id=1)
        self.resolver = BoardResolver(self.issue_tracker, self.settings)

    async def test_configured_board(self):
        self.assertEqual(await self.resolver.board_for_projects(["ce"]), 209)
        self.issue_tracker.boards_for_project.assert_not_called()

    async def test_lowercase_configured_board(self):
        resolver = BoardResolver(self.issue_tracker, JiraBoardSettings(project_boards={"ce": 209}))
        self.assertEqual(await resolver.board_for_projects(["CE"]), 209)
        self.issue_tracker.boards_for_project.assert_not_called()

    async def test_board_lookup(self):
        self.issue_tracker.boards_for_project.return_value = [Board(id=31, name="OPS board")]
        self.assertEqual(await self.resolver.board_for_projects(["OPS"]), 31)

    async def test_lookup_failure_uses_default(self):
        self.issue_tracker.boards_for_project.side_effect = ExternalServiceError("jira down")
        self.assertEqual(await self.resolver.board_for_project("OPS"), 1)

    async def test_no_project_uses_default(self):
        self.assertEqual(await self.resolver.board_for_projects([]), 1)

    async def test_multiple_projects_rejected(self):
        with self.assertRaises(SprintScopeError) as context:
            await self.resolver.board_for_projects(["CE", "OPS"])
        self.assertEqual(context.exception.status_code, 400)
