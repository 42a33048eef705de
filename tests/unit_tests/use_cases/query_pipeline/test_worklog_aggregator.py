from __future__ import annotations

import unittest
from datetime import datetime
from datetime import timezone
from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import PropertyMock

from jira_query_assistant.entities.date_range import DateRange
from jira_query_assistant.entities.date_range import DateRangeSource
from jira_query_assistant.entities.worklog import WorklogEntry
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.query_pipeline.worklog_aggregator import WorklogAggregator
from jira_query_assistant.use_cases.query_pipeline.worklog_aggregator import current_month_window
from jira_query_assistant.use_cases.query_pipeline.worklog_aggregator import entry_matches
from jira_query_assistant.utils.exceptions import AggregationError
from jira_query_assistant.utils.exceptions import ExternalServiceError

JANUARY = DateRange(
    start=datetime(2025, 1, 1, tzinfo=timezone.utc),
    end=datetime(2025, 1, 31, 23, 59, 59, tzinfo=timezone.utc),
    source=DateRangeSource.CALENDAR_MONTH,
)


def worklog(author: str, seconds: int, started: str, entry_id: str = None) -> dict:
    raw = {"author": {"name": author}, "timeSpentSeconds": seconds, "started": started}
    if entry_id:
        raw["id"] = entry_id
    return raw


def issue(key: str, worklogs: list, total: int = None) -> dict:
    return {
        "key": key,
        "fields": {
            "worklog": {
                "worklogs": worklogs,
                "total": len(worklogs) if total is None else total,
            }
        },
    }


class TestEntryMatches(unittest.TestCase):
    def test_author_is_case_insensitive(self):
        entry = WorklogEntry.from_raw(worklog("Alice", 60, "2025-01-10T10:00:00.000+0000"))
        self.assertTrue(entry_matches(entry, ["alice "], JANUARY))
        self.assertFalse(entry_matches(entry, ["bob"], JANUARY))

    def test_window_is_inclusive_and_bad_dates_never_match(self):
        inside = WorklogEntry.from_raw(worklog("alice", 60, "2025-01-31T23:59:59.000+0000"))
        outside = WorklogEntry.from_raw(worklog("alice", 60, "2025-02-01T00:00:00.000+0000"))
        broken = WorklogEntry.from_raw(worklog("alice", 60, "yesterday"))
        self.assertTrue(entry_matches(inside, ["alice"], JANUARY))
        self.assertFalse(entry_matches(outside, ["alice"], JANUARY))
        self.assertFalse(entry_matches(broken, ["alice"], JANUARY))

    def test_offset_is_normalized(self):
        # 2025-02-01 01:30 at +03:00 is still January in UTC.
        entry = WorklogEntry.from_raw(worklog("alice", 60, "2025-02-01T01:30:00.000+0300"))
        self.assertTrue(entry_matches(entry, ["alice"], JANUARY))

    def test_author_identifier_fallbacks(self):
        entry = WorklogEntry.from_raw({"author": {"accountId": "5b10"}, "timeSpentSeconds": 5})
        self.assertEqual(entry.author, "5b10")

    def test_current_month_window(self):
        window = current_month_window(datetime(2024, 2, 10, tzinfo=timezone.utc))
        self.assertEqual(window.start_literal, "2024-02-01")
        self.assertEqual(window.end, datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc))


class TestWorklogAggregator(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.issue_tracker = MagicMock(spec=IssueTrackerRepositoryInterface)
        type(self.issue_tracker).username = PropertyMock(return_value="alice")
        self.issue_tracker.search = AsyncMock()
        self.issue_tracker.get = AsyncMock(return_value={"worklogs": []})
        self.aggregator = WorklogAggregator(self.issue_tracker, page_size=2, issue_limit=10)

    async def test_sums_matching_entries_across_pages(self):
        self.issue_tracker.search.side_effect = [
            (
                {"maxResults": 2, "issues": [
                    issue("CE-1", [
                        worklog("alice", 3600, "2025-01-05T09:00:00.000+0000"),
                        worklog("bob", 7200, "2025-01-05T09:00:00.000+0000"),
                    ]),
                    issue("CE-2", [worklog("alice", 1800, "2024-12-31T09:00:00.000+0000")]),
                ]},
                3,
            ),
            (
                {"maxResults": 2, "issues": [
                    issue("CE-3", [worklog("ALICE", 5400, "2025-01-20T09:00:00.000+0000")]),
                ]},
                3,
            ),
        ]
        summary = await self.aggregator.aggregate("worklogAuthor = currentUser()", window=JANUARY)
        self.assertEqual(summary.total_seconds, 9000)
        self.assertAlmostEqual(summary.hours, 2.5)
        self.assertEqual(summary.issues_scanned, 3)
        self.assertFalse(summary.possibly_incomplete)
        starts = [call.kwargs["start_at"] for call in self.issue_tracker.search.await_args_list]
        self.assertEqual(starts, [0, 2])
        self.issue_tracker.get.assert_not_called()

    async def test_explicit_authors_replace_default(self):
        self.issue_tracker.search.return_value = (
            {"maxResults": 2, "issues": [
                issue("CE-1", [
                    worklog("alice", 3600, "2025-01-05T09:00:00.000+0000"),
                    worklog("bob", 7200, "2025-01-05T09:00:00.000+0000"),
                ]),
            ]},
            1,
        )
        hours = await self.aggregator.sum_hours("project = CE", ["bob"], window=JANUARY)
        self.assertAlmostEqual(hours, 2.0)

    async def test_overflow_is_fetched_and_deduplicated(self):
        embedded = [worklog("alice", 600, "2025-01-05T09:00:00.000+0000", "1")]
        self.issue_tracker.search.return_value = (
            {"maxResults": 2, "issues": [issue("CE-9", embedded, total=3)]},
            1,
        )
        self.issue_tracker.get.return_value = {
            "worklogs": [
                worklog("alice", 600, "2025-01-05T09:00:00.000+0000", "1"),
                worklog("alice", 1200, "2025-01-06T09:00:00.000+0000", "2"),
                worklog("alice", 1800, "2025-01-07T09:00:00.000+0000", "3"),
            ]
        }
        summary = await self.aggregator.aggregate("q", window=JANUARY)
        self.assertEqual(summary.total_seconds, 3600)
        self.issue_tracker.get.assert_awaited_once_with(
            "/rest/api/2/issue/CE-9/worklog?maxResults=1000"
        )

    async def test_overflow_failure_keeps_embedded_total(self):
        self.issue_tracker.search.return_value = (
            {"maxResults": 2, "issues": [
                issue("CE-9", [worklog("alice", 600, "2025-01-05T09:00:00.000+0000")], total=5),
            ]},
            1,
        )
        self.issue_tracker.get.side_effect = ExternalServiceError("jira down", 503)
        summary = await self.aggregator.aggregate("q", window=JANUARY)
        self.assertEqual(summary.total_seconds, 600)

    async def test_issue_limit_marks_result_incomplete(self):
        page = {"maxResults": 2, "issues": [issue("CE-1", []), issue("CE-2", [])]}
        self.issue_tracker.search.return_value = (page, 50)
        summary = await self.aggregator.aggregate("q", window=JANUARY)
        self.assertTrue(summary.possibly_incomplete)
        self.assertEqual(summary.issues_scanned, 10)
        self.assertEqual(self.issue_tracker.search.await_count, 5)

    async def test_search_failure_raises_aggregation_error(self):
        self.issue_tracker.search.side_effect = ExternalServiceError("jira down", 503)
        with self.assertRaises(AggregationError):
            await self.aggregator.aggregate("q", window=JANUARY)
