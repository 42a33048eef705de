from __future__ import annotations

from datetime import datetime
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence
from urllib.parse import quote

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.constants import WORKLOG_ISSUE_HARD_LIMIT
from jira_query_assistant.entities.constants import WORKLOG_OVERFLOW_PAGE_SIZE
from jira_query_assistant.entities.constants import WORKLOG_PAGE_SIZE
from jira_query_assistant.entities.date_range import DateRange
from jira_query_assistant.entities.date_range import DateRangeSource
from jira_query_assistant.entities.worklog import WorklogEntry
from jira_query_assistant.entities.worklog import WorklogSummary
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.query_pipeline.clause_utils import ensure_valid_fields
from jira_query_assistant.utils.exceptions import AggregationError
from jira_query_assistant.utils.jira_time import month_range_utc
from jira_query_assistant.utils.jira_time import parse_jira_datetime
from jira_query_assistant.utils.jira_time import utc_now


def current_month_window(now: Optional[datetime] = None) -> DateRange:
    start, end = month_range_utc(now or utc_now())
    return DateRange(start=start, end=end, source=DateRangeSource.CALENDAR_MONTH)


def entry_matches(entry: WorklogEntry, authors: Sequence[str], window: DateRange) -> bool:
    """Author (case-insensitive) and inclusive window check; bad timestamps never match."""
    if authors:
        author = entry.author.strip().lower()
        if not any(author == candidate.strip().lower() for candidate in authors):
            return False
    started = parse_jira_datetime(entry.started)
    if started is None:
        return False
    return window.contains(started)


class WorklogAggregator:
    """Sums logged time for the issues matched by a JQL query.

    Pages through the search with the embedded ``worklog`` field and fetches
    the full worklog list of every issue whose embedded list is truncated.
    """

    def __init__(
        self,
        issue_tracker: IssueTrackerRepositoryInterface,
        page_size: int = WORKLOG_PAGE_SIZE,
        issue_limit: int = WORKLOG_ISSUE_HARD_LIMIT,
    ):
        self.issue_tracker = issue_tracker
        self.page_size = page_size
        self.issue_limit = issue_limit

    async def sum_hours(
        self,
        query: str,
        authors: Optional[Iterable[str]] = None,
        window: Optional[DateRange] = None,
    ) -> float:
        summary = await self.aggregate(query, authors, window)
        return summary.hours

    async def aggregate(
        self,
        query: str,
        authors: Optional[Iterable[str]] = None,
        window: Optional[DateRange] = None,
    ) -> WorklogSummary:
        """Total logged time of matching worklog entries across the matched issues.

        Args:
            query: JQL selecting the issues
            authors: Worklog authors to count; defaults to the configured Jira user
            window: Inclusive window on the entry start time; defaults to the current month

        Returns:
            Hours, seconds and scan statistics; ``possibly_incomplete`` is set when
            the issue limit stopped paging early

        Raises:
            AggregationError: a search page failed
        """
        effective_authors = ensure_valid_fields(authors)
        if not effective_authors and self.issue_tracker.username:
            effective_authors = [self.issue_tracker.username]
        window = window or current_month_window()

        total_seconds = 0
        issues_scanned = 0
        start_at = 0
        total = 0
        while start_at < self.issue_limit:
            try:
                payload, total = await self.issue_tracker.search(
                    query,
                    max_results=self.page_size,
                    start_at=start_at,
                    fields=["worklog"],
                )
            except Exception as e:
                raise AggregationError(f"worklog search page at {start_at} failed: {e}") from e

            issues = payload.get("issues") or []
            for issue in issues:
                total_seconds += await self._issue_seconds(issue, effective_authors, window)
            issues_scanned += len(issues)

            page_max = payload.get("maxResults") or self.page_size
            start_at += page_max
            if not issues or start_at >= total:
                break

        possibly_incomplete = start_at < total
        if possibly_incomplete:
            LOGGER.warning(
                f"Worklog aggregation stopped after {issues_scanned} of {total} issues"
            )
        return WorklogSummary(
            hours=total_seconds / 3600.0,
            total_seconds=total_seconds,
            issues_scanned=issues_scanned,
            possibly_incomplete=possibly_incomplete,
            window=window,
        )

    async def _issue_seconds(
        self,
        issue: Dict[str, Any],
        authors: Sequence[str],
        window: DateRange,
    ) -> int:
        """Seconds logged on one issue by the given authors within the window.

        Args:
            issue: Raw search hit carrying the embedded ``worklog`` field
            authors: Lower-case comparison is applied to both sides
            window: Inclusive window on the entry start time

        Returns:
            Seconds from the embedded entries plus, when Jira truncated the
            embedded list, the entries fetched separately (deduplicated)
        """
        worklog = (issue.get("fields") or {}).get("worklog") or {}
        embedded = [WorklogEntry.from_raw(raw) for raw in worklog.get("worklogs") or []]
        seconds = sum(
            entry.elapsed_seconds for entry in embedded if entry_matches(entry, authors, window)
        )
        reported_total = worklog.get("total") or 0
        if reported_total <= len(embedded):
            return seconds

        key = issue.get("key")
        remainder = await self._overflow_entries(key)
        seen = {entry.identity for entry in embedded}
        for entry in remainder:
            if entry.identity in seen:
                continue
            seen.add(entry.identity)
            if entry_matches(entry, authors, window):
                seconds += entry.elapsed_seconds
        return seconds

    async def _overflow_entries(self, issue_key: str) -> List[WorklogEntry]:
        if not issue_key:
            return []
        path = (
            f"/rest/api/2/issue/{quote(issue_key, safe='')}/worklog"
            f"?maxResults={WORKLOG_OVERFLOW_PAGE_SIZE}"
        )
        try:
            payload = await self.issue_tracker.get(path)
        except Exception as e:
            LOGGER.warning(f"Worklog overflow fetch for {issue_key} failed: {e}")
            return []
        return [WorklogEntry.from_raw(raw) for raw in (payload or {}).get("worklogs") or []]
