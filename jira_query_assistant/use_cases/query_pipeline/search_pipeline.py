"""Use case that turns a free-form request into an executed Jira search."""

from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.api_schemas.search import IssueLink, SearchRequest, SearchResult
from jira_query_assistant.entities.constants import (
    DEFAULT_MAX_RESULTS,
    ISSUE_DETAIL_FIELDS,
    StepName,
    StepStatus,
)
from jira_query_assistant.entities.date_range import DateRange
from jira_query_assistant.entities.history import HistoryEntry, PipelineStep
from jira_query_assistant.entities.intent import IntentSet
from jira_query_assistant.entities.worklog import WorklogSummary
from jira_query_assistant.use_cases.interfaces.history_repository_interface import (
    HistoryRepositoryInterface,
)
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.interfaces.query_assistant_interface import (
    QueryAssistantInterface,
)
from jira_query_assistant.use_cases.query_pipeline import clause_rewriter
from jira_query_assistant.use_cases.query_pipeline.clause_utils import (
    clean_query,
    contains_field,
    ensure_valid_fields,
)
from jira_query_assistant.use_cases.query_pipeline.intent_classifier import IntentClassifier
from jira_query_assistant.use_cases.query_pipeline.query_synthesizer import QuerySynthesizer
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import (
    BoardResolver,
    SprintRangeResolver,
)
from jira_query_assistant.use_cases.query_pipeline.worklog_aggregator import WorklogAggregator
from jira_query_assistant.utils.exceptions import (
    AggregationError,
    EmptyQueryError,
    ExternalServiceError,
)
from jira_query_assistant.utils.jira_time import utc_now

HISTORY_PREVIEW_SIZE = 10


def new_history_id() -> str:
    return secrets.token_hex(8)


def clamp_max_results(max_results: int) -> int:
    if max_results <= 0 or max_results > DEFAULT_MAX_RESULTS:
        return DEFAULT_MAX_RESULTS
    return max_results


def extract_issue_links(raw: Dict[str, Any], base_url: str) -> List[IssueLink]:
    links = []
    for issue in (raw or {}).get("issues") or []:
        key = issue.get("key") or ""
        summary = (issue.get("fields") or {}).get("summary") or ""
        links.append(
            IssueLink(key=key, title=summary, url=f"{base_url.rstrip('/')}/browse/{key}")
        )
    return links


def worklog_analysis_text(summary: WorklogSummary, sprint_range: Optional[DateRange]) -> str:
    if sprint_range is None:
        text = f"Списано за текущий месяц: {summary.hours:.2f} ч"
    else:
        text = (
            f"Списано за спринт {sprint_range.start_literal}..{sprint_range.end_literal}: "
            f"{summary.hours:.2f} ч"
        )
    if summary.possibly_incomplete:
        text += f" (учтено задач: {summary.issues_scanned}, данные могут быть неполными)"
    return text


@dataclass
class ResolvedQuery:
    jql: str
    intents: IntentSet
    title: Optional[str]
    sprint_range: Optional[DateRange]
    max_results: int


class SearchQueryUseCase:
    """Runs the query interpretation pipeline for one request.

    Stages run strictly in order: synthesis, intent classification, sprint
    window, clause rewriting, search, worklog aggregation, summary. The whole
    run is bound to one deadline; a cancelled or timed-out run raises before
    any history entry is written.
    """

    def __init__(
        self,
        issue_tracker: IssueTrackerRepositoryInterface,
        history_repository: HistoryRepositoryInterface,
        synthesizer: QuerySynthesizer,
        classifier: IntentClassifier,
        board_resolver: BoardResolver,
        sprint_resolver: SprintRangeResolver,
        worklog_aggregator: WorklogAggregator,
        assistant: Optional[QueryAssistantInterface] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.issue_tracker = issue_tracker
        self.history_repository = history_repository
        self.synthesizer = synthesizer
        self.classifier = classifier
        self.board_resolver = board_resolver
        self.sprint_resolver = sprint_resolver
        self.worklog_aggregator = worklog_aggregator
        self.assistant = assistant
        self.timeout_seconds = timeout_seconds

    async def execute(self, request: SearchRequest) -> SearchResult:
        """Resolve, run and record one search request.

        Args:
            request: Free-form text and/or JQL with project, user and sprint selections

        Returns:
            Final JQL, issues, optional analysis and the pipeline steps taken

        Raises:
            EmptyQueryError: no JQL could be produced
            SprintScopeError: a sprint-scoped request selects several projects
            ExternalServiceError: Jira rejected the search; carries the JQL
            asyncio.TimeoutError: the run exceeded the configured deadline
        """
        if self.timeout_seconds:
            return await asyncio.wait_for(self._execute(request), timeout=self.timeout_seconds)
        return await self._execute(request)

    async def _execute(self, request: SearchRequest) -> SearchResult:
        resolved = await self.resolve(request)
        LOGGER.info(f"Resolved JQL '{resolved.jql}' intents={resolved.intents.as_dict()}")

        if request.dry_run:
            return SearchResult(
                jql=resolved.jql,
                raw=[],
                history=await self.history_repository.latest(HISTORY_PREVIEW_SIZE),
                executed_at=utc_now(),
                steps=[self._jql_step(resolved)],
                intents=resolved.intents.as_dict(),
            )

        fields = ensure_valid_fields(request.fields)
        if resolved.intents.is_worklog and not contains_field(fields, "worklog"):
            fields.append("worklog")

        try:
            raw, total = await self.issue_tracker.search(
                resolved.jql,
                max_results=resolved.max_results,
                start_at=0,
                fields=fields,
            )
        except ExternalServiceError as e:
            raise e.with_jql(resolved.jql) from e
        links = extract_issue_links(raw, self.issue_tracker.base_url)
        first_issue_key = links[0].key if links else ""

        issue_detail = None
        if resolved.title and first_issue_key:
            issue_detail = await self._issue_detail(first_issue_key)

        analysis = ""
        if resolved.intents.is_worklog:
            analysis = await self._worklog_analysis(resolved, request.users)
        if request.analysis and self.assistant is not None and not analysis:
            analysis = await self._summarize(request, resolved.jql, raw)

        steps = self.build_steps(resolved, raw, total, analysis, first_issue_key, issue_detail)
        entry = HistoryEntry(
            id=new_history_id(),
            query=request.query.strip(),
            jql=resolved.jql,
            max_results=resolved.max_results,
            steps=steps,
            issues=links,
            analysis=analysis,
            created_at=utc_now(),
        )
        try:
            await self.history_repository.append(entry)
        except OSError as e:
            LOGGER.error(f"Failed to persist history entry {entry.id}: {e}", exc_info=True)

        return SearchResult(
            jql=resolved.jql,
            raw=raw,
            history=await self.history_repository.latest(HISTORY_PREVIEW_SIZE),
            executed_at=entry.created_at,
            analysis=analysis,
            total=total,
            issues=links,
            steps=steps,
            history_id=entry.id,
            intents=resolved.intents.as_dict(),
        )

    async def resolve(self, request: SearchRequest) -> ResolvedQuery:
        """Produce the final JQL without executing it.

        Args:
            request: Incoming search request

        Returns:
            JQL with overrides, default filters and sprint dates applied, plus
            the detected intents and the resolved sprint window
        """
        title = self.synthesizer.extract_title(request.query)
        suggestion = None
        if not request.jql.strip() and not title:
            suggestion = await self._derive_with_assistant(request.query)
        jql = self.synthesizer.synthesize(request, title, suggestion)

        intents = self.classifier.classify(request.query, jql)
        sprint_range = None
        if intents.is_sprint_scoped or request.sprint_id > 0:
            board_id = await self.board_resolver.board_for_projects(request.projects)
            sprint_range = await self.sprint_resolver.resolve(request, board_id, jql)
            jql = clause_rewriter.apply_date_range(jql, sprint_range)

        jql = clean_query(self.rewrite(jql, intents, request.projects, request.users))
        if not jql:
            raise EmptyQueryError()
        return ResolvedQuery(
            jql=jql,
            intents=intents,
            title=title,
            sprint_range=sprint_range,
            max_results=clamp_max_results(request.max_results),
        )

    @staticmethod
    def rewrite(jql: str, intents: IntentSet, projects: List[str], users: List[str]) -> str:
        """Apply project/user selections according to intent.

        Worklog queries take users as worklog authors and never get an assignee
        filter; bug queries take users as reporters; everything else takes them
        as assignees.
        """
        users = ensure_valid_fields(users)
        projects = ensure_valid_fields(projects)
        if intents.is_worklog and users:
            jql = clause_rewriter.override_worklog_authors(jql, users)
            if intents.is_bug:
                jql = clause_rewriter.override_reporters(jql, users)
            jql = clause_rewriter.override_projects(jql, projects)
            return clause_rewriter.apply_default_filters(jql)
        if intents.is_bug:
            jql = clause_rewriter.override_reporters(jql, users)
            jql = clause_rewriter.override_projects(jql, projects)
            return clause_rewriter.apply_default_filters(jql)
        jql = clause_rewriter.override_projects(jql, projects)
        jql = clause_rewriter.override_assignees(jql, users)
        return clause_rewriter.apply_default_filters(jql, users=users)

    async def _derive_with_assistant(self, raw_text: str) -> Optional[str]:
        if self.assistant is None or not (raw_text or "").strip():
            return None
        try:
            derived = await self.assistant.derive_query(raw_text)
        except Exception as e:
            LOGGER.warning(f"LLM query derivation failed, using keyword heuristics: {e}")
            return None
        return (derived or "").strip() or None

    async def _issue_detail(self, issue_key: str) -> Optional[Any]:
        path = f"/rest/api/2/issue/{quote(issue_key, safe='')}?fields={ISSUE_DETAIL_FIELDS}"
        try:
            return await self.issue_tracker.get(path)
        except Exception as e:
            LOGGER.warning(f"Issue detail lookup for {issue_key} failed: {e}")
            return None

    async def _worklog_analysis(self, resolved: ResolvedQuery, users: List[str]) -> str:
        try:
            summary = await self.worklog_aggregator.aggregate(
                resolved.jql, users, window=resolved.sprint_range
            )
        except AggregationError as e:
            LOGGER.warning(f"Worklog aggregation skipped: {e.message}")
            return ""
        return worklog_analysis_text(summary, resolved.sprint_range)

    async def _summarize(self, request: SearchRequest, jql: str, raw: Any) -> str:
        try:
            return (await self.assistant.summarize(request.query, jql, raw) or "").strip()
        except Exception as e:
            LOGGER.warning(f"LLM summary failed: {e}")
            return ""

    @staticmethod
    def _jql_step(resolved: ResolvedQuery) -> PipelineStep:
        if resolved.title:
            description = f"Найти по названию: {resolved.title}"
        else:
            description = "Derived from the user query and selected filters"
        return PipelineStep(
            name=StepName.GENERATE_JQL.value,
            description=description,
            status=StepStatus.COMPLETED.value,
            result={"jql": resolved.jql},
        )

    def build_steps(
        self,
        resolved: ResolvedQuery,
        raw: Any,
        total: int,
        analysis: str,
        first_issue_key: str,
        issue_detail: Optional[Any],
    ) -> List[PipelineStep]:
        steps = [
            self._jql_step(resolved),
            PipelineStep(
                name=StepName.EXECUTE_SEARCH.value,
                description=f"Fetched {total} issues via Jira",
                status=StepStatus.COMPLETED.value,
                result=raw,
            ),
        ]
        if analysis:
            steps.append(
                PipelineStep(
                    name=StepName.ANALYSIS.value,
                    description="Summary generated by worklog aggregation or the LLM",
                    status=StepStatus.COMPLETED.value,
                    result={"analysis": analysis},
                )
            )
        if issue_detail:
            steps.append(
                PipelineStep(
                    name=StepName.ISSUE_DETAILS.value,
                    description=f"Собрал дополнительные детали по задаче {first_issue_key}",
                    status=StepStatus.COMPLETED.value,
                    result=issue_detail,
                )
            )
        return steps
