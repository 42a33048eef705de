"""History API endpoint."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query

from jira_query_assistant.entities.api_schemas.search import (
    FollowUpRequest,
    FollowUpResponse,
    HistorySearchRequest,
    HistorySearchResponse,
)
from jira_query_assistant.entities.history import HistoryEntry
from jira_query_assistant.frameworks.api.base_endpoint import (
    ServiceAPIEndpointBluePrint,
    to_http_exception,
)
from jira_query_assistant.use_cases.history.history_use_case import (
    DEFAULT_HISTORY_LIMIT,
    HistoryUseCase,
)


class HistoryEndpoint(ServiceAPIEndpointBluePrint):
    """API endpoint for stored searches."""

    def __init__(self, history_use_case: HistoryUseCase):
        self.history_use_case = history_use_case

    def create_rest_api_route(self) -> APIRouter:
        api_route = APIRouter(prefix="/history", tags=["History"])

        @api_route.get(
            "",
            summary="Latest searches, newest first",
            response_model=List[HistoryEntry],
        )
        async def latest(
            limit: int = Query(DEFAULT_HISTORY_LIMIT, description="Number of entries; 0 returns all"),
        ):
            try:
                return await self.history_use_case.latest(limit)
            except Exception as e:
                raise to_http_exception(e, "reading history") from e

        @api_route.get(
            "/{entry_id}",
            summary="Get one stored search",
            response_model=HistoryEntry,
        )
        async def get_entry(entry_id: str):
            try:
                return await self.history_use_case.get(entry_id)
            except Exception as e:
                raise to_http_exception(e, f"reading history entry {entry_id}") from e

        @api_route.post(
            "/{entry_id}/search",
            summary="Find issues of a stored search by key, title or URL",
            response_model=HistorySearchResponse,
        )
        async def search_entry(entry_id: str, request: HistorySearchRequest):
            try:
                return await self.history_use_case.search(entry_id, request.query)
            except Exception as e:
                raise to_http_exception(e, f"searching history entry {entry_id}") from e

        @api_route.post(
            "/{entry_id}/action",
            summary="Run a follow-up command against a stored search",
            response_model=FollowUpResponse,
        )
        async def follow_up(entry_id: str, request: FollowUpRequest):
            try:
                result = await self.history_use_case.follow_up(entry_id, request.command)
            except Exception as e:
                raise to_http_exception(e, f"running follow-up on {entry_id}") from e
            return FollowUpResponse(result=result)

        return api_route
