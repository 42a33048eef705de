"""Search API endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.api_schemas.search import SearchRequest, SearchResult
from jira_query_assistant.frameworks.api.base_endpoint import (
    ServiceAPIEndpointBluePrint,
    to_http_exception,
)
from jira_query_assistant.use_cases.query_pipeline.search_pipeline import SearchQueryUseCase


class SearchEndpoint(ServiceAPIEndpointBluePrint):
    """API endpoint running the query pipeline."""

    def __init__(self, search_use_case: SearchQueryUseCase):
        self.search_use_case = search_use_case

    def create_rest_api_route(self) -> APIRouter:
        api_route = APIRouter(prefix="/search", tags=["Search"])

        @api_route.post(
            "",
            summary="Search Jira with a natural-language request",
            description=(
                "Derives JQL from the request, applies project/user/sprint filters, "
                "runs the search and records it in the history. With dryRun only the "
                "JQL is returned."
            ),
            response_model=SearchResult,
        )
        async def search(request: SearchRequest):
            LOGGER.debug(f"Search request: {request.model_dump()}")
            try:
                return await self.search_use_case.execute(request)
            except Exception as e:
                raise to_http_exception(e, "running search") from e

        return api_route
