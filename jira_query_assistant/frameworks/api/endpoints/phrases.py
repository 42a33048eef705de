"""Saved phrases API endpoint."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from jira_query_assistant.entities.api_schemas.search import PhrasesUpdateRequest
from jira_query_assistant.entities.history import Phrase
from jira_query_assistant.frameworks.api.base_endpoint import (
    ServiceAPIEndpointBluePrint,
    to_http_exception,
)
from jira_query_assistant.use_cases.interfaces.phrase_repository_interface import (
    PhraseRepositoryInterface,
)


class PhrasesEndpoint(ServiceAPIEndpointBluePrint):
    def __init__(self, phrase_repository: PhraseRepositoryInterface):
        self.phrase_repository = phrase_repository

    def create_rest_api_route(self) -> APIRouter:
        api_route = APIRouter(prefix="/phrases", tags=["Phrases"])

        @api_route.get("", summary="List saved phrases", response_model=List[Phrase])
        async def list_phrases():
            try:
                return await self.phrase_repository.list()
            except Exception as e:
                raise to_http_exception(e, "reading phrases") from e

        @api_route.post("", summary="Replace saved phrases", response_model=List[Phrase])
        async def replace_phrases(request: PhrasesUpdateRequest):
            try:
                return await self.phrase_repository.replace(request.as_phrases())
            except Exception as e:
                raise to_http_exception(e, "saving phrases") from e

        return api_route
