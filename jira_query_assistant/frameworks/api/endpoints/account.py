"""Current Jira account endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from jira_query_assistant.frameworks.api.base_endpoint import (
    ServiceAPIEndpointBluePrint,
    to_http_exception,
)
from jira_query_assistant.use_cases.catalog.project_catalog_use_case import ProjectCatalogUseCase


class AccountEndpoint(ServiceAPIEndpointBluePrint):
    def __init__(self, project_catalog_use_case: ProjectCatalogUseCase):
        self.project_catalog_use_case = project_catalog_use_case

    def create_rest_api_route(self) -> APIRouter:
        api_route = APIRouter(tags=["Account"])

        @api_route.get("/myself", summary="Jira profile of the service account")
        async def myself():
            try:
                return await self.project_catalog_use_case.myself()
            except Exception as e:
                raise to_http_exception(e, "retrieving current user") from e

        return api_route
