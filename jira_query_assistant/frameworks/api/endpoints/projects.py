"""Projects and sprints API endpoint."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.api_schemas.search import ProjectSummary, SprintSummary
from jira_query_assistant.frameworks.api.base_endpoint import (
    ServiceAPIEndpointBluePrint,
    to_http_exception,
)
from jira_query_assistant.use_cases.catalog.project_catalog_use_case import (
    DEFAULT_SPRINT_LIMIT,
    ProjectCatalogUseCase,
)


class ProjectsEndpoint(ServiceAPIEndpointBluePrint):
    """API endpoint for project and sprint listings."""

    def __init__(self, project_catalog_use_case: ProjectCatalogUseCase):
        """Initialize the endpoint.

        Args:
            project_catalog_use_case: Use case listing projects and their sprints
        """
        self.project_catalog_use_case = project_catalog_use_case

    def create_rest_api_route(self) -> APIRouter:
        """Create and configure the API router for project operations.

        Returns:
            Configured APIRouter for project endpoints
        """
        api_route = APIRouter(prefix="/projects", tags=["Projects"])

        @api_route.get(
            "",
            summary="List visible projects",
            description="Returns Jira projects except the configured hidden ones",
            response_model=List[ProjectSummary],
        )
        async def get_projects():
            try:
                return await self.project_catalog_use_case.projects()
            except Exception as e:
                raise to_http_exception(e, "retrieving projects") from e

        @api_route.get(
            "/{project_key}/sprints",
            summary="List active and future sprints of a project",
            description="Sprints of the project's board, latest end date first",
            response_model=List[SprintSummary],
        )
        async def get_sprints(
            project_key: str,
            limit: int = Query(DEFAULT_SPRINT_LIMIT, description="Number of sprints, 1..50"),
        ):
            LOGGER.debug(f"Getting sprints for {project_key} with limit={limit}")
            try:
                return await self.project_catalog_use_case.sprints(project_key, limit)
            except Exception as e:
                raise to_http_exception(e, f"retrieving sprints of {project_key}") from e

        return api_route
