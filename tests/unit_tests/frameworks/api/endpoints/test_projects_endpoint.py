"""Unit tests for the projects and account endpoints."""

import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from jira_query_assistant.entities.api_schemas.search import ProjectSummary, SprintSummary
from jira_query_assistant.frameworks.api.api_endpoint import create_app
from jira_query_assistant.frameworks.api.endpoints.account import AccountEndpoint
from jira_query_assistant.frameworks.api.endpoints.projects import ProjectsEndpoint
from jira_query_assistant.frameworks.api.registry import SubServiceEndpoints
from jira_query_assistant.use_cases.catalog.project_catalog_use_case import ProjectCatalogUseCase
from jira_query_assistant.utils.exceptions import ExternalServiceError


class TestProjectsEndpoint(unittest.TestCase):
    """Test suite for ProjectsEndpoint and AccountEndpoint."""

    def setUp(self):
        self.catalog = MagicMock(spec=ProjectCatalogUseCase)
        self.catalog.projects = AsyncMock(return_value=[ProjectSummary(key="CE", name="Core Engine")])
        self.catalog.sprints = AsyncMock(
            return_value=[
                SprintSummary(
                    id=12,
                    name="Sprint 12",
                    start_date=datetime(2025, 1, 9, tzinfo=timezone.utc),
                    end_date=datetime(2025, 1, 15, 23, 59, 59, tzinfo=timezone.utc),
                )
            ]
        )
        self.catalog.myself = AsyncMock(return_value={"name": "alice", "displayName": "Alice"})
        registry = SubServiceEndpoints()
        registry.register(ProjectsEndpoint(self.catalog))
        registry.register(AccountEndpoint(self.catalog))
        self.client = TestClient(create_app(registry))

    def test_projects(self):
        response = self.client.get("/api/projects")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{"key": "CE", "name": "Core Engine"}])

    def test_sprints(self):
        response = self.client.get("/api/projects/CE/sprints", params={"limit": 3})

        self.assertEqual(response.status_code, 200)
        sprint = response.json()[0]
        self.assertEqual(sprint["id"], 12)
        self.assertIn("startDate", sprint)
        self.catalog.sprints.assert_awaited_once_with("CE", 3)

    def test_sprints_default_limit(self):
        self.client.get("/api/projects/CE/sprints")
        self.catalog.sprints.assert_awaited_once_with("CE", 5)

    def test_sprints_upstream_failure(self):
        self.catalog.sprints.side_effect = ExternalServiceError(
            "jira sprint listing failed", upstream_status=503
        )

        response = self.client.get("/api/projects/CE/sprints")

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["upstream_status"], 503)

    def test_myself(self):
        response = self.client.get("/api/myself")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "alice")


if __name__ == "__main__":
    unittest.main()
