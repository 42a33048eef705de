"""FastAPI application entry point."""

from __future__ import annotations

from jira_query_assistant.config_dependency_injection import get_container
from jira_query_assistant.frameworks.api.api_endpoint import create_app
from jira_query_assistant.frameworks.api.registry import SubServiceEndpoints

app = create_app(get_container()[SubServiceEndpoints])
