"""API endpoints package."""

__all__ = [
    "AccountEndpoint",
    "HealthCheckEndpoint",
    "HistoryEndpoint",
    "PhrasesEndpoint",
    "ProjectsEndpoint",
    "SearchEndpoint",
]

from jira_query_assistant.frameworks.api.endpoints.account import AccountEndpoint
from jira_query_assistant.frameworks.api.endpoints.health_check import HealthCheckEndpoint
from jira_query_assistant.frameworks.api.endpoints.history import HistoryEndpoint
from jira_query_assistant.frameworks.api.endpoints.phrases import PhrasesEndpoint
from jira_query_assistant.frameworks.api.endpoints.projects import ProjectsEndpoint
from jira_query_assistant.frameworks.api.endpoints.search import SearchEndpoint
