"""FastAPI configuration settings."""

from __future__ import annotations

from typing import Any, Dict, List

from jira_query_assistant import __version__

# API version prefix
api_prefix: str = "/api"

# FastAPI information dictionary
fastapi_information: Dict[str, Any] = {
    "title": "Jira Query Assistant API",
    "description": "Natural-language search over Jira with JQL rewriting and worklog totals",
    "version": __version__,
    "openapi_url": f"{api_prefix}/openapi.json",
    "docs_url": f"{api_prefix}/docs",
    "redoc_url": f"{api_prefix}/redoc",
}

# FastAPI tags metadata for API documentation
fastapi_tags_metadata: List[Dict[str, str]] = [
    {
        "name": "Search",
        "description": "Turn a request into JQL, run it and summarize the result",
    },
    {
        "name": "History",
        "description": "Stored searches, issue lookup inside them and follow-up commands",
    },
    {
        "name": "Phrases",
        "description": "Saved query phrases",
    },
    {
        "name": "Projects",
        "description": "Visible Jira projects and their sprints",
    },
    {
        "name": "Account",
        "description": "The Jira account the service runs as",
    },
    {
        "name": "Health",
        "description": "Health check endpoints for monitoring service status",
    },
]
