from jira_query_assistant.adapters.repositories.jira.jira_repository import JiraRepository

__all__ = ["JiraRepository"]
