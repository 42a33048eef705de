from jira_query_assistant.frameworks.api.configs.fastapi_doc import (
    api_prefix,
    fastapi_information,
    fastapi_tags_metadata,
)

__all__ = ["api_prefix", "fastapi_information", "fastapi_tags_metadata"]
