from jira_query_assistant.adapters.repositories.file_storage.history_repository import (
    FileHistoryRepository,
)
from jira_query_assistant.adapters.repositories.file_storage.phrase_repository import (
    FilePhraseRepository,
)

__all__ = ["FileHistoryRepository", "FilePhraseRepository"]
