from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import List
from typing import Optional

from jira_query_assistant.entities.history import HistoryEntry


class HistoryRepositoryInterface(ABC):
    @abstractmethod
    async def append(self, entry: HistoryEntry) -> None:
        pass

    @abstractmethod
    async def latest(self, limit: int) -> List[HistoryEntry]:
        """Return up to limit entries, newest first; limit <= 0 returns all."""
        pass

    @abstractmethod
    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        pass
