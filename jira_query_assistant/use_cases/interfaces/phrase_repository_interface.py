from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import List

from jira_query_assistant.entities.history import Phrase


class PhraseRepositoryInterface(ABC):
    @abstractmethod
    async def list(self) -> List[Phrase]:
        pass

    @abstractmethod
    async def replace(self, phrases: List[Phrase]) -> List[Phrase]:
        pass
