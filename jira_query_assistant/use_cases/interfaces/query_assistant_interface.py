from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Any


class QueryAssistantInterface(ABC):
    """Optional generative-model capability; a missing assistant is a valid setup."""

    @abstractmethod
    async def derive_query(self, raw_text: str) -> str:
        """
        Translate a natural-language request into JQL, or return an empty string.
        """
        pass

    @abstractmethod
    async def summarize(self, raw_text: str, query: str, raw_result: Any) -> str:
        """
        Summarize a search result for the user who asked raw_text.
        """
        pass

    @abstractmethod
    async def follow_up(self, context: str, command: str) -> str:
        """
        Answer a follow-up command about an earlier search.
        """
        pass
