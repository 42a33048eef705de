"""File storage implementation of the search history repository."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List
from typing import Optional

from pydantic import ValidationError

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.constants import HISTORY_CAPACITY
from jira_query_assistant.entities.history import HistoryEntry
from jira_query_assistant.use_cases.interfaces.history_repository_interface import (
    HistoryRepositoryInterface,
)


class FileHistoryRepository(HistoryRepositoryInterface):
    """Keeps the latest entries in memory and mirrors them to a JSON file."""

    def __init__(self, history_file_path: str, capacity: int = HISTORY_CAPACITY):
        """Initialize the repository and load any existing history.

        Args:
            history_file_path: Path to the JSON file holding the entries
            capacity: Number of most recent entries to keep
        """
        self.history_file_path = Path(history_file_path)
        self.capacity = capacity
        self._lock = asyncio.Lock()
        self._entries: List[HistoryEntry] = self._load()

    def _load(self) -> List[HistoryEntry]:
        if not self.history_file_path.exists():
            return []
        try:
            with open(self.history_file_path, "r", encoding="utf-8") as file:
                data = json.load(file)
            return [HistoryEntry.model_validate(item) for item in data or []]
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            LOGGER.error(f"Failed to parse history file {self.history_file_path}: {e}")
            return []

    def _save(self) -> None:
        self.history_file_path.parent.mkdir(parents=True, exist_ok=True)
        data = [entry.model_dump(mode="json", by_alias=True) for entry in self._entries]
        with open(self.history_file_path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=2)

    async def append(self, entry: HistoryEntry) -> None:
        async with self._lock:
            self._entries.append(entry)
            if len(self._entries) > self.capacity:
                self._entries = self._entries[-self.capacity:]
            self._save()

    async def latest(self, limit: int) -> List[HistoryEntry]:
        async with self._lock:
            newest_first = list(reversed(self._entries))
        if limit <= 0:
            return newest_first
        return newest_first[:limit]

    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        async with self._lock:
            for entry in reversed(self._entries):
                if entry.id == entry_id:
                    return entry
        return None
