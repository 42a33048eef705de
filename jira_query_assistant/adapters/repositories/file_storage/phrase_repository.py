"""File storage implementation of the saved phrase repository."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List

from pydantic import ValidationError

from jira_query_assistant import LOGGER
from jira_query_assistant.entities.history import Phrase
from jira_query_assistant.use_cases.interfaces.phrase_repository_interface import (
    PhraseRepositoryInterface,
)


def normalize_phrases(phrases: List[Phrase]) -> List[Phrase]:
    """Trim text and description, drop empty texts, keep the first phrase per text."""
    unique: List[Phrase] = []
    seen = set()
    for phrase in phrases:
        text = (phrase.text or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        unique.append(Phrase(text=text, description=(phrase.description or "").strip()))
    return unique


class FilePhraseRepository(PhraseRepositoryInterface):
    """Phrases stored as a JSON list; the older list-of-strings layout is upgraded on load."""

    def __init__(self, phrases_file_path: str):
        self.phrases_file_path = Path(phrases_file_path)
        self._lock = asyncio.Lock()
        self._phrases: List[Phrase] = self._load()

    def _load(self) -> List[Phrase]:
        if not self.phrases_file_path.exists():
            return []
        try:
            with open(self.phrases_file_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            LOGGER.error(f"Failed to parse phrases file {self.phrases_file_path}: {e}")
            return []
        if not isinstance(data, list):
            LOGGER.warning(f"Invalid phrases file format: {self.phrases_file_path}")
            return []

        if all(isinstance(item, str) for item in data):
            phrases = normalize_phrases([Phrase(text=item) for item in data])
            LOGGER.info(f"Migrating {len(phrases)} legacy phrases in {self.phrases_file_path}")
            self._phrases = phrases
            self._save()
            return phrases
        try:
            return [Phrase.model_validate(item) for item in data]
        except ValidationError as e:
            LOGGER.error(f"Invalid phrase entry in {self.phrases_file_path}: {e}")
            return []

    def _save(self) -> None:
        self.phrases_file_path.parent.mkdir(parents=True, exist_ok=True)
        data = [phrase.model_dump(exclude_defaults=True) for phrase in self._phrases]
        with open(self.phrases_file_path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=2)

    async def list(self) -> List[Phrase]:
        async with self._lock:
            return [phrase.model_copy() for phrase in self._phrases]

    async def replace(self, phrases: List[Phrase]) -> List[Phrase]:
        async with self._lock:
            self._phrases = normalize_phrases(phrases)
            self._save()
            return [phrase.model_copy() for phrase in self._phrases]
