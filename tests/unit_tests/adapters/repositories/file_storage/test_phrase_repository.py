"""Tests for FilePhraseRepository."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest import IsolatedAsyncioTestCase

from jira_query_assistant.adapters.repositories.file_storage.phrase_repository import (
    FilePhraseRepository,
)
from jira_query_assistant.adapters.repositories.file_storage.phrase_repository import (
    normalize_phrases,
)
from jira_query_assistant.entities.history import Phrase


class TestNormalizePhrases(unittest.TestCase):
    def test_trims_and_deduplicates(self) -> None:
        phrases = normalize_phrases(
            [
                Phrase(text="  мои баги  ", description=" bugs "),
                Phrase(text="мои баги", description="duplicate"),
                Phrase(text="   "),
                Phrase(text="worklog"),
            ]
        )
        self.assertEqual(
            phrases,
            [Phrase(text="мои баги", description="bugs"), Phrase(text="worklog")],
        )


class TestFilePhraseRepository(IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.phrases_file_path = Path(self.temp_dir.name) / "phrases.json"

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def read_file(self):
        with open(self.phrases_file_path, encoding="utf-8") as f:
            return json.load(f)

    async def test_missing_file(self) -> None:
        repo = FilePhraseRepository(str(self.phrases_file_path))
        self.assertEqual(await repo.list(), [])

    async def test_legacy_list_is_migrated(self) -> None:
        with open(self.phrases_file_path, "w", encoding="utf-8") as f:
            json.dump(["мои задачи", " мои задачи ", "", "списал за спринт"], f, ensure_ascii=False)

        repo = FilePhraseRepository(str(self.phrases_file_path))

        self.assertEqual(
            [p.text for p in await repo.list()],
            ["мои задачи", "списал за спринт"],
        )
        self.assertEqual(
            self.read_file(),
            [{"text": "мои задачи"}, {"text": "списал за спринт"}],
        )

    async def test_object_format_is_loaded(self) -> None:
        with open(self.phrases_file_path, "w", encoding="utf-8") as f:
            json.dump([{"text": "bugs", "description": "my bugs"}], f)

        repo = FilePhraseRepository(str(self.phrases_file_path))
        self.assertEqual(await repo.list(), [Phrase(text="bugs", description="my bugs")])

    async def test_replace_persists(self) -> None:
        repo = FilePhraseRepository(str(self.phrases_file_path))
        saved = await repo.replace([Phrase(text=" a "), Phrase(text="a"), Phrase(text="b", description="x")])

        self.assertEqual(saved, [Phrase(text="a"), Phrase(text="b", description="x")])
        self.assertEqual(self.read_file(), [{"text": "a"}, {"text": "b", "description": "x"}])

        reloaded = FilePhraseRepository(str(self.phrases_file_path))
        self.assertEqual(await reloaded.list(), saved)

    async def test_list_returns_copies(self) -> None:
        repo = FilePhraseRepository(str(self.phrases_file_path))
        await repo.replace([Phrase(text="a")])
        listed = await repo.list()
        listed[0].text = "changed"
        self.assertEqual((await repo.list())[0].text, "a")

    async def test_invalid_file_starts_empty(self) -> None:
        self.phrases_file_path.write_text('{"phrases": []}', encoding="utf-8")
        repo = FilePhraseRepository(str(self.phrases_file_path))
        self.assertEqual(await repo.list(), [])


if __name__ == "__main__":
    unittest.main()
