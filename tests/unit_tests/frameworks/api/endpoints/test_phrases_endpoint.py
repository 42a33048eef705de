"""Unit tests for the saved phrases endpoint."""

import unittest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from jira_query_assistant.entities.history import Phrase
from jira_query_assistant.frameworks.api.api_endpoint import create_app
from jira_query_assistant.frameworks.api.endpoints.phrases import PhrasesEndpoint
from jira_query_assistant.frameworks.api.registry import SubServiceEndpoints
from jira_query_assistant.use_cases.interfaces.phrase_repository_interface import (
    PhraseRepositoryInterface,
)


class TestPhrasesEndpoint(unittest.TestCase):
    """Test suite for PhrasesEndpoint."""

    def setUp(self):
        self.phrase_repository = MagicMock(spec=PhraseRepositoryInterface)
        self.phrase_repository.list = AsyncMock(return_value=[Phrase(text="мои баги")])
        self.phrase_repository.replace = AsyncMock(side_effect=lambda phrases: phrases)
        registry = SubServiceEndpoints()
        registry.register(PhrasesEndpoint(self.phrase_repository))
        self.client = TestClient(create_app(registry))

    def test_list(self):
        response = self.client.get("/api/phrases")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{"text": "мои баги", "description": ""}])

    def test_replace_accepts_strings_and_objects(self):
        response = self.client.post(
            "/api/phrases",
            json={"phrases": ["списал за спринт", {"text": "bugs", "description": "my bugs"}]},
        )

        self.assertEqual(response.status_code, 200)
        phrases = self.phrase_repository.replace.await_args.args[0]
        self.assertEqual(
            phrases,
            [Phrase(text="списал за спринт"), Phrase(text="bugs", description="my bugs")],
        )

    def test_replace_storage_failure(self):
        self.phrase_repository.replace.side_effect = OSError("disk full")

        response = self.client.post("/api/phrases", json={"phrases": []})

        self.assertEqual(response.status_code, 500)


if __name__ == "__main__":
    unittest.main()
