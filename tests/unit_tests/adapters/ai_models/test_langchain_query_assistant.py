import unittest
from unittest.mock import MagicMock

from langchain_core.language_models.fake_chat_models import FakeListChatModel

from jira_query_assistant.adapters.ai_models.ai_agents.langchain_query_assistant import (
    LangChainQueryAssistant,
)
from jira_query_assistant.adapters.ai_models.ai_agents.langchain_query_assistant import (
    clean_derived_query,
)
from jira_query_assistant.adapters.ai_models.ai_agents.prompts import analysis_prompt
from jira_query_assistant.adapters.ai_models.ai_agents.prompts import jql_prompt
from jira_query_assistant.adapters.ai_models.llm_models import LLMModels
from jira_query_assistant.settings.gemini_settings import GeminiConnectionSetting
from jira_query_assistant.settings.openai_settings import OpenAISettings


class TestCleanDerivedQuery(unittest.TestCase):
    def test_strips_fences_and_labels(self):
        self.assertEqual(clean_derived_query("```JQL status = Open```"), "status = Open")
        self.assertEqual(clean_derived_query("`SQL project = CE`"), "project = CE")
        self.assertEqual(clean_derived_query("  assignee = currentUser()\n"), "assignee = currentUser()")
        self.assertEqual(clean_derived_query(None), "")


class TestPrompts(unittest.TestCase):
    def test_jql_prompt_variables(self):
        self.assertEqual(jql_prompt().input_variables, ["query"])

    def test_analysis_prompt_variables(self):
        self.assertEqual(sorted(analysis_prompt().input_variables), ["jql", "query", "raw_json"])


class TestLangChainQueryAssistant(unittest.IsolatedAsyncioTestCase):
    def build(self, *responses):
        registry = MagicMock()
        registry.__getitem__.return_value = FakeListChatModel(responses=list(responses))
        return registry, LangChainQueryAssistant(registry, "gpt-4o-mini")

    async def test_derive_query(self):
        registry, assistant = self.build("```JQL project = CE AND status = Open```")
        self.assertEqual(await assistant.derive_query("open CE tasks"), "project = CE AND status = Open")
        registry.__getitem__.assert_called_once_with(("openai", "gpt-4o-mini"))

    async def test_derive_query_rejects_empty_text(self):
        _, assistant = self.build("unused")
        with self.assertRaises(ValueError):
            await assistant.derive_query("   ")

    async def test_summarize(self):
        _, assistant = self.build("  Две задачи, обе открыты.  ")
        summary = await assistant.summarize("мои задачи", "project = CE", {"issues": [{"key": "CE-1"}]})
        self.assertEqual(summary, "Две задачи, обе открыты.")

    async def test_summarize_rejects_empty_results(self):
        _, assistant = self.build("unused")
        with self.assertRaises(ValueError):
            await assistant.summarize("q", "project = CE", [])

    async def test_follow_up(self):
        _, assistant = self.build("CE-2")
        self.assertEqual(await assistant.follow_up("Issues:\n- CE-2: Bug\n", "which one?"), "CE-2")


class TestLLMModels(unittest.TestCase):
    def setUp(self):
        self.models = LLMModels(OpenAISettings(token="sk-test"), GeminiConnectionSetting(token="g-test"))

    def test_openai_model_is_cached(self):
        first = self.models["openai", "gpt-4o-mini"]
        second = self.models["openai", "gpt-4o-mini"]
        self.assertIs(first, second)

    def test_gemini_model_is_cached(self):
        first = self.models["gemini", "gemini-1.5-flash"]
        self.assertIs(first, self.models["gemini", "gemini-1.5-flash"])
        self.assertIsNot(first, self.models["openai", "gpt-4o-mini"])

    def test_unknown_engine(self):
        with self.assertRaises(ValueError):
            self.models["mistral", "large"]
