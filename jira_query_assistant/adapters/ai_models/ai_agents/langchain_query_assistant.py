from __future__ import annotations

import json
from typing import Any

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from jira_query_assistant import LOGGER
from jira_query_assistant.adapters.ai_models.ai_agents.prompts import analysis_prompt
from jira_query_assistant.adapters.ai_models.ai_agents.prompts import follow_up_prompt
from jira_query_assistant.adapters.ai_models.ai_agents.prompts import jql_prompt
from jira_query_assistant.use_cases.interfaces.llm_model_interface import LLMModelInterface
from jira_query_assistant.use_cases.interfaces.query_assistant_interface import (
    QueryAssistantInterface,
)

JQL_MAX_TOKENS = 120
ANALYSIS_MAX_TOKENS = 400
FOLLOW_UP_MAX_TOKENS = 600
TEMPERATURE = 0.2


def clean_derived_query(text: str) -> str:
    """Strip code fences and a leading ``JQL``/``SQL`` label from model output."""
    text = (text or "").strip().strip("`").strip()
    if text[:3] in ("JQL", "SQL"):
        text = text[3:].strip()
    return text


class LangChainQueryAssistant(QueryAssistantInterface):
    def __init__(
        self,
        model_registry: LLMModelInterface,
        model_name: str,
        engine_name: str = "openai",
    ):
        self.model_registry = model_registry
        self.model_name = model_name
        self.engine_name = engine_name

    async def _run(self, prompt: ChatPromptTemplate, inputs: dict, max_tokens: int) -> str:
        model = self.model_registry[self.engine_name, self.model_name]
        chain = prompt | model | StrOutputParser()
        return await chain.with_config(
            configurable={"llm_temperature": TEMPERATURE, "llm_max_tokens": max_tokens},
        ).ainvoke(inputs)

    async def derive_query(self, raw_text: str) -> str:
        raw_text = (raw_text or "").strip()
        if not raw_text:
            raise ValueError("empty query")
        output = await self._run(jql_prompt(), {"query": raw_text}, JQL_MAX_TOKENS)
        derived = clean_derived_query(output)
        LOGGER.debug(f"LLM derived JQL: {derived}")
        return derived

    async def summarize(self, raw_text: str, query: str, raw_result: Any) -> str:
        if not raw_result:
            raise ValueError("empty results")
        raw_json = json.dumps(raw_result, ensure_ascii=False, default=str)
        output = await self._run(
            analysis_prompt(),
            {"query": raw_text, "jql": query, "raw_json": raw_json},
            ANALYSIS_MAX_TOKENS,
        )
        return output.strip()

    async def follow_up(self, context: str, command: str) -> str:
        output = await self._run(
            follow_up_prompt(),
            {"context": context, "command": command},
            FOLLOW_UP_MAX_TOKENS,
        )
        return output.strip()
