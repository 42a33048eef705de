from __future__ import annotations

from typing import Tuple

from langchain_core.runnables import ConfigurableField
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from jira_query_assistant.settings.gemini_settings import GeminiConnectionSetting
from jira_query_assistant.settings.openai_settings import OpenAISettings
from jira_query_assistant.use_cases.interfaces.llm_model_interface import (
    LLMModelInterface,
)

TEMPERATURE_FIELD = ConfigurableField(
    id="llm_temperature",
    name="LLM Temperature",
    description="The temperature of the LLM",
)
MAX_TOKENS_FIELD = ConfigurableField(
    id="llm_max_tokens",
    name="LLM Max Tokens",
    description="Upper bound on generated tokens",
)


class LLMModels(LLMModelInterface):
    def __init__(
        self,
        openai_settings: OpenAISettings,
        gemini_settings: GeminiConnectionSetting,
    ):
        self.models = {}
        self.openai_settings = openai_settings
        self.gemini_settings = gemini_settings

    def __getitem__(self, key: Tuple[str, str]):
        engine_name, model_name = key
        try:
            return self.models[engine_name][model_name]
        except KeyError:
            self.register(engine_name, model_name)
            return self.models[engine_name][model_name]

    def register(self, engine_name: str, model_name: str):
        if self.models.get(engine_name) is None:
            self.models[engine_name] = {}
        if self.models[engine_name].get(model_name) is not None:
            return
        try:
            factory = self.__getattribute__(f"register_{engine_name}_model")
        except AttributeError as e:
            raise ValueError(f"Unknown LLM engine '{engine_name}'") from e
        self.models[engine_name][model_name] = factory(model_name)

    def register_openai_model(self, model_name: str):
        return ChatOpenAI(
            model=model_name,
            api_key=self.openai_settings.token,
        ).configurable_fields(
            temperature=TEMPERATURE_FIELD,
            max_tokens=MAX_TOKENS_FIELD,
        )

    def register_gemini_model(self, model_name: str):
        return ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=self.gemini_settings.token,
        ).configurable_fields(
            temperature=TEMPERATURE_FIELD,
            max_output_tokens=MAX_TOKENS_FIELD,
        )
