"""Dependency injection configuration for the Jira query assistant."""

from __future__ import annotations

from typing import Optional

from lagom import Container, Singleton

from jira_query_assistant import LOGGER
from jira_query_assistant.adapters.ai_models.ai_agents.langchain_query_assistant import (
    LangChainQueryAssistant,
)
from jira_query_assistant.adapters.ai_models.llm_models import LLMModels
from jira_query_assistant.adapters.repositories.file_storage import (
    FileHistoryRepository,
    FilePhraseRepository,
)
from jira_query_assistant.adapters.repositories.jira import JiraRepository
from jira_query_assistant.frameworks.api.endpoints import (
    AccountEndpoint,
    HealthCheckEndpoint,
    HistoryEndpoint,
    PhrasesEndpoint,
    ProjectsEndpoint,
    SearchEndpoint,
)
from jira_query_assistant.frameworks.api.registry import SubServiceEndpoints
from jira_query_assistant.settings import (
    GeminiConnectionSetting,
    JiraBoardSettings,
    JiraConnectionSettings,
    OpenAISettings,
    QuerySettings,
)
from jira_query_assistant.use_cases.catalog.project_catalog_use_case import ProjectCatalogUseCase
from jira_query_assistant.use_cases.history.history_use_case import HistoryUseCase
from jira_query_assistant.use_cases.interfaces.history_repository_interface import (
    HistoryRepositoryInterface,
)
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.use_cases.interfaces.llm_model_interface import LLMModelInterface
from jira_query_assistant.use_cases.interfaces.phrase_repository_interface import (
    PhraseRepositoryInterface,
)
from jira_query_assistant.use_cases.interfaces.query_assistant_interface import (
    QueryAssistantInterface,
)
from jira_query_assistant.use_cases.query_pipeline.intent_classifier import IntentClassifier
from jira_query_assistant.use_cases.query_pipeline.query_synthesizer import QuerySynthesizer
from jira_query_assistant.use_cases.query_pipeline.search_pipeline import SearchQueryUseCase
from jira_query_assistant.use_cases.query_pipeline.sprint_range_resolver import (
    BoardResolver,
    SprintRangeResolver,
)
from jira_query_assistant.use_cases.query_pipeline.worklog_aggregator import WorklogAggregator

# Global container instance
_container = None


def build_query_assistant(container: Container) -> Optional[QueryAssistantInterface]:
    """Build the assistant for the engine selected by ``QUERY_LLM_ENGINE``.

    Returns:
        The assistant, or None when the selected engine has no token
    """
    engine = container[QuerySettings].llm_engine
    if engine == "gemini":
        engine_settings = container[GeminiConnectionSetting]
    else:
        engine_settings = container[OpenAISettings]
    if not engine_settings.enabled:
        LOGGER.info(f"{engine} token not configured, LLM features are disabled")
        return None
    return LangChainQueryAssistant(
        container[LLMModelInterface], engine_settings.model, engine_name=engine
    )


def configure_container() -> Container:
    """Configure the dependency injection container.

    Returns:
        Configured Lagom container
    """
    container = Container()

    # Settings
    container[JiraConnectionSettings] = Singleton(lambda: JiraConnectionSettings())
    container[JiraBoardSettings] = Singleton(lambda: JiraBoardSettings())
    container[OpenAISettings] = Singleton(lambda: OpenAISettings())
    container[GeminiConnectionSetting] = Singleton(lambda: GeminiConnectionSetting())
    container[QuerySettings] = Singleton(lambda: QuerySettings())

    # A) Bind INTERFACE -> ADAPTER
    container[IssueTrackerRepositoryInterface] = Singleton(
        lambda c: JiraRepository(c[JiraConnectionSettings])
    )
    container[HistoryRepositoryInterface] = Singleton(
        lambda c: FileHistoryRepository(str(c[QuerySettings].history_file))
    )
    container[PhraseRepositoryInterface] = Singleton(
        lambda c: FilePhraseRepository(str(c[QuerySettings].phrases_file))
    )
    container[LLMModelInterface] = Singleton(
        lambda c: LLMModels(c[OpenAISettings], c[GeminiConnectionSetting])
    )

    # B) Pipeline components
    container[QuerySynthesizer] = Singleton(
        lambda c: QuerySynthesizer(c[QuerySettings].intent_keywords)
    )
    container[IntentClassifier] = Singleton(
        lambda c: IntentClassifier(c[QuerySettings].intent_keywords)
    )
    container[BoardResolver] = Singleton(
        lambda c: BoardResolver(c[IssueTrackerRepositoryInterface], c[JiraBoardSettings])
    )
    container[SprintRangeResolver] = Singleton(
        lambda c: SprintRangeResolver(c[IssueTrackerRepositoryInterface])
    )
    container[WorklogAggregator] = Singleton(
        lambda c: WorklogAggregator(c[IssueTrackerRepositoryInterface])
    )

    # C) Use cases
    container[SearchQueryUseCase] = Singleton(
        lambda c: SearchQueryUseCase(
            issue_tracker=c[IssueTrackerRepositoryInterface],
            history_repository=c[HistoryRepositoryInterface],
            synthesizer=c[QuerySynthesizer],
            classifier=c[IntentClassifier],
            board_resolver=c[BoardResolver],
            sprint_resolver=c[SprintRangeResolver],
            worklog_aggregator=c[WorklogAggregator],
            assistant=build_query_assistant(c),
            timeout_seconds=c[QuerySettings].request_timeout_seconds,
        )
    )
    container[HistoryUseCase] = Singleton(
        lambda c: HistoryUseCase(
            history_repository=c[HistoryRepositoryInterface],
            assistant=build_query_assistant(c),
        )
    )
    container[ProjectCatalogUseCase] = Singleton(
        lambda c: ProjectCatalogUseCase(
            issue_tracker=c[IssueTrackerRepositoryInterface],
            board_resolver=c[BoardResolver],
            board_settings=c[JiraBoardSettings],
        )
    )

    # D) API endpoints
    container[SearchEndpoint] = Singleton(lambda c: SearchEndpoint(c[SearchQueryUseCase]))
    container[HistoryEndpoint] = Singleton(lambda c: HistoryEndpoint(c[HistoryUseCase]))
    container[PhrasesEndpoint] = Singleton(lambda c: PhrasesEndpoint(c[PhraseRepositoryInterface]))
    container[ProjectsEndpoint] = Singleton(lambda c: ProjectsEndpoint(c[ProjectCatalogUseCase]))
    container[AccountEndpoint] = Singleton(lambda c: AccountEndpoint(c[ProjectCatalogUseCase]))
    container[HealthCheckEndpoint] = Singleton(lambda: HealthCheckEndpoint())
    container[SubServiceEndpoints] = Singleton(lambda c: register_endpoints(c))

    return container


def register_endpoints(container: Container) -> SubServiceEndpoints:
    registry = SubServiceEndpoints()
    for endpoint_type in (
        SearchEndpoint,
        HistoryEndpoint,
        PhrasesEndpoint,
        ProjectsEndpoint,
        AccountEndpoint,
        HealthCheckEndpoint,
    ):
        registry.register(container[endpoint_type])
    return registry


def get_container() -> Container:
    """Get the global container instance.

    Returns:
        The configured container
    """
    global _container
    if _container is None:
        _container = configure_container()
    return _container
