from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from jira_query_assistant.entities.sprint import Board
from jira_query_assistant.entities.sprint import Sprint


class IssueTrackerRepositoryInterface(ABC):
    """Read path into the issue tracker.

    Every method is a suspension point; failures are raised as
    ExternalServiceError carrying the upstream status and body.
    """

    @property
    @abstractmethod
    def base_url(self) -> str:
        pass

    @property
    @abstractmethod
    def username(self) -> str:
        pass

    @abstractmethod
    async def search(
        self,
        query: str,
        max_results: int,
        start_at: int = 0,
        fields: Optional[Sequence[str]] = None,
    ) -> Tuple[Dict[str, Any], int]:
        """Run a JQL search and return the raw payload with its total."""
        pass

    @abstractmethod
    async def get(self, path: str) -> Any:
        """GET a REST path relative to the server and return the decoded JSON."""
        pass

    @abstractmethod
    async def list_sprints(self, board_id: int, state: str, max_results: int) -> List[Sprint]:
        pass

    @abstractmethod
    async def get_sprint(self, sprint_id: int) -> Sprint:
        pass

    @abstractmethod
    async def active_sprints(self, board_id: int) -> List[Sprint]:
        pass

    @abstractmethod
    async def boards_for_project(self, project_key: str) -> List[Board]:
        pass

    @abstractmethod
    async def myself(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def projects(self) -> List[Dict[str, Any]]:
        pass
