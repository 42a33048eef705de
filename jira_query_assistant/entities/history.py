from __future__ import annotations

from datetime import datetime
from datetime import timezone
from typing import Any
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class PipelineStep(BaseModel):
    """One user-visible stage of a search: derivation, execution, analysis or detail lookup."""

    name: str
    description: str = ""
    status: str
    result: Optional[Any] = None


class IssueSnapshot(BaseModel):
    key: str
    title: str = ""
    url: str = ""


class HistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    query: str = ""
    jql: str = ""
    max_results: int = Field(default=0, alias="maxResults")
    steps: List[PipelineStep] = Field(default_factory=list)
    issues: List[IssueSnapshot] = Field(default_factory=list)
    analysis: str = ""
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
    )

    def find_step_result(self, name: str) -> Optional[Any]:
        for step in self.steps:
            if step.name == name and step.result:
                return step.result
        return None


class Phrase(BaseModel):
    text: str
    description: str = ""
