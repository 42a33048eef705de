from __future__ import annotations

from typing import Dict
from typing import List
from typing import Optional

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class JiraBoardSettings(BaseSettings):
    project_boards: Dict[str, int] = Field(
        default_factory=dict,
        description="Project key to scrum board id, e.g. {\"CE\": 209}",
    )
    default_board_id: Optional[int] = Field(
        default=None,
        description="Board used for sprint lookups when no project is selected",
    )
    hidden_projects: List[str] = Field(
        default_factory=list,
        description="Project keys never offered in the project list",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="jira_board_",
        extra="ignore",
    )

    @field_validator("project_boards")
    @classmethod
    def normalize_project_keys(cls, value: Dict[str, int]) -> Dict[str, int]:
        """Project keys are matched upper-case, so ``{"ce": 209}`` works too."""
        return {key.strip().upper(): board_id for key, board_id in value.items() if key.strip()}

    def board_for(self, project_key: str) -> Optional[int]:
        return self.project_boards.get(project_key.strip().upper())
