from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
from typing import Iterable
from typing import List

from pydantic import BaseModel
from pydantic import Field

from jira_query_assistant.entities import constants


def _copy(mapping: Dict[str, List[str]]) -> Dict[str, List[str]]:
    return {locale: list(words) for locale, words in mapping.items()}


class IntentKeywords(BaseModel):
    """Locale to keyword mapping for every signal the classifier and synthesizer look for.

    Adding a language means adding a locale key; no code changes.
    """

    bug: Dict[str, List[str]] = Field(default_factory=lambda: _copy(constants.BUG_KEYWORDS))
    worklog: Dict[str, List[str]] = Field(default_factory=lambda: _copy(constants.WORKLOG_KEYWORDS))
    sprint: Dict[str, List[str]] = Field(default_factory=lambda: _copy(constants.SPRINT_KEYWORDS))
    week_window: Dict[str, List[str]] = Field(
        default_factory=lambda: _copy(constants.WEEK_WINDOW_KEYWORDS)
    )
    title_stop: Dict[str, List[str]] = Field(
        default_factory=lambda: _copy(constants.TITLE_STOP_KEYWORDS)
    )

    @staticmethod
    def flatten(mapping: Dict[str, Iterable[str]]) -> List[str]:
        words = []
        for locale in sorted(mapping):
            for word in mapping[locale]:
                word = word.strip().lower()
                if word and word not in words:
                    words.append(word)
        return words


@dataclass(frozen=True)
class IntentSet:
    is_bug: bool = False
    is_worklog: bool = False
    is_sprint_scoped: bool = False

    def as_dict(self) -> Dict[str, bool]:
        return {
            "bug": self.is_bug,
            "worklog": self.is_worklog,
            "sprint": self.is_sprint_scoped,
        }
