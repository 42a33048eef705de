from __future__ import annotations

from typing import Optional

from jira_query_assistant.entities.intent import IntentKeywords
from jira_query_assistant.entities.intent import IntentSet
from jira_query_assistant.use_cases.query_pipeline.clause_utils import contains_any


class IntentClassifier:
    """Keyword-signal classification of a request into bug, worklog and sprint intents."""

    def __init__(self, keywords: Optional[IntentKeywords] = None):
        keywords = keywords or IntentKeywords()
        self.bug_keywords = IntentKeywords.flatten(keywords.bug)
        self.worklog_keywords = IntentKeywords.flatten(keywords.worklog)
        self.sprint_keywords = IntentKeywords.flatten(keywords.sprint)

    def classify(self, raw_text: str, query_so_far: str = "") -> IntentSet:
        text = f"{raw_text or ''} {query_so_far or ''}"
        return IntentSet(
            is_bug=contains_any(text, self.bug_keywords),
            is_worklog=contains_any(text, self.worklog_keywords),
            is_sprint_scoped=contains_any(text, self.sprint_keywords),
        )
