from __future__ import annotations

import re
from typing import Optional

from jira_query_assistant.entities import constants
from jira_query_assistant.entities.api_schemas.search import SearchRequest
from jira_query_assistant.entities.constants import DateField
from jira_query_assistant.entities.intent import IntentKeywords
from jira_query_assistant.use_cases.query_pipeline.clause_utils import contains_any
from jira_query_assistant.use_cases.query_pipeline.clause_utils import escape_quotes
from jira_query_assistant.use_cases.query_pipeline.clause_utils import truncate_before_keywords
from jira_query_assistant.use_cases.query_pipeline.intent_classifier import IntentClassifier
from jira_query_assistant.utils.exceptions import EmptyQueryError

TITLE_DIRECTIVE = re.compile(r"(?:название|названием|title)\s*[:\-]\s*(.+)", re.IGNORECASE | re.DOTALL)
TITLE_STRIP_CHARS = "\"'⟨⟩“”«»[]"


def symbolic_window(field: DateField, week: bool) -> str:
    unit = "Week" if week else "Month"
    return f"{field.value} >= startOf{unit}() AND {field.value} <= endOf{unit}()"


class QuerySynthesizer:
    """Produces the base JQL for a request.

    Precedence: explicit override, title directive, external (LLM) suggestion,
    keyword heuristic.
    """

    def __init__(self, keywords: Optional[IntentKeywords] = None):
        keywords = keywords or IntentKeywords()
        self.classifier = IntentClassifier(keywords)
        self.week_keywords = IntentKeywords.flatten(keywords.week_window)
        self.title_stop_keywords = IntentKeywords.flatten(keywords.title_stop)

    def extract_title(self, raw_text: str) -> Optional[str]:
        """Return the value of a ``title:`` / ``название:`` directive, if any.

        The value is cut before the first instruction keyword ("проанализ",
        "describe", ...) and stripped of quotes and brackets.
        """
        match = TITLE_DIRECTIVE.search(raw_text or "")
        if match is None:
            return None
        candidate = truncate_before_keywords(match.group(1).strip(), self.title_stop_keywords)
        candidate = candidate.strip(TITLE_STRIP_CHARS).strip()
        return candidate or None

    def synthesize(
        self,
        request: SearchRequest,
        title_directive: Optional[str] = None,
        external_suggestion: Optional[str] = None,
    ) -> str:
        """Pick the base JQL: explicit JQL, then the title directive, then the
        LLM suggestion, then keyword heuristics.

        Raises:
            EmptyQueryError: none of the sources produced a query
        """
        query = (request.jql or "").strip()
        if not query and title_directive:
            query = self.title_clause(title_directive)
        if not query and external_suggestion:
            query = external_suggestion.strip()
        if not query:
            query = self.derive_from_keywords(request.query)
        if not query:
            raise EmptyQueryError()
        return query

    @staticmethod
    def title_clause(title: str) -> str:
        return f'summary ~ "\\"{escape_quotes(title)}\\""'

    def derive_from_keywords(self, raw_text: str) -> str:
        raw_text = (raw_text or "").strip()
        if not raw_text:
            return ""
        intents = self.classifier.classify(raw_text)
        week = contains_any(raw_text, self.week_keywords)
        if intents.is_bug:
            return (
                f"{symbolic_window(DateField.CREATED, week)}"
                " AND issuetype = Bug AND reporter = currentUser()"
            )
        if intents.is_worklog:
            return (
                f"{symbolic_window(DateField.WORKLOG_DATE, week)}"
                " AND worklogAuthor = currentUser()"
            )
        if contains_any(raw_text, constants.QUERY_SYNTAX_HINTS):
            return raw_text
        return f'text ~ "{escape_quotes(raw_text)}"'
