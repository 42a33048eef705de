from __future__ import annotations

from enum import Enum


class ClauseKind(Enum):
    """JQL fields the clause rewriter knows how to override."""
    PROJECT = "project"
    ASSIGNEE = "assignee"
    REPORTER = "reporter"
    WORKLOG_AUTHOR = "worklogAuthor"


class DateField(Enum):
    """Date fields that carry sprint and month windows."""
    CREATED = "created"
    WORKLOG_DATE = "worklogDate"


class StepName(Enum):
    """Names of the pipeline steps persisted with each history entry."""
    GENERATE_JQL = "Generate JQL"
    EXECUTE_SEARCH = "Execute Jira search"
    ANALYSIS = "Analysis"
    ISSUE_DETAILS = "Issue details"


class StepStatus(Enum):
    COMPLETED = "completed"
    FAILED = "failed"


DEFAULT_MAX_RESULTS = 300
WORKLOG_PAGE_SIZE = 50
WORKLOG_ISSUE_HARD_LIMIT = 2000
WORKLOG_OVERFLOW_PAGE_SIZE = 1000
SPRINT_SEARCH_PAGE_SIZE = 200
SPRINT_LIST_PAGE_SIZE = 50
HISTORY_CAPACITY = 100
ERROR_BODY_LIMIT = 400

ISSUE_DETAIL_FIELDS = "summary,description,status,issuetype"

BUG_KEYWORDS = {
    "en": ["bug", "defect"],
    "ru": ["ошиб", "баг", "дефект", "заведен"],
}
WORKLOG_KEYWORDS = {
    "en": ["worklog", "time spent", "logged"],
    "ru": ["сколько времени", "затрек", "списал", "списан", "затрачен"],
}
SPRINT_KEYWORDS = {
    "en": ["sprint"],
    "ru": ["спринт"],
}
WEEK_WINDOW_KEYWORDS = {
    "en": ["week", "sprint"],
    "ru": ["недел", "спринт"],
}
TITLE_STOP_KEYWORDS = {
    "en": ["analyze", "analyse", "describe", "test", "find", "write"],
    "ru": ["проанализ", "опис", "тест", "найд", "напиш"],
}
QUERY_SYNTAX_HINTS = ["project ", "assignee ", "status "]
