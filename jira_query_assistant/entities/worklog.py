from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Dict
from typing import Optional

from jira_query_assistant.entities.date_range import DateRange


@dataclass(frozen=True)
class WorklogEntry:
    author: str
    elapsed_seconds: int
    started: str
    entry_id: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "WorklogEntry":
        author = raw.get("author") or {}
        identifier = (
            author.get("name")
            or author.get("key")
            or author.get("accountId")
            or author.get("emailAddress")
            or ""
        )
        entry_id = raw.get("id")
        return cls(
            author=identifier,
            elapsed_seconds=int(raw.get("timeSpentSeconds") or 0),
            started=raw.get("started") or "",
            entry_id=str(entry_id) if entry_id is not None else None,
        )

    @property
    def identity(self):
        if self.entry_id:
            return self.entry_id
        return (self.author, self.started, self.elapsed_seconds)


@dataclass(frozen=True)
class WorklogSummary:
    hours: float
    total_seconds: int
    issues_scanned: int
    possibly_incomplete: bool
    window: DateRange
