from __future__ import annotations

from datetime import datetime
from typing import Any
from typing import Dict
from typing import Optional

from pydantic import BaseModel

from jira_query_assistant.utils.jira_time import parse_jira_datetime


class Board(BaseModel):
    id: int
    name: str = ""
    type: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "Board":
        return cls(id=raw["id"], name=raw.get("name") or "", type=raw.get("type"))


class Sprint(BaseModel):
    id: int
    name: str = ""
    state: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "Sprint":
        """Build a sprint from an agile API payload; unparseable dates become None."""
        return cls(
            id=raw["id"],
            name=raw.get("name") or "",
            state=raw.get("state"),
            start_date=parse_jira_datetime(raw.get("startDate"), to_utc=False),
            end_date=parse_jira_datetime(raw.get("endDate"), to_utc=False),
        )

    @property
    def has_dates(self) -> bool:
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date <= self.end_date
        )
