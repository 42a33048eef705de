from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DateRangeSource(Enum):
    EXPLICIT_ID = "explicit-id"
    EXPLICIT_NUMBER = "explicit-number"
    ACTIVE_LOOKUP = "active-lookup"
    FALLBACK_HEURISTIC = "fallback-heuristic"
    CALENDAR_MONTH = "calendar-month"


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar window with the resolution step that produced it."""

    start: datetime
    end: datetime
    source: DateRangeSource

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"date range start {self.start} is after end {self.end}")

    @property
    def start_literal(self) -> str:
        return self.start.strftime("%Y-%m-%d")

    @property
    def end_literal(self) -> str:
        return self.end.strftime("%Y-%m-%d")

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end
