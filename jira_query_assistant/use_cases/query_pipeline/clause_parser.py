"""Split a JQL string into top-level clauses and render it back.

Only the outermost level is parsed: parenthesized groups, quoted values and
anything that is not ``field operator operand`` are kept as opaque text.
Rendering always uses upper-case connectors and never emits a connector
without a clause on both sides.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Callable
from typing import List
from typing import Optional

_CONNECTOR_AT = re.compile(r"(and|or)(?=[\s(]|$)", re.IGNORECASE)
_ORDER_BY_AT = re.compile(r"order\s+by\b", re.IGNORECASE)
_CLAUSE = re.compile(
    r"^(?P<field>cf\[\d+\]|[A-Za-z_][\w.]*)\s*"
    r"(?P<operator>!=|>=|<=|!~|=|~|>|<|"
    r"(?:was\s+not\s+in|was\s+in|was\s+not|was|not\s+in|in|is\s+not|is|changed)\b)"
    r"\s*(?P<operand>.*)$",
    re.IGNORECASE | re.DOTALL,
)
_WHITESPACE = re.compile(r"\s+")


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char in "_."


@dataclass
class QueryClause:
    text: str
    connector: str = "AND"
    field: Optional[str] = None
    operator: Optional[str] = None
    operand: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, connector: str = "AND") -> "QueryClause":
        text = text.strip()
        match = _CLAUSE.match(text)
        if match is None:
            return cls(text=text, connector=connector)
        return cls(
            text=text,
            connector=connector,
            field=match.group("field"),
            operator=_WHITESPACE.sub(" ", match.group("operator")).lower(),
            operand=match.group("operand").strip(),
        )

    def is_field(self, name: str) -> bool:
        return self.field is not None and self.field.lower() == name.lower()


@dataclass
class ParsedQuery:
    clauses: List[QueryClause] = dataclass_field(default_factory=list)
    order_by: str = ""

    def render(self) -> str:
        parts = []
        for clause in self.clauses:
            if parts:
                parts.append(clause.connector)
            parts.append(clause.text)
        if self.order_by:
            parts.append(self.order_by)
        return " ".join(parts).strip()

    def remove(self, predicate: Callable[[QueryClause], bool]) -> "ParsedQuery":
        kept = [clause for clause in self.clauses if not predicate(clause)]
        return ParsedQuery(clauses=kept, order_by=self.order_by)

    def append(self, text: str, connector: str = "AND") -> "ParsedQuery":
        clauses = self.clauses + [QueryClause.from_text(text, connector)]
        return ParsedQuery(clauses=clauses, order_by=self.order_by)

    def find(self, predicate: Callable[[QueryClause], bool]) -> List[QueryClause]:
        return [clause for clause in self.clauses if predicate(clause)]


def parse_query(text: str) -> ParsedQuery:
    text = (text or "").strip()
    segments = []
    order_by = ""
    connector = "AND"
    depth = 0
    quote = None
    escaped = False
    segment_start = 0
    end = len(text)
    index = 0
    while index < end:
        char = text[index]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            index += 1
            continue
        if char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif depth == 0 and (index == 0 or not _is_word_char(text[index - 1])):
            match = _ORDER_BY_AT.match(text, index)
            if match:
                order_by = _WHITESPACE.sub(" ", text[index:]).strip()
                end = index
                break
            match = _CONNECTOR_AT.match(text, index)
            if match:
                segments.append((connector, text[segment_start:index]))
                connector = match.group(1).upper()
                index = match.end()
                segment_start = index
                continue
        index += 1
    segments.append((connector, text[segment_start:end]))

    # An empty segment comes from doubled connectors; the later connector wins.
    clauses = [
        QueryClause.from_text(segment, segment_connector)
        for segment_connector, segment in segments
        if segment.strip()
    ]
    return ParsedQuery(clauses=clauses, order_by=order_by)


def unwrap_group(text: str) -> Optional[str]:
    """Return the inside of a parenthesized group.

    Args:
        text: Clause text, e.g. ``(a = 1 OR b = 2)``

    Returns:
        The text between the outer parentheses when they enclose the whole
        clause, otherwise None (``(a) OR (b)``, ``NOT (a)``, plain clauses).
    """
    text = (text or "").strip()
    if not (text.startswith("(") and text.endswith(")")):
        return None
    depth = 0
    quote = None
    escaped = False
    last = len(text) - 1
    for index, char in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index != last:
                return None
    if depth != 0:
        return None
    return text[1:-1].strip()
