"""Override, default-filter and date-window rewriting of JQL clauses.

Every function takes a query string and returns a new one; nothing is
mutated in place. Clause detection works on the clause lists from
``clause_parser``, descending into parenthesized groups, so removing a clause
also removes the connector in front of it and the result never starts or
ends with a bare AND/OR.
"""

from __future__ import annotations

import re
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from jira_query_assistant.entities.constants import ClauseKind
from jira_query_assistant.entities.constants import DateField
from jira_query_assistant.entities.date_range import DateRange
from jira_query_assistant.use_cases.query_pipeline.clause_parser import ParsedQuery
from jira_query_assistant.use_cases.query_pipeline.clause_parser import QueryClause
from jira_query_assistant.use_cases.query_pipeline.clause_parser import parse_query
from jira_query_assistant.use_cases.query_pipeline.clause_parser import unwrap_group
from jira_query_assistant.use_cases.query_pipeline.clause_utils import ensure_valid_fields
from jira_query_assistant.use_cases.query_pipeline.clause_utils import normalize_clause
from jira_query_assistant.use_cases.query_pipeline.clause_utils import quote_list

_WINDOW_START = re.compile(r"^startOf(Week|Month)\(\s*\)$", re.IGNORECASE)
_WINDOW_END = re.compile(r"^endOf(Week|Month)\(\s*\)$", re.IGNORECASE)
_DATE_LITERAL = re.compile(r'^"[0-9-]+"$')


def _group_clauses(clause: QueryClause) -> Optional[ParsedQuery]:
    if clause.field is not None:
        return None
    body = unwrap_group(clause.text)
    if body is None:
        return None
    return parse_query(body)


def is_overridable(clause: QueryClause, kind: ClauseKind) -> bool:
    """Match ``kind in (...)``, ``kind = currentUser()`` and ``kind = value``."""
    if not clause.is_field(kind.value) or not clause.operand:
        return False
    if clause.operator == "in":
        return clause.operand.startswith("(") and clause.operand.endswith(")")
    return clause.operator == "="


def constrains_only(clause: QueryClause, kind: ClauseKind) -> bool:
    """True for an overridable clause or a group built only from such clauses.

    Args:
        clause: Top-level or nested clause
        kind: Field being overridden

    Returns:
        Whether dropping the clause removes nothing but ``kind`` constraints
    """
    if is_overridable(clause, kind):
        return True
    group = _group_clauses(clause)
    if group is None or not group.clauses:
        return False
    return all(constrains_only(inner, kind) for inner in group.clauses)


def override(query: str, kind: ClauseKind, values: Iterable[str]) -> str:
    """Replace every constraint on ``kind`` with one ``kind in (...)`` clause.

    Groups that mix ``kind`` with other fields are left alone.

    Args:
        query: JQL to rewrite
        kind: Field to override
        values: Replacement values; blank entries are ignored

    Returns:
        The rewritten query, or the input unchanged when no value remains
    """
    values = ensure_valid_fields(values)
    if not values:
        return query
    parsed = parse_query(query).remove(lambda clause: constrains_only(clause, kind))
    return parsed.append(f"{kind.value} in ({quote_list(values)})").render()


def override_projects(query: str, projects: Iterable[str]) -> str:
    return override(query, ClauseKind.PROJECT, projects)


def override_assignees(query: str, assignees: Iterable[str]) -> str:
    return override(query, ClauseKind.ASSIGNEE, assignees)


def override_reporters(query: str, reporters: Iterable[str]) -> str:
    return override(query, ClauseKind.REPORTER, reporters)


def override_worklog_authors(query: str, authors: Iterable[str]) -> str:
    return override(query, ClauseKind.WORKLOG_AUTHOR, authors)


def apply_default_filters(query: str, projects: Iterable[str] = None, users: Iterable[str] = None) -> str:
    """Add project/assignee filters only where the query does not constrain them at all."""
    clauses: List[str] = []
    base = normalize_clause(query)
    if base:
        clauses.append(base)
    lowered = (query or "").lower()
    projects = ensure_valid_fields(projects)
    if projects and not any(hint in lowered for hint in ("project in", "project=", "project ")):
        clauses.append(f"project in ({quote_list(projects)})")
    users = ensure_valid_fields(users)
    if users and "assignee" not in lowered and "worklogauthor" not in lowered:
        clauses.append(f"assignee in ({quote_list(users)})")
    return " AND ".join(clauses)


def _bound(clause: QueryClause, field: DateField, operator: str, pattern: re.Pattern) -> bool:
    return (
        clause.is_field(field.value)
        and clause.operator == operator
        and bool(pattern.match(clause.operand or ""))
    )


def _range_pairs(parsed: ParsedQuery, field: DateField, start_pattern, end_pattern) -> List[int]:
    """Indexes of ``field >= x AND field <= y`` pairs matching the given bound patterns."""
    indexes = []
    clauses = parsed.clauses
    position = 0
    while position < len(clauses) - 1:
        lower, upper = clauses[position], clauses[position + 1]
        if (
            _bound(lower, field, ">=", start_pattern)
            and _bound(upper, field, "<=", end_pattern)
            and upper.connector == "AND"
        ):
            indexes.append(position)
            position += 2
        else:
            position += 1
    return indexes


def _strip_literal_pairs(parsed: ParsedQuery, field: DateField) -> ParsedQuery:
    doomed = set()
    for position in _range_pairs(parsed, field, _DATE_LITERAL, _DATE_LITERAL):
        doomed.update({position, position + 1})
    kept = []
    for index, clause in enumerate(parsed.clauses):
        if index in doomed:
            continue
        group = _group_clauses(clause)
        if group is not None:
            inner = _strip_literal_pairs(group, field)
            if not inner.clauses:
                continue
            if len(inner.clauses) != len(group.clauses):
                clause = QueryClause.from_text(f"({inner.render()})", clause.connector)
        kept.append(clause)
    return ParsedQuery(clauses=kept, order_by=parsed.order_by)


def strip_literal_range(query: str, field: DateField) -> str:
    """Drop ``field >= "date" AND field <= "date"`` pairs, inside groups too.

    A group left empty is dropped together with its connector.
    """
    return _strip_literal_pairs(parse_query(query), field).render()


def _pin_bound(clause: QueryClause, date_range: DateRange) -> Optional[QueryClause]:
    for field in DateField:
        if _bound(clause, field, ">=", _WINDOW_START):
            return QueryClause.from_text(
                f'{field.value} >= "{date_range.start_literal}"', clause.connector
            )
        if _bound(clause, field, "<=", _WINDOW_END):
            return QueryClause.from_text(
                f'{field.value} <= "{date_range.end_literal}"', clause.connector
            )
    return None


def pin_windows(parsed: ParsedQuery, date_range: DateRange) -> Tuple[ParsedQuery, bool]:
    """Replace every ``startOfWeek()``/``endOfMonth()`` style bound with a literal date.

    Bounds are replaced one by one, so a window split by other clauses or
    nested in parentheses is pinned as well as an adjacent pair.

    Args:
        parsed: Parsed query
        date_range: Window whose first and last day replace the symbolic bounds

    Returns:
        The rewritten query and whether any bound was replaced
    """
    replaced = False
    clauses = []
    for clause in parsed.clauses:
        pinned = _pin_bound(clause, date_range)
        if pinned is None:
            group = _group_clauses(clause)
            if group is not None:
                inner, inner_replaced = pin_windows(group, date_range)
                if inner_replaced:
                    pinned = QueryClause.from_text(f"({inner.render()})", clause.connector)
        if pinned is not None:
            replaced = True
            clause = pinned
        clauses.append(clause)
    return ParsedQuery(clauses=clauses, order_by=parsed.order_by), replaced


def apply_date_range(query: str, date_range: DateRange) -> str:
    """Pin the query to concrete dates.

    Existing literal ranges on created/worklogDate are dropped first, then
    startOfWeek()/startOfMonth() style bounds are replaced by the literal
    dates wherever they appear. Without such a bound a range is appended on
    worklogDate when the query filters by worklog author, otherwise on
    created.

    Args:
        query: JQL to pin
        date_range: Sprint or fallback window; None leaves the query as is

    Returns:
        The query with no symbolic week or month window left
    """
    if date_range is None:
        return query
    for field in DateField:
        query = strip_literal_range(query, field)

    parsed, replaced = pin_windows(parse_query(query), date_range)
    if replaced:
        return parsed.render()

    if "worklogauthor" in query.lower():
        field = DateField.WORKLOG_DATE
    else:
        field = DateField.CREATED
    parsed = parsed.append(f'{field.value} >= "{date_range.start_literal}"')
    return parsed.append(f'{field.value} <= "{date_range.end_literal}"').render()
