"""Low-level text helpers shared by every stage that touches a JQL string."""

from __future__ import annotations

import re
from typing import Iterable
from typing import List

_DUPLICATE_CONNECTORS = re.compile(r"\b(AND|OR)\s+(AND|OR)\b", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_QUOTED = re.compile(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'')


def escape_quotes(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def ensure_valid_fields(values: Iterable[str] = None) -> List[str]:
    """Drop blank entries so Jira never receives an empty field or value."""
    if not values:
        return []
    cleaned = []
    for value in values:
        value = (value or "").strip()
        if value:
            cleaned.append(value)
    return cleaned


def quote_list(values: Iterable[str]) -> str:
    return ",".join(f'"{escape_quotes(value)}"' for value in values)


def contains_field(fields: Iterable[str], target: str) -> bool:
    target = target.lower()
    return any(field.strip().lower() == target for field in fields)


def trim_leading_logical(text: str) -> str:
    text = text.strip()
    while True:
        lowered = text.lower()
        if lowered in ("and", "or"):
            return ""
        if lowered.startswith("and "):
            text = text[3:].strip()
        elif lowered.startswith("or "):
            text = text[2:].strip()
        else:
            return text


def trim_trailing_logical(text: str) -> str:
    text = text.strip()
    while True:
        lowered = text.lower()
        if lowered in ("and", "or"):
            return ""
        if lowered.endswith(" and"):
            text = text[:-3].strip()
        elif lowered.endswith(" or"):
            text = text[:-2].strip()
        else:
            return text


def normalize_clause(text: str) -> str:
    return trim_trailing_logical(trim_leading_logical(text or "")).strip()


def _map_unquoted(text: str, transform) -> str:
    """Apply transform to the parts of text outside quoted values."""
    parts = []
    position = 0
    for match in _QUOTED.finditer(text):
        parts.append(transform(text[position:match.start()]))
        parts.append(match.group(0))
        position = match.end()
    parts.append(transform(text[position:]))
    return "".join(parts)


def _collapse(segment: str) -> str:
    while _DUPLICATE_CONNECTORS.search(segment):
        segment = _DUPLICATE_CONNECTORS.sub(lambda match: match.group(2), segment)
    return _WHITESPACE.sub(" ", segment)


def _clean_once(text: str) -> str:
    return normalize_clause(_map_unquoted(text, _collapse))


def clean_query(text: str) -> str:
    """Collapse doubled connectors and whitespace, drop dangling connectors.

    Runs to a fixed point, so clean_query(clean_query(x)) == clean_query(x).
    """
    text = (text or "").strip()
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)


def truncate_before_keywords(text: str, keywords: Iterable[str]) -> str:
    """Cut text before the first word that starts with one of the keywords."""
    cut = len(text)
    for keyword in keywords:
        match = re.search(rf"(?<!\w){re.escape(keyword)}", text, re.IGNORECASE)
        if match and match.start() < cut:
            cut = match.start()
    return text[:cut].strip()
