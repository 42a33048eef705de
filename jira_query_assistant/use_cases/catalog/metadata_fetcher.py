"""Snapshot of Jira reference data (fields, projects, statuses...) as JSON files."""

from __future__ import annotations

import json
from datetime import datetime
from datetime import timezone
from pathlib import Path
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from jira_query_assistant import LOGGER
from jira_query_assistant.use_cases.interfaces.issue_tracker_repository_interface import (
    IssueTrackerRepositoryInterface,
)
from jira_query_assistant.utils.exceptions import ExternalServiceError
from jira_query_assistant.utils.exceptions import MetadataFetchError

METADATA_PATHS = (
    ("jira_fields", "/rest/api/2/field"),
    ("jira_projects", "/rest/api/2/project"),
    ("jira_statuses", "/rest/api/2/status"),
    ("jira_issue_types", "/rest/api/2/issuetype"),
    ("jira_priorities", "/rest/api/2/priority"),
)
VERSIONS_NAME = "jira_versions"
BOARDS_NAME = "jira_boards"
BOARDS_PATH = "/rest/agile/1.0/board"
SUMMARY_FILE_NAME = "summary.json"


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _error_text(error: Exception) -> str:
    if isinstance(error, ExternalServiceError):
        return error.message["error"]
    return str(error)


class JiraMetadataFetcher:
    """Writes one ``<name>.json`` per reference endpoint plus a ``summary.json``."""

    def __init__(self, issue_tracker: IssueTrackerRepositoryInterface, out_dir: Path):
        self.issue_tracker = issue_tracker
        self.out_dir = Path(out_dir)

    async def fetch_all(self) -> List[Dict[str, str]]:
        """Fetch every reference endpoint and store the results.

        A failing endpoint does not stop the others. Versions are collected
        per project id and board listing failures are only logged.

        Returns:
            Summary entries with ``name``, ``path``, ``fetchedAt`` and, on
            failure, ``error``

        Raises:
            MetadataFetchError: at least one entry failed; summary.json is
                written before raising
        """
        self.out_dir.mkdir(parents=True, exist_ok=True)
        summary = []
        projects = None
        for name, path in METADATA_PATHS:
            data = await self._fetch_step(name, path, summary)
            if name == "jira_projects":
                projects = data

        summary.append(await self._fetch_versions(projects))
        await self._fetch_boards()

        summary_path = self.out_dir / SUMMARY_FILE_NAME
        self._write(summary_path, summary)
        failed = [entry["name"] for entry in summary if entry.get("error")]
        if failed:
            LOGGER.error(f"Metadata fetch failed for {', '.join(failed)}")
            raise MetadataFetchError(str(summary_path), failed)
        LOGGER.info(f"Metadata fetched into {self.out_dir}")
        return summary

    async def _fetch_step(self, name: str, path: str, summary: List[Dict[str, str]]) -> Optional[Any]:
        entry = {"name": name, "path": "", "fetchedAt": _now()}
        summary.append(entry)
        try:
            data = await self.issue_tracker.get(path)
            out_path = self.out_dir / f"{name}.json"
            self._write(out_path, data)
        except (ExternalServiceError, OSError) as e:
            LOGGER.warning(f"Fetching {name} failed: {_error_text(e)}")
            entry["error"] = _error_text(e)
            return None
        entry["path"] = str(out_path)
        return data

    async def _fetch_versions(self, projects: Optional[Any]) -> Dict[str, str]:
        entry = {"name": VERSIONS_NAME, "path": "", "fetchedAt": _now()}
        if projects is None:
            try:
                projects = await self.issue_tracker.get("/rest/api/2/project")
            except ExternalServiceError as e:
                entry["error"] = _error_text(e)
                return entry
        if not isinstance(projects, list):
            entry["error"] = "parse projects: expected a list"
            return entry

        versions = {}
        for project in projects:
            project_id = str((project or {}).get("id") or "")
            if not project_id:
                continue
            try:
                versions[project_id] = await self.issue_tracker.get(
                    f"/rest/api/2/project/{project_id}/versions"
                )
            except ExternalServiceError as e:
                LOGGER.warning(f"Skipping versions of project {project_id}: {_error_text(e)}")

        out_path = self.out_dir / f"{VERSIONS_NAME}.json"
        try:
            self._write(out_path, versions)
        except OSError as e:
            entry["error"] = str(e)
            return entry
        entry["path"] = str(out_path)
        return entry

    async def _fetch_boards(self) -> None:
        try:
            boards = await self.issue_tracker.get(BOARDS_PATH)
            self._write(self.out_dir / f"{BOARDS_NAME}.json", boards)
        except (ExternalServiceError, OSError) as e:
            LOGGER.info(f"Board listing not stored: {_error_text(e)}")

    @staticmethod
    def _write(path: Path, data: Any) -> None:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=2)
