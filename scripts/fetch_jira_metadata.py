#!/usr/bin/env python
"""Fetch Jira reference data (fields, projects, statuses...) into the data directory."""

import argparse
import asyncio
import sys
from pathlib import Path

from jira_query_assistant import LOGGER
from jira_query_assistant.adapters.repositories.jira import JiraRepository
from jira_query_assistant.settings import JiraConnectionSettings
from jira_query_assistant.settings import QuerySettings
from jira_query_assistant.use_cases.catalog.metadata_fetcher import JiraMetadataFetcher
from jira_query_assistant.utils.exceptions import MetadataFetchError


def parse_arguments():
    """Parse command line arguments.

    Returns:
        Parsed command-line arguments
    """
    parser = argparse.ArgumentParser(description="Fetch Jira metadata as JSON files")
    parser.add_argument(
        "--out-dir", type=Path, default=None,
        help="Output directory, defaults to the query data directory"
    )
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Deadline for the whole fetch in seconds"
    )

    args, _ = parser.parse_known_args()
    return args


def main():
    """Fetch and store the metadata snapshot."""
    args = parse_arguments()
    out_dir = args.out_dir or QuerySettings().data_dir
    fetcher = JiraMetadataFetcher(JiraRepository(JiraConnectionSettings()), out_dir)

    LOGGER.info(f"Fetching Jira metadata into {out_dir}")
    try:
        asyncio.run(asyncio.wait_for(fetcher.fetch_all(), timeout=args.timeout))
    except MetadataFetchError as e:
        LOGGER.error(e.message["error"])
        sys.exit(1)
    except asyncio.TimeoutError:
        LOGGER.error(f"Metadata fetch did not finish within {args.timeout} seconds")
        sys.exit(1)


if __name__ == "__main__":
    main()
