import re
from pathlib import Path
from typing import List

from setuptools import setup, find_packages

ROOT = Path(__file__).parent


def read_requirements(file_name: str) -> List[str]:
    """Read a requirements file, skipping comments and blank lines."""
    lines = (ROOT / file_name).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


def get_version():
    file = ROOT / "jira_query_assistant" / "__init__.py"
    return re.search(
        r'^__version__ *= *[\'"]([^\'"]*)[\'"]', file.read_text(encoding="utf-8"), re.M
    )[1]


setup(
    name="jira_query_assistant",
    version=get_version(),
    description="Natural-language Jira search with JQL rewriting, sprint windows and worklog totals",
    zip_safe=False,
    python_requires=">=3.9",
    packages=find_packages(include=["jira_query_assistant", "jira_query_assistant.*"]),
    install_requires=read_requirements("requirements.txt"),
    extras_require={"test": read_requirements("requirements-test.txt")},
)
