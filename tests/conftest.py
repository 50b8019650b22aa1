"""
Shared test fixtures for c7-mirror.

Provides an in-memory catalog source, a recording sleep for pacing,
and sample catalog payloads in both API shapes.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from src.catalog.models import ProjectSummary, parse_catalog
from utils.exceptions import FetchError


def make_entry(
    project: str,
    title: str,
    tokens: int = 100,
    snippets: int = 10,
    state: str = "finalized",
    repo: str = "",
    nested: bool = True,
) -> Dict[str, Any]:
    """Build one raw /api/projects entry."""
    identity = {"project": project, "title": title, "docsRepoUrl": repo}
    version = {
        "totalTokens": tokens,
        "totalSnippets": snippets,
        "lastUpdate": "2026-10-01T12:00:00.000Z",
        "state": state,
    }
    if nested:
        return {"settings": identity, "version": version}
    return {**identity, "version": version}


class FakeSource:
    """Deterministic catalog source recording every call."""

    def __init__(
        self,
        entries: List[Dict[str, Any]],
        payloads: Optional[Dict[str, str]] = None,
        fail_on: Optional[str] = None,
    ):
        self.entries = entries
        self.payloads = payloads or {}
        self.fail_on = fail_on
        self.calls: List[tuple] = []

    async def fetch_projects(self) -> List[ProjectSummary]:
        self.calls.append(("projects",))
        return parse_catalog(self.entries)

    async def fetch_payload(self, project_id: str, tokens: int) -> str:
        self.calls.append(("payload", project_id, tokens))
        if project_id == self.fail_on:
            raise FetchError(f"GET {project_id}/llm.txt returned HTTP 500")
        return self.payloads.get(project_id, f"payload for {project_id}\n")


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self, source: Optional[FakeSource] = None):
        self.delays: List[float] = []
        self.source = source

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self.source is not None:
            self.source.calls.append(("sleep", delay))


@pytest.fixture
def sample_entries() -> List[Dict[str, Any]]:
    """The two-project catalog, deliberately out of title order."""
    return [
        make_entry("b", "Beta", tokens=100, state="finalized"),
        make_entry("a", "Alpha", tokens=50, state="initial", repo="https://github.com/acme/alpha"),
    ]


@pytest.fixture
def fake_source(sample_entries: List[Dict[str, Any]]) -> FakeSource:
    return FakeSource(sample_entries, payloads={"a": "alpha docs\n", "b": "beta docs\n"})


@pytest.fixture
def recording_sleep(fake_source: FakeSource) -> RecordingSleep:
    return RecordingSleep(fake_source)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty output root for report and data directory."""
    out = tmp_path / "mirror"
    out.mkdir()
    return out
