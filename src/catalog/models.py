"""
Catalog data model.

Typed records for the project list returned by the Context7 API.
The live endpoint nests identity fields under "settings"; a flat shape
is accepted too.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from utils.exceptions import ParseError, UnknownStateError


class ProjectState(Enum):
    """Lifecycle of a project's documentation generation."""

    INITIAL = "initial"
    FINALIZED = "finalized"
    ERROR = "error"

    @classmethod
    def parse(cls, value: Any) -> "ProjectState":
        try:
            return cls(value)
        except ValueError:
            raise UnknownStateError(f"Unknown project state: {value!r}") from None


def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    if key not in data or data[key] is None:
        raise ParseError(f"Missing '{key}' in {context}")
    return data[key]


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ParseError(f"'{key}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ParseError(f"'{key}' must be an integer, got {value!r}")


@dataclass
class ProjectVersion:
    """Snapshot of a project's current documentation build."""

    total_tokens: int
    total_snippets: int
    last_update: str  # ISO timestamp, kept as sent
    state: ProjectState

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectVersion":
        if not isinstance(data, dict):
            raise ParseError(f"'version' must be an object, got {type(data).__name__}")
        return cls(
            total_tokens=_as_int(data.get("totalTokens", 0), "totalTokens"),
            total_snippets=_as_int(data.get("totalSnippets", 0), "totalSnippets"),
            last_update=str(data.get("lastUpdate") or ""),
            state=ProjectState.parse(_require(data, "state", "version")),
        )


@dataclass
class ProjectSummary:
    """One entry of the catalog."""

    project: str  # identifier, also the payload file stem
    title: str
    docs_repo_url: str
    version: ProjectVersion

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectSummary":
        """Build a summary from either the nested or the flat API shape."""
        if not isinstance(data, dict):
            raise ParseError(f"Project entry must be an object, got {type(data).__name__}")

        settings = data.get("settings")
        identity = settings if isinstance(settings, dict) else data
        project = str(_require(identity, "project", "project entry"))
        segments = project.strip("/").split("/")
        if not project.strip("/") or ".." in segments:
            raise ParseError(f"Invalid project identifier: {project!r}")

        return cls(
            project=project,
            title=str(_require(identity, "title", f"project '{project}'")),
            docs_repo_url=str(identity.get("docsRepoUrl") or ""),
            version=ProjectVersion.from_dict(_require(data, "version", f"project '{project}'")),
        )

    @property
    def payload_name(self) -> str:
        """Relative file name of the exported payload, e.g. 'nextjs.txt'."""
        return f"{self.project.strip('/')}.txt"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project,
            "title": self.title,
            "docsRepoUrl": self.docs_repo_url,
            "version": {
                "totalTokens": self.version.total_tokens,
                "totalSnippets": self.version.total_snippets,
                "lastUpdate": self.version.last_update,
                "state": self.version.state.value,
            },
        }


def parse_catalog(data: Any) -> List[ProjectSummary]:
    """Parse the decoded /api/projects response.

    Raises ParseError when two entries would export to the same payload
    file, e.g. duplicate ids or "/acme/lib" next to "acme/lib".
    """
    if not isinstance(data, list):
        raise ParseError(f"Catalog must be a JSON array, got {type(data).__name__}")

    projects = []
    seen: Dict[str, str] = {}
    for entry in data:
        summary = ProjectSummary.from_dict(entry)
        if summary.payload_name in seen:
            raise ParseError(
                f"Projects {seen[summary.payload_name]!r} and {summary.project!r} both map to {summary.payload_name}"
            )
        seen[summary.payload_name] = summary.project
        projects.append(summary)
    return projects
