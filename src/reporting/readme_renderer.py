"""
README report renderer.

Renders the sorted catalog as a markdown document with an embedded
HTML table linking each project to its exported payload. Output is a
pure function of the catalog, so unchanged catalogs render
byte-identical reports.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from src.catalog.models import ProjectState, ProjectSummary
from utils.exceptions import ReportingError, UnknownStateError
from utils.logging_config import get_logger

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
README_TEMPLATE = "readme.md.j2"


@dataclass
class ReportConfig:
    """Configuration for README rendering."""

    report_path: Path = Path("readme.md")
    data_dir: Path = Path("data")
    banner_image: Optional[str] = None
    title: str = "Context7 Mirror"


def state_icon(state: ProjectState) -> str:
    """Map a project state to its table indicator."""
    if state is ProjectState.INITIAL:
        return "⏳"
    elif state is ProjectState.FINALIZED:
        return "✅"
    elif state is ProjectState.ERROR:
        return "❌"
    raise UnknownStateError(f"No indicator for project state: {state!r}")


def format_count(value: int) -> str:
    """Thousands-separated integer, e.g. 1234567 -> '1,234,567'."""
    return f"{value:,}"


def _repo_label(url: str) -> str:
    """Shorten a repository URL for display (drops scheme and github.com)."""
    label = url.split("://", 1)[-1]
    if label.startswith("github.com/"):
        label = label[len("github.com/"):]
    return label.rstrip("/")


def _data_link_prefix(report_path: Path, data_dir: Path) -> str:
    """Path from the report's directory to the data directory, POSIX-style."""
    rel = os.path.relpath(data_dir, report_path.parent)
    return Path(rel).as_posix()


def build_rows(projects: Sequence[ProjectSummary], data_link_prefix: str = "data") -> List[Dict[str, Any]]:
    """Build template rows in catalog order, positions starting at 1."""
    rows = []
    for index, p in enumerate(projects):
        rows.append({
            "position": index + 1,
            "project": p.project,
            "title": p.title,
            "title_link": f"{data_link_prefix}/{p.payload_name}",
            "repo_url": p.docs_repo_url,
            "repo_label": _repo_label(p.docs_repo_url) if p.docs_repo_url else "",
            "tokens": format_count(p.version.total_tokens),
            "snippets": format_count(p.version.total_snippets),
            "last_update": p.version.last_update,
            "state": state_icon(p.version.state),
            "state_name": p.version.state.value.upper(),
        })
    return rows


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_readme(projects: Sequence[ProjectSummary], config: Optional[ReportConfig] = None) -> str:
    """Render the README document for an already-sorted catalog."""
    config = config or ReportConfig()
    template = _environment().get_template(README_TEMPLATE)
    return template.render(
        title=config.title,
        banner_image=config.banner_image,
        rows=build_rows(projects, _data_link_prefix(config.report_path, config.data_dir)),
        total_projects=len(projects),
    )


def write_readme(projects: Sequence[ProjectSummary], config: Optional[ReportConfig] = None) -> Path:
    """
    Render and write the README, overwriting any previous version.

    Returns:
        Path to the written report.

    Raises:
        UnknownStateError: If a project state has no indicator.
        ReportingError: If rendering or writing fails.
    """
    config = config or ReportConfig()
    try:
        content = render_readme(projects, config)
        config.report_path.parent.mkdir(parents=True, exist_ok=True)
        config.report_path.write_text(content, encoding="utf-8")
    except UnknownStateError:
        raise
    except Exception as e:
        raise ReportingError(f"Failed to write report {config.report_path}: {e}") from e

    logger.info(f"Wrote report for {len(projects)} project(s) to {config.report_path}")
    return config.report_path
