"""
Bulk exporter for the Context7 catalog.

One sequential run:
1. Fetch the project catalog
2. Sort it by title
3. Write the README report
4. Reset the data directory (destructive)
5. For each project, in order: pace, fetch its llm.txt payload, write it verbatim

There is no retry and no skip-and-continue. The first failure aborts the
run; files already written stay on disk.
"""

import asyncio
import shutil
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

import config as settings
from src.catalog.client import CatalogClient, CatalogSource
from src.catalog.models import ProjectSummary
from src.catalog.ordering import sort_by_title
from src.reporting.readme_renderer import ReportConfig, write_readme
from utils.exceptions import ConfigError, ReportingError, StorageError
from utils.logging_config import get_logger, log_performance
from utils.rate_limiter import Pacer, SleepFunc

logger = get_logger(__name__)

# Upper bound the API treats as "no limit"
UNBOUNDED_TOKENS = int("9" * 33)


class TokenCap(Enum):
    """How the per-payload token cap is chosen."""

    UNBOUNDED = "unbounded"
    PROJECT_TOTAL = "project"

    @classmethod
    def parse(cls, value: Any) -> "TokenCap":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(c.value for c in cls)
            raise ConfigError(f"Unknown token cap {value!r} (expected one of: {choices})") from None

    def tokens_for(self, project: ProjectSummary) -> int:
        if self is TokenCap.PROJECT_TOTAL and project.version.total_tokens > 0:
            return project.version.total_tokens
        return UNBOUNDED_TOKENS


@dataclass
class ExportConfig:
    """Configuration for an export run."""

    base_url: str = settings.DEFAULT_BASE_URL
    delay_seconds: float = settings.DEFAULT_DELAY_SECONDS
    token_cap: TokenCap = TokenCap.UNBOUNDED
    report_path: Path = Path("readme.md")
    data_dir: Path = Path("data")
    banner_image: Optional[str] = None
    timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.base_url, str) or not self.base_url.strip():
            raise ConfigError(f"base_url must be a non-empty string, got {self.base_url!r}")
        self.token_cap = TokenCap.parse(self.token_cap)
        for name in ("report_path", "data_dir"):
            value = getattr(self, name)
            if not isinstance(value, (str, Path)) or not str(value).strip():
                raise ConfigError(f"{name} must be a non-empty path, got {value!r}")
            setattr(self, name, Path(value))
        try:
            self.delay_seconds = float(self.delay_seconds)
            if self.timeout_seconds is not None:
                self.timeout_seconds = float(self.timeout_seconds)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
        if self.delay_seconds < 0:
            raise ConfigError(f"delay_seconds must be >= 0, got {self.delay_seconds}")
        # The data directory is wiped on every run
        if self.data_dir.resolve() in self.report_path.resolve().parents:
            raise ConfigError(f"Report {self.report_path} must not live inside {self.data_dir}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ExportConfig":
        """Build from environment variables (and .env), then apply non-None overrides."""
        values = settings.env_settings()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> "ExportConfig":
        """Load from a YAML file layered over the environment.

        Keys: base_url, delay_seconds, token_cap, report_path, data_dir,
        banner_image, timeout_seconds. Keys left empty in the file fall
        back to the environment. Non-None overrides win over the file.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        known = {
            "base_url", "delay_seconds", "token_cap", "report_path",
            "data_dir", "banner_image", "timeout_seconds",
        }
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown keys in {path}: {', '.join(sorted(map(str, unknown)))}")

        values = settings.env_settings()
        values.update({k: v for k, v in data.items() if v is not None})
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def report_config(self) -> ReportConfig:
        return ReportConfig(
            report_path=self.report_path,
            data_dir=self.data_dir,
            banner_image=self.banner_image,
        )


@dataclass
class ExportSummary:
    """Outcome of a successful export run."""

    projects: List[str] = field(default_factory=list)  # sorted project ids
    report_path: Optional[Path] = None
    data_dir: Optional[Path] = None
    files_written: int = 0
    bytes_written: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projects": self.projects,
            "report_path": str(self.report_path) if self.report_path else None,
            "data_dir": str(self.data_dir) if self.data_dir else None,
            "files_written": self.files_written,
            "bytes_written": self.bytes_written,
            "duration_seconds": round(self.duration_seconds, 2),
        }


def reset_directory(path: Path) -> None:
    """Remove `path` with all contents if present, then recreate it empty."""
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as e:
        raise StorageError(f"Could not reset directory {path}: {e}") from e
    logger.debug(f"Reset export directory {path}")


def write_payload(data_dir: Path, project: ProjectSummary, text: str) -> int:
    """Write a payload verbatim. Returns the number of bytes written."""
    target = data_dir / project.payload_name
    encoded = text.encode("utf-8")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(encoded)
    except OSError as e:
        raise StorageError(f"Could not write {target}: {e}") from e
    return len(encoded)


async def fetch_sorted_catalog(source: CatalogSource) -> List[ProjectSummary]:
    """Fetch the catalog and return it sorted by title."""
    return sort_by_title(await source.fetch_projects())


async def write_report_only(config: ExportConfig, source: Optional[CatalogSource] = None) -> Path:
    """Fetch, sort and write the README without touching the data directory."""
    if source is not None:
        return _write_report(await fetch_sorted_catalog(source), config)

    async with CatalogClient(config.base_url, timeout=config.timeout_seconds) as client:
        return _write_report(await fetch_sorted_catalog(client), config)


def _write_report(projects: List[ProjectSummary], config: ExportConfig) -> Path:
    try:
        return write_readme(projects, config.report_config())
    except ReportingError as e:
        if isinstance(e.__cause__, OSError):
            raise StorageError(str(e)) from e.__cause__
        raise


@log_performance()
async def run_export(
    config: ExportConfig,
    source: Optional[CatalogSource] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> ExportSummary:
    """
    Run a full export.

    Args:
        config: Export configuration.
        source: Catalog source; a CatalogClient for config.base_url if omitted.
        sleep: Coroutine used for pacing (tests inject a recorder).

    Returns:
        ExportSummary describing what was written.

    Raises:
        FetchError: Network or HTTP failure.
        ParseError: Unexpected response shape or unknown project state.
        StorageError: Filesystem failure.
    """
    if source is not None:
        return await _export(config, source, sleep)

    async with CatalogClient(config.base_url, timeout=config.timeout_seconds) as client:
        return await _export(config, client, sleep)


async def _export(config: ExportConfig, source: CatalogSource, sleep: SleepFunc) -> ExportSummary:
    start = time.monotonic()
    pacer = Pacer(config.delay_seconds, sleep=sleep)

    projects = await fetch_sorted_catalog(source)
    report_path = _write_report(projects, config)
    reset_directory(config.data_dir)

    summary = ExportSummary(
        projects=[p.project for p in projects],
        report_path=report_path,
        data_dir=config.data_dir,
    )

    total = len(projects)
    for index, project in enumerate(projects, start=1):
        await pacer.wait()
        tokens = config.token_cap.tokens_for(project)
        text = await source.fetch_payload(project.project, tokens)
        size = write_payload(config.data_dir, project, text)

        summary.files_written += 1
        summary.bytes_written += size
        logger.info(
            f"[{index}/{total}] Exported {project.project} ({size:,} bytes)",
            extra={"project": project.project},
        )

    summary.duration_seconds = time.monotonic() - start
    logger.info(
        f"Export complete: {summary.files_written} file(s), "
        f"{summary.bytes_written:,} bytes in {summary.duration_seconds:.1f}s"
    )
    return summary
