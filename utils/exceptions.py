"""
Custom exception hierarchy for c7-mirror.

All project-specific exceptions inherit from C7MirrorError.
Anything that can abort an export run is an ExportError.
"""


class C7MirrorError(Exception):
    """Base exception for c7-mirror."""

    pass


class ConfigError(C7MirrorError):
    """Invalid or missing configuration."""

    pass


class ExportError(C7MirrorError):
    """Error during a catalog export run."""

    pass


class ReportingError(ExportError):
    """Error during README report generation."""

    pass


class FetchError(ExportError):
    """Network or HTTP failure talking to the catalog API."""

    pass


class ParseError(ExportError):
    """Response could not be decoded into the expected structure."""

    pass


class UnknownStateError(ParseError):
    """Project state outside the known lifecycle values."""

    pass


class StorageError(ExportError):
    """Filesystem failure while writing export output."""

    pass
