"""
Catalog export module.

Mirrors the Context7 catalog to disk: a README report plus one
llm.txt payload per project under the data directory, fetched
sequentially with a fixed pacing delay.
"""

from .exporter import ExportConfig, ExportSummary, TokenCap, run_export, write_report_only

__all__ = ["run_export", "write_report_only", "ExportConfig", "ExportSummary", "TokenCap"]
