"""
README reporting module.

Renders the sorted catalog as a markdown document with an HTML table
using a Jinja2 template.
"""

from .readme_renderer import ReportConfig, render_readme, state_icon, write_readme

__all__ = ["ReportConfig", "render_readme", "state_icon", "write_readme"]
