"""
c7-mirror - Context7 catalog mirror

Fetches the Context7 project catalog, renders a README table of all
projects, and exports each project's llm.txt payload to disk.

Main components:
- catalog: API client, typed project records, title ordering
- reporting: README rendering with Jinja2 templates
- export: Paced sequential bulk export
"""

__version__ = "0.1.0"
