"""Catalog ordering."""

from typing import Iterable, List

from .models import ProjectSummary


def sort_by_title(projects: Iterable[ProjectSummary]) -> List[ProjectSummary]:
    """Return a new list sorted ascending by title.

    Plain code-point comparison, no locale collation. sorted() is stable,
    so entries with equal titles keep their original relative order.
    """
    return sorted(projects, key=lambda p: p.title)
