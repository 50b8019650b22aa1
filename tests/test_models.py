"""Tests for catalog parsing."""

import pytest

from src.catalog.models import ProjectState, ProjectSummary, ProjectVersion, parse_catalog
from utils.exceptions import ParseError, UnknownStateError

from conftest import make_entry


class TestProjectState:
    @pytest.mark.parametrize("raw,expected", [
        ("initial", ProjectState.INITIAL),
        ("finalized", ProjectState.FINALIZED),
        ("error", ProjectState.ERROR),
    ])
    def test_parse_known(self, raw: str, expected: ProjectState) -> None:
        assert ProjectState.parse(raw) is expected

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(UnknownStateError, match="delete"):
            ProjectState.parse("delete")

    def test_unknown_state_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            ProjectState.parse(None)


class TestProjectSummary:
    def test_nested_shape(self) -> None:
        p = ProjectSummary.from_dict(make_entry("nextjs", "Next.js", tokens=1234, snippets=56))
        assert p.project == "nextjs"
        assert p.title == "Next.js"
        assert p.version.total_tokens == 1234
        assert p.version.total_snippets == 56
        assert p.version.state is ProjectState.FINALIZED

    def test_flat_shape(self) -> None:
        p = ProjectSummary.from_dict(make_entry("react", "React", nested=False, repo="https://github.com/facebook/react"))
        assert p.project == "react"
        assert p.docs_repo_url == "https://github.com/facebook/react"

    def test_missing_repo_is_empty(self) -> None:
        entry = make_entry("x", "X")
        del entry["settings"]["docsRepoUrl"]
        assert ProjectSummary.from_dict(entry).docs_repo_url == ""

    def test_missing_counts_default_to_zero(self) -> None:
        entry = {"project": "x", "title": "X", "version": {"state": "initial"}}
        p = ProjectSummary.from_dict(entry)
        assert p.version.total_tokens == 0
        assert p.version.total_snippets == 0
        assert p.version.last_update == ""

    def test_missing_title_raises(self) -> None:
        with pytest.raises(ParseError, match="title"):
            ProjectSummary.from_dict({"project": "x", "version": {"state": "initial"}})

    def test_missing_version_raises(self) -> None:
        with pytest.raises(ParseError, match="version"):
            ProjectSummary.from_dict({"project": "x", "title": "X"})

    def test_non_integer_tokens_raises(self) -> None:
        entry = make_entry("x", "X")
        entry["version"]["totalTokens"] = "lots"
        with pytest.raises(ParseError, match="totalTokens"):
            ProjectSummary.from_dict(entry)

    def test_integral_float_accepted(self) -> None:
        entry = make_entry("x", "X")
        entry["version"]["totalTokens"] = 42.0
        assert ProjectSummary.from_dict(entry).version.total_tokens == 42

    @pytest.mark.parametrize("project", ["", "/", "../etc", "a/../../b"])
    def test_rejects_unsafe_identifiers(self, project: str) -> None:
        with pytest.raises(ParseError, match="identifier"):
            ProjectSummary.from_dict(make_entry(project, "Bad"))

    def test_payload_name(self) -> None:
        assert ProjectSummary.from_dict(make_entry("/vercel/next.js", "Next.js")).payload_name == "vercel/next.js.txt"

    def test_to_dict_is_flat(self) -> None:
        data = ProjectSummary.from_dict(make_entry("a", "Alpha", state="error")).to_dict()
        assert data["project"] == "a"
        assert data["version"]["state"] == "error"
        assert "settings" not in data


class TestParseCatalog:
    def test_parses_list(self) -> None:
        projects = parse_catalog([make_entry("a", "A"), make_entry("b", "B")])
        assert [p.project for p in projects] == ["a", "b"]

    def test_empty_list(self) -> None:
        assert parse_catalog([]) == []

    def test_non_list_raises(self) -> None:
        with pytest.raises(ParseError, match="array"):
            parse_catalog({"projects": []})

    def test_non_object_entry_raises(self) -> None:
        with pytest.raises(ParseError):
            parse_catalog(["nextjs"])

    def test_version_must_be_object(self) -> None:
        with pytest.raises(ParseError):
            ProjectVersion.from_dict([1, 2])

    def test_duplicate_id_raises(self) -> None:
        with pytest.raises(ParseError, match="a.txt"):
            parse_catalog([make_entry("a", "A"), make_entry("a", "Again")])

    def test_ids_colliding_after_normalisation_raise(self) -> None:
        with pytest.raises(ParseError, match="acme/lib.txt"):
            parse_catalog([make_entry("/acme/lib", "Lib"), make_entry("acme/lib", "Lib 2")])
