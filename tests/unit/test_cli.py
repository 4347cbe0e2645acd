"""Unit tests for the listing command line script."""

import json
import sys

import pytest

import main


@pytest.fixture
def run_cli(monkeypatch, capsys):
    """Run main() with the given arguments and return stdout."""

    def _run(*args: str) -> str:
        monkeypatch.setattr(sys, "argv", ["main.py", *args])
        main.main()
        return capsys.readouterr().out

    return _run


@pytest.mark.unit
class TestParsePage:
    """Tests for parse_page function."""

    def test_values(self):
        """Test page parsing with fallbacks."""
        assert main.parse_page(None) == 1
        assert main.parse_page(["3"]) == 3
        assert main.parse_page(["0"]) == 1
        assert main.parse_page(["three"]) == 1


@pytest.mark.unit
class TestMain:
    """Tests for the main entry point."""

    def test_listing_page(self, run_cli, sample_machine_jsonl: str):
        """Test rendering a listing page as JSON."""
        data = json.loads(run_cli(sample_machine_jsonl))
        assert data["total"] == 2
        assert data["page"] == 1
        assert [m["id"] for m in data["results"]] == ["m-1001", "m-1002"]
        assert data["facets"]["make"] == [
            {"value": "CAT", "count": 1},
            {"value": "Kubota", "count": 1},
        ]

    def test_query_string(self, run_cli, sample_machine_jsonl: str):
        """Test filters, sort and paging from a query string."""
        out = run_cli(sample_machine_jsonl, "?make=Kubota&sort=year-newest&page=4")
        data = json.loads(out)
        assert data["total"] == 1
        assert data["results"][0]["make"] == "Kubota"
        assert data["sort"] == "year-newest"
        assert data["page"] == 1

    def test_page_size(self, run_cli, sample_machine_jsonl: str):
        """Test the page size option."""
        data = json.loads(run_cli(sample_machine_jsonl, "", "--page-size", "1"))
        assert len(data["results"]) == 1
        assert data["pagination"]["tokens"] == [1, 2]

    def test_output_file(self, run_cli, sample_machine_jsonl: str, tmp_path):
        """Test writing the page to a file."""
        output = tmp_path / "page.json"
        assert run_cli(sample_machine_jsonl, "--output", str(output)) == ""
        assert json.loads(output.read_text())["total"] == 2

    def test_missing_file(self, run_cli, tmp_path):
        """Test that a missing input exits with an error."""
        with pytest.raises(SystemExit) as exc_info:
            run_cli(str(tmp_path / "missing.jsonl"))
        assert exc_info.value.code == 1
