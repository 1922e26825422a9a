import importlib

from colorama import Fore, Style

from core.coverage_ledger import CoverageRecord
from core.coverage_options import ReportOptions
import report.coverage_section
from report.coverage_section import CoverageSection, render_markup, render_table


RECORDS = [
    CoverageRecord("/users/{id}", "get", "404", 0),
    CoverageRecord("/users", "post", "201", 2),
    CoverageRecord("/users", "get", "200", 5),
    CoverageRecord("/<script>", "get", "200", 1),
]


def test_section_sorts_records():
    section = CoverageSection(RECORDS)
    assert [(r.path, r.method, r.status) for r in section.data] == [
        ("/<script>", "get", "200"),
        ("/users", "get", "200"),
        ("/users", "post", "201"),
        ("/users/{id}", "get", "404"),
    ]


def test_table_hides_zero_counts_by_default():
    table = render_table(RECORDS)

    assert "/users/{id}" not in table
    assert "post" in table
    assert Fore.RED not in table


def test_table_shows_highlighted_zero_counts_when_requested():
    table = render_table(RECORDS, ReportOptions(show_zero_counts=True))

    assert "/users/{id}" in table
    assert f"{Fore.RED}0{Style.RESET_ALL}" in table
    assert "Path" in table and "Count" in table
    # box-drawing borders
    assert "│" in table


def test_table_rows_follow_sort_order():
    table = render_table(RECORDS, ReportOptions(show_zero_counts=True))

    assert table.index("/<script>") < table.index("/users ") < table.index("/users/{id}")


def test_summary_counts_covered_responses():
    summary = CoverageSection(RECORDS).summary()

    assert summary == {"total": 4, "covered": 3, "uncovered": 1, "coverage_pct": 75.0}


def test_summary_of_empty_ledger():
    assert CoverageSection([]).summary()["coverage_pct"] == 0.0


def test_markup_includes_all_records_and_marks_zero_counts():
    html = render_markup(RECORDS)

    assert html.startswith("<!DOCTYPE html>")
    assert "<th>Path</th>" in html and "<th>Count</th>" in html
    assert "<td>/users/{id}</td>" in html
    assert '<span class="zero-count" style="color: red;">0</span>' in html
    assert "3/4 responses covered (75.0%)" in html


def test_markup_escapes_paths():
    html = render_markup(RECORDS)

    assert "/&lt;script&gt;" in html
    assert "<td>/<script></td>" not in html


def test_markdown_and_json_renderings():
    section = CoverageSection(RECORDS, ReportOptions(show_zero_counts=True))

    markdown = section.to_markdown()
    assert "| `/users/{id}` | get | 404 | **0** |" in markdown
    assert "**Overall Coverage: 75.0%** (3/4 responses)" in markdown

    data = section.to_json()
    assert data["summary"]["covered"] == 3
    assert data["records"][0] == {"path": "/<script>", "method": "get", "status": "200", "count": 1}


def test_json_respects_zero_count_option():
    data = CoverageSection(RECORDS).to_json()
    assert all(record["count"] > 0 for record in data["records"])


def test_colorama_is_initialised_on_import(monkeypatch):
    calls = []
    monkeypatch.setattr("colorama.init", lambda *args, **kwargs: calls.append(kwargs))

    importlib.reload(report.coverage_section)

    assert calls == [{}]
