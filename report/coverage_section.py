from typing import Dict, List, Optional

import colorama
from colorama import Fore, Style
from tabulate import tabulate

from core.coverage_ledger import CoverageRecord
from core.coverage_options import ReportOptions
from report.report_section import ReportSection
from templates.template_registry import TemplateRegistry

colorama.init()

HEADERS = ["Path", "Method", "Status", "Count"]


class CoverageSection(ReportSection):
    """Path / method / status hit counts for every declared response."""

    def __init__(self, records: List[CoverageRecord], options: Optional[ReportOptions] = None,
                 template_registry: Optional[TemplateRegistry] = None):
        super().__init__(
            title="OpenAPI Coverage Report",
            description="Declared responses exercised by the test run",
            data=sorted(records, key=lambda record: record.sort_key),
        )
        self.options = options or ReportOptions()
        self.template_registry = template_registry or TemplateRegistry()

    @property
    def visible_records(self) -> List[CoverageRecord]:
        if self.options.show_zero_counts:
            return list(self.data)
        return [record for record in self.data if record.count > 0]

    def summary(self) -> Dict:
        total = len(self.data)
        covered = sum(1 for record in self.data if record.count > 0)
        return {
            "total": total,
            "covered": covered,
            "uncovered": total - covered,
            "coverage_pct": (covered / total * 100) if total > 0 else 0.0,
        }

    def to_terminal(self) -> str:
        rows = []
        for record in self.visible_records:
            count = f"{Fore.RED}{record.count}{Style.RESET_ALL}" if record.count == 0 else str(record.count)
            rows.append([record.path, record.method, record.status, count])

        summary = self.summary()
        table = tabulate(rows, headers=HEADERS, tablefmt="fancy_grid", disable_numparse=True)
        return (
            f"{table}\n"
            f"Covered {summary['covered']}/{summary['total']} responses ({summary['coverage_pct']:.1f}%)"
        )

    def to_html(self) -> str:
        # Always every record, zero counts included
        return self.template_registry.render_template("coverage_report", {
            "title": self.title,
            "records": self.data,
            "summary": self.summary(),
        })

    def to_markdown(self) -> str:
        md = f"## {self.title}\n\n{self.description}\n\n"
        summary = self.summary()
        md += f"**Overall Coverage: {summary['coverage_pct']:.1f}%** ({summary['covered']}/{summary['total']} responses)\n\n"
        md += "| Path | Method | Status | Count |\n"
        md += "|------|--------|--------|-------|\n"
        for record in self.visible_records:
            count = f"**{record.count}**" if record.count == 0 else str(record.count)
            md += f"| `{record.path}` | {record.method} | {record.status} | {count} |\n"
        return md

    def to_json(self) -> Dict:
        return {
            "title": self.title,
            "description": self.description,
            "summary": self.summary(),
            "records": [
                {"path": r.path, "method": r.method, "status": r.status, "count": r.count}
                for r in self.visible_records
            ],
        }


def render_table(records: List[CoverageRecord], options: Optional[ReportOptions] = None) -> str:
    return CoverageSection(records, options).to_terminal()


def render_markup(records: List[CoverageRecord]) -> str:
    return CoverageSection(records).to_html()
