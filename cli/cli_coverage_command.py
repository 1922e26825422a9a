import json
import logging
import os
import sys

import click

from contract.contract_loader import ContractLoader
from core.coverage_ledger import CoverageLedger
from core.coverage_options import ReportOptions
from core.exceptions import ContractLoadError, CoverageError
from report.coverage_section import CoverageSection

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(level=log_level, format=log_format)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group(name="openapi-coverage")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def coverage_cli(verbose):
    """Inspect OpenAPI contracts and coverage reports."""
    setup_logging(verbose)


@coverage_cli.command("validate")
@click.argument("contract_path", type=click.Path(dir_okay=False))
@click.option("--path-prefix", default="", help="Prefix shown in front of each declared path")
def validate_contract(contract_path, path_prefix):
    """Load a contract and list the (path, method, status) triples it declares."""
    try:
        contract = ContractLoader.load_from_file(contract_path)
    except ContractLoadError as e:
        click.echo(f"✗ Validation failed: {e}", err=True)
        sys.exit(1)

    operations = contract.declared_operations()
    click.echo(f"✓ Contract file is valid: {contract_path}")
    click.echo(f"✓ {len(operations)} operations declared")
    for i, operation in enumerate(operations, 1):
        statuses = ", ".join(operation.statuses) or "-"
        click.echo(f"  {i}. {operation.method.upper()} {path_prefix}{operation.path} -> {statuses}")


@coverage_cli.command("report")
@click.argument("coverage_file", type=click.Path(dir_okay=False))
@click.option("--format", "output_format", default="table",
              type=click.Choice(["table", "html", "markdown", "json"]), help="Output format")
@click.option("--show-zero-counts", is_flag=True, help="Include responses that were never hit")
@click.option("--output", "-o", help="Output file path (defaults to stdout)")
def coverage_report(coverage_file, output_format, show_zero_counts, output):
    """Render a persisted coverage.json file."""
    try:
        with open(coverage_file, "r", encoding="utf-8") as f:
            ledger = CoverageLedger.from_dict(json.load(f))
    except (OSError, json.JSONDecodeError, CoverageError) as e:
        click.echo(f"❌ Error: cannot read coverage file {coverage_file}: {e}", err=True)
        sys.exit(1)

    section = CoverageSection(ledger.snapshot(), ReportOptions(show_zero_counts=show_zero_counts))
    if output_format == "html":
        report = section.to_html()
    elif output_format == "markdown":
        report = section.to_markdown()
    elif output_format == "json":
        report = json.dumps(section.to_json(), indent=2)
    else:
        report = section.to_terminal()

    if output:
        os.makedirs(os.path.dirname(os.path.abspath(output)), exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            f.write(report)
        click.echo(f"✅ Coverage report written to {output}")
    else:
        click.echo(report)


if __name__ == "__main__":
    coverage_cli()
