"""Command-line interface for checking expected-exception definitions.

Usage:
    raisecheck <yaml_file>                    Validate and show expectations
    raisecheck -d <directory>                 Validate all YAML files in a directory
    raisecheck <yaml_file> -f test_a,test_b   Only show selected tests
    raisecheck <yaml_file> --export-json out.json
"""

import json
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .criteria import ExpectationCriteria, load_criteria_file
from .monitoring import enable_monitoring


def find_yaml_files(directory: Path) -> list[Path]:
    """Find all YAML files in directory recursively."""
    return sorted((*directory.glob("**/*.yml"), *directory.glob("**/*.yaml")))


def _criteria_table(title: str, expectations: dict[str, ExpectationCriteria]) -> Table:
    table = Table(title=title, box=box.ROUNDED, show_header=True)
    table.add_column("Test", style="cyan", no_wrap=True)
    table.add_column("Raises", style="magenta")
    table.add_column("Message")
    table.add_column("Match", style="yellow")
    table.add_column("Handler", style="green")
    table.add_column("User Message", style="dim")

    for test_id, criteria in expectations.items():
        message = criteria.expected_message
        table.add_row(
            escape(test_id),
            escape(criteria.expected_type_label),
            escape(message) if message is not None else "[dim]any[/dim]",
            criteria.match_type.value,
            criteria.handler or "[dim]default[/dim]",
            escape(criteria.user_message or ""),
        )
    return table


@click.command()
@click.argument("yaml_file", type=click.Path(exists=True, path_type=Path), required=False)
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Check all YAML files in directory",
)
@click.option("--filter", "-f", "filter_ids", help="Filter tests (comma-separated)")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output")
@click.option("--no-color", is_flag=True, help="Disable colors")
@click.option("--export-json", type=click.Path(path_type=Path), help="Export criteria to JSON")
def main(
    yaml_file: Path | None,
    directory: Path | None,
    filter_ids: str | None,
    quiet: bool,
    no_color: bool,
    export_json: Path | None,
):
    """raisecheck — validate expected-exception definitions."""
    enable_monitoring()
    console = Console(force_terminal=False, no_color=True) if no_color else Console()

    if directory and filter_ids:
        click.secho("ERROR: --filter cannot be used with --dir", fg="red", err=True)
        raise SystemExit(1)

    if yaml_file:
        files = [yaml_file]
    elif directory:
        files = find_yaml_files(directory)
        if not files:
            click.secho(f"ERROR: No YAML files found in {directory}", fg="red", err=True)
            raise SystemExit(1)
    else:
        click.secho("ERROR: Provide a YAML file or --dir", fg="red", err=True)
        raise SystemExit(1)

    exported: dict[str, dict] = {}
    invalid = 0
    total = 0

    for path in files:
        try:
            expectations = load_criteria_file(path)
        except (ValidationError, yaml.YAMLError, UnicodeDecodeError, OSError) as e:
            invalid += 1
            click.secho(f"✗ {path}: invalid expectations", fg="red", err=True)
            click.secho(str(e), fg="red", err=True)
            continue

        if filter_ids:
            wanted = [name.strip() for name in filter_ids.split(",") if name.strip()]
            missing = [name for name in wanted if name not in expectations]
            if missing:
                click.secho(
                    f"ERROR: No tests found matching filters: {', '.join(missing)}. "
                    f"Available: {', '.join(expectations)}",
                    fg="red",
                    err=True,
                )
                raise SystemExit(1)
            expectations = {name: expectations[name] for name in wanted}

        total += len(expectations)
        exported[str(path)] = {
            test_id: criteria.model_dump(mode="json") for test_id, criteria in expectations.items()
        }

        if not quiet:
            console.print()
            console.print(_criteria_table(path.name, expectations))

    if export_json:
        with open(export_json, "w") as f:
            json.dump(exported, f, indent=2)
        if not quiet:
            click.echo(f"  💾 Exported: {click.style(str(export_json), fg='blue', dim=True)}")

    if invalid:
        click.secho(f"{invalid} of {len(files)} file(s) invalid", fg="red", err=True)
        raise SystemExit(1)

    click.secho(f"✓ {total} expectation(s) valid", fg="green")


if __name__ == "__main__":
    main()
