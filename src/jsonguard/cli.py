"""CLI interface for jsonguard using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jsonguard import __description__, __version__
from jsonguard.config import Draft, EngineConfig, load_config
from jsonguard.engine import JsonSchemaEngine
from jsonguard.errors import JsonGuardError
from jsonguard.formats import FORMATS, get_format

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="jsonguard",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"jsonguard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """jsonguard - JSON Schema validation with custom formats."""


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _collect_schema_files(paths: list[Path]) -> list[Path]:
    """Expand directories into the *.json files they contain."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(path.rglob("*.json")))
        elif path.exists():
            files.append(path)
        else:
            raise FileNotFoundError(f"Schema path not found: {path}")
    return files


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@app.command()
def validate(
    schema: Annotated[
        Path,
        typer.Argument(help="Main schema file")
    ],
    instances: Annotated[
        List[Path],
        typer.Argument(help="Instance files to validate")
    ],
    ref: Annotated[
        Optional[List[Path]],
        typer.Option("--ref", "-r", help="Schema file or directory made available to $ref (repeatable)")
    ] = None,
    draft: Annotated[
        Optional[str],
        typer.Option("--draft", "-d", help="Draft: 4, 6, 7, 2019-09, 2020-12 (default: detect from $schema)")
    ] = None,
    no_custom_formats: Annotated[
        bool,
        typer.Option("--no-custom-formats", help="Disable the custom format catalog")
    ] = False,
    strict_formats: Annotated[
        bool,
        typer.Option("--strict-formats", help="Fail on formats unknown to the validator")
    ] = False,
    no_check_formats: Annotated[
        bool,
        typer.Option("--no-check-formats", help="Do not assert the format keyword")
    ] = False,
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Error template with {path}, {instance}, {schema_path}, {error}")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .jsonguard.json)")
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level: error, warn, info, debug")
    ] = None,
) -> None:
    """Validate instance documents against a schema."""
    valid_formats = ["table", "json"]

    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        guard_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _configure_logging(log_level or guard_config.logging.level)

    engine_config: EngineConfig = guard_config.engine.model_copy()
    if no_custom_formats:
        engine_config.use_custom_formats = False
    if strict_formats:
        engine_config.ignore_unknown_formats = False
    if no_check_formats:
        engine_config.check_formats = False
    if template is not None:
        engine_config.output_template = template

    engine = JsonSchemaEngine(engine_config)

    try:
        if draft is not None:
            engine.set_draft(draft)

        ref_paths = [Path(p) for p in guard_config.schemas.preload] + list(ref or [])
        for schema_file in _collect_schema_files(ref_paths):
            uri = engine.add_schema(_read_text(schema_file))
            logger.debug(f"Loaded {schema_file} as {uri}")

        engine.compile(_read_text(schema))

        results = []
        for instance_file in instances:
            is_valid, errors_json = engine.validate(_read_text(instance_file))
            results.append({
                "instance": str(instance_file),
                "valid": is_valid,
                "errors": jsonlib.loads(errors_json),
            })

    except (JsonGuardError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if format == "json":
        print(jsonlib.dumps(results, indent=2, ensure_ascii=False))
    else:
        table = Table(title="Validation Results")
        table.add_column("Instance", style="cyan")
        table.add_column("Valid", justify="center")
        table.add_column("Errors", style="dim")

        for result in results:
            status = "[green]yes[/green]" if result["valid"] else "[red]no[/red]"
            table.add_row(escape(result["instance"]), status, escape("\n".join(result["errors"])))

        console.print(table)

    if not all(result["valid"] for result in results):
        raise typer.Exit(1)


@app.command("check-format")
def check_format(
    name: Annotated[
        str,
        typer.Argument(help="Format name, see 'jsonguard formats'")
    ],
    value: Annotated[
        str,
        typer.Argument(help="String to check")
    ],
) -> None:
    """Check a single string against a custom format."""
    fmt = get_format(name)
    if fmt is None:
        console.print(f"[red]Error:[/red] Unknown format '{escape(name)}'")
        raise typer.Exit(1)

    if fmt.predicate(value):
        console.print(f"[green]valid[/green] {name}: {escape(value)}")
    else:
        console.print(f"[red]invalid[/red] {name}: {escape(value)}")
        raise typer.Exit(1)


@app.command()
def formats() -> None:
    """List the custom format catalog."""
    table = Table(title="Custom Formats")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")

    for fmt in FORMATS:
        table.add_row(fmt.name, fmt.description)

    console.print(table)
    console.print(f"[dim]Drafts: {', '.join(d.value for d in Draft)}[/dim]")


if __name__ == "__main__":
    app()
