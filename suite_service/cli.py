"""
This file is the entry point for the 'suitetree' command-line tool.
Run 'suitetree --help' in your shell to use the CLI.

Every command except 'serve' works on a snapshot file: the raw project list
exported from the test management backend, as JSON or YAML.
"""
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from common.app_setup import setup_logging, print_and_log, print_error
from common.config import Settings, load_settings
from suite_service import server
from suitetree import MalformedRecordError, SuiteTreeModel, TreeState, load_snapshot
from suitetree.render import build_rich_tree
from suitetree.tree import iter_nodes

app = typer.Typer(add_completion=False, help="Inspect test suite snapshots and serve them over HTTP.")

@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings file (YAML)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """Load settings and set up logging for every command."""
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"Failed to load settings: {escape(str(e))}")
        raise typer.Exit(1)
    if verbose:
        settings.log_level = "DEBUG"
    setup_logging(app_name="suitetree", loglevel=settings.log_level, logfile=settings.logfile)
    ctx.obj = settings


def _load_model(ctx: typer.Context, snapshot: Path, strict: bool = False) -> SuiteTreeModel:
    settings: Settings = ctx.obj
    try:
        raw_projects = load_snapshot(snapshot)
    except (OSError, TypeError, ValueError) as e:
        print_error(f"Failed to read snapshot {snapshot}: {escape(str(e))}")
        raise typer.Exit(1)
    model = SuiteTreeModel(TreeState(), strict=strict or settings.strict_ingest)
    model.load(raw_projects)
    return model


@app.command()
def show(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Snapshot file"),
    query: str = typer.Option("", "--query", "-q", help="Only show matches and their ancestors"),
    select: Optional[list[str]] = typer.Option(None, "--select", "-s", help="Path to mark as selected (repeatable)"),
    expand_all: bool = typer.Option(False, "--expand-all", "-a", help="Show collapsed branches too"),
):
    """Print the normalized suite tree."""
    model = _load_model(ctx, snapshot)
    if select:
        model.set_selection(select)
    projects = model.filter(query)
    if not projects:
        print_and_log("No matching projects.")
        return
    Console().print(build_rich_tree(projects, model.state, show_collapsed=expand_all or bool(query)))


@app.command()
def search(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Snapshot file"),
    query: str = typer.Argument(..., help="Case-insensitive text to look for in names"),
):
    """List the paths whose names contain QUERY."""
    model = _load_model(ctx, snapshot)
    needle = query.lower()
    found = 0
    for path, node in iter_nodes(model.filter(query)):
        if needle in node.name.lower():
            print_and_log(f"{escape(path)}\t{escape(model.display_name(path))}")
            found += 1
    if not found:
        print_and_log(f"No names match '{escape(query)}'.")


@app.command()
def resolve(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Snapshot file"),
    paths: list[str] = typer.Argument(..., help="Colon-delimited paths"),
):
    """Print the readable 'Project > Suite' name of each PATH."""
    model = _load_model(ctx, snapshot)
    for path in paths:
        marker = "" if model.find(path) is not None else "  (not found)"
        print_and_log(f"{escape(path)}\t{escape(model.display_name(path))}{marker}")


@app.command()
def stats(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Snapshot file"),
    paths: list[str] = typer.Argument(..., help="Selected suite paths"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Sum test case counts over the suites behind PATHS."""
    model = _load_model(ctx, snapshot)
    report = model.stats(paths)
    if as_json:
        typer.echo(json.dumps(report.model_dump(), indent=2))
        return
    table = Table(title="Test cases")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for key, value in report.as_backend_dict().items():
        table.add_row(key, str(value))
    Console().print(table)
    for error in report.errors:
        print_error(error)


@app.command()
def validate(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Snapshot file"),
):
    """Ingest strictly and report every record that would be dropped."""
    model = _load_model(ctx, snapshot, strict=True)
    errors: list[MalformedRecordError] = model.errors
    print_and_log(f"{len(model.projects)} projects loaded, {len(errors)} malformed records.")
    for error in errors:
        print_error(escape(error.message))
    if errors:
        raise typer.Exit(1)


@app.command()
def serve(
    ctx: typer.Context,
    port: Optional[int] = typer.Option(None, help="Port to listen on (settings default if not set)"),
    host: Optional[str] = typer.Option(None, help="Interface to bind"),
    snapshot: Optional[Path] = typer.Option(None, help="Snapshot file to preload"),
    syslog: bool = typer.Option(False, "--syslog", help="Log to syslog instead of the log file"),
):
    """Run the REST API with uvicorn."""
    settings: Settings = ctx.obj
    if syslog:
        setup_logging(app_name="suitetree", daemon=True, loglevel=settings.log_level)
    update = {}
    if port is not None:
        update["port"] = port
    if host is not None:
        update["host"] = host
    if snapshot is not None:
        update["snapshot"] = str(snapshot)
    settings = settings.model_copy(update=update)
    try:
        server.run(settings)
    except (OSError, TypeError, ValueError) as e:
        print_error(f"Failed to start server: {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
