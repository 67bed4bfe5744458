"""
Assessment Kit - Command Line Interface

Runs cross-tool synthesis over a workspace of assessment tool data.

Usage:
    assess [--workspace PATH] <command> [<args>]

Commands:
    init        Initialize a new workspace
    tool        Store or remove assessment tool data
    rules       Inspect the synthesis rule catalog
    synthesize  Run a synthesis pass and store the result
    report      Render the latest synthesis result to Markdown

Run 'assess <command> --help' for more information on a command.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
import yaml

from assessment_system import __version__
from assessment_system.core.config import validate_config
from assessment_system.core.logging import setup_logging
from assessment_system.core.workspace import (
    Workspace,
    WorkspaceError,
    get_workspace,
    require_workspace,
)
from assessment_system.schemas.common import MAX_SEVERITY, MIN_SEVERITY
from assessment_system.synthesis import (
    SEVERITY_LABELS,
    ReportError,
    ReportGenerator,
    SynthesisContextBuilder,
    SynthesisResult,
    build_default_registry,
    default_rule_ids,
    is_result_current,
    load_synthesis_result,
    save_synthesis_result,
    skipped_summary,
)
from assessment_system.synthesis.rules import DEFAULT_RULES

app = typer.Typer(
    name="assess",
    help="Cross-tool synthesis for business self-assessment data.",
    no_args_is_help=True,
)
tool_app = typer.Typer(help="Store or remove assessment tool data.", no_args_is_help=True)
rules_app = typer.Typer(help="Inspect the synthesis rule catalog.", no_args_is_help=True)
app.add_typer(tool_app, name="tool")
app.add_typer(rules_app, name="rules")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"assessment-kit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    workspace: Annotated[
        Optional[Path],
        typer.Option(
            "--workspace",
            "-w",
            help="Workspace path (default: $ASSESSMENT_WORKSPACE or ~/.assessment-workspace)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Also print log output to stderr"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
):
    """Cross-tool synthesis for business self-assessment data."""
    ctx.obj = {"workspace": workspace, "verbose": verbose}


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def _open_workspace(ctx: typer.Context) -> Workspace:
    """Resolve and validate the workspace, then start logging into it."""
    try:
        workspace = require_workspace(ctx.obj["workspace"])
        config = workspace.config
    except WorkspaceError as e:
        _fail(str(e))

    setup_logging(workspace.path, config, console=ctx.obj["verbose"])
    return workspace


def _run_synthesis(workspace: Workspace) -> SynthesisResult:
    registry = build_default_registry(workspace.config)
    context = SynthesisContextBuilder(workspace).build()
    return registry.evaluate_all(context)


# =============================================================================
# INIT
# =============================================================================


@app.command("init")
def init(
    ctx: typer.Context,
    path: Annotated[
        Optional[Path],
        typer.Argument(help="Workspace directory (default: --workspace or env/default)"),
    ] = None,
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Business name shown in reports"),
    ] = "My Business",
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Reinitialize an existing workspace"),
    ] = False,
):
    """Initialize a new workspace.

    Creates the directory structure, default assessment-kit.yaml and
    workspace metadata. Existing tool data is kept on --force.

    Examples:
        assess init ./acme --name "Acme Ltd"
        assess init ./acme --force
    """
    workspace = get_workspace(path or ctx.obj["workspace"])

    try:
        created = workspace.init(name=name, force=force)
    except OSError as e:
        _fail(f"Could not create workspace at {workspace.path}: {e}")

    if not created:
        typer.secho(
            f"Workspace already exists at {workspace.path}. Use --force to reinitialize.",
            fg=typer.colors.YELLOW,
        )
        return

    typer.secho(f"Initialized workspace at {workspace.path}", fg=typer.colors.GREEN)
    typer.echo(f"  Name: {name}")
    typer.echo(f"  Add tool data with: assess -w {workspace.path} tool set <tool-id> <file>")


# =============================================================================
# TOOL DATA
# =============================================================================


def _read_payload(file: Path):
    try:
        text = file.read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Could not read {file}: {e}")

    try:
        if file.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        _fail(f"Could not parse {file}: {e}")


@tool_app.command("set")
def tool_set(
    ctx: typer.Context,
    tool_id: Annotated[str, typer.Argument(help="Tool id (e.g., swot-analysis)")],
    file: Annotated[
        Path,
        typer.Argument(help="YAML or JSON file holding the tool's data", exists=True, dir_okay=False),
    ],
):
    """Store a tool's data in the workspace, replacing any previous data.

    Examples:
        assess tool set swot-analysis ./swot.yaml
        assess tool set leadership-dna ./dna.json
    """
    workspace = _open_workspace(ctx)
    payload = _read_payload(file)

    if payload is None:
        _fail(f"{file} is empty")

    try:
        path = workspace.save_tool(tool_id, payload)
    except WorkspaceError as e:
        _fail(str(e))

    typer.secho(f"Stored {tool_id} data: {path}", fg=typer.colors.GREEN)


@tool_app.command("remove")
def tool_remove(
    ctx: typer.Context,
    tool_id: Annotated[str, typer.Argument(help="Tool id to remove")],
):
    """Remove a tool's data from the workspace."""
    workspace = _open_workspace(ctx)
    try:
        removed = workspace.remove_tool(tool_id)
    except WorkspaceError as e:
        _fail(str(e))

    if not removed:
        typer.secho(f"No data stored for {tool_id}", fg=typer.colors.YELLOW)
        return
    typer.secho(f"Removed {tool_id} data", fg=typer.colors.GREEN)


@tool_app.command("list")
def tool_list(ctx: typer.Context):
    """List tools with stored data."""
    workspace = _open_workspace(ctx)
    tool_ids = workspace.tool_ids()
    if not tool_ids:
        typer.echo("No tool data stored yet.")
        return
    for tool_id in tool_ids:
        typer.echo(tool_id)


# =============================================================================
# RULES
# =============================================================================


@rules_app.command("list")
def rules_list(ctx: typer.Context):
    """List every built-in rule and whether it is enabled."""
    workspace = _open_workspace(ctx)
    config = workspace.config
    disabled = set(config.synthesis.disabled_rules)

    for problem in validate_config(config, known_rule_ids=default_rule_ids()):
        typer.secho(f"Warning: {problem}", fg=typer.colors.YELLOW)

    for rule_cls in sorted(DEFAULT_RULES, key=lambda r: r.id):
        status = "disabled" if rule_cls.id in disabled else "enabled"
        color = typer.colors.YELLOW if status == "disabled" else typer.colors.GREEN
        typer.secho(f"{rule_cls.id} [{status}]", fg=color, bold=True)
        typer.echo(f"  {rule_cls.name}: {rule_cls.description}")
        typer.echo(f"  Requires: {', '.join(rule_cls.required_tools)}")


@rules_app.command("applicable")
def rules_applicable(ctx: typer.Context):
    """Show which rules can run with the tool data stored so far."""
    workspace = _open_workspace(ctx)
    registry = build_default_registry(workspace.config)
    context = SynthesisContextBuilder(workspace).build()
    available = set(context.available_tool_ids)

    applicable = {rule.id for rule in registry.get_applicable_rules(available)}
    for rule_id in sorted(registry.get_ids()):
        rule = registry.get(rule_id)
        if rule_id in applicable:
            typer.secho(f"✓ {rule_id}", fg=typer.colors.GREEN)
            continue
        missing = [t for t in rule.required_tools if t not in available]
        typer.secho(f"✗ {rule_id}", fg=typer.colors.YELLOW)
        typer.echo(f"  Missing: {', '.join(missing)}")

    typer.echo(f"\n{len(applicable)} of {len(registry)} rules can run.")


# =============================================================================
# SYNTHESIS
# =============================================================================


@app.command("synthesize")
def synthesize(
    ctx: typer.Context,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the full result as JSON"),
    ] = False,
    no_save: Annotated[
        bool,
        typer.Option("--no-save", help="Do not store the result in the workspace"),
    ] = False,
):
    """Run every applicable rule and print the prioritized insights.

    Examples:
        assess synthesize
        assess synthesize --json --no-save
    """
    workspace = _open_workspace(ctx)

    try:
        result = _run_synthesis(workspace)
        if not no_save:
            save_synthesis_result(result, workspace)
    except WorkspaceError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, default=str))
        return

    typer.secho(
        f"Synthesis: {len(result.insights)} insights from "
        f"{result.rules_evaluated} rules",
        fg=typer.colors.CYAN,
        bold=True,
    )
    typer.echo(skipped_summary(result))
    if result.rules_failed:
        typer.secho(
            f"Rules failed (see log): {', '.join(result.rules_failed)}",
            fg=typer.colors.RED,
        )

    for insight in result.insights:
        label = SEVERITY_LABELS[insight.severity]
        typer.echo(f"\n[{label}] {insight.type.value}: {insight.title}")
        typer.echo(f"  {insight.description}")
        typer.echo(f"  → {insight.recommendation}")

    if result.scores:
        typer.echo("\nScores:")
        for key in sorted(result.scores):
            typer.echo(f"  {key}: {result.scores[key]}")


@app.command("report")
def report(
    ctx: typer.Context,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path (default: reports/assessment-<date>.md)"),
    ] = None,
    min_severity: Annotated[
        Optional[int],
        typer.Option(
            "--min-severity",
            min=MIN_SEVERITY,
            max=MAX_SEVERITY,
            help="Lowest severity to include (default from config)",
        ),
    ] = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", "-f", help="Overwrite existing output file"),
    ] = False,
    stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Print the report instead of writing a file"),
    ] = False,
):
    """Render the latest synthesis result as a Markdown report.

    Uses the stored result when it is still current, otherwise runs a fresh
    pass and stores it.

    Examples:
        assess report
        assess report --min-severity 4 --stdout
        assess report -o ./acme-report.md --overwrite
    """
    workspace = _open_workspace(ctx)

    try:
        result = load_synthesis_result(workspace)
        if result is None or not is_result_current(result, workspace):
            result = _run_synthesis(workspace)
            save_synthesis_result(result, workspace)
        meta = SynthesisContextBuilder.build_meta(workspace.load_meta())
    except WorkspaceError as e:
        _fail(str(e))

    generator = ReportGenerator(workspace.config.report)

    try:
        if stdout:
            typer.echo(generator.render(result, meta, min_severity=min_severity), nl=False)
            return

        if output is None:
            output = workspace.reports_path / f"assessment-{datetime.now():%Y-%m-%d}.md"
        path = generator.render_to_file(
            result, meta, output, overwrite=overwrite, min_severity=min_severity
        )
    except FileExistsError:
        _fail(f"File already exists: {output}. Use --overwrite to replace.")
    except ReportError as e:
        _fail(str(e))

    typer.secho(f"Generated: {path}", fg=typer.colors.GREEN)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
