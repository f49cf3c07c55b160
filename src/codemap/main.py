from pathlib import Path
from typing import Optional

import typer

from codemap import __version__
from codemap.logging_config import logger, reset_logging, setup_logging
from codemap.blueprint import (
    BlueprintGenerator,
    FORMAT_VERSION,
    create_annotator,
    load_file,
    read_facts_file,
    save_file,
)
from codemap.blueprint.results import GenerationProgress
from codemap.cli import query
from codemap.cli.common import resolve_blueprint_path
from codemap.cli.config import CLIConfig
from codemap.cli.output import get_console, print_error, print_json
from codemap.exceptions import BlueprintLoadError, InvalidFactsError
from codemap.paths import get_paths

app = typer.Typer()
console = get_console()


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables and colors (also via CODEMAP_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level to stderr"),
):
    """
    codemap: navigable blueprint of a codebase from extracted facts.

    Machine mode is the default (pure data, no formatting).
    Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)
    if verbose:
        reset_logging()
        setup_logging(level="DEBUG", suppress_console=False)
    elif not human:
        setup_logging(suppress_console=True)


# Query commands live in cli/query.py and are registered flat
app.command(name="entry-points")(query.entry_points_cmd)
app.command(name="tree")(query.tree_cmd)
app.command(name="architecture")(query.architecture_cmd)
app.command(name="stats")(query.stats_cmd)
app.command(name="refs")(query.refs_cmd)
app.command(name="flow")(query.flow_cmd)
app.command(name="scenarios")(query.scenarios_cmd)
app.command(name="dirtree")(query.dirtree_cmd)
app.command(name="module")(query.module_cmd)
app.command(name="search")(query.search_cmd)


@app.command()
def generate(
    facts_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Facts file (JSON array or JSON lines)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Blueprint path (default .codemap/blueprint.json)"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name (default: current directory name)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root recorded in the blueprint"),
    semantic: bool = typer.Option(False, "--semantic/--no-semantic", help="Annotate with the configured LLM backend"),
    json_output: bool = typer.Option(False, "--json", help="Output summary as JSON"),
):
    """
    Generate a blueprint from extracted per-file facts.
    """
    try:
        facts = read_facts_file(facts_path)
    except InvalidFactsError as e:
        print_error(str(e), code="INVALID_FACTS", input_value=str(facts_path))
        raise typer.Exit(code=1)

    root_path = (root or Path.cwd()).resolve()
    last_phase = {"name": None}

    def on_progress(progress: GenerationProgress):
        if progress.phase != last_phase["name"]:
            last_phase["name"] = progress.phase
            logger.debug(f"Generation phase '{progress.phase}' ({progress.total} items)")
            if not CLIConfig.is_machine_mode():
                console.print(f"[dim]{progress.phase}...[/dim]")

    generator = BlueprintGenerator(
        project_name=project or root_path.name,
        root_path=str(root_path),
        annotator=create_annotator() if semantic else None,
        progress=on_progress,
    )
    blueprint = generator.generate(facts)

    output = output or get_paths().blueprint_file
    save_file(blueprint, output)

    stats = blueprint.statistics
    summary = {
        "status": "ok",
        "blueprint_path": str(output),
        "modules": stats.total_modules,
        "symbols": stats.total_symbols,
        "symbol_calls": stats.reference_stats.total_symbol_calls,
    }
    if json_output or CLIConfig.is_machine_mode():
        print_json(summary)
    else:
        console.print(
            f"[green]Blueprint written to {output}[/green] "
            f"({stats.total_modules} modules, {stats.total_symbols} symbols)"
        )


@app.command()
def validate(
    blueprint_path: Optional[Path] = typer.Option(None, "--blueprint", "-b", help="Path to blueprint.json"),
):
    """
    Check that a blueprint document loads with this version of codemap.
    """
    path = resolve_blueprint_path(blueprint_path)
    try:
        blueprint = load_file(path)
    except BlueprintLoadError as e:
        print_error(str(e), code=type(e).__name__, input_value=str(path))
        raise typer.Exit(code=1)

    print_json({
        "status": "ok",
        "blueprint_path": str(path),
        "version": blueprint.meta.version,
        "supported_version": FORMAT_VERSION,
        "modules": len(blueprint.modules),
    })


@app.command()
def serve():
    """
    Run the MCP query server over stdio.
    """
    from codemap.mcp import run_server

    setup_logging(suppress_console=True)
    run_server()


@app.command()
def version():
    """
    Prints the current version of codemap.
    """
    typer.echo(f"codemap v{__version__} (blueprint format {FORMAT_VERSION})")


if __name__ == "__main__":
    app()
