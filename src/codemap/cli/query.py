"""
Query commands over a generated blueprint.

Each command loads the blueprint once, runs one query and prints either
JSON (--json, or machine mode default) or a human rendering.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from codemap.blueprint import (
    TreeRenderer,
    build_dependency_tree,
    build_scenario_flow,
    detect_entry_points,
    detect_scenarios,
    format_flow,
    format_flow_mermaid,
    get_architecture_view,
    get_directory_tree,
    get_module_detail,
    get_statistics,
    get_symbol_references,
    search_blueprint,
)
from codemap.blueprint.facade import score_entry_points

from .common import load_blueprint_or_exit
from .config import CLIConfig
from .output import echo, get_console, print_error, print_json, print_model, print_table

console = get_console()

BlueprintOption = typer.Option(None, "--blueprint", "-b", help="Path to blueprint.json (default: auto-discover)")
JsonOption = typer.Option(False, "--json", help="Output as JSON")


def _wants_json(json_output: bool) -> bool:
    return json_output or CLIConfig.is_machine_mode()


def entry_points_cmd(
    blueprint_path: Optional[Path] = BlueprintOption,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum candidates (default 5)"),
    explain: bool = typer.Option(False, "--explain", help="Include the score breakdown"),
    json_output: bool = JsonOption,
):
    """
    Rank modules most likely to start execution (best-effort heuristic).
    """
    blueprint = load_blueprint_or_exit(blueprint_path)

    if explain:
        candidates = score_entry_points(blueprint)
        if limit is not None:
            candidates = candidates[:limit]
        if _wants_json(json_output):
            print_model(candidates)
            return
        table = Table(title="Entry point candidates")
        table.add_column("Module", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Pattern")
        table.add_column("Imported")
        for c in candidates:
            table.add_row(c.id, str(c.score), c.matched_pattern or "-", "yes" if c.imported else "no")
        print_table(table)
        return

    entries = detect_entry_points(blueprint, limit)
    if _wants_json(json_output):
        print_json({"entry_points": entries})
    else:
        for entry in entries:
            echo(entry)


def tree_cmd(
    root: Optional[str] = typer.Argument(None, help="Root module id (default: best entry point)"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Maximum expansion depth (default 10)"),
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Show the import tree below a module, marking circular imports.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)

    if root is None:
        entries = detect_entry_points(blueprint, 1)
        if not entries:
            print_error("No entry point detected; pass a root module id", code="NO_ENTRY_POINT")
            raise typer.Exit(code=1)
        root = entries[0]

    tree = build_dependency_tree(blueprint, root, depth)
    if tree is None:
        print_error(f"Module '{root}' not found", code="MODULE_NOT_FOUND", input_value=root)
        raise typer.Exit(code=1)

    if json_output:
        print_model(tree)
    else:
        echo(TreeRenderer().render(tree))


def architecture_cmd(
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Show architecture layers and directory blocks.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    view = get_architecture_view(blueprint)

    if _wants_json(json_output):
        print_model(view)
        return

    console.print(f"[bold]{view.project_name}[/bold]")
    if view.project_description:
        console.print(view.project_description)

    table = Table(title="Blocks")
    table.add_column("Block", style="cyan")
    table.add_column("Type")
    table.add_column("Layer")
    table.add_column("Files", justify="right")
    table.add_column("Lines", justify="right")
    table.add_column("Depends on")
    for block in view.blocks:
        table.add_row(
            block.id, block.type, block.layer, str(block.file_count),
            str(block.total_lines), ", ".join(block.dependencies),
        )
    print_table(table)

    for layer in view.layers:
        if layer.modules:
            console.print(f"[green]{layer.name}[/green] ({len(layer.modules)}): {layer.description}")


def stats_cmd(
    blueprint_path: Optional[Path] = BlueprintOption,
    top: Optional[int] = typer.Option(None, "--top", help="Recompute rankings with this many entries"),
    json_output: bool = JsonOption,
):
    """
    Show blueprint statistics.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    stats = get_statistics(blueprint, top)

    if _wants_json(json_output):
        print_model(stats)
        return

    table = Table(title=f"Statistics: {blueprint.project.name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Modules", str(stats.total_modules))
    table.add_row("Symbols", str(stats.total_symbols))
    table.add_row("Lines", str(stats.total_lines))
    table.add_row("Semantic coverage", f"{stats.semantic_coverage.coverage_percent}%")
    for language, count in stats.language_breakdown.items():
        table.add_row(f"Language: {language}", str(count))
    print_table(table)

    if stats.most_imported_modules:
        console.print("[bold]Most imported[/bold]")
        for item in stats.most_imported_modules:
            console.print(f"  {item.id} ({item.count})")
    if stats.most_called_symbols:
        console.print("[bold]Most called[/bold]")
        for item in stats.most_called_symbols:
            console.print(f"  {item.name} [dim]{item.id}[/dim] ({item.count})")


def refs_cmd(
    symbol_id: str = typer.Argument(..., help="Symbol id"),
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Show callers, callees and type references of a symbol.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    refs = get_symbol_references(blueprint, symbol_id)
    if refs is None:
        print_error(f"Symbol '{symbol_id}' not found", code="SYMBOL_NOT_FOUND", input_value=symbol_id)
        raise typer.Exit(code=1)

    if _wants_json(json_output):
        print_model(refs)
        return

    console.print(f"[bold]{refs.name}[/bold] [dim]{refs.module_id}[/dim]")
    for title, entries in (("Callers", refs.callers), ("Callees", refs.callees)):
        console.print(f"{title} ({len(entries)}):")
        for entry in entries:
            suffix = " [yellow](external)[/yellow]" if entry.external else ""
            console.print(f"  {entry.name} [dim]{entry.symbol_id}[/dim]{suffix}")
    if refs.type_refs:
        console.print(f"Type references ({len(refs.type_refs)}):")
        for entry in refs.type_refs:
            console.print(f"  {entry.direction}: {entry.name} ({entry.kind})")


def flow_cmd(
    entries: List[str] = typer.Argument(..., help="Entry symbol ids"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Maximum walk depth (default 5)"),
    mermaid: bool = typer.Option(False, "--mermaid", help="Emit a mermaid flowchart"),
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Build a scenario flow from one or more entry symbols.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    flow = build_scenario_flow(blueprint, entries, depth)

    if mermaid:
        echo(format_flow_mermaid(flow))
    elif json_output:
        print_model(flow)
    else:
        echo(format_flow(flow))


def scenarios_cmd(
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Propose named execution scenarios with their entry symbols.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    scenarios = detect_scenarios(blueprint)

    if _wants_json(json_output):
        print_model(scenarios)
        return

    for scenario in scenarios:
        console.print(f"[bold]{scenario.id}[/bold] {scenario.name}: {scenario.description}")
        for symbol_id in scenario.entry_symbols:
            console.print(f"  - {symbol_id}")


def dirtree_cmd(
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Show modules as a directory tree.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    tree = get_directory_tree(blueprint)
    if json_output:
        print_model(tree)
    else:
        echo(TreeRenderer().render(tree))


def module_cmd(
    module_id: str = typer.Argument(..., help="Module id"),
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Show a module's symbols, imports and importers.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    detail = get_module_detail(blueprint, module_id)
    if detail is None:
        print_error(f"Module '{module_id}' not found", code="MODULE_NOT_FOUND", input_value=module_id)
        raise typer.Exit(code=1)

    if _wants_json(json_output):
        print_model(detail)
        return

    console.print(f"[bold]{detail.id}[/bold] ({detail.language}, {detail.lines} lines, {detail.layer})")
    if detail.semantic and detail.semantic.description:
        console.print(detail.semantic.description)
    for kind, ids in detail.symbols_by_kind.items():
        console.print(f"{kind}: {', '.join(ids)}")
    console.print(f"Imports: {', '.join(detail.internal_imports) or '-'}")
    console.print(f"External: {', '.join(detail.external_imports) or '-'}")
    console.print(f"Imported by: {', '.join(detail.imported_by) or '-'}")


def search_cmd(
    query: str = typer.Argument(..., help="Substring to look for in module ids and symbol names"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n"),
    blueprint_path: Optional[Path] = BlueprintOption,
    json_output: bool = JsonOption,
):
    """
    Search module ids and symbol names.
    """
    blueprint = load_blueprint_or_exit(blueprint_path)
    hits = search_blueprint(blueprint, query, limit)

    if _wants_json(json_output):
        print_model(hits)
        return

    for hit in hits:
        kind = hit.kind or hit.type
        echo(f"{kind:10} {hit.id}")
