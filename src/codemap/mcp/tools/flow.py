"""Scenario tools: scenario detection and flow extraction."""
from typing import List, Optional

from codemap.blueprint import build_scenario_flow, detect_scenarios, format_flow_mermaid

from .common import active_blueprint, dump, error


def register(mcp):
    @mcp.tool()
    def scenarios() -> dict:
        """
        Propose named execution scenarios (CLI input, API request, ...)
        with entry symbols suitable for scenario_flow.
        """
        blueprint, err = active_blueprint()
        if err:
            return err
        return {"status": "ok", "scenarios": dump(detect_scenarios(blueprint))}

    @mcp.tool()
    def scenario_flow(
        entry_ids: Optional[List[str]] = None,
        scenario_id: Optional[str] = None,
        max_depth: int = 5,
        format: str = "json",
    ) -> dict:
        """
        Flow diagram (nodes and edges) reached from entry symbols.

        Every symbol appears once even on recursive call graphs. Node roles:
        entry, process, decision, data, end. Edge types: normal,
        conditional, loop, async.

        Args:
            entry_ids: Entry symbol ids
            scenario_id: Use the entry symbols of a detected scenario instead
            max_depth: Maximum walk depth (default 5)
            format: "json" (nodes/edges) or "mermaid"
        """
        blueprint, err = active_blueprint()
        if err:
            return err

        title = None
        if not entry_ids:
            if scenario_id is None:
                return error("invalid_arguments", "Provide entry_ids or scenario_id")
            match = next((s for s in detect_scenarios(blueprint) if s.id == scenario_id), None)
            if match is None:
                return error("scenario_not_found", f"Scenario '{scenario_id}' not found")
            entry_ids, title = match.entry_symbols, match.name

        flow = build_scenario_flow(blueprint, entry_ids, max_depth, title)
        if format == "mermaid":
            return {"status": "ok", "title": flow.title, "mermaid": format_flow_mermaid(flow),
                    "unknown_entries": flow.unknown_entries}
        return {"status": "ok", "flow": dump(flow)}
