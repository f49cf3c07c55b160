"""Cross-reference tools: symbol references, module detail, search."""
from codemap.blueprint import get_module_detail, get_symbol_references, search_blueprint

from .common import active_blueprint, dump, error


def register(mcp):
    @mcp.tool()
    def symbol_refs(symbol_id: str) -> dict:
        """
        Callers, callees and type references of a symbol.

        Edges whose far end is not in the blueprint are kept and flagged
        external, so counts always match the raw edge lists.

        Args:
            symbol_id: Full symbol id (e.g. "src/app.ts::main")

        Returns:
            dict with status and references {callers, callees, typeRefs}
        """
        blueprint, err = active_blueprint()
        if err:
            return err

        refs = get_symbol_references(blueprint, symbol_id)
        if refs is None:
            return error("symbol_not_found", f"Symbol '{symbol_id}' not found", symbol_id=symbol_id)
        return {"status": "ok", "references": dump(refs)}

    @mcp.tool()
    def module_detail(module_id: str) -> dict:
        """
        Symbols by kind, internal/external imports and importers of a module.

        Args:
            module_id: Module id (project-relative path)
        """
        blueprint, err = active_blueprint()
        if err:
            return err

        detail = get_module_detail(blueprint, module_id)
        if detail is None:
            return error("module_not_found", f"Module '{module_id}' not found", module_id=module_id)
        return {"status": "ok", "module": dump(detail)}

    @mcp.tool()
    def search(query: str, limit: int = 50) -> dict:
        """
        Case-insensitive substring search over module ids and symbol names.

        Args:
            query: Text to look for
            limit: Maximum hits (default 50)
        """
        blueprint, err = active_blueprint()
        if err:
            return err

        hits = search_blueprint(blueprint, query, limit)
        return {"status": "ok", "query": query, "hits": dump(hits)}
