"""Blueprint lifecycle tools."""
from typing import Optional

from codemap.blueprint import get_blueprint_manager
from codemap.exceptions import BlueprintLoadError

from .common import active_blueprint, error


def register(mcp):
    @mcp.tool()
    def blueprint_info() -> dict:
        """
        Summary of the active blueprint (path, project, version, totals).
        """
        _, err = active_blueprint()
        if err:
            return err
        return {"status": "ok", **get_blueprint_manager().get_info()}

    @mcp.tool()
    def reload_blueprint(path: Optional[str] = None) -> dict:
        """
        Reload the blueprint from disk and swap it in atomically.

        In-flight queries finish against the previous blueprint. On failure
        the previous blueprint stays active.

        Args:
            path: Blueprint file to load (default: the current one, or auto-discovery)
        """
        manager = get_blueprint_manager()
        try:
            manager.reload(path)
        except FileNotFoundError as e:
            return error("blueprint_not_found", str(e))
        except BlueprintLoadError as e:
            return error("blueprint_load_failed", str(e), exception=type(e).__name__)
        return {"status": "ok", **manager.get_info()}
