"""Builders for extracted facts and the sample blueprints used across tests."""

from typing import List, Optional, Sequence

from codemap.blueprint import (
    BlueprintGenerator,
    FileFacts,
    Location,
    Module,
    SemanticInfo,
    Symbol,
    SymbolCall,
    TypeReference,
)


def make_symbol(symbol_id: str, kind: str = "function", signature: Optional[str] = None,
                children: Sequence[str] = (), parent: Optional[str] = None,
                description: Optional[str] = None) -> Symbol:
    module_id, _, name = symbol_id.rpartition("::")
    return Symbol(
        id=symbol_id,
        name=name.split(".")[-1] if kind == "method" else name,
        kind=kind,
        module_id=module_id,
        location=Location(start_line=1, end_line=10),
        signature=signature,
        children=list(children),
        parent=parent,
        semantic=SemanticInfo(description=description) if description else None,
    )


def make_facts(module_id: str, imports: Sequence[str] = (), lines: int = 10,
               language: str = "typescript", symbols: Sequence[Symbol] = (),
               calls: Sequence[tuple] = (), type_refs: Sequence[TypeReference] = (),
               description: Optional[str] = None) -> FileFacts:
    """Facts for one file; calls are (caller, callee) or (caller, callee, call_type)."""
    return FileFacts(
        module=Module(
            id=module_id,
            name=module_id.split("/")[-1],
            path=f"/project/{module_id}",
            language=language,
            lines=lines,
            imports=list(imports),
            semantic=SemanticInfo(description=description) if description else None,
        ),
        symbols=list(symbols),
        calls=[
            SymbolCall(caller_symbol_id=c[0], callee_symbol_id=c[1],
                       call_type=c[2] if len(c) > 2 else "direct")
            for c in calls
        ],
        type_refs=list(type_refs),
    )


def build_blueprint(facts: List[FileFacts], name: str = "sample"):
    return BlueprintGenerator(project_name=name, root_path="/project").generate(facts)


CLI = "src/cli.ts"
ENGINE = "src/core/engine.ts"
PARSER = "src/core/parser.ts"
HELPERS = "src/utils/helpers.ts"
SETTINGS = "src/config/settings.ts"
APP = "src/ui/components/App.tsx"


def sample_facts() -> List[FileFacts]:
    """
    Six-module project:

        cli -> settings, engine, helpers
        engine -> helpers, parser      parser -> helpers, lodash (external)
        settings -> helpers            App -> engine
    """
    return [
        make_facts(
            CLI, imports=[SETTINGS, ENGINE, HELPERS], lines=50,
            symbols=[make_symbol(f"{CLI}::main")],
            calls=[(f"{CLI}::main", f"{ENGINE}::Engine.run", "method"),
                   (f"{CLI}::main", f"{SETTINGS}::loadConfig")],
        ),
        make_facts(
            ENGINE, imports=[HELPERS, PARSER], lines=200, description="Runs the pipeline",
            symbols=[
                make_symbol(f"{ENGINE}::Engine", kind="class", children=[f"{ENGINE}::Engine.run"]),
                make_symbol(f"{ENGINE}::Engine.run", kind="method", parent=f"{ENGINE}::Engine"),
            ],
            calls=[(f"{ENGINE}::Engine.run", f"{PARSER}::parse"),
                   (f"{ENGINE}::Engine.run", f"{HELPERS}::format"),
                   (f"{ENGINE}::Engine.run", "lodash::map")],
        ),
        make_facts(
            PARSER, imports=[HELPERS, "lodash"], lines=120,
            symbols=[
                make_symbol(f"{PARSER}::parse"),
                make_symbol(f"{PARSER}::BaseParser", kind="class"),
                make_symbol(f"{PARSER}::TsParser", kind="class"),
            ],
            calls=[(f"{PARSER}::parse", f"{PARSER}::parse"),
                   (f"{PARSER}::parse", f"{HELPERS}::format")],
            type_refs=[TypeReference(source=f"{PARSER}::TsParser", target=f"{PARSER}::BaseParser")],
        ),
        make_facts(HELPERS, lines=30, symbols=[make_symbol(f"{HELPERS}::format")]),
        make_facts(
            SETTINGS, imports=[HELPERS], lines=20,
            symbols=[
                make_symbol(f"{SETTINGS}::loadConfig", signature="async function loadConfig()"),
                make_symbol(f"{SETTINGS}::DEFAULTS", kind="constant"),
            ],
            calls=[(f"{SETTINGS}::loadConfig", f"{SETTINGS}::DEFAULTS")],
        ),
        make_facts(
            APP, imports=[ENGINE], lines=80,
            symbols=[make_symbol(f"{APP}::App", kind="class")],
            type_refs=[TypeReference(source=f"{APP}::App", target="react::Component")],
        ),
    ]


def cycle_facts() -> List[FileFacts]:
    """A imports B, B imports C, C imports A."""
    return [
        make_facts("a.ts", imports=["b.ts"]),
        make_facts("b.ts", imports=["c.ts"]),
        make_facts("c.ts", imports=["a.ts"]),
    ]

