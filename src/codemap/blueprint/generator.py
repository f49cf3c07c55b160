"""Blueprint generation: assemble per-file facts into an immutable Blueprint."""

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from codemap.exceptions import GenerationCancelledError, InvalidFactsError
from codemap.logging_config import logger
from codemap.tracing import trace

from .results import GenerationProgress
from .schemas import (
    Blueprint,
    BlueprintMeta,
    FileFacts,
    Module,
    ModuleDependency,
    ProjectInfo,
    ProjectSemantic,
    References,
    Symbol,
    SymbolCall,
    TypeReference,
)
from .semantic import CodeContext, NullAnnotator, SemanticAnnotator
from .statistics import StatisticsAggregator
from .store import FORMAT_VERSION

GENERATOR_VERSION = "1.0.0"

PHASES = ("modules", "symbols", "references", "semantics", "statistics")

ProgressCallback = Callable[[GenerationProgress], None]


class BlueprintGenerator:
    """
    Builds a Blueprint from extracted facts.

    Facts can be fed incrementally with add_facts() or all at once through
    generate(). Re-adding facts for a module id replaces the earlier facts.
    Progress is reported per item to the optional callback, and the
    cancel event is checked between phases and between annotations.
    """

    def __init__(
        self,
        project_name: str,
        root_path: str = "",
        annotator: Optional[SemanticAnnotator] = None,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        technologies: Sequence[str] = (),
        project_semantic: Optional[ProjectSemantic] = None,
        top_n: int = 10,
    ):
        self.project_name = project_name
        self.root_path = root_path
        self.annotator = annotator or NullAnnotator()
        self.progress = progress
        self.cancel_event = cancel_event
        self.technologies = list(technologies)
        self.project_semantic = project_semantic
        self.top_n = top_n
        self._facts: Dict[str, FileFacts] = {}

    def add_facts(self, facts: FileFacts) -> None:
        module_id = facts.module.id
        if module_id in self._facts:
            logger.debug(f"Replacing facts for module '{module_id}'")
        self._facts[module_id] = facts

    def add_many(self, facts: Iterable[FileFacts]) -> int:
        count = 0
        for item in facts:
            self.add_facts(item)
            count += 1
        return count

    @property
    def pending_modules(self) -> int:
        return len(self._facts)

    @trace
    def generate(self, facts: Optional[Iterable[FileFacts]] = None) -> Blueprint:
        """
        Run every phase and return a new Blueprint.

        Raises:
            GenerationCancelledError: If the cancel event is set between phases.
        """
        if facts is not None:
            self.add_many(facts)
        all_facts = list(self._facts.values())

        self._check_cancelled("modules")
        modules = self._collect_modules(all_facts)

        self._check_cancelled("symbols")
        symbols = self._collect_symbols(all_facts)
        symbol_ids = {s.id for group in symbols.values() for s in group}

        self._check_cancelled("references")
        references = self._collect_references(all_facts, symbol_ids)

        self._check_cancelled("semantics")
        annotated = self._annotate(modules, symbols)

        meta = BlueprintMeta(
            version=FORMAT_VERSION,
            generated_at=datetime.now(timezone.utc).isoformat(),
            generator_version=GENERATOR_VERSION,
            semantic_version=getattr(self.annotator, "version", None) if annotated else None,
        )
        project = ProjectInfo(
            name=self.project_name,
            root_path=self.root_path,
            languages=sorted({m.language for m in modules.values() if m.language != "unknown"}),
            technologies=self.technologies,
            semantic=self.project_semantic,
        )
        blueprint = Blueprint(
            meta=meta,
            project=project,
            modules=modules,
            symbols=symbols,
            references=references,
        )

        self._check_cancelled("statistics")
        self._report("statistics", 0, 1)
        statistics = StatisticsAggregator(top_n=self.top_n).compute(blueprint)
        self._report("statistics", 1, 1)

        blueprint = blueprint.model_copy(update={"statistics": statistics})
        logger.info(
            f"Generated blueprint '{self.project_name}': {len(modules)} modules, "
            f"{len(symbol_ids)} symbols, {len(references.symbol_calls)} calls"
        )
        return blueprint

    def _collect_modules(self, all_facts: List[FileFacts]) -> Dict[str, Module]:
        total = len(all_facts)
        modules = {}
        for index, facts in enumerate(all_facts, start=1):
            modules[facts.module.id] = facts.module
            self._report("modules", index, total, facts.module.id)
        return modules

    def _collect_symbols(self, all_facts: List[FileFacts]) -> Dict[str, List[Symbol]]:
        total = len(all_facts)
        seen = set()
        symbols: Dict[str, List[Symbol]] = {}
        for index, facts in enumerate(all_facts, start=1):
            module_id = facts.module.id
            group = []
            for symbol in facts.symbols:
                if symbol.id in seen:
                    logger.warning(f"Duplicate symbol id '{symbol.id}' in {module_id}, skipping")
                    continue
                if symbol.module_id != module_id:
                    symbol = symbol.model_copy(update={"module_id": module_id})
                seen.add(symbol.id)
                group.append(symbol)
            symbols[module_id] = group
            self._report("symbols", index, total, module_id)
        return symbols

    def _collect_references(self, all_facts: List[FileFacts], symbol_ids) -> References:
        module_deps: List[ModuleDependency] = []
        symbol_calls: List[SymbolCall] = []
        type_refs: List[TypeReference] = []
        dropped = 0

        total = len(all_facts)
        for index, facts in enumerate(all_facts, start=1):
            module = facts.module
            for target in module.imports:
                module_deps.append(
                    ModuleDependency(source=module.id, target=target, type=facts.dependency_type)
                )
            for call in facts.calls:
                if call.caller_symbol_id in symbol_ids:
                    symbol_calls.append(call)
                else:
                    dropped += 1
            for ref in facts.type_refs:
                if ref.source in symbol_ids:
                    type_refs.append(ref)
                else:
                    dropped += 1
            self._report("references", index, total, module.id)

        if dropped:
            logger.warning(f"Dropped {dropped} edges whose source symbol is unknown")
        return References(module_deps=module_deps, symbol_calls=symbol_calls, type_refs=type_refs)

    def _annotate(self, modules: Dict[str, Module], symbols: Dict[str, List[Symbol]]) -> int:
        """Fill in missing semantics in the working dicts. Returns the count applied."""
        if isinstance(self.annotator, NullAnnotator):
            return 0

        pending = [m for m in modules.values() if m.semantic is None]
        pending_symbols = [s for group in symbols.values() for s in group if s.semantic is None]
        total = len(pending) + len(pending_symbols)
        applied = 0
        current = 0

        for module in pending:
            current += 1
            self._check_cancelled("semantics")
            self._report("semantics", current, total, module.id)
            context = CodeContext(
                kind="module",
                id=module.id,
                name=module.name,
                language=module.language,
                imports=module.imports,
                member_names=[s.name for s in symbols.get(module.id, [])],
            )
            info = self._safe_annotate(context)
            if info is not None:
                modules[module.id] = module.model_copy(update={"semantic": info})
                applied += 1

        for symbol in pending_symbols:
            current += 1
            self._check_cancelled("semantics")
            self._report("semantics", current, total, symbol.id)
            context = CodeContext(
                kind="symbol",
                id=symbol.id,
                name=symbol.name,
                language=modules[symbol.module_id].language if symbol.module_id in modules else "unknown",
                signature=symbol.signature,
                symbol_kind=symbol.kind,
            )
            info = self._safe_annotate(context)
            if info is not None:
                group = symbols[symbol.module_id]
                group[group.index(symbol)] = symbol.model_copy(update={"semantic": info})
                applied += 1

        logger.info(f"Semantic annotation applied to {applied}/{total} items")
        return applied

    def _safe_annotate(self, context: CodeContext):
        try:
            return self.annotator(context)
        except Exception as e:
            logger.warning(f"Semantic annotation failed for {context.id}: {e}")
            return None

    def _check_cancelled(self, phase: str) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.info(f"Generation cancelled before phase '{phase}'")
            raise GenerationCancelledError(phase)

    def _report(self, phase: str, current: int, total: int, item: Optional[str] = None) -> None:
        if self.progress is None:
            return
        self.progress(
            GenerationProgress(phase=phase, current=current, total=total, current_item=item)
        )


def read_facts(data: str) -> List[FileFacts]:
    """
    Parse facts from a JSON array or JSON-lines text.

    Raises:
        InvalidFactsError: On undecodable JSON or invalid records.
    """
    text = data.strip()
    if not text:
        return []

    if text.startswith("["):
        try:
            records = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidFactsError(f"Facts file is not valid JSON: {exc}") from exc
        numbered = list(enumerate(records, start=1))
    else:
        numbered = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                numbered.append((line_no, json.loads(line)))
            except json.JSONDecodeError as exc:
                raise InvalidFactsError(f"Invalid JSON on line {line_no}: {exc}", line=line_no) from exc

    facts = []
    for position, record in numbered:
        try:
            facts.append(FileFacts.model_validate(record))
        except ValidationError as exc:
            raise InvalidFactsError(f"Invalid facts record {position}: {exc}", line=position) from exc
    return facts


def read_facts_file(path: Path) -> List[FileFacts]:
    return read_facts(Path(path).read_text(encoding="utf-8"))
