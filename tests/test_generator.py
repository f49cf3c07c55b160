"""Tests for blueprint generation from extracted facts."""

import json
import threading

import pytest

from codemap.blueprint import BlueprintGenerator, SemanticInfo, read_facts, read_facts_file
from codemap.blueprint.generator import GENERATOR_VERSION, PHASES
from codemap.exceptions import GenerationCancelledError, InvalidFactsError

from .factories import CLI, ENGINE, make_facts, make_symbol, sample_facts

pytestmark = [pytest.mark.fast, pytest.mark.blueprint]


class TestGenerate:
    """Assembly of modules, symbols, references and statistics."""

    def test_assembles_sections(self, sample_blueprint):
        assert len(sample_blueprint.modules) == 6
        assert sum(1 for _ in sample_blueprint.iter_symbols()) == 10
        assert len(sample_blueprint.references.module_deps) == 9
        assert sample_blueprint.statistics.total_modules == 6

    def test_meta_and_project(self, sample_blueprint):
        assert sample_blueprint.meta.generator_version == GENERATOR_VERSION
        assert sample_blueprint.meta.semantic_version is None
        assert sample_blueprint.project.name == "sample"
        assert sample_blueprint.project.languages == ["typescript"]

    def test_module_deps_keep_import_order(self, sample_blueprint):
        deps = [d.target for d in sample_blueprint.references.module_deps if d.source == CLI]
        assert deps == sample_blueprint.modules[CLI].imports

    def test_duplicate_symbol_skipped(self):
        facts = [
            make_facts("a.ts", symbols=[make_symbol("a.ts::f")]),
            make_facts("b.ts", symbols=[make_symbol("a.ts::f")]),
        ]
        blueprint = BlueprintGenerator("dup").generate(facts)
        assert [s.id for s in blueprint.iter_symbols()] == ["a.ts::f"]
        assert blueprint.module_symbols("b.ts") == []

    def test_unknown_caller_dropped(self):
        facts = [make_facts("a.ts", symbols=[make_symbol("a.ts::f")],
                            calls=[("a.ts::ghost", "a.ts::f"), ("a.ts::f", "other::g")])]
        blueprint = BlueprintGenerator("drop").generate(facts)
        calls = blueprint.references.symbol_calls
        assert [(c.caller_symbol_id, c.callee_symbol_id) for c in calls] == [("a.ts::f", "other::g")]

    def test_readding_facts_replaces(self):
        generator = BlueprintGenerator("incremental")
        generator.add_facts(make_facts("a.ts", lines=10))
        generator.add_facts(make_facts("a.ts", lines=99))
        assert generator.pending_modules == 1
        blueprint = generator.generate()
        assert blueprint.modules["a.ts"].lines == 99

    def test_incremental_add(self):
        generator = BlueprintGenerator("incremental")
        assert generator.add_many(sample_facts()[:3]) == 3
        blueprint = generator.generate(sample_facts()[3:])
        assert len(blueprint.modules) == 6


class TestProgressAndCancel:

    def test_progress_covers_all_phases(self):
        events = []
        BlueprintGenerator("p", progress=events.append).generate(sample_facts())
        phases = [e.phase for e in events]
        assert set(phases) == set(PHASES) - {"semantics"}
        module_events = [e for e in events if e.phase == "modules"]
        assert module_events[-1].current == module_events[-1].total == 6
        assert module_events[0].current_item == CLI

    def test_cancel_before_start(self):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(GenerationCancelledError) as exc_info:
            BlueprintGenerator("c", cancel_event=cancel).generate(sample_facts())
        assert exc_info.value.phase == "modules"

    def test_cancel_mid_generation(self):
        cancel = threading.Event()

        def on_progress(progress):
            if progress.phase == "symbols":
                cancel.set()

        generator = BlueprintGenerator("c", progress=on_progress, cancel_event=cancel)
        with pytest.raises(GenerationCancelledError) as exc_info:
            generator.generate(sample_facts())
        assert exc_info.value.phase == "references"


class TestSemanticAnnotation:

    def test_annotator_fills_missing(self):
        def annotator(context):
            return SemanticInfo(description=f"{context.kind} {context.name}")

        blueprint = BlueprintGenerator("s", annotator=annotator).generate(sample_facts())
        assert blueprint.modules[CLI].semantic.description == "module cli.ts"
        # existing descriptions are kept
        assert blueprint.modules[ENGINE].semantic.description == "Runs the pipeline"
        assert blueprint.statistics.semantic_coverage.coverage_percent == 100
        assert blueprint.statistics.semantic_coverage.symbols_with_description == 10

    def test_annotator_failure_skipped(self):
        def annotator(context):
            if context.id == CLI:
                raise RuntimeError("model offline")
            return None

        blueprint = BlueprintGenerator("s", annotator=annotator).generate(sample_facts())
        assert blueprint.modules[CLI].semantic is None

    def test_annotator_receives_context(self):
        seen = []

        def annotator(context):
            seen.append(context)
            return None

        BlueprintGenerator("s", annotator=annotator).generate(sample_facts())
        cli = next(c for c in seen if c.id == CLI)
        assert cli.kind == "module"
        assert cli.member_names == ["main"]
        load = next(c for c in seen if c.id.endswith("::loadConfig"))
        assert load.signature == "async function loadConfig()"
        assert load.symbol_kind == "function"


class TestReadFacts:

    def test_json_array(self):
        text = json.dumps([f.model_dump(mode="json", by_alias=True) for f in sample_facts()])
        facts = read_facts(text)
        assert [f.module.id for f in facts] == [f.module.id for f in sample_facts()]

    def test_json_lines(self, temp_dir):
        path = temp_dir / "facts.jsonl"
        path.write_text(
            "\n".join(json.dumps(f.model_dump(mode="json", by_alias=True)) for f in sample_facts()) + "\n",
            encoding="utf-8",
        )
        assert len(read_facts_file(path)) == 6

    def test_snake_case_keys_accepted(self):
        facts = read_facts('{"module": {"id": "a.py", "name": "a.py"}, "dependency_type": "require"}')
        assert facts[0].dependency_type == "require"

    def test_empty(self):
        assert read_facts("  \n") == []

    def test_bad_json_line(self):
        with pytest.raises(InvalidFactsError) as exc_info:
            read_facts('{"module": {"id": "a.py", "name": "a.py"}}\n{broken')
        assert exc_info.value.line == 2

    def test_invalid_record(self):
        with pytest.raises(InvalidFactsError) as exc_info:
            read_facts('[{"module": {"id": "a.py"}}]')
        assert exc_info.value.line == 1

    def test_bad_json_array(self):
        with pytest.raises(InvalidFactsError):
            read_facts("[1, 2")
