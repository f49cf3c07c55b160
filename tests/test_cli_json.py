import json

import pytest
from typer.testing import CliRunner

from codemap.blueprint import FORMAT_VERSION, load_file
from codemap.cli.config import CLIConfig
from codemap.main import app

from .factories import APP, CLI, ENGINE, HELPERS, PARSER, sample_facts

pytestmark = [pytest.mark.integration]

runner = CliRunner()


@pytest.fixture(autouse=True)
def machine_mode():
    CLIConfig.set_machine_mode(None)
    yield
    CLIConfig.set_machine_mode(None)


def invoke(*args):
    return runner.invoke(app, [str(a) for a in args])


def test_generate_json(temp_dir):
    facts_path = temp_dir / "facts.jsonl"
    facts_path.write_text(
        "\n".join(json.dumps(f.model_dump(mode="json", by_alias=True)) for f in sample_facts()),
        encoding="utf-8",
    )
    output = temp_dir / "out" / "blueprint.json"

    result = invoke("generate", facts_path, "--output", output, "--project", "demo", "--json")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == {
        "status": "ok",
        "blueprint_path": str(output),
        "modules": 6,
        "symbols": 10,
        "symbol_calls": 8,
    }
    assert load_file(output).project.name == "demo"


def test_generate_invalid_facts(temp_dir):
    facts_path = temp_dir / "facts.jsonl"
    facts_path.write_text("{broken\n")
    result = invoke("generate", facts_path, "--output", temp_dir / "bp.json")
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "INVALID_FACTS"


def test_validate(blueprint_file):
    result = invoke("validate", "--blueprint", blueprint_file)
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "ok"
    assert payload["supported_version"] == FORMAT_VERSION
    assert payload["modules"] == 6


def test_validate_rejects_newer_version(blueprint_file):
    raw = json.loads(blueprint_file.read_text())
    raw["meta"]["version"] = "9.0.0"
    blueprint_file.write_text(json.dumps(raw))
    result = invoke("validate", "--blueprint", blueprint_file)
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "IncompatibleVersionError"


def test_missing_blueprint(temp_dir):
    result = invoke("stats", "--blueprint", temp_dir / "nope.json")
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "BLUEPRINT_NOT_FOUND"


def test_entry_points_json(blueprint_file):
    result = invoke("entry-points", "--blueprint", blueprint_file, "--limit", "2", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"entry_points": [CLI, APP]}


def test_entry_points_explain(blueprint_file):
    result = invoke("entry-points", "--blueprint", blueprint_file, "--explain", "--json")
    assert result.exit_code == 0
    candidates = json.loads(result.stdout)
    assert candidates[0]["id"] == CLI
    assert candidates[0]["score"] == 88
    assert candidates[0]["matchedPattern"] == "cli"


def test_tree_text_by_default(blueprint_file):
    result = invoke("tree", CLI, "--blueprint", blueprint_file)
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == f"{CLI} [50 lines]"


def test_tree_json_defaults_to_entry_point(blueprint_file):
    result = invoke("tree", "--blueprint", blueprint_file, "--depth", "1", "--json")
    assert result.exit_code == 0
    tree = json.loads(result.stdout)
    assert tree["id"] == CLI
    assert [c["id"] for c in tree["children"]] == ["src/config/settings.ts", ENGINE, HELPERS]
    assert tree["children"][0]["isCircular"] is False


def test_tree_unknown_module(blueprint_file):
    result = invoke("tree", "src/nope.ts", "--blueprint", blueprint_file)
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "MODULE_NOT_FOUND"


def test_architecture_json(blueprint_file):
    result = invoke("architecture", "--blueprint", blueprint_file)
    assert result.exit_code == 0
    view = json.loads(result.stdout)
    assert view["projectName"] == "sample"
    assert len(view["layers"]) == 5
    assert len(view["blockEdges"]) == 6


def test_stats_json(blueprint_file):
    result = invoke("stats", "--blueprint", blueprint_file, "--json")
    assert result.exit_code == 0
    stats = json.loads(result.stdout)
    assert stats["totalModules"] == 6
    assert stats["mostImportedModules"][0] == {"id": HELPERS, "count": 4}


def test_stats_top(blueprint_file):
    result = invoke("stats", "--blueprint", blueprint_file, "--top", "1", "--json")
    assert len(json.loads(result.stdout)["largestFiles"]) == 1


def test_refs_json(blueprint_file):
    result = invoke("refs", f"{PARSER}::parse", "--blueprint", blueprint_file, "--json")
    assert result.exit_code == 0
    refs = json.loads(result.stdout)
    assert len(refs["callers"]) == 2
    assert len(refs["callees"]) == 2


def test_refs_unknown_symbol(blueprint_file):
    result = invoke("refs", "nope::x", "--blueprint", blueprint_file)
    assert result.exit_code == 1
    error = json.loads(result.stdout)
    assert error["status"] == "error"
    assert error["code"] == "SYMBOL_NOT_FOUND"
    assert error["input"] == "nope::x"


def test_flow_json(blueprint_file):
    result = invoke("flow", f"{CLI}::main", "--blueprint", blueprint_file, "--json")
    assert result.exit_code == 0
    flow = json.loads(result.stdout)
    assert len(flow["nodes"]) == 7
    assert len(flow["edges"]) == 8


def test_flow_mermaid(blueprint_file):
    result = invoke("flow", f"{CLI}::main", "--mermaid", "--blueprint", blueprint_file)
    assert result.exit_code == 0
    assert result.stdout.startswith("flowchart TD")


def test_scenarios_json(blueprint_file):
    result = invoke("scenarios", "--blueprint", blueprint_file)
    assert result.exit_code == 0
    assert "cli-input" in [s["id"] for s in json.loads(result.stdout)]


def test_dirtree_text(blueprint_file):
    result = invoke("dirtree", "--blueprint", blueprint_file)
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "sample/ [500 lines]"


def test_module_json(blueprint_file):
    result = invoke("module", PARSER, "--blueprint", blueprint_file)
    assert result.exit_code == 0
    detail = json.loads(result.stdout)
    assert detail["externalImports"] == ["lodash"]
    assert detail["importedBy"] == [ENGINE]


def test_search_json(blueprint_file):
    result = invoke("search", "parse", "--blueprint", blueprint_file, "--limit", "1")
    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["id"] == f"{PARSER}::parse"


def test_human_mode_table(blueprint_file):
    result = invoke("--human", "stats", "--blueprint", blueprint_file)
    assert result.exit_code == 0
    assert "Modules" in result.stdout


def test_version():
    result = invoke("version")
    assert result.exit_code == 0
    assert FORMAT_VERSION in result.stdout
