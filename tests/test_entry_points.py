"""Tests for entry-point detection and its configurable scoring."""

import pytest

from codemap.blueprint import EntryPointDetector, EntryPointScoring
from codemap.blueprint.facade import detect_entry_points, score_entry_points
from codemap.config import DEFAULTS
from codemap.exceptions import ConfigError

from .factories import APP, CLI, ENGINE, HELPERS, PARSER, SETTINGS, build_blueprint, make_facts

pytestmark = [pytest.mark.fast, pytest.mark.blueprint]


@pytest.fixture
def detector():
    return EntryPointDetector()


class TestScoring:
    """Per-module score breakdown."""

    def test_cli_scores_highest(self, detector, sample_blueprint):
        candidate = detector.score_module(sample_blueprint, sample_blueprint.modules[CLI])
        # pattern 60 + root-like 5 + unimported 20 + three imports
        assert candidate.score == 88
        assert candidate.matched_pattern == "cli"
        assert candidate.root_like is True
        assert candidate.imported is False
        assert candidate.import_count == 3

    def test_pattern_match_is_case_insensitive(self, detector, sample_blueprint):
        candidate = detector.score_module(sample_blueprint, sample_blueprint.modules[APP])
        assert candidate.matched_pattern == "app"
        assert candidate.score == 30 + 20 + 1

    def test_imported_module_gets_no_bonus(self, detector, sample_blueprint):
        candidate = detector.score_module(sample_blueprint, sample_blueprint.modules[ENGINE])
        assert candidate.imported is True
        assert candidate.score == 2

    def test_zero_scores_are_dropped(self, detector, sample_blueprint):
        ids = [c.id for c in detector.score(sample_blueprint)]
        assert HELPERS not in ids

    def test_import_count_is_capped(self, detector):
        targets = [f"lib/m{i}.ts" for i in range(15)]
        blueprint = build_blueprint([make_facts("pkg/hub.ts", imports=targets)])
        candidate = detector.score_module(blueprint, blueprint.modules["pkg/hub.ts"])
        assert candidate.score == 20 + 10

    def test_top_level_file_is_root_like(self, detector):
        blueprint = build_blueprint([make_facts("main.py", language="python")])
        candidate = detector.score_module(blueprint, blueprint.modules["main.py"])
        assert candidate.root_like is True
        assert candidate.score == 40 + 5 + 20


class TestDetect:
    """Ranking and limits."""

    def test_ranking(self, detector, sample_blueprint):
        assert detector.detect(sample_blueprint) == [CLI, APP, ENGINE, PARSER, SETTINGS]

    def test_limit(self, detector, sample_blueprint):
        assert detector.detect(sample_blueprint, 1) == [CLI]

    def test_ties_break_by_id(self, detector):
        blueprint = build_blueprint([make_facts("pkg/b.ts"), make_facts("pkg/a.ts")])
        assert detector.detect(blueprint) == ["pkg/a.ts", "pkg/b.ts"]

    def test_empty_blueprint(self, detector):
        assert detector.detect(build_blueprint([])) == []

    def test_unimported_hub_ranks_above_imported_module(self, detector):
        blueprint = build_blueprint([
            make_facts("pkg/a.ts", imports=["pkg/b.ts", "pkg/c.ts", "pkg/d.ts"]),
            make_facts("pkg/b.ts"),
            make_facts("pkg/c.ts", imports=["pkg/b.ts"]),
            make_facts("pkg/d.ts"),
        ])
        ranked = detector.detect(blueprint)
        assert ranked.index("pkg/a.ts") < ranked.index("pkg/c.ts")
        assert "pkg/b.ts" not in ranked

    def test_at_most_five_by_default(self, detector):
        blueprint = build_blueprint([make_facts(f"pkg/m{i}.ts") for i in range(8)])
        ranked = detector.detect(blueprint)
        assert len(ranked) == 5
        assert all(module_id in blueprint.modules for module_id in ranked)

    def test_every_module_imported_and_unmatched(self, detector, cycle_blueprint):
        # each module has one import, so all score 1 and tie on id
        assert detector.detect(cycle_blueprint) == ["a.ts", "b.ts", "c.ts"]


class TestScoringConfig:
    """Weights read from the [entry_points] config section."""

    def test_defaults_match_config_defaults(self):
        scoring = EntryPointScoring()
        assert scoring.patterns == tuple(DEFAULTS["entry_points"]["patterns"])
        assert scoring.unimported_bonus == 20
        assert scoring.limit == 5

    def test_from_dict_invalid_raises(self):
        values = {**DEFAULTS["entry_points"], "pattern_weight": "heavy"}
        with pytest.raises(ConfigError):
            EntryPointScoring.from_dict(values)

    def test_from_dict_missing_key_raises(self):
        values = dict(DEFAULTS["entry_points"])
        del values["root_bonus"]
        with pytest.raises(ConfigError):
            EntryPointScoring.from_dict(values)

    def test_from_dict_rejects_zero_limit(self):
        with pytest.raises(ConfigError):
            EntryPointScoring.from_dict({**DEFAULTS["entry_points"], "limit": 0})

    def test_config_file_overrides_weights(self, temp_dir, monkeypatch, sample_blueprint):
        config = temp_dir / "codemap.toml"
        config.write_text('[entry_points]\npatterns = ["engine"]\nunimported_bonus = 0\n')
        monkeypatch.setenv("CODEMAP_CONFIG", str(config))

        scoring = EntryPointScoring.from_config()
        assert scoring.patterns == ("engine",)
        assert scoring.root_bonus == 5
        assert detect_entry_points(sample_blueprint, 1) == [ENGINE]

    def test_score_entry_points_facade(self, sample_blueprint):
        candidates = score_entry_points(sample_blueprint, EntryPointScoring())
        assert candidates[0].id == CLI
        assert candidates[0].score == 88
