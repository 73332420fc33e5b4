"""Tests for the campaign simulator CLI."""

import json

import pytest

from casework.cli.simulate import (
    RECENT_MISTAKE_LIMIT,
    LearnerState,
    format_day,
    load_pack,
    main,
    run_simulation,
    validate_modifiers,
)
from casework.cli.trace import DecisionTraceLogger
from casework.engine.rng import RNGController
from casework.models.content import Mode
from casework.storage.file_repo import FileSaveRepository


class TestRunSimulation:
    """Tests for run_simulation."""

    def test_one_decision_per_day(self, core_pack):
        result = run_simulation(core_pack, days=12, seed=3)
        assert [d.day for d in result.decisions] == list(range(1, 13))
        assert sum(result.counts.values()) == 12

    def test_deterministic(self, core_pack):
        a = run_simulation(core_pack, days=15, seed=8)
        b = run_simulation(core_pack, days=15, seed=8)
        assert [d.to_dict() for d in a.decisions] == [d.to_dict() for d in b.decisions]
        assert a.outcomes == b.outcomes
        assert a.learner.meters == b.learner.meters

    def test_learner_tallies(self, core_pack):
        """Every answered event lands in the right/wrong tallies."""
        result = run_simulation(core_pack, days=20, seed=4)
        attempts = sum(s.right + s.wrong for s in result.learner.stats.values())
        assert attempts == 20
        wrong = sum(s.wrong for s in result.learner.stats.values())
        assert len(result.learner.recent_mistakes) == min(wrong, RECENT_MISTAKE_LIMIT)

    def test_modifier_filters_pool(self, core_pack):
        """Re-inspection week keeps deposit events out of the run."""
        result = run_simulation(
            core_pack, days=30, seed=5, active_modifiers=["modifier.hqsReinspectionWeek"]
        )
        assert all("Deposit" not in d.event.topic for d in result.decisions)

    def test_unknown_modifier(self, core_pack):
        with pytest.raises(ValueError, match="Unknown map modifier"):
            run_simulation(core_pack, days=1, seed=1, active_modifiers=["modifier.nope"])

    def test_summary(self, core_pack):
        summary = run_simulation(core_pack, days=10, seed=2).summary()
        assert summary["days"] == 10
        assert summary["seed"] == 2
        assert set(summary["counts"]) == {mode.value for mode in Mode}
        assert 0.0 <= summary["accuracy"] <= 1.0

    def test_resume_from_learner(self, core_pack):
        learner = LearnerState(streak=3)
        result = run_simulation(core_pack, days=2, seed=1, learner=learner, start_day=9)
        assert [d.day for d in result.decisions] == [9, 10]
        assert result.learner is learner

    def test_trace_written(self, core_pack, tmp_path):
        trace_logger = DecisionTraceLogger("core", 6, output_dir=tmp_path)
        run_simulation(core_pack, days=4, seed=6, trace_logger=trace_logger)

        data = json.loads(trace_logger.output_file.read_text())
        assert data["seed"] == 6
        assert len(data["days"]) == 4
        assert data["days"][0]["decision"]["day"] == 1
        assert data["summary"]["days"] == 4
        assert data["end_time"] is not None


class TestHelpers:
    """Tests for CLI helpers."""

    def test_validate_modifiers(self):
        assert validate_modifiers(["modifier.rentControlCity"]) == ["modifier.rentControlCity"]

    def test_format_day(self, core_pack):
        decision = run_simulation(core_pack, days=1, seed=1).decisions[0]
        line = format_day(decision, True)
        assert line.startswith("Day   1 [easy]")
        assert decision.event.id in line
        assert "[ok]" in line

    def test_load_pack_file(self, core_pack_path):
        assert load_pack(None, str(core_pack_path)).id == "core"

    def test_load_unknown_pack(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CASEWORK_PACKS_PATH", str(tmp_path))
        with pytest.raises(ValueError, match="Pack not found"):
            load_pack("missing", None)


class TestMain:
    """Tests for the casework-sim entry point."""

    def test_prints_days_and_distribution(self, core_pack_path, capsys):
        code = main(["--pack-file", str(core_pack_path), "--days", "5", "--seed", "7"])
        out = capsys.readouterr().out
        assert code == 0
        assert "seed=7" in out
        assert out.count("Day ") == 5
        assert "Mode distribution:" in out

    def test_debug_lists_candidates(self, core_pack_path, capsys):
        main(["--pack-file", str(core_pack_path), "--days", "3", "--seed", "7", "--debug"])
        out = capsys.readouterr().out
        assert "Debug (last call):" in out

    def test_trace_dir(self, core_pack_path, tmp_path, capsys):
        trace_dir = tmp_path / "traces"
        main(
            [
                "--pack-file", str(core_pack_path),
                "--days", "3",
                "--seed", "7",
                "--trace-dir", str(trace_dir),
            ]
        )
        traces = list(trace_dir.glob("*.json"))
        assert len(traces) == 1
        assert "Trace saved to" in capsys.readouterr().out

    def test_save_and_resume(self, core_pack_path, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("CASEWORK_SAVES_PATH", str(tmp_path / "saves"))
        args = ["--pack-file", str(core_pack_path), "--days", "4", "--save", "run"]
        main(args + ["--seed", "11", "--modifiers", "modifier.rentControlCity"])

        save = FileSaveRepository(tmp_path / "saves").load("run")
        assert save.day == 5
        assert save.run_seed == 11
        assert save.active_modifiers == ["modifier.rentControlCity"]

        main(args)
        out = capsys.readouterr().out
        assert "Day   5" in out
        resumed = FileSaveRepository(tmp_path / "saves").load("run")
        assert resumed.day == 9
        assert resumed.run_seed == 11

    def test_resume_uses_fresh_stream(self, core_pack_path, tmp_path, monkeypatch, capsys):
        """A resumed session seeds from the run seed and its start day."""
        monkeypatch.setenv("CASEWORK_SAVES_PATH", str(tmp_path / "saves"))
        args = ["--pack-file", str(core_pack_path), "--days", "3", "--save", "run"]
        main(args + ["--seed", "11"])
        capsys.readouterr()

        main(args)
        out = capsys.readouterr().out
        expected = RNGController(11).fork(4).seed
        assert expected != 11
        assert f"seed={expected}" in out
