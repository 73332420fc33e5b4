"""Tests for the Director.

Tests verify:
1. plan_next returns a complete decision for a simple pack
2. Fixed seed and inputs replay identical decisions
3. Anti-repeat, counters and distribution convergence
4. Empty content and malformed context never raise
5. debug() toggling, peeking and rejecting unknown actions
"""

import pytest

from casework.engine.director import Director, DirectorConfig, create_director
from casework.models.content import Difficulty, DifficultyCurve, Mode
from casework.models.context import PlanInput
from casework.models.decision import TimerKind


def play(director, days, **context):
    return [director.plan_next({"day": day, **context}) for day in range(1, days + 1)]


class TestPlanNext:
    """Tests for a single plan_next call."""

    def test_first_day(self, basic_events):
        """Day 1 on the default curve is easy and selects an event."""
        director = create_director(basic_events, seed=1)
        decision = director.plan_next(PlanInput(day=1))

        assert decision.event is not None
        assert decision.has_event
        assert decision.day == 1
        assert decision.difficulty == Difficulty.EASY
        assert decision.intended_mode == Mode.APPLICATION
        assert sum(director.runtime.counts.values()) == 1
        assert director.runtime.last_event_id == decision.event.id

    def test_timers_ordered(self, basic_events):
        """Response and review timers are always present, in order."""
        director = create_director(basic_events, seed=3)
        for decision in play(director, 10):
            kinds = [t.kind for t in decision.timers]
            assert kinds[:2] == [TimerKind.RESPONSE, TimerKind.REVIEW]
            assert (TimerKind.BOSS_PREP in kinds) == (decision.mode == Mode.BOSS_SETUP)

    def test_mode_matches_event(self, basic_events):
        """The decision mode is the selected event's mode."""
        director = create_director(basic_events, seed=11)
        modes = {
            "event.welcome-inspection": Mode.APPLICATION,
            "event.deposit-review": Mode.RECALL,
            "event.boss-hearing": Mode.BOSS_SETUP,
        }
        for decision in play(director, 20):
            assert decision.mode == modes[decision.event.id]

    def test_modifiers_capped(self, basic_events):
        """No decision carries more than two modifiers."""
        director = create_director(basic_events, seed=5)
        decisions = play(
            director,
            30,
            meterStates={"compliance": 10, "trust": 10, "roi": 10, "risk": 90},
            recentMistakes=["NJLAD"],
        )
        assert all(len(d.modifiers) <= 2 for d in decisions)
        assert all(len(d.modifiers) >= 1 for d in decisions)

    def test_dict_input(self, basic_events):
        """Plain dicts with camelCase keys are accepted."""
        director = create_director(basic_events, seed=2)
        decision = director.plan_next({"day": "8", "masteryByTopic": {"NJLAD": 90}})
        assert decision.day == 8
        assert decision.difficulty == Difficulty.HARD

    def test_difficulty_override(self, basic_events):
        """A context curve overrides the configured one."""
        director = create_director(basic_events, seed=2)
        curve = DifficultyCurve(start=Difficulty.HARD)
        decision = director.plan_next(PlanInput(day=1, difficulty_curve=curve))
        assert decision.difficulty == Difficulty.HARD

    @pytest.mark.parametrize(
        "day,difficulty",
        [(3, Difficulty.EASY), (4, Difficulty.NORMAL), (7, Difficulty.NORMAL), (8, Difficulty.HARD)],
    )
    def test_phase_boundaries(self, basic_events, day, difficulty):
        director = create_director(basic_events, seed=1)
        assert director.plan_next({"day": day}).difficulty == difficulty

    def test_malformed_context(self, basic_events):
        """Garbage context is normalised, not rejected."""
        director = create_director(basic_events, seed=9)
        decision = director.plan_next(
            {
                "day": -4,
                "masteryByTopic": "none",
                "recentMistakes": [None, 3, {"eventId": "x"}],
                "meterStates": {"compliance": "high", "risk": float("nan")},
            }
        )
        assert decision.day == 1
        assert decision.event is not None

    def test_config_from_pack(self, core_pack):
        """A config built from a pack carries its events and curve."""
        config = DirectorConfig.from_pack(core_pack, seed=4)
        director = Director(config)
        assert len(director.events) == len(core_pack.events)
        assert director.seed == 4
        assert director.plan_next({"day": 1}).event is not None


class TestDeterminism:
    """Tests for seeded replay."""

    def test_same_seed_same_decisions(self, basic_events):
        a = create_director(basic_events, seed=42)
        b = create_director(basic_events, seed=42)
        assert [d.to_dict() for d in play(a, 25)] == [d.to_dict() for d in play(b, 25)]

    def test_different_seeds_diverge(self, core_pack):
        a = Director(DirectorConfig.from_pack(core_pack, seed=1))
        b = Director(DirectorConfig.from_pack(core_pack, seed=2))
        assert [d.to_dict() for d in play(a, 25)] != [d.to_dict() for d in play(b, 25)]

    def test_instances_isolated(self, basic_events):
        """Calls on one Director do not disturb another."""
        a = create_director(basic_events, seed=7)
        b = create_director(basic_events, seed=7)
        play(create_director(basic_events, seed=7), 10)
        assert play(a, 5)[-1].to_dict() == play(b, 5)[-1].to_dict()


class TestAntiRepeat:
    """Tests for consecutive-event exclusion."""

    def test_no_back_to_back(self, basic_events):
        director = create_director(basic_events, seed=13)
        ids = [d.event.id for d in play(director, 200)]
        assert all(a != b for a, b in zip(ids, ids[1:]))

    def test_single_event_repeats(self, event_factory):
        director = create_director([event_factory("event.only", "Rent", 2)], seed=1)
        ids = [d.event.id for d in play(director, 5)]
        assert ids == ["event.only"] * 5


class TestEmptyContent:
    """Tests for a Director with no events."""

    def test_null_event(self):
        """No events gives a null event, never an error."""
        director = create_director([], seed=1)
        decision = director.plan_next({"day": 1})
        assert decision.event is None
        assert not decision.has_event
        assert decision.mode == decision.intended_mode == Mode.APPLICATION
        assert decision.timer(TimerKind.RESPONSE).duration_ms == 120000

    def test_counts_unchanged(self):
        director = create_director([], seed=1)
        play(director, 5)
        assert sum(director.runtime.counts.values()) == 0
        assert director.debug().candidates == ()


class TestDebug:
    """Tests for debug snapshots."""

    def test_peek_before_any_call(self, basic_events):
        snapshot = create_director(basic_events, seed=1).debug()
        assert snapshot.enabled is False
        assert snapshot.last_decision is None
        assert snapshot.candidates == ()

    def test_toggle(self, basic_events):
        director = create_director(basic_events, seed=1)
        assert director.debug("toggle").enabled is True
        assert director.debug("peek").enabled is True
        assert director.debug("toggle").enabled is False

    def test_unknown_action(self, basic_events):
        with pytest.raises(ValueError, match="Unknown debug action"):
            create_director(basic_events, seed=1).debug("reset")

    def test_candidates_sorted(self, core_pack):
        director = Director(DirectorConfig.from_pack(core_pack, seed=6))
        play(director, 3)
        snapshot = director.debug()
        weights = [c.weight for c in snapshot.candidates]
        assert weights == sorted(weights, reverse=True)
        # Anti-repeat leaves every event but the previous pick.
        assert len(snapshot.candidates) == len(core_pack.events) - 1
        assert len(snapshot.top_candidates()) == 5

    def test_last_decision_and_context(self, basic_events):
        director = create_director(basic_events, seed=1)
        decision = director.plan_next({"day": 2, "meterStates": {"trust": 5}})
        snapshot = director.debug()
        assert snapshot.last_decision == decision
        assert snapshot.last_context.day == 2
        assert snapshot.intended_mode == decision.intended_mode

    def test_to_dict_is_json_safe(self, basic_events):
        director = create_director(basic_events, seed=1)
        director.plan_next({"day": 1})
        data = director.debug().to_dict()
        assert data["counts"][director.runtime.last_decision.mode.value] == 1


class TestDistribution:
    """Tests for long-run mode convergence."""

    @pytest.mark.slow
    def test_converges_to_targets(self, event_factory):
        """Observed ratios land within 0.1 of the targets.

        The pool leans toward application events (14/4/2). The mode multiplier
        is bounded at 1.35 against 0.85, so with an even supply per mode
        application settles near 0.4 and cannot reach its 0.7 target.
        """
        events = [
            event_factory(f"event.apply-{i}", "NJLAD", 1 + i % 3, related_question_id=f"q.{i}")
            for i in range(14)
        ] + [
            event_factory(f"event.recall-{i}", "Deposits", 1 + i % 3) for i in range(4)
        ] + [
            event_factory("event.boss-a", "Notices", 5),
            event_factory("event.boss-b", "Rent", 4),
        ]
        director = create_director(events, seed=2024)
        play(director, 600)

        report = director.debug().distribution
        for mode, target in report.target.items():
            assert report.actual[mode] == pytest.approx(target, abs=0.1)
