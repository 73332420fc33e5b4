"""Campaign simulator for Casework content packs.

Drives a Director through a run of days with a simulated learner, so pack
authors can check the mode mix, difficulty curve and timers without playing.

The simulated learner answers each selected event correctly with probability
equal to its current mastery estimate on the event's topic. Results feed back
into the next day's context the same way the game does: right/wrong tallies,
meters (event impact run through the active map modifiers) and the last
RECENT_MISTAKE_LIMIT mistakes.

Usage:
    casework-sim --pack core --days 30 --seed 7
    casework-sim --pack-file packs/core.json --modifiers modifier.rentControlCity --debug
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from casework.campaign import (
    apply_modifiers_to_outcome,
    collect_modifier_notes,
    filter_events_for_active_modifiers,
    get_map_modifier,
)
from casework.engine import Director, DirectorConfig, RNGController, format_duration
from casework.models import (
    Decision,
    MasteryStats,
    MeterSnapshot,
    MistakeRecord,
    Mode,
    OutcomeDelta,
    PlanInput,
    TimerKind,
    apply_outcome,
    describe_outcome,
    mastery_from_stats,
)
from casework.storage import (
    ContentPack,
    SaveGame,
    get_pack_repository,
    get_save_repository,
    load_pack_file,
)

from .trace import DecisionTraceLogger

logger = logging.getLogger(__name__)

RECENT_MISTAKE_LIMIT = 10
LEARNER_STREAM_SALT = 7919


@dataclass
class LearnerState:
    """What the simulated learner carries from day to day."""

    meters: MeterSnapshot = field(default_factory=MeterSnapshot)
    stats: dict[str, MasteryStats] = field(default_factory=dict)
    recent_mistakes: list[MistakeRecord] = field(default_factory=list)
    streak: int = 0

    def plan_input(self, day: int) -> PlanInput:
        """Build the Director context for a day."""
        return PlanInput(
            day=day,
            mastery_by_topic=mastery_from_stats(self.stats),
            recent_mistakes=list(self.recent_mistakes),
            meter_states=self.meters.as_meter_states(),
        )

    def record_answer(self, decision: Decision, correct: bool) -> None:
        """Update tallies, streak and recent mistakes after an answer."""
        event = decision.event
        tally = self.stats.get(event.topic, MasteryStats())
        if correct:
            self.stats[event.topic] = MasteryStats(right=tally.right + 1, wrong=tally.wrong)
            self.streak += 1
        else:
            self.stats[event.topic] = MasteryStats(right=tally.right, wrong=tally.wrong + 1)
            self.streak = 0
            self.recent_mistakes.append(
                MistakeRecord(
                    topic=event.topic,
                    timestamp=datetime.now(timezone.utc).isoformat(),
                    event_id=event.id,
                )
            )
            self.recent_mistakes = self.recent_mistakes[-RECENT_MISTAKE_LIMIT:]

    def to_save(self, day: int, seed: int, active_modifiers: Sequence[str]) -> SaveGame:
        """Convert the learner state into a save."""
        return SaveGame(
            day=day,
            run_seed=seed,
            meters=self.meters,
            mastery=dict(self.stats),
            recent_mistakes=list(self.recent_mistakes),
            streak=self.streak,
            active_modifiers=list(active_modifiers),
        )


@dataclass
class SimulationResult:
    """Outcome of a simulated run."""

    director: Director
    learner: LearnerState
    decisions: list[Decision] = field(default_factory=list)
    outcomes: list[Optional[bool]] = field(default_factory=list)

    @property
    def counts(self) -> dict[Mode, int]:
        return dict(self.director.runtime.counts)

    def summary(self) -> dict:
        """Summarise the run for printing and traces."""
        report = self.director.debug().distribution
        answered = [o for o in self.outcomes if o is not None]
        return {
            "days": len(self.decisions),
            "seed": self.director.seed,
            "counts": {mode.value: count for mode, count in self.counts.items()},
            "actual": {mode.value: round(v, 3) for mode, v in report.actual.items()},
            "target": {mode.value: v for mode, v in report.target.items()},
            "accuracy": (sum(answered) / len(answered)) if answered else None,
            "meters": self.learner.meters.as_meter_states(),
        }


def validate_modifiers(modifier_ids: Sequence[str]) -> list[str]:
    """Check that every map modifier id exists.

    Raises:
        ValueError: If any id is unknown
    """
    unknown = [m for m in modifier_ids if get_map_modifier(m) is None]
    if unknown:
        raise ValueError(f"Unknown map modifier(s): {', '.join(unknown)}")
    return list(modifier_ids)


def run_simulation(
    pack: ContentPack,
    days: int,
    seed: int | None = None,
    active_modifiers: Sequence[str] = (),
    trace_logger: DecisionTraceLogger | None = None,
    learner: LearnerState | None = None,
    start_day: int = 1,
) -> SimulationResult:
    """Run the Director for a number of days against a simulated learner.

    Args:
        pack: Content pack to draw events from
        days: Number of days to simulate
        seed: Director seed (None seeds from the clock)
        active_modifiers: Map modifier ids active for the run
        trace_logger: Optional trace writer, updated after every day
        learner: Starting learner state (fresh if omitted)
        start_day: Day number of the first simulated day

    Returns:
        SimulationResult with every decision and the final learner state
    """
    active_modifiers = validate_modifiers(active_modifiers)
    events = filter_events_for_active_modifiers(pack.events, active_modifiers)
    director = Director(
        DirectorConfig(events=tuple(events), difficulty_curve=pack.difficulty_curve, seed=seed)
    )
    answers = RNGController(director.seed).fork(LEARNER_STREAM_SALT)
    result = SimulationResult(director=director, learner=learner or LearnerState())

    logger.info(
        f"Simulating {days} days of pack {pack.id} with {len(events)} events "
        f"(seed={director.seed}, modifiers={list(active_modifiers)})"
    )

    for day in range(start_day, start_day + days):
        context = result.learner.plan_input(day)
        decision = director.plan_next(context)

        correct: bool | None = None
        if decision.event is not None:
            correct = answers.next() < context.mastery_for(decision.event.topic)
            result.learner.record_answer(decision, correct)
            if correct:
                outcome = apply_modifiers_to_outcome(
                    decision.event, decision.event.meter_impact or OutcomeDelta(), active_modifiers
                )
                logger.debug(f"Day {day}: {describe_outcome(result.learner.meters, outcome)}")
                result.learner.meters = apply_outcome(result.learner.meters, outcome)

        result.decisions.append(decision)
        result.outcomes.append(correct)
        if trace_logger is not None:
            trace_logger.record_day(context, decision, correct)

    if trace_logger is not None:
        trace_logger.record_summary(result.summary())
    return result


def format_day(decision: Decision, correct: bool | None) -> str:
    """Format one simulated day as a single line."""
    if decision.event is None:
        return f"Day {decision.day:>3} [{decision.difficulty.value}] no content available"

    mark = "ok" if correct else "miss"
    mode = decision.mode.value
    if decision.mode != decision.intended_mode:
        mode = f"{mode} (wanted {decision.intended_mode.value})"
    response = decision.timer(TimerKind.RESPONSE)
    window = format_duration(response.duration_ms) if response else "-"
    line = (
        f"Day {decision.day:>3} [{decision.difficulty.value}] {mode}: "
        f"{decision.event.id} [{mark}] window {window}"
    )
    if decision.modifiers:
        line += f" | {'; '.join(decision.modifiers)}"
    return line


def load_pack(pack_id: str | None, pack_file: str | None) -> ContentPack:
    """Load a pack from a file or from the pack repository.

    Raises:
        ValueError: If the pack id is not in the repository
    """
    if pack_file:
        return load_pack_file(pack_file)

    pack_id = pack_id or "core"
    pack = get_pack_repository().get_pack(pack_id)
    if pack is None:
        raise ValueError(f"Pack not found: {pack_id}")
    return pack


def print_debug(director: Director) -> None:
    snapshot = director.debug()
    print("\nDebug (last call):")
    print(f"  Intended mode: {snapshot.intended_mode.value if snapshot.intended_mode else '-'}")
    for candidate in snapshot.top_candidates(5):
        b = candidate.breakdown
        print(
            f"  {candidate.weight:6.3f}  {candidate.event_id:<32} {candidate.mode.value:<12}"
            f" mastery={b.mastery:.2f} mistakes={b.mistakes:.2f} meters={b.meters:.2f}"
            f" difficulty={b.difficulty:.2f} x{b.mode_multiplier:.2f}"
        )


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line interface for campaign simulation."""
    parser = argparse.ArgumentParser(
        description="Simulate a Casework campaign against a content pack"
    )
    parser.add_argument(
        "--pack",
        type=str,
        default=None,
        help="Pack ID in the pack repository (default: core)",
    )
    parser.add_argument(
        "--pack-file",
        type=str,
        default=None,
        help="Path to a pack JSON file (overrides --pack)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=30,
        help="Number of days to simulate (default: 30)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Director seed for reproducibility",
    )
    parser.add_argument(
        "--modifiers",
        type=str,
        default=None,
        help="Comma-separated map modifier IDs",
    )
    parser.add_argument(
        "--trace-dir",
        type=str,
        default=None,
        help="Write a JSON decision trace to this directory",
    )
    parser.add_argument(
        "--save",
        type=str,
        default=None,
        help="Resume from and write back to this save ID",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the top scored candidates of the last day",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pack = load_pack(args.pack, args.pack_file)
    modifiers = []
    if args.modifiers:
        modifiers = [m.strip() for m in args.modifiers.split(",") if m.strip()]

    learner = None
    start_day = 1
    seed = args.seed
    run_seed = None
    if args.save:
        save = get_save_repository().load(args.save)
        learner = LearnerState(
            meters=save.meters,
            stats=dict(save.mastery),
            recent_mistakes=list(save.recent_mistakes),
            streak=save.streak,
        )
        start_day = save.day
        if seed is None and save.run_seed is not None:
            # Each resumed session draws from its own stream for the day it starts on.
            run_seed = save.run_seed
            seed = RNGController(run_seed).fork(start_day).seed
        if not modifiers:
            modifiers = list(save.active_modifiers)

    # Resolve a clock seed now so the trace records the seed actually used.
    seed = RNGController(seed).seed
    if run_seed is None:
        run_seed = seed

    trace_logger = None
    if args.trace_dir:
        trace_logger = DecisionTraceLogger(
            pack_id=pack.id,
            seed=seed,
            active_modifiers=modifiers,
            output_dir=Path(args.trace_dir),
        )

    result = run_simulation(
        pack,
        days=args.days,
        seed=seed,
        active_modifiers=modifiers,
        trace_logger=trace_logger,
        learner=learner,
        start_day=start_day,
    )

    print(f"Pack: {pack.title} ({pack.id} v{pack.version})  seed={result.director.seed}")
    for note in collect_modifier_notes(modifiers):
        print(f"Modifier: {note}")
    for decision, correct in zip(result.decisions, result.outcomes):
        print(format_day(decision, correct))

    summary = result.summary()
    print("\nMode distribution:")
    for mode in Mode:
        print(
            f"  {mode.value:<12} {summary['counts'][mode.value]:>4}"
            f"  actual {summary['actual'][mode.value]:.2f}"
            f"  target {summary['target'][mode.value]:.2f}"
        )
    if summary["accuracy"] is not None:
        print(f"Accuracy: {summary['accuracy']:.1%}")
    print(f"Meters: {summary['meters']}")

    if args.debug:
        print_debug(result.director)

    if trace_logger is not None:
        print(f"\nTrace saved to {trace_logger.output_file}")

    if args.save:
        next_day = start_day + args.days
        get_save_repository().save(
            args.save, result.learner.to_save(next_day, run_seed, modifiers)
        )
        print(f"Saved progress to {args.save} (next day {next_day})")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
