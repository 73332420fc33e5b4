"""Director service for Casework.

The Director decides, once per simulated day, which event the learner faces.

plan_next() sequence:
1. NORMALISE - Clamp the day and meters, normalise mistakes
2. DIFFICULTY - Resolve the curve (override or configured) for the day's phase
3. INTENT - Ask the distribution controller for the most under-served mode
4. SCORE - Score every eligible event (anti-repeat excludes the last pick)
5. SAMPLE - Weighted-sample one candidate
6. RECORD - Remember the pick and count its actual mode
7. DERIVE - Generate modifiers and timers from the actual mode
8. STORE - Keep decision, context and candidates for debug()

A Director owns its RuntimeState and RNG exclusively. It is not safe to call
plan_next() concurrently on one instance; separate instances are isolated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from casework.engine.distribution import (
    distribution_report,
    empty_counts,
    pick_intended_mode,
)
from casework.engine.modifiers import generate_modifiers
from casework.engine.rng import RNGController, WeightedItem, weighted_sample
from casework.engine.scoring import eligible_events, score_candidates
from casework.engine.timers import generate_timers
from casework.models.content import (
    DifficultyCurve,
    Event,
    Mode,
    classify_mode,
    difficulty_for_day,
)
from casework.models.context import PlanInput
from casework.models.decision import Candidate, DebugSnapshot, Decision

if TYPE_CHECKING:
    from casework.storage.schemas import ContentPack

logger = logging.getLogger(__name__)

DebugAction = Literal["toggle", "peek"]


class DirectorConfig(BaseModel):
    """Construction-time configuration supplied by the content pack provider.

    Attributes:
        events: Immutable event list
        difficulty_curve: Default difficulty per phase
        seed: RNG seed (None seeds from the clock)
    """

    model_config = ConfigDict(frozen=True)

    events: tuple[Event, ...] = Field(default=())
    difficulty_curve: DifficultyCurve = Field(default_factory=DifficultyCurve)
    seed: int | None = Field(default=None)

    @classmethod
    def from_pack(cls, pack: ContentPack, seed: int | None = None) -> DirectorConfig:
        """Build a config from a loaded content pack."""
        return cls(events=tuple(pack.events), difficulty_curve=pack.difficulty_curve, seed=seed)


@dataclass
class RuntimeState:
    """Mutable state owned by one Director.

    Attributes:
        counts: Selections so far per mode (never decrease)
        last_event_id: Last selected event, excluded from the next call
        last_decision: Most recent decision
        last_context: Normalised context of the most recent call
        last_intended_mode: Mode the controller asked for last call
        debug_enabled: Debug overlay flag, flipped by debug("toggle")
        last_candidates: Candidates scored in the most recent call
    """

    counts: dict[Mode, int] = field(default_factory=empty_counts)
    last_event_id: Optional[str] = None
    last_decision: Optional[Decision] = None
    last_context: Optional[PlanInput] = None
    last_intended_mode: Optional[Mode] = None
    debug_enabled: bool = False
    last_candidates: list[Candidate] = field(default_factory=list)

    @property
    def total_selections(self) -> int:
        """Selections made so far across all modes."""
        return sum(self.counts.values())


class Director:
    """Stateful content-selection engine.

    Attributes:
        config: Events, default curve and seed
        runtime: Running counters and last-call state
    """

    def __init__(self, config: DirectorConfig) -> None:
        """Initialize the Director.

        Args:
            config: Content and seed. Events are never mutated or validated.
        """
        self.config = config
        self._rng = RNGController(config.seed)
        self.runtime = RuntimeState()

    @property
    def seed(self) -> int:
        """Seed actually used by this Director's RNG."""
        return self._rng.seed

    @property
    def events(self) -> Sequence[Event]:
        """Configured events."""
        return self.config.events

    def plan_next(self, plan_input: PlanInput | dict) -> Decision:
        """Choose the next event for the learner.

        Args:
            plan_input: Learner context. Dicts are validated into PlanInput,
                normalising malformed values instead of rejecting them.

        Returns:
            Decision for this day. decision.event is None when no events are
            configured; callers should treat that as "no content available".
        """
        # Revalidate even PlanInput instances: fields may have been reassigned.
        if isinstance(plan_input, PlanInput):
            plan_input = plan_input.model_dump()
        context = PlanInput.model_validate(plan_input)
        day = context.day

        curve = context.difficulty_curve or self.config.difficulty_curve
        difficulty = difficulty_for_day(curve, day)

        intended_mode = pick_intended_mode(self.runtime.counts)

        candidates_pool = eligible_events(self.events, self.runtime.last_event_id)
        candidates = score_candidates(
            candidates_pool, context, difficulty, intended_mode, self._rng.next
        )
        self.runtime.last_candidates = candidates

        selected: Event | None = None
        if candidates:
            selected = weighted_sample(
                [
                    WeightedItem(value=event, weight=candidate.weight)
                    for event, candidate in zip(candidates_pool, candidates)
                ],
                self._rng.next,
            )

        if selected is not None:
            actual_mode = classify_mode(selected)
            self.runtime.last_event_id = selected.id
            self.runtime.counts[actual_mode] += 1
        else:
            actual_mode = intended_mode
            logger.warning(f"No events configured; day {day} has no content")

        modifiers = generate_modifiers(day, context, selected, self._rng.next)
        timers = generate_timers(
            difficulty,
            actual_mode,
            selected.pressure if selected is not None else 0,
            len(context.recent_mistakes),
            self._rng.next,
        )

        decision = Decision(
            event=selected,
            day=day,
            difficulty=difficulty,
            mode=actual_mode,
            intended_mode=intended_mode,
            modifiers=tuple(modifiers),
            timers=tuple(timers),
        )

        self.runtime.last_decision = decision
        self.runtime.last_context = context
        self.runtime.last_intended_mode = intended_mode

        logger.debug(
            f"Day {day} ({difficulty.value}): intended={intended_mode.value} "
            f"actual={actual_mode.value} event={selected.id if selected else None} "
            f"candidates={len(candidates)}"
        )
        return decision

    def debug(self, action: DebugAction = "peek") -> DebugSnapshot:
        """Inspect the Director's internals.

        Args:
            action: "toggle" flips the debug flag before snapshotting,
                "peek" leaves it untouched

        Returns:
            Snapshot with counts, distribution, last decision/context and all
            last-call candidates sorted by weight descending

        Raises:
            ValueError: If action is not "toggle" or "peek"
        """
        if action == "toggle":
            self.runtime.debug_enabled = not self.runtime.debug_enabled
        elif action != "peek":
            raise ValueError(f"Unknown debug action: {action!r}")

        return DebugSnapshot(
            enabled=self.runtime.debug_enabled,
            counts=dict(self.runtime.counts),
            distribution=distribution_report(self.runtime.counts),
            last_decision=self.runtime.last_decision,
            last_context=self.runtime.last_context,
            intended_mode=self.runtime.last_intended_mode,
            candidates=tuple(
                sorted(self.runtime.last_candidates, key=lambda c: c.weight, reverse=True)
            ),
        )


def create_director(
    events: Sequence[Event],
    difficulty_curve: DifficultyCurve | None = None,
    seed: int | None = None,
) -> Director:
    """Create a Director from events and an optional curve.

    Args:
        events: Events to choose from
        difficulty_curve: Default curve (easy/normal/hard if omitted)
        seed: RNG seed for reproducible decisions

    Returns:
        New Director with zeroed counters
    """
    return Director(
        DirectorConfig(
            events=tuple(events),
            difficulty_curve=difficulty_curve or DifficultyCurve(),
            seed=seed,
        )
    )
