"""Director output models.

A Decision is produced once per Director.plan_next() call and is never
mutated afterwards. Candidates and the DebugSnapshot expose the scoring
internals for debug overlays and traces.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from casework.models.content import Difficulty, Event, Mode
from casework.models.context import PlanInput


class TimerKind(str, Enum):
    """Kinds of time budget attached to a decision."""

    RESPONSE = "response"
    REVIEW = "review"
    BOSS_PREP = "boss_prep"


class Timer(BaseModel):
    """A named time budget in milliseconds."""

    model_config = ConfigDict(frozen=True)

    kind: TimerKind
    label: str
    duration_ms: int = Field(ge=0)


class ScoreBreakdown(BaseModel):
    """Contribution of each scoring factor to a candidate's weight.

    weight = (base + mastery + mistakes + meters + difficulty)
             * mode_multiplier + randomness
    """

    model_config = ConfigDict(frozen=True)

    mastery: float
    mistakes: float
    meters: float
    difficulty: float
    mode_multiplier: float
    randomness: float


class Candidate(BaseModel):
    """A scored event considered for selection."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    topic: str
    mode: Mode
    weight: float
    breakdown: ScoreBreakdown


class Decision(BaseModel):
    """The Director's choice for one simulated day.

    Attributes:
        event: Selected event, or None when no content is available
        day: Normalised day the decision was made for
        difficulty: Difficulty resolved from the curve
        mode: Mode of the selected event (intended mode if none selected)
        intended_mode: Mode the distribution controller asked for
        modifiers: Contextual modifier labels (at most 2)
        timers: Response, review and optional boss prep budgets, in that order
    """

    model_config = ConfigDict(frozen=True)

    event: Event | None
    day: int
    difficulty: Difficulty
    mode: Mode
    intended_mode: Mode
    modifiers: tuple[str, ...] = Field(default=())
    timers: tuple[Timer, ...] = Field(default=())

    @property
    def has_event(self) -> bool:
        """Whether content was available for this decision."""
        return self.event is not None

    def timer(self, kind: TimerKind) -> Timer | None:
        """Get the timer of a given kind, if present."""
        for timer in self.timers:
            if timer.kind == kind:
                return timer
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dictionary."""
        return self.model_dump(mode="json")


class DistributionReport(BaseModel):
    """Target vs observed mode mix, with per-mode deficits."""

    model_config = ConfigDict(frozen=True)

    target: dict[Mode, float]
    actual: dict[Mode, float]
    deficits: dict[Mode, float]


class DebugSnapshot(BaseModel):
    """Director internals for debug overlays.

    Candidates are the full list from the last call, sorted by weight
    descending. Display layers are expected to cap it themselves.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool
    counts: dict[Mode, int]
    distribution: DistributionReport
    last_decision: Decision | None = None
    last_context: PlanInput | None = None
    intended_mode: Mode | None = None
    candidates: tuple[Candidate, ...] = Field(default=())

    def top_candidates(self, limit: int = 5) -> tuple[Candidate, ...]:
        """Get the highest weighted candidates."""
        return self.candidates[:limit]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dictionary."""
        return self.model_dump(mode="json")
