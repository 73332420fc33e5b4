"""Content models read by the Director.

Events and difficulty curves are owned by the content pack. The Director
only reads them; both models are frozen.

Key rules:
- Day phases: start (days 1-3), mid (days 4-7), late (day 8+)
- Mode is derived, never stored:
    boss_setup  if the id or topic mentions "boss", or pressure >= 4
    application if the event links a related question
    recall      otherwise
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from casework.models.meters import OutcomeDelta
from casework.parameters import (
    BOSS_PRESSURE_THRESHOLD,
    MID_PHASE_LAST_DAY,
    START_PHASE_LAST_DAY,
)


class Difficulty(str, Enum):
    """Ordered difficulty levels.

    Inherits from str for proper JSON serialization.
    """

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class Phase(str, Enum):
    """Campaign day phases used to look up the difficulty curve."""

    START = "start"
    MID = "mid"
    LATE = "late"


class Mode(str, Enum):
    """Pedagogical purpose of an event."""

    APPLICATION = "application"
    RECALL = "recall"
    BOSS_SETUP = "boss_setup"


class Event(BaseModel):
    """A scripted scenario the learner can face on a given day.

    Attributes:
        id: Unique event identifier within its pack
        topic: Subject category (e.g. "NJLAD", "Notices")
        pressure: Integer intensity rating, matched against difficulty
        description: Scenario text
        meter_impact: Meter effects of resolving the event (optional)
        citation: Source reference (optional)
        related_question_id: Linked assessment question (optional)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    topic: str
    pressure: int
    description: str = Field(default="")
    meter_impact: OutcomeDelta | None = Field(
        default=None,
        validation_alias=AliasChoices("meter_impact", "meterImpact"),
    )
    citation: str | None = Field(default=None)
    related_question_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("related_question_id", "relatedQuestionId"),
    )


class DifficultyCurve(BaseModel):
    """Difficulty for each phase of a campaign."""

    model_config = ConfigDict(frozen=True)

    start: Difficulty = Field(default=Difficulty.EASY)
    mid: Difficulty = Field(default=Difficulty.NORMAL)
    late: Difficulty = Field(default=Difficulty.HARD)

    def for_phase(self, phase: Phase) -> Difficulty:
        """Get the difficulty configured for a phase."""
        return getattr(self, phase.value)


def phase_for_day(day: int) -> Phase:
    """Get the campaign phase for a day number.

    Examples:
        >>> phase_for_day(3)
        <Phase.START: 'start'>
        >>> phase_for_day(4)
        <Phase.MID: 'mid'>
        >>> phase_for_day(8)
        <Phase.LATE: 'late'>
    """
    if day <= START_PHASE_LAST_DAY:
        return Phase.START
    elif day <= MID_PHASE_LAST_DAY:
        return Phase.MID
    else:
        return Phase.LATE


def difficulty_for_day(curve: DifficultyCurve, day: int) -> Difficulty:
    """Resolve the difficulty for a day from a curve."""
    return curve.for_phase(phase_for_day(day))


def classify_mode(event: Event) -> Mode:
    """Classify an event's learning mode.

    Boss setup wins over application: a high-pressure event that also links
    a question is still boss setup.
    """
    if (
        "boss" in event.id.lower()
        or "boss" in event.topic.lower()
        or event.pressure >= BOSS_PRESSURE_THRESHOLD
    ):
        return Mode.BOSS_SETUP
    if event.related_question_id:
        return Mode.APPLICATION
    return Mode.RECALL
