"""Pydantic schemas for content packs and saves.

Content packs are authored as camelCase JSON (difficultyCurve, meterImpact,
relatedQuestionId). Models accept both camelCase and snake_case and always
dump snake_case.

Pack validation lives here, at load time. The Director never validates the
events it is handed.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from casework.models.content import Difficulty, DifficultyCurve, Event
from casework.models.context import MasteryStats, MistakeRecord
from casework.models.meters import MeterSnapshot, OutcomeDelta

SAVE_VERSION = 1


class QuestionChoice(BaseModel):
    """One answer option for an assessment question."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    meter_impact: OutcomeDelta | None = Field(
        default=None,
        validation_alias=AliasChoices("meter_impact", "meterImpact"),
    )
    correct: bool = Field(default=False)
    followup_event_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("followup_event_id", "followupEventId"),
    )


class Question(BaseModel):
    """An assessment question events can link to."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    prompt: str
    topic: str
    difficulty: Difficulty
    explanation: str | None = Field(default=None)
    choices: list[QuestionChoice] = Field(min_length=2)


class ContentPack(BaseModel):
    """A loadable bundle of events and questions.

    Attributes:
        id: Pack identifier
        title: Display title
        version: Pack version string
        topics: Topics covered (at least one)
        municipalities: Municipalities the pack is set in
        difficulty_curve: Default difficulty per phase
        events: Events the Director chooses from
        questions: Assessment questions referenced by events
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    version: str = Field(default="1.0.0")
    topics: list[str] = Field(min_length=1)
    municipalities: list[str] = Field(default_factory=list)
    difficulty_curve: DifficultyCurve = Field(
        default_factory=DifficultyCurve,
        validation_alias=AliasChoices("difficulty_curve", "difficultyCurve"),
    )
    events: list[Event] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> ContentPack:
        """Reject duplicate event ids and dangling question links."""
        seen: set[str] = set()
        for event in self.events:
            if event.id in seen:
                raise ValueError(f"Duplicate event id: {event.id}")
            seen.add(event.id)

        question_ids = {question.id for question in self.questions}
        for event in self.events:
            if event.related_question_id and event.related_question_id not in question_ids:
                raise ValueError(
                    f"Event {event.id} references unknown question {event.related_question_id}"
                )
        return self

    def metadata(self) -> dict:
        """Summary used when listing packs."""
        return {
            "id": self.id,
            "title": self.title,
            "version": self.version,
            "topics": list(self.topics),
            "event_count": len(self.events),
        }


class SaveGame(BaseModel):
    """Persisted campaign progress.

    The Director keeps no state across restarts; the caller stores what it
    needs to rebuild PlanInput here.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: int = Field(default=SAVE_VERSION)
    last_played: str = Field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc).isoformat(),
        validation_alias=AliasChoices("last_played", "lastPlayed"),
    )
    day: int = Field(default=1, ge=1)
    run_seed: int | None = Field(
        default=None,
        validation_alias=AliasChoices("run_seed", "runSeed"),
    )
    meters: MeterSnapshot = Field(default_factory=MeterSnapshot)
    mastery: dict[str, MasteryStats] = Field(default_factory=dict)
    recent_mistakes: list[MistakeRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("recent_mistakes", "recentMistakes"),
    )
    streak: int = Field(default=0, ge=0)
    earned_badges: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("earned_badges", "earnedBadges"),
    )
    active_modifiers: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("active_modifiers", "activeModifiers"),
    )
