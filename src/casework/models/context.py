"""Per-call learner context for the Director.

PlanInput is built from loosely-typed persisted state, so it never rejects
malformed numbers. Instead:
- Meters: non-numeric or non-finite values are dropped, the rest are rounded
  and clamped into integers [0, 100], and aliased names are canonicalised.
- Mastery: values are kept as given and normalised on read by
  normalize_mastery() (missing -> 0.5, > 1 treated as a percentage).
- Mistakes: a bare topic string or a detailed record, both normalised to
  MistakeRecord on ingestion. Entries without a topic are dropped.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from casework.models.content import DifficultyCurve
from casework.models.meters import canonical_meter_name, clamp_meter, round_half_up
from casework.parameters import DEFAULT_MASTERY


class MistakeRecord(BaseModel):
    """A recent mistake on a topic.

    Attributes:
        topic: Topic the mistake was made on
        timestamp: When it happened (ISO string, optional)
        event_id: Event it was made on (optional)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    topic: str
    timestamp: str | None = Field(default=None)
    event_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("event_id", "eventId"),
    )


MistakeEntry = Union[str, MistakeRecord, Mapping[str, Any]]


class MasteryStats(BaseModel):
    """Right/wrong tallies for one topic."""

    right: int = Field(default=0, ge=0)
    wrong: int = Field(default=0, ge=0)

    @field_validator("right", "wrong", mode="before")
    @classmethod
    def clamp_tally(cls, v: Any) -> int:
        """Coerce tallies to non-negative integers."""
        number = _to_finite_float(v)
        if number is None:
            return 0
        return max(0, round_half_up(number))


def _to_finite_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_mastery(value: Any) -> float:
    """Normalise a raw mastery estimate into [0, 1].

    Args:
        value: Raw estimate. Values above 1 are treated as percentages.

    Returns:
        Mastery in [0, 1]; 0.5 when the value is missing or unusable

    Examples:
        >>> normalize_mastery(150)
        1.0
        >>> normalize_mastery(0.5)
        0.5
        >>> normalize_mastery(None)
        0.5
        >>> normalize_mastery(80)
        0.8
    """
    number = _to_finite_float(value)
    if number is None:
        return DEFAULT_MASTERY
    if number > 1:
        number = number / 100.0
    return max(0.0, min(1.0, number))


def normalize_mistake(entry: MistakeEntry) -> MistakeRecord | None:
    """Normalise one mistake entry to a MistakeRecord.

    Returns None for entries that carry no usable topic.
    """
    if isinstance(entry, MistakeRecord):
        return entry
    if isinstance(entry, str):
        topic = entry.strip()
        return MistakeRecord(topic=topic) if topic else None
    if isinstance(entry, Mapping):
        topic = entry.get("topic")
        if not isinstance(topic, str) or not topic.strip():
            return None
        timestamp = entry.get("timestamp")
        event_id = entry.get("event_id", entry.get("eventId"))
        return MistakeRecord(
            topic=topic.strip(),
            timestamp=str(timestamp) if timestamp is not None else None,
            event_id=str(event_id) if event_id is not None else None,
        )
    return None


def normalize_meter_states(meters: Mapping[str, Any] | None) -> dict[str, int]:
    """Canonicalise meter names and clamp values into integers [0, 100].

    Unusable values are dropped rather than defaulted, so a missing meter
    stays missing.
    """
    if not meters:
        return {}
    normalized: dict[str, int] = {}
    for name, raw in meters.items():
        number = _to_finite_float(raw)
        if number is None:
            continue
        normalized[canonical_meter_name(str(name))] = clamp_meter(number)
    return normalized


def mastery_from_stats(stats: Mapping[str, MasteryStats]) -> dict[str, float]:
    """Convert right/wrong tallies into 0-1 mastery per topic.

    Topics with no attempts are omitted so they keep the default estimate.
    """
    mastery = {}
    for topic, tally in stats.items():
        attempts = tally.right + tally.wrong
        if attempts > 0:
            mastery[topic] = tally.right / attempts
    return mastery


class PlanInput(BaseModel):
    """Snapshot of the learner handed to Director.plan_next().

    Attributes:
        day: Campaign day (>= 1 after normalisation)
        mastery_by_topic: Topic -> mastery estimate (0-1, or percentage)
        recent_mistakes: Ordered recent mistakes, oldest first
        meter_states: Meter name -> value (0-100)
        difficulty_curve: Optional override for the configured curve
    """

    model_config = ConfigDict(populate_by_name=True)

    day: int = Field(default=1)
    mastery_by_topic: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("mastery_by_topic", "masteryByTopic"),
    )
    recent_mistakes: list[MistakeRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("recent_mistakes", "recentMistakes"),
    )
    meter_states: dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("meter_states", "meterStates"),
    )
    difficulty_curve: DifficultyCurve | None = Field(
        default=None,
        validation_alias=AliasChoices("difficulty_curve", "difficultyCurve"),
    )

    @field_validator("day", mode="before")
    @classmethod
    def clamp_day(cls, v: Any) -> int:
        """Floor the day and clamp it to >= 1."""
        number = _to_finite_float(v)
        if number is None:
            return 1
        return max(1, int(math.floor(number)))

    @field_validator("mastery_by_topic", mode="before")
    @classmethod
    def copy_mastery(cls, v: Any) -> dict[str, Any]:
        """Copy mastery; anything that isn't a mapping is empty."""
        if not isinstance(v, Mapping):
            return {}
        return {str(topic): value for topic, value in v.items()}

    @field_validator("recent_mistakes", mode="before")
    @classmethod
    def normalize_mistakes(cls, v: Any) -> list[MistakeRecord]:
        """Normalise every mistake entry, dropping unusable ones."""
        if not isinstance(v, (list, tuple)):
            return []
        records = []
        for entry in v:
            record = normalize_mistake(entry)
            if record is not None:
                records.append(record)
        return records

    @field_validator("meter_states", mode="before")
    @classmethod
    def normalize_meters(cls, v: Any) -> dict[str, int]:
        """Canonicalise and clamp meters."""
        if not isinstance(v, Mapping):
            return {}
        return normalize_meter_states(v)

    def mastery_for(self, topic: str) -> float:
        """Get the normalised mastery for a topic."""
        return normalize_mastery(self.mastery_by_topic.get(topic))

    def mistake_counts(self) -> dict[str, int]:
        """Count recent mistakes per topic."""
        counts: dict[str, int] = {}
        for mistake in self.recent_mistakes:
            counts[mistake.topic] = counts.get(mistake.topic, 0) + 1
        return counts
