"""Candidate scoring for the Director.

Every eligible event gets a composite weight built from the learner context:

    weight = (0.6 + mastery + mistakes + meters + difficulty) * mode_multiplier
             + randomness

Factors:
- mastery    = (1 - mastery(topic)) * 1.8, unseen topics count as 0.5
- mistakes   = 0 if the topic has no recent mistakes,
               else 0.6 + (topic_mistakes / total_mistakes) * 1.2
- meters     = sum over the event's meter impact of
                 positive impact: deficit below 60 (as a ratio) * impact / 5
                 negative impact: excess above 60 (as a ratio) * |impact| / 5 * 0.75
- difficulty = max(0, 1 - |pressure - target| / max(1, target))
               with target pressure easy=1.5, normal=2.8, hard=4.2
- mode multiplier = 1.35 if the event's mode is the intended mode, else 0.85
- randomness = one RNG draw * 0.25, not scaled by the multiplier

The final weight is floored at 0.01 so the sampler always has positive weights.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from casework.engine.rng import RNG
from casework.models.content import Difficulty, Event, Mode, classify_mode
from casework.models.context import PlanInput
from casework.models.decision import Candidate, ScoreBreakdown
from casework.models.meters import OutcomeDelta
from casework.parameters import (
    BASE_WEIGHT,
    MASTERY_WEIGHT,
    METER_IMPACT_DIVISOR,
    METER_MAX,
    METER_SURPLUS_WEIGHT,
    METER_TARGET,
    MIN_CANDIDATE_WEIGHT,
    MISTAKE_BASE,
    MISTAKE_SHARE_WEIGHT,
    MODE_MATCH_MULTIPLIER,
    MODE_MISMATCH_MULTIPLIER,
    RANDOMNESS_WEIGHT,
    TARGET_PRESSURE,
)


def eligible_events(events: Sequence[Event], last_event_id: str | None) -> list[Event]:
    """Get the events that may be chosen next.

    The previously chosen event is excluded unless it is the only event.
    """
    if len(events) <= 1:
        return list(events)
    return [event for event in events if event.id != last_event_id]


def mastery_contribution(mastery: float) -> float:
    """Weight for weak topics. Expects mastery already normalised to [0, 1]."""
    return (1.0 - mastery) * MASTERY_WEIGHT


def mistake_contribution(topic: str, mistake_counts: Mapping[str, int], total_mistakes: int) -> float:
    """Weight for topics the learner recently got wrong."""
    topic_mistakes = mistake_counts.get(topic, 0)
    if topic_mistakes == 0 or total_mistakes == 0:
        return 0.0
    return MISTAKE_BASE + (topic_mistakes / total_mistakes) * MISTAKE_SHARE_WEIGHT


def meter_contribution(impact: OutcomeDelta | None, meter_states: Mapping[str, int]) -> float:
    """Weight for events that would pull meters back toward the target.

    Meters missing from meter_states contribute nothing.
    """
    if impact is None:
        return 0.0

    total = 0.0
    for meter, delta in impact.numeric_items():
        current = meter_states.get(meter)
        if current is None:
            continue
        if delta > 0:
            deficit_ratio = max(0, METER_TARGET - current) / METER_TARGET
            total += deficit_ratio * delta / METER_IMPACT_DIVISOR
        elif delta < 0:
            surplus_ratio = max(0, current - METER_TARGET) / (METER_MAX - METER_TARGET)
            total += surplus_ratio * abs(delta) / METER_IMPACT_DIVISOR * METER_SURPLUS_WEIGHT
    return total


def target_pressure(difficulty: Difficulty) -> float:
    """Get the ideal event pressure for a difficulty."""
    return TARGET_PRESSURE[difficulty.value]


def difficulty_contribution(pressure: float, difficulty: Difficulty) -> float:
    """Weight for events whose pressure is close to the difficulty's target.

    Examples:
        >>> difficulty_contribution(1.5, Difficulty.EASY)
        1.0
        >>> difficulty_contribution(10, Difficulty.EASY)
        0.0
    """
    target = target_pressure(difficulty)
    return max(0.0, 1.0 - abs(pressure - target) / max(1.0, target))


def mode_multiplier(mode: Mode, intended_mode: Mode) -> float:
    """Boost events in the intended mode, damp the rest."""
    return MODE_MATCH_MULTIPLIER if mode == intended_mode else MODE_MISMATCH_MULTIPLIER


def score_event(
    event: Event,
    context: PlanInput,
    difficulty: Difficulty,
    intended_mode: Mode,
    rng: RNG,
    mistake_counts: Mapping[str, int] | None = None,
) -> Candidate:
    """Score one event. Takes exactly one draw from rng.

    Args:
        event: Event to score
        context: Normalised learner context
        difficulty: Difficulty resolved for this call
        intended_mode: Mode the distribution controller asked for
        rng: Draw source for the randomness factor
        mistake_counts: Precomputed per-topic mistake counts (optional)

    Returns:
        Candidate with its weight and factor breakdown
    """
    if mistake_counts is None:
        mistake_counts = context.mistake_counts()
    mode = classify_mode(event)

    mastery = mastery_contribution(context.mastery_for(event.topic))
    mistakes = mistake_contribution(event.topic, mistake_counts, len(context.recent_mistakes))
    meters = meter_contribution(event.meter_impact, context.meter_states)
    difficulty_score = difficulty_contribution(event.pressure, difficulty)
    multiplier = mode_multiplier(mode, intended_mode)
    randomness = rng() * RANDOMNESS_WEIGHT

    weight = (BASE_WEIGHT + mastery + mistakes + meters + difficulty_score) * multiplier + randomness

    return Candidate(
        event_id=event.id,
        topic=event.topic,
        mode=mode,
        weight=max(MIN_CANDIDATE_WEIGHT, weight),
        breakdown=ScoreBreakdown(
            mastery=mastery,
            mistakes=mistakes,
            meters=meters,
            difficulty=difficulty_score,
            mode_multiplier=multiplier,
            randomness=randomness,
        ),
    )


def score_candidates(
    events: Sequence[Event],
    context: PlanInput,
    difficulty: Difficulty,
    intended_mode: Mode,
    rng: RNG,
) -> list[Candidate]:
    """Score events in order, one RNG draw per event."""
    mistake_counts = context.mistake_counts()
    return [
        score_event(event, context, difficulty, intended_mode, rng, mistake_counts)
        for event in events
    ]
