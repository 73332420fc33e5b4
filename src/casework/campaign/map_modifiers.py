"""Campaign map modifiers.

A map modifier is a run-wide rule picked on the campaign map. It can hide
events from the Director's pool and adjust the outcome of resolved events.
Map modifiers are applied by the caller around the Director: filter the
events before building the DirectorConfig, then adjust each outcome before
applying it to the meters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from casework.models.content import Event
from casework.models.meters import OutcomeDelta

OutcomeAdjuster = Callable[[Optional[Event], OutcomeDelta], OutcomeDelta]
EventFilter = Callable[[Event], bool]


@dataclass(frozen=True)
class MapModifier:
    """A campaign-wide modifier definition.

    Attributes:
        id: Stable identifier stored in saves
        name: Display name
        description: What the modifier represents
        effect_summary: Mechanical effect, for the player
        director_note: Note surfaced alongside Director decisions
        event_filter: Keeps events that return True (optional)
        adjust_outcome: Rewrites the outcome of a resolved event (optional)
    """

    id: str
    name: str
    description: str
    effect_summary: str
    director_note: str
    event_filter: Optional[EventFilter] = None
    adjust_outcome: Optional[OutcomeAdjuster] = None


def _with_suffix(summary: str, suffix: str) -> str:
    if suffix in summary:
        return summary
    return f"{summary} ({suffix})"


def apply_rent_control(event: Event | None, outcome: OutcomeDelta) -> OutcomeDelta:
    """Halve owner ROI gains on rent events and push compliance further.

    ROI gains become max(-10, ceil(roi * 0.5)); compliance moves one more
    step in its own direction (>= 0 -> +1, < 0 -> -1).
    """
    if event is None or "rent" not in event.topic.lower():
        return outcome

    owner_roi = outcome.owner_roi or 0
    compliance = outcome.compliance or 0
    return outcome.model_copy(
        update={
            "owner_roi": max(-10, math.ceil(owner_roi * 0.5)) if owner_roi > 0 else owner_roi,
            "compliance": compliance + 1 if compliance >= 0 else compliance - 1,
            "summary": _with_suffix(
                outcome.summary, "Rent control caps ROI gains and raises compliance scrutiny."
            ),
        }
    )


def apply_reinspection_week(event: Event | None, outcome: OutcomeDelta) -> OutcomeDelta:
    """Reward notice and NJLAD work with extra trust and compliance."""
    if event is None:
        return outcome

    topic = event.topic.lower()
    if "notice" not in topic and "njlad" not in topic:
        return outcome

    return outcome.model_copy(
        update={
            "resident_trust": (outcome.resident_trust or 0) + 1,
            "compliance": (outcome.compliance or 0) + 1,
            "summary": _with_suffix(
                outcome.summary, "Inspection blitz boosts trust for equity-aligned work."
            ),
        }
    )


MAP_MODIFIERS: tuple[MapModifier, ...] = (
    MapModifier(
        id="modifier.rentControlCity",
        name="Rent Control City",
        description="Cap rent adjustments and lean into habitability enforcement for this run.",
        effect_summary=(
            "Owner ROI gains from rent events are halved while compliance scoring climbs "
            "when rent moves stay lawful."
        ),
        director_note=(
            "Rent Control City active: prioritize affordability optics and tempered rent strategies."
        ),
        adjust_outcome=apply_rent_control,
    ),
    MapModifier(
        id="modifier.hqsReinspectionWeek",
        name="HQS Re-inspection Week",
        description="HUD re-checks push staff to clear equity and notice items before deposits.",
        effect_summary=(
            "Deposit actions are paused; NJLAD and Notice events grant extra trust when "
            "resolved during the blitz."
        ),
        director_note=(
            "HQS Re-inspection Week: deposit playbooks are off the table while inspection "
            "teams chase equity wins."
        ),
        event_filter=lambda event: "deposit" not in event.topic.lower(),
        adjust_outcome=apply_reinspection_week,
    ),
)


def get_map_modifier(modifier_id: str) -> MapModifier | None:
    """Look up a map modifier by id."""
    for modifier in MAP_MODIFIERS:
        if modifier.id == modifier_id:
            return modifier
    return None


def _active(active_ids: Sequence[str]) -> list[MapModifier]:
    return [modifier for modifier in MAP_MODIFIERS if modifier.id in active_ids]


def filter_events_for_active_modifiers(
    events: Sequence[Event],
    active_ids: Sequence[str],
) -> list[Event]:
    """Drop events rejected by any active modifier's filter.

    Returns the full list if filtering would leave nothing to play.
    """
    filters = [m.event_filter for m in _active(active_ids) if m.event_filter is not None]
    if not filters:
        return list(events)

    filtered = [event for event in events if all(keep(event) for keep in filters)]
    return filtered if filtered else list(events)


def apply_modifiers_to_outcome(
    event: Event | None,
    outcome: OutcomeDelta,
    active_ids: Sequence[str],
) -> OutcomeDelta:
    """Run the outcome through every active modifier, in catalog order."""
    for modifier in _active(active_ids):
        if modifier.adjust_outcome is not None:
            outcome = modifier.adjust_outcome(event, outcome)
    return outcome


def collect_modifier_notes(active_ids: Sequence[str]) -> list[str]:
    """Get the Director notes for the active modifiers."""
    return [modifier.director_note for modifier in _active(active_ids)]
