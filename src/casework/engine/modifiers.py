"""Contextual modifier rules.

Modifiers are short flavour labels attached to a decision. Each rule in
MODIFIER_RULES is checked independently, in catalog order:

1. Owner ROI < 55                                  -> Municipal Rent Control in effect
2. Compliance < 60, or a recent NJLAD mistake      -> Voucher Inspection this week
3. Day is a multiple of 5                          -> Housing Court Backlog slowing filings
4. Selected event is NJLAD, or resident trust < 50 -> Community Advocacy Spotlight hits the property

If no rule fires, a 40% draw adds the filler label. If rules fire, their
labels are shuffled (one draw per label as a sort key) and capped at two.
Meters missing from the context never satisfy a threshold rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from casework.engine.rng import RNG
from casework.models.content import Event
from casework.models.context import PlanInput
from casework.parameters import (
    COMPLIANCE_INSPECTION_BELOW,
    COURT_BACKLOG_EVERY_DAYS,
    FILLER_THRESHOLD,
    MAX_MODIFIERS,
    OWNER_ROI_RENT_CONTROL_BELOW,
    RESIDENT_TRUST_SPOTLIGHT_BELOW,
)

FILLER_LABEL = "Regional Policy Brief Released"


@dataclass(frozen=True)
class ModifierContext:
    """What a modifier rule can see."""

    day: int
    context: PlanInput
    event: Event | None


@dataclass(frozen=True)
class ModifierRule:
    """A condition and the label it contributes when true."""

    id: str
    label: str
    condition: Callable[[ModifierContext], bool]


def _meter_below(ctx: ModifierContext, meter: str, threshold: int) -> bool:
    value = ctx.context.meter_states.get(meter)
    return value is not None and value < threshold


def _mentions_njlad(text: str) -> bool:
    return "njlad" in text.lower()


def _rent_control(ctx: ModifierContext) -> bool:
    return _meter_below(ctx, "owner_roi", OWNER_ROI_RENT_CONTROL_BELOW)


def _voucher_inspection(ctx: ModifierContext) -> bool:
    if _meter_below(ctx, "compliance", COMPLIANCE_INSPECTION_BELOW):
        return True
    return any(_mentions_njlad(mistake.topic) for mistake in ctx.context.recent_mistakes)


def _court_backlog(ctx: ModifierContext) -> bool:
    return ctx.day % COURT_BACKLOG_EVERY_DAYS == 0


def _advocacy_spotlight(ctx: ModifierContext) -> bool:
    if ctx.event is not None and _mentions_njlad(ctx.event.topic):
        return True
    return _meter_below(ctx, "resident_trust", RESIDENT_TRUST_SPOTLIGHT_BELOW)


MODIFIER_RULES: tuple[ModifierRule, ...] = (
    ModifierRule("rent_control", "Municipal Rent Control in effect", _rent_control),
    ModifierRule("voucher_inspection", "Voucher Inspection this week", _voucher_inspection),
    ModifierRule("court_backlog", "Housing Court Backlog slowing filings", _court_backlog),
    ModifierRule(
        "advocacy_spotlight",
        "Community Advocacy Spotlight hits the property",
        _advocacy_spotlight,
    ),
)


def active_rules(ctx: ModifierContext) -> list[ModifierRule]:
    """Get every rule whose condition holds, in catalog order."""
    return [rule for rule in MODIFIER_RULES if rule.condition(ctx)]


def generate_modifiers(
    day: int,
    context: PlanInput,
    event: Event | None,
    rng: RNG,
) -> list[str]:
    """Build the modifier labels for a decision.

    Args:
        day: Normalised day
        context: Normalised learner context
        event: Selected event (None if nothing was selected)
        rng: Draw source for the filler roll or the shuffle keys

    Returns:
        Zero to two labels
    """
    labels = [rule.label for rule in active_rules(ModifierContext(day, context, event))]

    if not labels:
        if rng() > FILLER_THRESHOLD:
            return [FILLER_LABEL]
        return []

    keyed = [(rng(), label) for label in labels]
    keyed.sort(key=lambda pair: pair[0])
    return [label for _, label in keyed[:MAX_MODIFIERS]]
