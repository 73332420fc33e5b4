"""Director engine for Casework.

This module contains the content-selection core:
- rng: Seeded random stream and weighted sampling
- scoring: Candidate weights from mastery, mistakes, meters and difficulty
- distribution: Deficit-based learning mode balancing
- modifiers: Contextual modifier labels
- timers: Response, review and boss prep time budgets
- director: The Director service that ties them together

Usage:
    from casework.engine import create_director
    from casework.models import DifficultyCurve, PlanInput

    director = create_director(events, DifficultyCurve(), seed=1)
    decision = director.plan_next(PlanInput(day=1))

    if decision.event is None:
        print("No content available")

    snapshot = director.debug("peek")
"""

from casework.engine.director import (
    Director,
    DirectorConfig,
    RuntimeState,
    create_director,
)
from casework.engine.distribution import (
    TARGET_RATIOS,
    compute_deficits,
    distribution_report,
    pick_intended_mode,
)
from casework.engine.modifiers import FILLER_LABEL, MODIFIER_RULES, generate_modifiers
from casework.engine.rng import (
    InvalidInputError,
    RNGController,
    SeededRNG,
    WeightedItem,
    sample,
    shuffle,
    weighted_sample,
)
from casework.engine.scoring import eligible_events, score_candidates, score_event
from casework.engine.timers import format_duration, generate_timers, response_window_ms

__all__ = [
    # Director
    "Director",
    "DirectorConfig",
    "RuntimeState",
    "create_director",
    # Randomness
    "InvalidInputError",
    "RNGController",
    "SeededRNG",
    "WeightedItem",
    "sample",
    "shuffle",
    "weighted_sample",
    # Scoring
    "eligible_events",
    "score_candidates",
    "score_event",
    # Distribution
    "TARGET_RATIOS",
    "compute_deficits",
    "distribution_report",
    "pick_intended_mode",
    # Modifiers
    "FILLER_LABEL",
    "MODIFIER_RULES",
    "generate_modifiers",
    # Timers
    "format_duration",
    "generate_timers",
    "response_window_ms",
]
