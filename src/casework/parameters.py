"""Director tuning parameters for Casework.

This module is the SINGLE SOURCE OF TRUTH for all tunable Director constants.

Parameter Categories:
- Candidate Scoring: How each event's selection weight is built
- Mode Balancing: Target mix of learning modes
- Difficulty: Pressure targets and day phases
- Timers: Response and review time budgets
- Meters: Baseline and default gauge values

Usage:
    from casework.parameters import MASTERY_WEIGHT, TARGET_MODE_RATIOS

Note: Changing any value here changes the decision stream produced for a
given seed. Recorded traces from older builds will no longer replay.
"""

# =============================================================================
# CANDIDATE SCORING PARAMETERS
# =============================================================================

BASE_WEIGHT = 0.6
"""Flat baseline added to every candidate before the mode multiplier.

Keeps weakly-matching events selectable so the learner still sees variety.
"""

MASTERY_WEIGHT = 1.8
"""Scale applied to (1 - mastery) for the event's topic.

Analysis:
    An unseen topic (mastery 0.5) contributes 0.9.
    A fully mastered topic contributes 0.0, a failing one 1.8.
"""

DEFAULT_MASTERY = 0.5
"""Mastery assumed for topics with no recorded estimate."""

MISTAKE_BASE = 0.6
"""Flat bonus for any topic that appears in recent mistakes."""

MISTAKE_SHARE_WEIGHT = 1.2
"""Scale applied to the topic's share of all recent mistakes.

Analysis:
    A topic holding every recent mistake gets 0.6 + 1.2 = 1.8, matching
    the ceiling of the mastery contribution.
"""

METER_IMPACT_DIVISOR = 5.0
"""Divisor applied to meter impact magnitudes in the meter contribution."""

METER_SURPLUS_WEIGHT = 0.75
"""Weight of the reward for negative impacts on meters above target."""

MODE_MATCH_MULTIPLIER = 1.35
"""Multiplier for candidates whose mode matches the intended mode."""

MODE_MISMATCH_MULTIPLIER = 0.85
"""Multiplier for candidates whose mode differs from the intended mode."""

RANDOMNESS_WEIGHT = 0.25
"""Scale of the per-candidate random jitter, added after the multiplier."""

MIN_CANDIDATE_WEIGHT = 0.01
"""Floor for every candidate weight.

The sampler rejects all-zero weight sets, so every candidate must stay
strictly positive.
"""


# =============================================================================
# MODE BALANCING PARAMETERS
# =============================================================================

TARGET_MODE_RATIOS = {
    "application": 0.7,
    "recall": 0.2,
    "boss_setup": 0.1,
}
"""Long-run share of selections per learning mode.

Insertion order is also the tie-break order for the intended mode.
"""

BOSS_PRESSURE_THRESHOLD = 4
"""Events at or above this pressure classify as boss setup."""


# =============================================================================
# DIFFICULTY PARAMETERS
# =============================================================================

TARGET_PRESSURE = {
    "easy": 1.5,
    "normal": 2.8,
    "hard": 4.2,
}
"""Ideal event pressure for each difficulty level."""

START_PHASE_LAST_DAY = 3
"""Last day of the start phase (days 1-3)."""

MID_PHASE_LAST_DAY = 7
"""Last day of the mid phase (days 4-7). Day 8 onward is late."""


# =============================================================================
# TIMER PARAMETERS
# =============================================================================

BASE_TIMER_MS = {
    "easy": 120_000,
    "normal": 95_000,
    "hard": 75_000,
}
"""Base response window per difficulty, in milliseconds."""

MIN_RESPONSE_MS = 45_000
"""Shortest response window ever granted."""

PRESSURE_PENALTY_MS = 6_000
"""Response time removed per point of event pressure."""

MISTAKE_LENIENCY_MS = 2_500
"""Response time added per recent mistake."""

MAX_MISTAKE_LENIENCY_MS = 20_000
"""Cap on the total mistake leniency."""

REVIEW_EXTRA_MS = 30_000
"""Fixed review time added on top of the base."""

REVIEW_JITTER_MS = 15_000
"""Maximum random review time added on top of REVIEW_EXTRA_MS."""

BOSS_PREP_EXTRA_MS = 60_000
"""Boss case prep time added on top of the base."""


# =============================================================================
# METER PARAMETERS
# =============================================================================

METER_MIN = 0
METER_MAX = 100

METER_TARGET = 60
"""Baseline every meter is steered toward by the meter contribution."""

DEFAULT_METERS = {
    "compliance": 70,
    "resident_trust": 70,
    "owner_roi": 60,
    "risk": 40,
}
"""Starting meter values for a fresh run."""


# =============================================================================
# MODIFIER PARAMETERS
# =============================================================================

OWNER_ROI_RENT_CONTROL_BELOW = 55
COMPLIANCE_INSPECTION_BELOW = 60
RESIDENT_TRUST_SPOTLIGHT_BELOW = 50
COURT_BACKLOG_EVERY_DAYS = 5

FILLER_THRESHOLD = 0.6
"""A draw above this injects the filler label when no rule fires (40%)."""

MAX_MODIFIERS = 2
"""Most modifier labels shown for a single decision."""
