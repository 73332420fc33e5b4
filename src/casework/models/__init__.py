"""Casework data models.

This module exports the core data structures read and produced by the Director.
"""

from .content import (
    Difficulty,
    DifficultyCurve,
    Event,
    Mode,
    Phase,
    classify_mode,
    difficulty_for_day,
    phase_for_day,
)
from .context import (
    MasteryStats,
    MistakeEntry,
    MistakeRecord,
    PlanInput,
    mastery_from_stats,
    normalize_mastery,
    normalize_meter_states,
    normalize_mistake,
)
from .decision import (
    Candidate,
    DebugSnapshot,
    Decision,
    DistributionReport,
    ScoreBreakdown,
    Timer,
    TimerKind,
)
from .meters import (
    METER_NAMES,
    MeterSnapshot,
    OutcomeDelta,
    apply_outcome,
    canonical_meter_name,
    clamp_meter,
    describe_outcome,
)

__all__ = [
    # Enums
    "Difficulty",
    "Mode",
    "Phase",
    "TimerKind",
    # Content Models
    "Event",
    "DifficultyCurve",
    # Context Models
    "PlanInput",
    "MistakeRecord",
    "MistakeEntry",
    "MasteryStats",
    # Decision Models
    "Candidate",
    "ScoreBreakdown",
    "Decision",
    "DistributionReport",
    "DebugSnapshot",
    "Timer",
    # Meter Models
    "MeterSnapshot",
    "OutcomeDelta",
    "METER_NAMES",
    # Content Functions
    "classify_mode",
    "difficulty_for_day",
    "phase_for_day",
    # Context Functions
    "mastery_from_stats",
    "normalize_mastery",
    "normalize_meter_states",
    "normalize_mistake",
    # Meter Functions
    "apply_outcome",
    "canonical_meter_name",
    "clamp_meter",
    "describe_outcome",
]
