"""Timer rules for Director decisions.

Formulas (milliseconds):
- Base:     easy=120000, normal=95000, hard=75000
- Response: max(45000, base - pressure * 6000 + min(20000, mistakes * 2500))
- Review:   base + 30000 + round(rng() * 15000)
- Boss prep (boss setup decisions only): base + 60000

Timers are always ordered response, review, then boss prep.
"""

from __future__ import annotations

import math

from casework.engine.rng import RNG
from casework.models.content import Difficulty, Mode
from casework.models.decision import Timer, TimerKind
from casework.models.meters import round_half_up
from casework.parameters import (
    BASE_TIMER_MS,
    BOSS_PREP_EXTRA_MS,
    MAX_MISTAKE_LENIENCY_MS,
    MIN_RESPONSE_MS,
    MISTAKE_LENIENCY_MS,
    PRESSURE_PENALTY_MS,
    REVIEW_EXTRA_MS,
    REVIEW_JITTER_MS,
)


def base_timer_ms(difficulty: Difficulty) -> int:
    """Get the base response window for a difficulty."""
    return BASE_TIMER_MS[difficulty.value]


def response_window_ms(difficulty: Difficulty, pressure: int, mistake_count: int) -> int:
    """Calculate the response window.

    Higher pressure shortens the window; recent mistakes lengthen it, capped.

    Examples:
        >>> response_window_ms(Difficulty.HARD, 5, 0)
        45000
        >>> response_window_ms(Difficulty.EASY, 1, 3)
        121500
    """
    base = base_timer_ms(difficulty)
    leniency = min(MAX_MISTAKE_LENIENCY_MS, mistake_count * MISTAKE_LENIENCY_MS)
    return max(MIN_RESPONSE_MS, base - pressure * PRESSURE_PENALTY_MS + leniency)


def review_window_ms(difficulty: Difficulty, rng: RNG) -> int:
    """Calculate the review window. Takes exactly one draw from rng."""
    return base_timer_ms(difficulty) + REVIEW_EXTRA_MS + round_half_up(rng() * REVIEW_JITTER_MS)


def boss_prep_ms(difficulty: Difficulty) -> int:
    """Calculate the boss case prep budget."""
    return base_timer_ms(difficulty) + BOSS_PREP_EXTRA_MS


def generate_timers(
    difficulty: Difficulty,
    mode: Mode,
    pressure: int,
    mistake_count: int,
    rng: RNG,
) -> list[Timer]:
    """Build the ordered timer set for a decision.

    Args:
        difficulty: Difficulty resolved for this call
        mode: Actual mode of the decision
        pressure: Pressure of the selected event (0 if none)
        mistake_count: Number of recent mistakes in the context
        rng: Draw source for the review jitter

    Returns:
        Response and review timers, plus boss prep for boss setup decisions
    """
    timers = [
        Timer(
            kind=TimerKind.RESPONSE,
            label="Response window",
            duration_ms=response_window_ms(difficulty, pressure, mistake_count),
        ),
        Timer(
            kind=TimerKind.REVIEW,
            label="Review window",
            duration_ms=review_window_ms(difficulty, rng),
        ),
    ]
    if mode == Mode.BOSS_SETUP:
        timers.append(
            Timer(
                kind=TimerKind.BOSS_PREP,
                label="Boss case prep",
                duration_ms=boss_prep_ms(difficulty),
            )
        )
    return timers


def format_duration(ms: float) -> str:
    """Format milliseconds as M:SS.

    Examples:
        >>> format_duration(95000)
        '1:35'
        >>> format_duration(-10)
        '0:00'
    """
    total_seconds = max(0, round_half_up(ms / 1000))
    minutes = math.floor(total_seconds / 60)
    seconds = total_seconds % 60
    return f"{minutes}:{seconds:02d}"
