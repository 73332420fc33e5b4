"""Mode distribution controller.

Keeps the long-run mix of learning modes close to the target ratios
(application 70%, recall 20%, boss setup 10%) using a deficit scheduler:

    deficit(mode) = target_ratio(mode) * (total_selections + 1) - count(mode)

The intended mode for the next call is the mode with the largest deficit.
Individual draws are weighted-random and may land on another mode, but the
mode that falls behind gets the largest deficit and is asked for next, so
observed frequencies converge on the targets.
"""

from __future__ import annotations

from typing import Mapping

from casework.models.content import Mode
from casework.models.decision import DistributionReport
from casework.parameters import TARGET_MODE_RATIOS

TARGET_RATIOS: dict[Mode, float] = {Mode(name): ratio for name, ratio in TARGET_MODE_RATIOS.items()}


def empty_counts() -> dict[Mode, int]:
    """Get a zeroed counter for every mode, in target order."""
    return {mode: 0 for mode in TARGET_RATIOS}


def compute_deficits(
    counts: Mapping[Mode, int],
    targets: Mapping[Mode, float] = TARGET_RATIOS,
    total: int | None = None,
) -> dict[Mode, float]:
    """Compute each mode's deficit against its target share.

    Args:
        counts: Selections so far per mode
        targets: Target ratio per mode
        total: Total selections so far (defaults to the sum of counts)

    Returns:
        Mode -> deficit, in target order
    """
    if total is None:
        total = sum(counts.values())
    return {mode: ratio * (total + 1) - counts.get(mode, 0) for mode, ratio in targets.items()}


def pick_intended_mode(
    counts: Mapping[Mode, int],
    targets: Mapping[Mode, float] = TARGET_RATIOS,
    total: int | None = None,
) -> Mode:
    """Pick the most under-served mode.

    Ties go to the mode listed first in targets (application by default).
    """
    deficits = compute_deficits(counts, targets, total)
    best_mode = Mode.APPLICATION
    best_deficit = float("-inf")
    for mode, deficit in deficits.items():
        if deficit > best_deficit:
            best_mode = mode
            best_deficit = deficit
    return best_mode


def distribution_report(
    counts: Mapping[Mode, int],
    targets: Mapping[Mode, float] = TARGET_RATIOS,
) -> DistributionReport:
    """Report target ratio, observed ratio and deficit per mode.

    Observed ratios are 0 until the first selection.
    """
    total = sum(counts.values())
    actual = {
        mode: (counts.get(mode, 0) / total if total > 0 else 0.0)
        for mode in targets
    }
    return DistributionReport(
        target=dict(targets),
        actual=actual,
        deficits=compute_deficits(counts, targets, total),
    )
