"""Tests for the mode distribution controller.

Deficit: target_ratio * (total + 1) - count. The mode with the largest
deficit is asked for next; ties go to application.
"""

import pytest

from casework.engine.distribution import (
    TARGET_RATIOS,
    compute_deficits,
    distribution_report,
    empty_counts,
    pick_intended_mode,
)
from casework.models.content import Mode


class TestComputeDeficits:
    """Tests for compute_deficits."""

    def test_empty_counts(self):
        """With nothing selected, deficits equal the targets."""
        deficits = compute_deficits(empty_counts())
        assert deficits[Mode.APPLICATION] == pytest.approx(0.7)
        assert deficits[Mode.RECALL] == pytest.approx(0.2)
        assert deficits[Mode.BOSS_SETUP] == pytest.approx(0.1)

    def test_after_selections(self):
        """Counted modes lose deficit."""
        counts = {Mode.APPLICATION: 3, Mode.RECALL: 0, Mode.BOSS_SETUP: 0}
        deficits = compute_deficits(counts)
        assert deficits[Mode.APPLICATION] == pytest.approx(0.7 * 4 - 3)
        assert deficits[Mode.RECALL] == pytest.approx(0.8)
        assert deficits[Mode.BOSS_SETUP] == pytest.approx(0.4)

    def test_explicit_total(self):
        """An explicit total overrides the sum of counts."""
        deficits = compute_deficits(empty_counts(), total=9)
        assert deficits[Mode.RECALL] == pytest.approx(2.0)


class TestPickIntendedMode:
    """Tests for pick_intended_mode."""

    def test_first_call_is_application(self):
        """Application has the largest initial deficit."""
        assert pick_intended_mode(empty_counts()) == Mode.APPLICATION

    def test_recall_behind(self):
        """Recall is asked for once application is ahead."""
        counts = {Mode.APPLICATION: 3, Mode.RECALL: 0, Mode.BOSS_SETUP: 0}
        assert pick_intended_mode(counts) == Mode.RECALL

    def test_boss_behind(self):
        """Boss setup is asked for once it falls far enough behind."""
        counts = {Mode.APPLICATION: 7, Mode.RECALL: 2, Mode.BOSS_SETUP: 0}
        assert pick_intended_mode(counts) == Mode.BOSS_SETUP

    def test_ties_go_to_application(self):
        """Equal deficits resolve in target order."""
        targets = {Mode.APPLICATION: 0.5, Mode.RECALL: 0.5}
        assert pick_intended_mode({}, targets) == Mode.APPLICATION

    def test_feedback_converges(self):
        """Always honouring the intent tracks the targets closely."""
        counts = empty_counts()
        for _ in range(100):
            counts[pick_intended_mode(counts)] += 1
        assert abs(counts[Mode.APPLICATION] - 70) <= 1
        assert abs(counts[Mode.RECALL] - 20) <= 1
        assert abs(counts[Mode.BOSS_SETUP] - 10) <= 1


class TestDistributionReport:
    """Tests for distribution_report."""

    def test_no_selections(self):
        """Observed ratios are 0 before the first selection."""
        report = distribution_report(empty_counts())
        assert report.actual == {mode: 0.0 for mode in TARGET_RATIOS}
        assert report.target == TARGET_RATIOS

    def test_observed_ratios(self):
        """Observed ratios are counts over total."""
        counts = {Mode.APPLICATION: 2, Mode.RECALL: 1, Mode.BOSS_SETUP: 1}
        report = distribution_report(counts)
        assert report.actual[Mode.APPLICATION] == pytest.approx(0.5)
        assert report.actual[Mode.BOSS_SETUP] == pytest.approx(0.25)
        assert report.deficits[Mode.BOSS_SETUP] == pytest.approx(0.1 * 5 - 1)
