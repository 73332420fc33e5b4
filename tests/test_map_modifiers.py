"""Tests for campaign map modifiers."""

import pytest

from casework.campaign import (
    MAP_MODIFIERS,
    apply_modifiers_to_outcome,
    collect_modifier_notes,
    filter_events_for_active_modifiers,
    get_map_modifier,
)
from casework.campaign.map_modifiers import apply_reinspection_week, apply_rent_control
from casework.models.meters import OutcomeDelta

RENT_CONTROL = "modifier.rentControlCity"
REINSPECTION = "modifier.hqsReinspectionWeek"


class TestCatalog:
    """Tests for the modifier catalog."""

    def test_lookup(self):
        assert get_map_modifier(RENT_CONTROL).name == "Rent Control City"
        assert get_map_modifier("modifier.unknown") is None

    def test_ids_unique(self):
        ids = [m.id for m in MAP_MODIFIERS]
        assert len(ids) == len(set(ids))

    def test_notes(self):
        notes = collect_modifier_notes([REINSPECTION])
        assert len(notes) == 1
        assert notes[0].startswith("HQS Re-inspection Week")


class TestRentControl:
    """Tests for the rent control outcome adjustment."""

    def test_halves_roi_gain(self, event_factory):
        event = event_factory("event.a", "Rent", 2)
        outcome = apply_rent_control(event, OutcomeDelta(owner_roi=5, compliance=2))
        assert outcome.owner_roi == 3
        assert outcome.compliance == 3
        assert "Rent control" in outcome.summary

    def test_negative_compliance_pushed_down(self, event_factory):
        event = event_factory("event.a", "Rent", 2)
        outcome = apply_rent_control(event, OutcomeDelta(owner_roi=-4, compliance=-2))
        assert outcome.owner_roi == -4
        assert outcome.compliance == -3

    def test_other_topics_untouched(self, event_factory):
        original = OutcomeDelta(owner_roi=5)
        assert apply_rent_control(event_factory("event.a", "NJLAD", 2), original) == original
        assert apply_rent_control(None, original) == original

    def test_suffix_added_once(self, event_factory):
        event = event_factory("event.a", "Rent", 2)
        once = apply_rent_control(event, OutcomeDelta(summary="Base."))
        twice = apply_rent_control(event, once)
        assert twice.summary == once.summary


class TestReinspectionWeek:
    """Tests for the re-inspection week modifier."""

    @pytest.mark.parametrize("topic", ["NJLAD", "Notices"])
    def test_rewards_equity_work(self, event_factory, topic):
        outcome = apply_reinspection_week(
            event_factory("event.a", topic, 2), OutcomeDelta(compliance=-4)
        )
        assert outcome.compliance == -3
        assert outcome.resident_trust == 1

    def test_hides_deposit_events(self, event_factory):
        events = [
            event_factory("event.a", "Deposits", 2),
            event_factory("event.b", "Rent", 2),
        ]
        kept = filter_events_for_active_modifiers(events, [REINSPECTION])
        assert [e.id for e in kept] == ["event.b"]

    def test_never_filters_to_nothing(self, event_factory):
        """If every event would be hidden, the full list is kept."""
        events = [event_factory("event.a", "Deposits", 2)]
        assert filter_events_for_active_modifiers(events, [REINSPECTION]) == events


class TestApplyModifiers:
    """Tests for chaining active modifiers."""

    def test_no_modifiers(self, event_factory):
        outcome = OutcomeDelta(compliance=1)
        assert apply_modifiers_to_outcome(event_factory("e", "Rent", 1), outcome, []) == outcome

    def test_chained_in_catalog_order(self, event_factory):
        """Active modifiers apply in catalog order, ignoring request order."""
        event = event_factory("event.a", "Rent Notices", 2)
        outcome = apply_modifiers_to_outcome(
            event, OutcomeDelta(owner_roi=4, compliance=0), [REINSPECTION, RENT_CONTROL]
        )
        # rent control: roi 2, compliance 1; re-inspection: compliance 2, trust 1
        assert outcome.owner_roi == 2
        assert outcome.compliance == 2
        assert outcome.resident_trust == 1
