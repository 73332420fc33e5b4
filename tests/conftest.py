"""Shared pytest fixtures and markers for all tests."""

from pathlib import Path

import pytest

PACKS_DIR = Path(__file__).resolve().parent.parent / "packs"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def make_event(event_id, topic, pressure, **kwargs):
    """Build an Event with keyword overrides."""
    from casework.models.content import Event

    return Event(id=event_id, topic=topic, pressure=pressure, **kwargs)


@pytest.fixture
def event_factory():
    """Provide the Event builder."""
    return make_event


@pytest.fixture
def basic_events():
    """Three events: one per mode."""
    return [
        make_event("event.welcome-inspection", "NJLAD", 1, related_question_id="q.njlad"),
        make_event("event.deposit-review", "Deposits", 2),
        make_event("event.boss-hearing", "Notices", 5),
    ]


@pytest.fixture
def core_pack_path():
    """Path to the bundled core pack."""
    return PACKS_DIR / "core.json"


@pytest.fixture
def core_pack(core_pack_path):
    """The bundled core pack, validated."""
    from casework.storage.file_repo import load_pack_file

    return load_pack_file(core_pack_path)


@pytest.fixture
def sample_plan_input():
    """A day-1 context with default meters."""
    from casework.models.context import PlanInput

    return PlanInput(
        day=1,
        mastery_by_topic={"NJLAD": 0.4},
        meter_states={"compliance": 70, "resident_trust": 70, "owner_roi": 60, "risk": 40},
    )
