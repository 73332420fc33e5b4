"""Player meter models for Casework.

Meters are the named 0-100 gauges the game tracks for the player's property:
compliance, resident trust, owner ROI and risk. Events carry an OutcomeDelta
describing how resolving them moves each gauge.

Persisted state and content packs use a mix of spellings for the same meter
(``residentTrust``, ``trust``, ``ownerROI``, ``roi``). Everything inside the
package uses the canonical snake_case names from METER_NAMES.
"""

from __future__ import annotations

import math
from typing import Iterator

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from casework.parameters import DEFAULT_METERS, METER_MAX, METER_MIN

METER_NAMES: tuple[str, ...] = ("compliance", "resident_trust", "owner_roi", "risk")

METER_ALIASES: dict[str, str] = {
    "residentTrust": "resident_trust",
    "trust": "resident_trust",
    "ownerROI": "owner_roi",
    "ownerRoi": "owner_roi",
    "roi": "owner_roi",
}


def canonical_meter_name(name: str) -> str:
    """Map a persisted or pack meter name onto its canonical spelling.

    Examples:
        >>> canonical_meter_name("ownerROI")
        'owner_roi'
        >>> canonical_meter_name("compliance")
        'compliance'
    """
    return METER_ALIASES.get(name, name)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding toward +infinity."""
    return int(math.floor(value + 0.5))


def clamp_meter(value: float) -> int:
    """Round a meter value and clamp it into [0, 100].

    Examples:
        >>> clamp_meter(104.2)
        100
        >>> clamp_meter(-3)
        0
        >>> clamp_meter(59.5)
        60
    """
    return min(METER_MAX, max(METER_MIN, round_half_up(value)))


class MeterSnapshot(BaseModel):
    """Current value of every player meter.

    All fields are rounded and clamped into [0, 100] on assignment.
    """

    model_config = ConfigDict(validate_assignment=True)

    compliance: int = Field(default=DEFAULT_METERS["compliance"])
    resident_trust: int = Field(
        default=DEFAULT_METERS["resident_trust"],
        validation_alias=AliasChoices("resident_trust", "residentTrust", "trust"),
    )
    owner_roi: int = Field(
        default=DEFAULT_METERS["owner_roi"],
        validation_alias=AliasChoices("owner_roi", "ownerROI", "roi"),
    )
    risk: int = Field(default=DEFAULT_METERS["risk"])

    @field_validator("compliance", "resident_trust", "owner_roi", "risk", mode="before")
    @classmethod
    def clamp_to_range(cls, v: float) -> int:
        """Clamp meters to [0, 100]."""
        number = float(v)
        if not math.isfinite(number):
            raise ValueError(f"Meter value must be finite, got {v!r}")
        return clamp_meter(number)

    def as_meter_states(self) -> dict[str, int]:
        """Return the snapshot as a plain meter-name mapping."""
        return {name: getattr(self, name) for name in METER_NAMES}


class OutcomeDelta(BaseModel):
    """Meter changes produced by resolving an event.

    Attributes:
        compliance: Change to compliance (None if unaffected)
        resident_trust: Change to resident trust (None if unaffected)
        owner_roi: Change to owner ROI (None if unaffected)
        risk: Change to risk (None if unaffected)
        summary: One-line explanation shown to the player
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    compliance: float | None = Field(default=None)
    resident_trust: float | None = Field(
        default=None,
        validation_alias=AliasChoices("resident_trust", "residentTrust", "trust"),
    )
    owner_roi: float | None = Field(
        default=None,
        validation_alias=AliasChoices("owner_roi", "ownerROI", "roi"),
    )
    risk: float | None = Field(default=None)
    summary: str = Field(default="")

    def numeric_items(self) -> Iterator[tuple[str, float]]:
        """Yield (meter, delta) for every meter this outcome touches.

        The summary is not a meter and is never yielded. Non-finite deltas
        are skipped.
        """
        for name in METER_NAMES:
            value = getattr(self, name)
            if value is not None and math.isfinite(value):
                yield name, value


def apply_outcome(snapshot: MeterSnapshot, delta: OutcomeDelta) -> MeterSnapshot:
    """Apply an outcome delta to produce a new meter snapshot.

    Args:
        snapshot: Current meters
        delta: Outcome to apply

    Returns:
        New snapshot with every meter clamped to [0, 100]
    """
    changes = dict(delta.numeric_items())
    return MeterSnapshot(
        compliance=snapshot.compliance + changes.get("compliance", 0),
        resident_trust=snapshot.resident_trust + changes.get("resident_trust", 0),
        owner_roi=snapshot.owner_roi + changes.get("owner_roi", 0),
        risk=snapshot.risk + changes.get("risk", 0),
    )


def _direction(value: int, current: int) -> str:
    if value > current:
        return "up"
    if value < current:
        return "down"
    return "steady"


def describe_outcome(snapshot: MeterSnapshot, delta: OutcomeDelta) -> str:
    """Describe how an outcome moves each meter.

    Example:
        "Compliance up · Resident Trust steady · Owner ROI down · Risk up · <summary>"
    """
    after = apply_outcome(snapshot, delta)
    return " · ".join(
        [
            f"Compliance {_direction(after.compliance, snapshot.compliance)}",
            f"Resident Trust {_direction(after.resident_trust, snapshot.resident_trust)}",
            f"Owner ROI {_direction(after.owner_roi, snapshot.owner_roi)}",
            f"Risk {_direction(after.risk, snapshot.risk)}",
            delta.summary,
        ]
    )
