"""Campaign rules that sit around the Director.

Usage:
    from casework.campaign import filter_events_for_active_modifiers

    events = filter_events_for_active_modifiers(pack.events, save.active_modifiers)
"""

from casework.campaign.map_modifiers import (
    MAP_MODIFIERS,
    MapModifier,
    apply_modifiers_to_outcome,
    collect_modifier_notes,
    filter_events_for_active_modifiers,
    get_map_modifier,
)

__all__ = [
    "MAP_MODIFIERS",
    "MapModifier",
    "apply_modifiers_to_outcome",
    "collect_modifier_notes",
    "filter_events_for_active_modifiers",
    "get_map_modifier",
]
