"""Dashboard accordion state — which sections are open.

The state is persisted as one JSON object under a single key and merged over
DEFAULT_ACCORDION_STATE on load, so sections missing from the saved value
keep their default.
"""

from __future__ import annotations

import json
from typing import Iterable

from security_barometer.logger import get_logger

logger = get_logger(__name__)

ACCORDION_KEY = "accordionState"

DEFAULT_ACCORDION_STATE: dict[str, bool] = {
    "active-alerts": True,
    "provinces": True,
    "international": True,
    "recent-alerts": False,
    "incidents": False,
    "employee-chart": False,
}

AccordionState = dict[str, bool]


def merge_accordion_state(saved: str | None) -> AccordionState:
    """Parse a saved JSON object and merge it over the defaults."""
    state = dict(DEFAULT_ACCORDION_STATE)
    if not saved:
        return state
    try:
        parsed = json.loads(saved)
    except json.JSONDecodeError as exc:
        logger.error("accordion_state_unparseable", error=str(exc))
        return state
    if not isinstance(parsed, dict):
        logger.error("accordion_state_not_object", value_type=type(parsed).__name__)
        return state
    state.update({str(k): bool(v) for k, v in parsed.items()})
    return state


def dump_accordion_state(state: AccordionState) -> str:
    return json.dumps(state)


def toggle_section(state: AccordionState, section_id: str) -> AccordionState:
    return {**state, section_id: not state.get(section_id, False)}


def is_section_open(state: AccordionState, section_id: str) -> bool:
    return state.get(section_id, False)


def open_sections(state: AccordionState) -> list[str]:
    return [section for section, is_open in state.items() if is_open]


def apply_open_sections(state: AccordionState, open_ids: Iterable[str]) -> AccordionState:
    """Close every known section, then open exactly `open_ids`."""
    updated = dict.fromkeys(state, False)
    updated.update(dict.fromkeys(open_ids, True))
    return updated


def expand_all() -> AccordionState:
    return dict.fromkeys(DEFAULT_ACCORDION_STATE, True)


def collapse_all() -> AccordionState:
    return dict.fromkeys(DEFAULT_ACCORDION_STATE, False)


def reset_to_default() -> AccordionState:
    return dict(DEFAULT_ACCORDION_STATE)
