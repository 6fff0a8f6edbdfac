"""Accordion preference routes under /preferences/accordion."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from security_barometer.api.dependencies import get_preference_store
from security_barometer.preferences import (
    ACCORDION_KEY,
    AccordionState,
    apply_open_sections,
    collapse_all,
    dump_accordion_state,
    expand_all,
    is_section_open,
    merge_accordion_state,
    open_sections,
    reset_to_default,
    toggle_section,
)
from security_barometer.store.preferences import PreferenceStore

router = APIRouter(prefix="/preferences")


class SectionState(BaseModel):
    section_id: str
    open: bool


async def _load(store: PreferenceStore) -> AccordionState:
    return merge_accordion_state(await store.get(ACCORDION_KEY))


async def _save(store: PreferenceStore, state: AccordionState) -> AccordionState:
    await store.set(ACCORDION_KEY, dump_accordion_state(state))
    return state


@router.get("/accordion", response_model=dict[str, bool])
async def get_accordion(
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    return await _load(store)


@router.put("/accordion", response_model=dict[str, bool])
async def put_accordion(
    state: dict[str, bool],
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    return await _save(store, merge_accordion_state(dump_accordion_state(state)))


@router.get("/accordion/open", response_model=list[str])
async def get_open_sections(
    store: PreferenceStore = Depends(get_preference_store),
) -> list[str]:
    return open_sections(await _load(store))


@router.put("/accordion/open", response_model=dict[str, bool])
async def put_open_sections(
    section_ids: list[str] = Body(...),
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    """Open exactly `section_ids`; every other known section is closed."""
    return await _save(store, apply_open_sections(await _load(store), section_ids))


@router.post("/accordion/expand-all", response_model=dict[str, bool])
async def expand_all_sections(
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    return await _save(store, expand_all())


@router.post("/accordion/collapse-all", response_model=dict[str, bool])
async def collapse_all_sections(
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    return await _save(store, collapse_all())


@router.post("/accordion/reset", response_model=dict[str, bool])
async def reset_sections(
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    return await _save(store, reset_to_default())


@router.get("/accordion/{section_id}", response_model=SectionState)
async def get_section(
    section_id: str,
    store: PreferenceStore = Depends(get_preference_store),
) -> SectionState:
    return SectionState(section_id=section_id, open=is_section_open(await _load(store), section_id))


@router.post("/accordion/{section_id}/toggle", response_model=dict[str, bool])
async def toggle_accordion_section(
    section_id: str,
    store: PreferenceStore = Depends(get_preference_store),
) -> AccordionState:
    return await _save(store, toggle_section(await _load(store), section_id))
