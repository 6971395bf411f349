"""Ordered entity store: subjects and items kept in user-controlled order.

All functions mutate the given State in place. Callers that need the old
state untouched (the dispatcher) pass in a copy.
"""
from dataclasses import fields
from datetime import date

from review_tracker.errors import InvalidCommand, NotFound
from review_tracker.models import Item, RepInfo, State, Subject, new_id

ITEM_FIELDS = {f.name for f in fields(Item)} - {"id"}
SUBJECT_FIELDS = {f.name for f in fields(Subject)} - {"id"}


def _index_of(entities: list, entity_id: str) -> int:
    for i, entity in enumerate(entities):
        if entity.id == entity_id:
            return i
    return -1


def find_item(state: State, item_id: str) -> Item:
    idx = _index_of(state.items, item_id)
    if idx == -1:
        raise NotFound("item", item_id)
    return state.items[idx]


def find_subject(state: State, subject_id: str) -> Subject:
    idx = _index_of(state.subjects, subject_id)
    if idx == -1:
        raise NotFound("subject", subject_id)
    return state.subjects[idx]


def items_for_subject(state: State, subject_id: str) -> list[Item]:
    """Items belonging to one subject, in global list order."""
    return [it for it in state.items if it.subject_id == subject_id]


def add_item(state: State, subject_id: str | None) -> Item:
    item = Item(id=new_id(), subject_id=subject_id)
    state.items.append(item)
    return item


def add_subject(state: State) -> Subject:
    subject = Subject(id=new_id())
    state.subjects.append(subject)
    return subject


def remove(state: State, entity_id: str) -> None:
    """Remove an item, or a subject together with all of its items.

    Unknown ids are ignored.
    """
    idx = _index_of(state.items, entity_id)
    if idx != -1:
        del state.items[idx]

    idx = _index_of(state.subjects, entity_id)
    if idx != -1:
        del state.subjects[idx]
        state.items = [it for it in state.items if it.subject_id != entity_id]


def _merge(entity, updates: dict, allowed: set, kind: str) -> None:
    unknown = set(updates) - allowed
    if unknown:
        raise InvalidCommand(f"cannot update {kind} field(s): {', '.join(sorted(unknown))}")
    for name, value in updates.items():
        setattr(entity, name, value)


def update_item(state: State, item_id: str, updates: dict) -> Item:
    item = find_item(state, item_id)
    _merge(item, updates, ITEM_FIELDS, "item")
    return item


def update_subject(state: State, subject_id: str, updates: dict) -> Subject:
    subject = find_subject(state, subject_id)
    _merge(subject, updates, SUBJECT_FIELDS, "subject")
    return subject


def reparent_item(state: State, item_id: str, subject_id: str | None) -> Item:
    return update_item(state, item_id, {"subject_id": subject_id})


def _move(entities: list, entity_id: str, index: int, kind: str) -> None:
    # Always look the entity up again: hover events may carry a stale index.
    current = _index_of(entities, entity_id)
    if current == -1:
        raise NotFound(kind, entity_id)
    entity = entities.pop(current)
    entities.insert(index, entity)


def move_item(state: State, item_id: str, index: int) -> None:
    _move(state.items, item_id, index, "item")


def move_subject(state: State, subject_id: str, index: int) -> None:
    _move(state.subjects, subject_id, index, "subject")


def check_interval(interval) -> None:
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise InvalidCommand(f"interval must be a positive integer, got {interval!r}")


def check_rep_info(rep_info: RepInfo, today: date) -> None:
    """Reject records that break the scheduling invariants."""
    check_interval(rep_info.interval)
    if not isinstance(rep_info.last_completion, date) or rep_info.last_completion > today:
        raise InvalidCommand(
            f"last completion must be a date no later than {today}, got {rep_info.last_completion!r}"
        )


def complete(state: State, item_id: str, next_interval: int, today: date) -> Item:
    """Record a completion today and schedule the next review."""
    check_interval(next_interval)
    item = find_item(state, item_id)
    item.rep_info = RepInfo(interval=next_interval, last_completion=today)
    return item
