"""Command dispatch: the single entry point for state changes.

A Command is a tag plus a payload dict. dispatch() validates the payload,
applies the matching store operation to a copy of the state and returns the
copy, so callers always receive a fresh snapshot and a failed command leaves
the previous state untouched.
"""
import copy
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from loguru import logger

from review_tracker import store
from review_tracker.errors import InvalidCommand
from review_tracker.models import Category, Item, RepInfo, State, Subject
from review_tracker.scheduler import Clock, next_interval_candidates, remaining_time, today
from review_tracker.seed import example_state

ITEM_FIELD_TYPES = {
    "label": (str,),
    "description": (str,),
    "visible": (bool,),
    "subject_id": (str, type(None)),
    "rep_info": (RepInfo, type(None)),
}
SUBJECT_FIELD_TYPES = {
    "label": (str,),
    "category_id": (str, type(None)),
}


@dataclass
class Command:
    tag: str
    payload: dict = field(default_factory=dict)


def _require(payload: dict, key: str, types: tuple) -> object:
    if key not in payload:
        raise InvalidCommand(f"missing '{key}' in payload")
    value = payload[key]
    # bool is an int subclass; never accept it where an int is expected
    if isinstance(value, bool) and bool not in types:
        raise InvalidCommand(f"'{key}' has wrong type: {type(value).__name__}")
    if not isinstance(value, types):
        raise InvalidCommand(f"'{key}' has wrong type: {type(value).__name__}")
    return value


def _fields(payload: dict, allowed: dict) -> dict:
    updates = {k: v for k, v in payload.items() if k != "id"}
    for key in updates:
        if key not in allowed:
            raise InvalidCommand(f"unknown field '{key}'")
        _require(updates, key, allowed[key])
    return updates


def _add(state, payload, on):
    store.add_item(state, _require(payload, "subject_id", (str, type(None))))


def _add_subject(state, payload, on):
    store.add_subject(state)


def _remove(state, payload, on):
    store.remove(state, _require(payload, "id", (str,)))


def _update(state, payload, on):
    updates = _fields(payload, ITEM_FIELD_TYPES)
    if updates.get("rep_info") is not None:
        store.check_rep_info(updates["rep_info"], on)
    store.update_item(state, _require(payload, "id", (str,)), updates)


def _update_subject(state, payload, on):
    store.update_subject(
        state, _require(payload, "id", (str,)), _fields(payload, SUBJECT_FIELD_TYPES),
    )


def _move(state, payload, on):
    store.move_item(state, _require(payload, "id", (str,)), _require(payload, "index", (int,)))


def _move_subject(state, payload, on):
    store.move_subject(state, _require(payload, "id", (str,)), _require(payload, "index", (int,)))


def _complete(state, payload, on):
    store.complete(
        state,
        _require(payload, "id", (str,)),
        _require(payload, "next_interval", (int,)),
        on,
    )


HANDLERS = {
    "add": _add,
    "addSubject": _add_subject,
    "remove": _remove,
    "update": _update,
    "updateSubject": _update_subject,
    "move": _move,
    "moveSubject": _move_subject,
    "complete": _complete,
}


def dispatch(state: State, command: Command, on: date) -> State:
    """Apply `command` and return the new state; `state` itself is not modified.

    Raises InvalidCommand for unknown tags or malformed payloads and NotFound
    when the command targets a missing entity.
    """
    handler = HANDLERS.get(command.tag)
    if handler is None:
        raise InvalidCommand(f"unknown command: {command.tag!r}")
    if not isinstance(command.payload, dict):
        raise InvalidCommand(f"payload for {command.tag!r} must be a dict")
    new_state = copy.deepcopy(state)
    handler(new_state, command.payload, on)
    return new_state


class Tracker:
    """Owns the live state and routes commands and queries to it."""

    def __init__(self, state: Optional[State] = None, gateway=None, clock: Clock = today):
        self.state = state if state is not None else State()
        self.gateway = gateway
        self.clock = clock

    @classmethod
    def start(cls, gateway, clock: Clock = today) -> "Tracker":
        """Restore the saved state once, or start from the example state."""
        state = gateway.restore()
        if state is None:
            logger.info("Starting from example state")
            state = example_state()
        return cls(state=state, gateway=gateway, clock=clock)

    def apply(self, command: Command) -> State:
        self.state = dispatch(self.state, command, self.clock())
        logger.debug("Applied {}", command.tag)
        if self.gateway is not None:
            self.gateway.notify(self.state)
        return self.state

    @property
    def categories(self) -> list[Category]:
        return self.state.categories

    @property
    def subjects(self) -> list[Subject]:
        return self.state.subjects

    @property
    def items(self) -> list[Item]:
        return self.state.items

    def item(self, item_id: str) -> Item:
        return store.find_item(self.state, item_id)

    def items_for_subject(self, subject_id: str) -> list[Item]:
        return store.items_for_subject(self.state, subject_id)

    def remaining_time(self, item_id: str) -> Optional[int]:
        return remaining_time(self.item(item_id), self.clock())

    def next_interval_candidates(self, item_id: str) -> list[int]:
        return next_interval_candidates(self.item(item_id), self.clock())
