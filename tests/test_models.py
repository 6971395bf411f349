"""Tests for data model classes."""
from datetime import date

import pytest

from review_tracker.models import Category, Item, RepInfo, State, Subject, new_id


def test_item_defaults():
    it = Item(id="x")
    assert it.label == "new item"
    assert it.description == ""
    assert it.visible is True
    assert it.subject_id is None
    assert it.rep_info is None


def test_subject_defaults():
    s = Subject(id="s")
    assert s.label == "new subject"
    assert s.category_id is None


def test_new_id_is_unique():
    assert len({new_id() for _ in range(100)}) == 100


def test_state_round_trip_through_dict():
    state = State(
        categories=[Category(id="c", label="cat")],
        subjects=[Subject(id="s2", label="second", category_id="c"), Subject(id="s1")],
        items=[
            Item(id="i2", label="two", description="d", visible=False, subject_id="s1",
                 rep_info=RepInfo(interval=4, last_completion=date(2024, 1, 31))),
            Item(id="i1", subject_id="s2"),
        ],
    )
    assert State.from_dict(state.to_dict()) == state


def test_to_dict_uses_iso_dates():
    state = State(items=[Item(id="i", rep_info=RepInfo(3, date(2024, 2, 29)))])
    data = state.to_dict()
    assert data["items"][0]["rep_info"] == {"interval": 3, "last_completion": "2024-02-29"}


def test_from_dict_missing_key_raises():
    with pytest.raises(KeyError):
        State.from_dict({"subjects": [], "items": []})


def test_from_dict_rejects_non_positive_interval():
    data = {
        "categories": [], "subjects": [],
        "items": [{"id": "i", "label": "x", "rep_info": {"interval": 0, "last_completion": "2024-01-01"}}],
    }
    with pytest.raises(ValueError):
        State.from_dict(data)


@pytest.mark.parametrize("rep", [
    {"interval": 2.7, "last_completion": "2024-01-01"},
    {"interval": "3", "last_completion": "2024-01-01"},
    {"interval": True, "last_completion": "2024-01-01"},
    {"interval": 3, "last_completion": 20240101},
])
def test_from_dict_rejects_non_int_interval_and_bad_dates(rep):
    data = {
        "categories": [], "subjects": [],
        "items": [{"id": "i", "label": "x", "rep_info": rep}],
    }
    with pytest.raises(TypeError):
        State.from_dict(data)


@pytest.mark.parametrize("data", [
    {"categories": [{"id": 1, "label": "c"}], "subjects": [], "items": []},
    {"categories": [], "subjects": [{"id": "s", "label": None}], "items": []},
    {"categories": [], "subjects": [], "items": [{"id": "i", "label": "x", "visible": "yes"}]},
    {"categories": [], "subjects": [], "items": [{"id": "i", "label": "x", "subject_id": 4}]},
    {"categories": [], "subjects": [], "items": ["i"]},
])
def test_from_dict_rejects_wrong_field_types(data):
    with pytest.raises(TypeError):
        State.from_dict(data)
