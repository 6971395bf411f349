from datetime import date

import pytest

from review_tracker.models import Item, State, Subject


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tracker.db")
    return db_path


@pytest.fixture
def day():
    return date(2024, 3, 1)


@pytest.fixture
def state():
    """Two subjects with interleaved items: a1, b1, a2, b2, a3."""
    return State(
        subjects=[Subject(id="a", label="A"), Subject(id="b", label="B")],
        items=[
            Item(id="a1", subject_id="a"),
            Item(id="b1", subject_id="b"),
            Item(id="a2", subject_id="a"),
            Item(id="b2", subject_id="b"),
            Item(id="a3", subject_id="a"),
        ],
    )


class FakeTimer:
    """Stands in for threading.Timer; fire() runs the callback on demand."""

    created = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


@pytest.fixture
def fake_timer():
    FakeTimer.created = []
    return FakeTimer
