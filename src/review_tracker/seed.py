"""First-run example state shown before anything has been saved."""
from review_tracker.models import Category, Item, State, Subject, new_id


def example_state() -> State:
    """Two subjects with a few unscheduled items, in display order."""
    first = Subject(id=new_id(), label="subject1")
    second = Subject(id=new_id(), label="subject2")
    return State(
        categories=[Category(id=new_id(), label="some category")],
        subjects=[first, second],
        items=[
            Item(id=new_id(), label="item1", subject_id=first.id),
            Item(id=new_id(), label="item2", subject_id=second.id),
            Item(id=new_id(), label="item3", subject_id=first.id),
        ],
    )
