"""Data classes for the review tracker domain model."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional
import uuid


def new_id() -> str:
    return str(uuid.uuid4())


_MISSING = object()


def _typed(record: dict, key: str, types, default=_MISSING):
    if not isinstance(record, dict):
        raise TypeError(f"expected an object, got {type(record).__name__}")
    if key not in record:
        if default is _MISSING:
            raise KeyError(key)
        return default
    value = record[key]
    # bool is an int subclass; a stored true is not an interval
    if isinstance(value, bool) and types is int:
        raise TypeError(f"{key!r} must be int, got bool")
    if not isinstance(value, types):
        raise TypeError(f"{key!r} has wrong type: {type(value).__name__}")
    return value


@dataclass
class Category:
    id: str
    label: str


@dataclass
class Subject:
    id: str
    label: str = "new subject"
    category_id: Optional[str] = None


@dataclass
class RepInfo:
    interval: int  # days
    last_completion: date


@dataclass
class Item:
    id: str
    label: str = "new item"
    description: str = ""
    visible: bool = True
    subject_id: Optional[str] = None
    rep_info: Optional[RepInfo] = None


@dataclass
class State:
    categories: list[Category] = field(default_factory=list)
    subjects: list[Subject] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dict (dates as ISO strings)."""
        return {
            "categories": [{"id": c.id, "label": c.label} for c in self.categories],
            "subjects": [
                {"id": s.id, "label": s.label, "category_id": s.category_id}
                for s in self.subjects
            ],
            "items": [
                {
                    "id": it.id,
                    "label": it.label,
                    "description": it.description,
                    "visible": it.visible,
                    "subject_id": it.subject_id,
                    "rep_info": (
                        {
                            "interval": it.rep_info.interval,
                            "last_completion": it.rep_info.last_completion.isoformat(),
                        }
                        if it.rep_info
                        else None
                    ),
                }
                for it in self.items
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "State":
        """Build a State from the output of to_dict.

        Values are taken as stored, never coerced. Raises KeyError, TypeError
        or ValueError on malformed input.
        """
        categories = [
            Category(id=_typed(c, "id", str), label=_typed(c, "label", str))
            for c in data["categories"]
        ]
        subjects = [
            Subject(
                id=_typed(s, "id", str),
                label=_typed(s, "label", str),
                category_id=_typed(s, "category_id", (str, type(None)), None),
            )
            for s in data["subjects"]
        ]
        items = []
        for it in data["items"]:
            rep = _typed(it, "rep_info", (dict, type(None)), None)
            rep_info = None
            if rep is not None:
                interval = _typed(rep, "interval", int)
                if interval < 1:
                    raise ValueError(f"interval must be positive, got {interval}")
                rep_info = RepInfo(
                    interval=interval,
                    last_completion=date.fromisoformat(_typed(rep, "last_completion", str)),
                )
            items.append(Item(
                id=_typed(it, "id", str),
                label=_typed(it, "label", str),
                description=_typed(it, "description", str, ""),
                visible=_typed(it, "visible", bool, True),
                subject_id=_typed(it, "subject_id", (str, type(None)), None),
                rep_info=rep_info,
            ))
        return cls(categories=categories, subjects=subjects, items=items)
