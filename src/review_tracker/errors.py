"""Exceptions raised by the tracker core."""


class TrackerError(Exception):
    """Base class for tracker errors."""


class NotFound(TrackerError, KeyError):
    """An operation referenced an id that is not in the relevant list."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")

    def __str__(self) -> str:
        return f"{self.kind} not found: {self.entity_id}"


class InvalidCommand(TrackerError, ValueError):
    """Unknown command tag or malformed payload."""


class PersistenceUnavailable(TrackerError):
    """Snapshot storage could not be read or written."""
