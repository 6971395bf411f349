"""Snapshot persistence with debounced writes.

The whole state is stored as one JSON blob under a single key. Saving is
fire-and-forget: failures are logged and the in-memory state stays the source
of truth. Restoring returns None on any failure so the caller can fall back
to its initial state.
"""
import json
import sqlite3
import threading
from datetime import datetime

from loguru import logger

from review_tracker.db import DEFAULT_DB_PATH, init_db, read_snapshot, write_snapshot
from review_tracker.errors import PersistenceUnavailable
from review_tracker.models import State

STATE_KEY = "state"
DEBOUNCE_SECONDS = 1.0


def _daemon_timer(interval, function):
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class PersistenceGateway:
    """Reads and writes state snapshots, coalescing bursts of changes.

    notify() may be called after every mutation; at most one write happens
    per `window` seconds and it carries the most recent state.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, window: float = DEBOUNCE_SECONDS,
                 timer_factory=_daemon_timer):
        self.db_path = db_path
        self.window = window
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        # held for the whole take-and-write, so flush() waits on a timer write in flight
        self._save_lock = threading.Lock()
        self._pending: State | None = None
        self._timer = None

    def _read(self) -> State | None:
        try:
            init_db(self.db_path)
            raw = read_snapshot(self.db_path, STATE_KEY)
            if raw is None:
                return None
            return State.from_dict(json.loads(raw))
        except (sqlite3.Error, OSError, ValueError, KeyError, TypeError, AttributeError,
                RecursionError) as e:
            raise PersistenceUnavailable(f"cannot restore snapshot from {self.db_path}: {e}") from e

    def _write(self, state: State) -> None:
        try:
            init_db(self.db_path)
            write_snapshot(
                self.db_path, STATE_KEY, json.dumps(state.to_dict()), datetime.now().isoformat(),
            )
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            raise PersistenceUnavailable(f"cannot save snapshot to {self.db_path}: {e}") from e

    def restore(self) -> State | None:
        """Load the last saved state, or None if there is none or it is unreadable."""
        try:
            state = self._read()
        except PersistenceUnavailable as e:
            logger.warning("{}", e)
            return None
        if state is None:
            logger.info("No snapshot found in {}", self.db_path)
        else:
            logger.debug("Restored {} subjects, {} items", len(state.subjects), len(state.items))
        return state

    def save(self, state: State) -> bool:
        """Write a snapshot now. Returns False (after logging) if the write failed."""
        try:
            self._write(state)
        except PersistenceUnavailable as e:
            logger.warning("{}", e)
            return False
        logger.debug("Saved snapshot ({} items)", len(state.items))
        return True

    def notify(self, state: State) -> None:
        """Schedule a trailing-edge save of `state`."""
        with self._lock:
            self._pending = state
            if self._timer is not None:
                return
            self._timer = self._timer_factory(self.window, self._fire)
            self._timer.start()

    def _fire(self) -> None:
        with self._save_lock:
            with self._lock:
                state, self._pending = self._pending, None
                self._timer = None
            if state is not None:
                self.save(state)

    def flush(self) -> None:
        """Cancel the pending timer and write the pending state immediately.

        Blocks until a timer-driven write already in progress has finished.
        """
        with self._save_lock:
            with self._lock:
                timer, self._timer = self._timer, None
                state, self._pending = self._pending, None
            if timer is not None:
                timer.cancel()
            if state is not None:
                self.save(state)

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    close = flush
