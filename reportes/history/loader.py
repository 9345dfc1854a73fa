"""
HistoryLoader -- owns the page's ViewState across Streamlit reruns.

Each fetch gets a fresh generation id.  Results that come back for an
older generation, or after the page has been closed, never touch state.
"""
from __future__ import annotations

from typing import Callable, Sequence

from reportes.core.logging import get_logger
from reportes.core.utils import timer
from reportes.history.client import HistoryFetchError, fetch_history
from reportes.history.models import HistoryRecord
from reportes.history.state import (
    LOAD_ERROR_MESSAGE,
    Event,
    ExportFinished,
    ExportStarted,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    ViewState,
    is_stale,
    reduce,
)

logger = get_logger(__name__)

FetchFn = Callable[[], Sequence[HistoryRecord]]


class HistoryLoader:
    def __init__(self, fetch: FetchFn = fetch_history, state: ViewState | None = None):
        self._fetch = fetch
        self._state = state or ViewState()
        self._next_generation = self._state.generation + 1
        self._closed = False
        self._loaded_once = False

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def loaded_once(self) -> bool:
        """True once a fetch has been attempted (used for the mount-time load)."""
        return self._loaded_once

    def dispatch(self, event: Event) -> ViewState:
        if self._closed:
            logger.debug("Loader closed -- dropping %s", type(event).__name__)
            return self._state
        if is_stale(self._state, event):
            logger.debug(
                "Dropping stale %s (generation %d, current %d)",
                type(event).__name__, event.generation, self._state.generation,
            )
            return self._state
        self._state = reduce(self._state, event)
        return self._state

    # ── Fetch lifecycle ─────────────────────────────────

    def begin(self) -> int:
        """Start a new fetch generation and return its id."""
        generation = self._next_generation
        self._next_generation += 1
        self._loaded_once = True
        self.dispatch(FetchStarted(generation))
        return generation

    def complete(self, generation: int, items: Sequence[HistoryRecord]) -> ViewState:
        return self.dispatch(FetchSucceeded(generation, tuple(items)))

    def fail(self, generation: int, message: str = LOAD_ERROR_MESSAGE) -> ViewState:
        return self.dispatch(FetchFailed(generation, message))

    def refresh(self) -> ViewState:
        """Run one fetch end to end and return the resulting state."""
        generation = self.begin()
        with timer() as t:
            try:
                items = self._fetch()
            except HistoryFetchError as exc:
                logger.warning("History fetch failed (generation %d): %s", generation, exc)
                return self.fail(generation)
            except Exception:
                # the page must never stay on the loading panel
                logger.exception("Unexpected error during history fetch (generation %d)", generation)
                return self.fail(generation)
        logger.info(
            "History fetch ok (generation %d): %d records in %d ms",
            generation, len(items), t["elapsed_ms"],
        )
        return self.complete(generation, items)

    def ensure_loaded(self) -> ViewState:
        """Fetch once when the view first becomes active."""
        if not self._loaded_once:
            return self.refresh()
        return self._state

    # ── Export busy flag ────────────────────────────────

    def start_export(self) -> bool:
        """Set the busy flag; False when an export is already running or not allowed."""
        if not self._state.can_export:
            return False
        self.dispatch(ExportStarted())
        return True

    def finish_export(self) -> ViewState:
        return self.dispatch(ExportFinished())

    def close(self) -> None:
        """Detach from the view; later results are ignored."""
        self._closed = True
