"""
View state for the history page and its transition function.

``ViewState`` is an immutable value; the only way to change it is to feed
an event through ``reduce``.  Fetch events carry the generation id handed
out when the fetch started so that results of superseded fetches are
dropped on arrival.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from reportes.history.models import HistoryRecord


LOAD_ERROR_MESSAGE = "No se pudo cargar el historial. Revisa tu sesión."


# ── State ───────────────────────────────────────────────


@dataclass(frozen=True)
class ViewState:
    loading: bool = True
    error: str = ""
    items: tuple[HistoryRecord, ...] = ()
    exporting: bool = False
    generation: int = 0

    @property
    def can_export(self) -> bool:
        return not self.loading and not self.exporting and len(self.items) > 0


# ── Events ──────────────────────────────────────────────


@dataclass(frozen=True)
class FetchStarted:
    generation: int


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    items: tuple[HistoryRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    message: str = LOAD_ERROR_MESSAGE


@dataclass(frozen=True)
class ExportStarted:
    pass


@dataclass(frozen=True)
class ExportFinished:
    pass


Event = Union[FetchStarted, FetchSucceeded, FetchFailed, ExportStarted, ExportFinished]


# ── Transition ──────────────────────────────────────────


def is_stale(state: ViewState, event: Event) -> bool:
    """True for fetch results that belong to a superseded generation."""
    if isinstance(event, (FetchSucceeded, FetchFailed)):
        return event.generation != state.generation
    return False


def reduce(state: ViewState, event: Event) -> ViewState:
    """Return the state that results from applying *event* to *state*."""
    if isinstance(event, FetchStarted):
        if event.generation <= state.generation:
            return state
        return replace(state, loading=True, error="", generation=event.generation)

    if isinstance(event, FetchSucceeded):
        if is_stale(state, event):
            return state
        return replace(state, loading=False, error="", items=tuple(event.items))

    if isinstance(event, FetchFailed):
        if is_stale(state, event):
            return state
        # previous items stay on screen
        return replace(state, loading=False, error=event.message)

    if isinstance(event, ExportStarted):
        return state if state.exporting else replace(state, exporting=True)

    if isinstance(event, ExportFinished):
        return replace(state, exporting=False)

    raise TypeError(f"Unknown event: {event!r}")
