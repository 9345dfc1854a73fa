"""
Pure rendering decisions for the history page.

Nothing here touches Streamlit; the page module turns these values into
widgets, which keeps the precedence rules and row formatting testable.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum

from reportes.core.config import get_settings
from reportes.history.models import HistoryRecord
from reportes.history.state import ViewState
from reportes.history.timefmt import time_ago


LOADING_TEXT = "Cargando historial..."
EMPTY_TEXT = "Aún no hay actividad."

LANDMARK_ICON = "🏛️"
PLACE_ICON = "📍"


class Panel(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    LIST = "list"


@dataclass(frozen=True)
class RowView:
    key: str
    icon: str
    actor: str
    primary: str
    secondary: str
    when: str

    @property
    def headline(self) -> str:
        return f"{self.actor} buscó {self.primary}{self.secondary}"


def select_panel(state: ViewState) -> Panel:
    """Which body to show; first matching rule wins.

    A failed refresh keeps earlier records in state.  Those stay on screen
    with the error as a banner (see ``stale_error``) rather than being
    replaced by the bare message.
    """
    if state.loading:
        return Panel.LOADING
    if state.error and not state.items:
        return Panel.ERROR
    if not state.items:
        return Panel.EMPTY
    return Panel.LIST


def stale_error(state: ViewState) -> str:
    """Error to show above a list that survived a failed refresh."""
    if state.loading or not state.items:
        return ""
    return state.error


def row_view(
    record: HistoryRecord,
    now: datetime.datetime | None = None,
    landmark_tag: str | None = None,
) -> RowView:
    tag = landmark_tag or get_settings().landmark_tag
    return RowView(
        key=str(record.id),
        icon=LANDMARK_ICON if record.is_landmark(tag) else PLACE_ICON,
        actor=record.username,
        primary=record.primary_text,
        secondary=f" · {record.tipo}" if record.tipo else "",
        when=time_ago(record.creado_en, now),
    )


def row_views(state: ViewState, now: datetime.datetime | None = None) -> list[RowView]:
    """Rows in server order; empty unless the list panel is showing."""
    if select_panel(state) is not Panel.LIST:
        return []
    return [row_view(record, now) for record in state.items]
