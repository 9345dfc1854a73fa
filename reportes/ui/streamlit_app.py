"""
Streamlit UI -- Historial de Actividad.

Features:
  - Loads the latest activity on first render and on "Refrescar"
  - Keeps the previous list on screen when a refresh fails
  - Relative timestamps per row, landmark / place icons
  - "Descargar Excel" export with CSV fallback

Run with:  streamlit run reportes/ui/streamlit_app.py
"""
import streamlit as st

from reportes.core.config import get_settings
from reportes.core.logging import get_logger
from reportes.history.export import ExportError, export_history
from reportes.history.loader import HistoryLoader
from reportes.history.render import (
    EMPTY_TEXT,
    LOADING_TEXT,
    Panel,
    row_views,
    select_panel,
    stale_error,
)

settings = get_settings()
logger = get_logger("reportes.ui")

st.set_page_config(
    page_title="Historial de Actividad",
    page_icon="🗂️",
    layout="centered",
)


if "loader" not in st.session_state:
    st.session_state.loader = HistoryLoader()

if "export_file" not in st.session_state:
    st.session_state.export_file = None

loader: HistoryLoader = st.session_state.loader


def _refresh():
    with st.spinner(LOADING_TEXT):
        loader.refresh()
    st.session_state.export_file = None


def _export():
    if not loader.start_export():
        return
    try:
        st.session_state.export_file = export_history(loader.state.items)
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        st.error(f"No se pudo generar el archivo: {exc}")
    finally:
        loader.finish_export()


# ── Header ──────────────────────────────────────────────
back, title, refresh_col, export_col = st.columns([1, 5, 2, 3])
back.link_button("←", settings.dashboard_url, help="Volver al panel")
title.subheader("Historial de Actividad")

if refresh_col.button("🔄 Refrescar", help="Refrescar", use_container_width=True):
    _refresh()

if not loader.loaded_once:
    _refresh()

state = loader.state

if export_col.button(
    "⬇️ Descargar Excel",
    help="Descargar Excel",
    disabled=not state.can_export,
    use_container_width=True,
):
    _export()

export_file = st.session_state.export_file
if export_file is not None:
    if export_file.is_fallback:
        st.caption("Excel no disponible en este entorno, se generó un CSV.")
    st.download_button(
        f"Guardar {export_file.filename}",
        export_file.data,
        file_name=export_file.filename,
        mime=export_file.mime,
    )

st.divider()


# ── Content ─────────────────────────────────────────────
panel = select_panel(state)

if panel is Panel.LOADING:
    st.info(LOADING_TEXT)
elif panel is Panel.ERROR:
    st.error(state.error)
elif panel is Panel.EMPTY:
    st.caption(EMPTY_TEXT)
else:
    banner = stale_error(state)
    if banner:
        st.warning(banner)
    for row in row_views(state):
        with st.container(border=True):
            icon_col, text_col = st.columns([1, 12])
            icon_col.markdown(f"### {row.icon}")
            secondary = f" _{row.secondary}_" if row.secondary else ""
            text_col.markdown(f"**{row.actor}** buscó {row.primary}{secondary}")
            text_col.caption(row.when)
