"""
History export -- XLSX first, CSV when no spreadsheet engine is installed.

Both strategies consume the same flat rows produced by ``rows_for_export``
so the column set and order is identical whichever file comes out.
"""
from __future__ import annotations

import datetime
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from reportes.core.logging import get_logger
from reportes.core.utils import timer, utc_now
from reportes.history.models import HistoryRecord
from reportes.history.timefmt import iso_utc, local_datetime

logger = get_logger(__name__)


COLUMNS = ["ID", "Usuario", "Texto", "Tipo", "Longitud", "Latitud", "FechaISO", "FechaLocal"]
SHEET_NAME = "Historial"
FILE_STEM = "historial"

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MIME = "text/csv; charset=utf-8"


class SpreadsheetUnavailable(Exception):
    """No XLSX engine can be loaded."""


class ExportError(Exception):
    """The export file could not be written."""


@dataclass(frozen=True)
class ExportFile:
    filename: str
    data: bytes
    mime: str

    @property
    def is_fallback(self) -> bool:
        return self.filename.endswith(".csv")


# ── Row projection ──────────────────────────────────────


def _number(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def rows_for_export(records: Sequence[HistoryRecord]) -> list[dict[str, Any]]:
    """Flatten records into rows keyed by ``COLUMNS`` (in order)."""
    return [
        {
            "ID": r.id,
            "Usuario": r.username,
            "Texto": r.texto_busqueda or "",
            "Tipo": r.tipo or "",
            "Longitud": _number(r.lng),
            "Latitud": _number(r.lat),
            "FechaISO": iso_utc(r.creado_en),
            "FechaLocal": local_datetime(r.creado_en),
        }
        for r in records
    ]


def export_filename(extension: str, today: datetime.date | None = None) -> str:
    today = today or utc_now().date()
    return f"{FILE_STEM}_{today.isoformat()}.{extension}"


# ── Serialisers ─────────────────────────────────────────


def _load_xlsx_engine() -> str:
    try:
        import xlsxwriter  # noqa: F401
    except ImportError as exc:
        raise SpreadsheetUnavailable(
            "The 'XlsxWriter' package is not installed.  "
            "Run: pip install XlsxWriter"
        ) from exc
    return "xlsxwriter"


def to_xlsx(rows: list[dict[str, Any]]) -> bytes:
    """Single-sheet workbook named ``Historial``."""
    engine = _load_xlsx_engine()
    df = pd.DataFrame(rows, columns=COLUMNS)
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine=engine) as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return buf.getvalue()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(value: Any) -> str:
    return '"' + _cell(value).replace('"', '""') + '"'


def to_csv(rows: list[dict[str, Any]]) -> str:
    """Header plus quoted rows, CRLF separated."""
    lines = [",".join(COLUMNS)]
    lines.extend(",".join(_quote(row.get(col)) for col in COLUMNS) for row in rows)
    return "\r\n".join(lines)


# ── Strategy dispatch ───────────────────────────────────


def export_history(
    records: Sequence[HistoryRecord],
    today: datetime.date | None = None,
    prefer_xlsx: bool = True,
) -> ExportFile | None:
    """Build the downloadable file, or ``None`` when there is nothing to export.

    Raises ``ExportError`` when the workbook cannot be produced for any
    reason other than a missing engine.
    """
    rows = rows_for_export(records)
    if not rows:
        logger.info("Export skipped -- no records")
        return None

    with timer() as t:
        export = None
        if prefer_xlsx:
            try:
                export = ExportFile(export_filename("xlsx", today), to_xlsx(rows), XLSX_MIME)
            except SpreadsheetUnavailable as exc:
                logger.warning("XLSX unavailable, exporting CSV instead: %s", exc)
            except Exception as exc:
                raise ExportError(f"Could not build the workbook: {exc}") from exc
        if export is None:
            export = ExportFile(export_filename("csv", today), to_csv(rows).encode("utf-8"), CSV_MIME)

    logger.info("Exported %d rows to %s (%d bytes, %d ms)",
                len(rows), export.filename, len(export.data), t["elapsed_ms"])
    return export


def save_export(export: ExportFile, directory: Path) -> Path:
    """Write *export* under *directory* and return the file path."""
    target = Path(directory) / export.filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(export.data)
    except OSError as exc:
        raise ExportError(f"Could not write {target}: {exc}") from exc
    logger.info("Export written to %s", target)
    return target
