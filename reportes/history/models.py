"""
HistoryRecord -- one entry of the activity log returned by /api/registros.
"""
from __future__ import annotations

import datetime
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reportes.core.utils import as_utc


class HistoryRecord(BaseModel):
    """A past search or map selection performed by a user."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str = Field(..., description="Opaque identifier, unique within one fetch")
    username: str = Field(..., description="Actor who performed the action")
    texto_busqueda: str | None = Field(None, description="Free-text query, if any")
    tipo: str | None = Field(None, description="Category tag, e.g. 'unesco'")
    lat: float | None = Field(None, description="Latitude of the selection")
    lng: float | None = Field(None, description="Longitude of the selection")
    creado_en: datetime.datetime = Field(..., description="Creation instant (ISO-8601)")

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _lenient_coordinate(cls, value):
        if value is None or value == "":
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @field_validator("creado_en")
    @classmethod
    def _normalise_timestamp(cls, value: datetime.datetime) -> datetime.datetime:
        return as_utc(value)

    @property
    def query_text(self) -> str | None:
        return self.texto_busqueda or None

    @property
    def coordinates_label(self) -> str:
        lat = self.lat if self.lat is not None else 0.0
        lng = self.lng if self.lng is not None else 0.0
        return f"({lat:.4f}, {lng:.4f})"

    @property
    def primary_text(self) -> str:
        """Query text when present, otherwise the coordinates."""
        return self.query_text or self.coordinates_label

    def is_landmark(self, tag: str) -> bool:
        return self.tipo == tag
