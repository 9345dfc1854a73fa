"""
Read-only access to the locally persisted bearer token.

The token lives in a small JSON key-value file (the desktop counterpart of
browser local storage).  This module never writes to it and performs no
expiry checks -- the server is the authority on token validity.
"""
from __future__ import annotations

import json
from pathlib import Path

from reportes.core.config import get_settings
from reportes.core.logging import get_logger

logger = get_logger(__name__)


class TokenStore:
    """Key-value view over the local storage file."""

    def __init__(self, path: Path | None = None, key: str | None = None):
        settings = get_settings()
        self._path = Path(path) if path is not None else settings.storage_path
        self._key = key or settings.token_key

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        """Return the stored token, or ``None`` when nothing usable is stored."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No local storage file at %s", self._path)
            return None
        except OSError:
            logger.warning("Local storage file %s is not readable", self._path, exc_info=True)
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Local storage file %s is not valid JSON", self._path)
            return None

        if not isinstance(data, dict):
            return None
        token = data.get(self._key)
        if not isinstance(token, str) or not token:
            return None
        return token


def read_token() -> str | None:
    """Read the token from the configured storage location."""
    return TokenStore().read()
