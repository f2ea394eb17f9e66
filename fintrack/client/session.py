"""
Durable Session Record

Remembers who is logged in between client runs. Only the username is
stored - never the password, never a token. Deleting the file is logging
out.
"""

import json
from pathlib import Path
from typing import Optional, Union

import structlog


logger = structlog.get_logger(__name__)


class SessionStore:
    """JSON file holding {"username": ...}."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[str]:
        """Return the remembered username, or None."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("session_unreadable", path=str(self._path), error=str(e))
            return None
        username = data.get("username") if isinstance(data, dict) else None
        return username or None

    def save(self, username: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"username": username}), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
