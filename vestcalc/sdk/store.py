"""Best-effort persistence of the session state.

State is written to two redundant JSON files on every change:

- session file (cache dir): short-lived copy that expires after a year
- durable file (data dir): long-lived backup

At startup the session file is read first and the durable file is the
fallback. Storage failures (unwritable dirs, full disks, corrupt JSON) are
logged and swallowed; the in-memory state stays authoritative.
"""

import json
import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .config import get_cache_path, get_data_path

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

STATE_KEY = "vest-calc-state-v3"
SESSION_MAX_AGE_DAYS = 365

STORAGE_ERRORS = (OSError, ValueError, TypeError)


class SessionFileStore:
    """Expiring copy of the payload in the cache directory."""

    name = "session"

    def __init__(
        self,
        directory: Optional[Path] = None,
        key: str = STATE_KEY,
        max_age: timedelta = timedelta(days=SESSION_MAX_AGE_DAYS),
    ):
        self.directory = directory
        self.key = key
        self.max_age = max_age

    @property
    def path(self) -> Path:
        return (self.directory or get_cache_path()) / f"{self.key}.session.json"

    def read(self) -> Optional[Dict[str, Any]]:
        """Return the stored payload, or None if absent or expired."""
        path = self.path
        if not path.exists():
            return None

        with open(path) as f:
            entry = json.load(f)

        if not isinstance(entry, dict):
            raise ValueError(f"{path.name}: expected an object")

        if not isinstance(entry.get("expires"), str):
            logger.debug(f"{path.name} has no expiry; ignoring it")
            return None

        expires = datetime.fromisoformat(entry["expires"])
        if expires <= datetime.now(timezone.utc):
            logger.debug(f"Session state expired at {expires.isoformat()}")
            return None

        return entry.get("payload")

    def write(self, payload: Dict[str, Any]) -> None:
        expires = datetime.now(timezone.utc) + self.max_age
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump({"expires": expires.isoformat(), "payload": payload}, f, indent=2)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class DurableFileStore:
    """Long-lived copy of the payload in the data directory."""

    name = "durable"

    def __init__(self, directory: Optional[Path] = None, key: str = STATE_KEY):
        self.directory = directory
        self.key = key

    @property
    def path(self) -> Path:
        return (self.directory or get_data_path()) / f"{self.key}.json"

    def read(self) -> Optional[Dict[str, Any]]:
        path = self.path
        if not path.exists():
            return None
        with open(path) as f:
            return json.load(f)

    def write(self, payload: Dict[str, Any]) -> None:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class StateStore:
    """Reads and writes the payload across redundant stores, never raising."""

    def __init__(self, stores: Optional[Iterable[Any]] = None):
        """
        Args:
            stores: Stores in read-priority order (session file, then durable
                file, by default)
        """
        self.stores = list(stores) if stores is not None else [SessionFileStore(), DurableFileStore()]

    def load(self) -> Optional[Any]:
        """Return the first payload found, in priority order."""
        for store in self.stores:
            try:
                payload = store.read()
            except STORAGE_ERRORS as e:
                logger.warning(f"Could not read {store.name} state: {e}")
                continue
            if payload is not None:
                logger.debug(f"Loaded state from {store.name} store")
                return payload
        return None

    def save(self, payload: Dict[str, Any]) -> bool:
        """Write the payload to every store.

        Returns:
            True if at least one store accepted it
        """
        saved = False
        for store in self.stores:
            try:
                store.write(payload)
                saved = True
            except STORAGE_ERRORS as e:
                logger.warning(f"Could not save {store.name} state: {e}")
        return saved

    def clear(self) -> None:
        for store in self.stores:
            try:
                store.clear()
            except OSError as e:
                logger.warning(f"Could not clear {store.name} state: {e}")
