# userdata/storage.py

import json
import logging

from userdata.errors import StorageFailure

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "userData"


class SessionStore:
    """
    Adapter over a per-browsing-session key-value mapping
    (a Flask session in the app, a plain dict in tests).

    Holds exactly one serialized record under a fixed key.
    No TTL and no size checks: limits belong to the backing store.
    """

    def __init__(self, backend, key: str = DEFAULT_STORAGE_KEY):
        self.backend = backend
        self.key = key

    def read(self) -> str | None:
        try:
            return self.backend.get(self.key)
        except Exception as exc:
            raise StorageFailure(f"read of {self.key!r} failed: {exc}") from exc

    def write(self, serialized: str):
        try:
            self.backend[self.key] = serialized
        except Exception as exc:
            raise StorageFailure(f"write of {self.key!r} failed: {exc}") from exc

    def erase(self):
        try:
            self.backend.pop(self.key, None)
        except Exception as exc:
            raise StorageFailure(f"erase of {self.key!r} failed: {exc}") from exc

    # -------------------------------------------------
    # Record helpers
    # -------------------------------------------------

    def write_record(self, record):
        try:
            serialized = json.dumps(record.to_dict(), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageFailure(f"record is not serializable: {exc}") from exc
        self.write(serialized)
        logger.debug("Mirror %r updated", self.key)
