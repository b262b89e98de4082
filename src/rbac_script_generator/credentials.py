from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "gemini-api-key"

Listener = Callable[["str | None"], None]


class CredentialStore(Protocol):
    """Single slot holding the user's API key (or nothing)."""

    def get(self) -> str | None: ...

    def set(self, value: str | None) -> None: ...

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


def _normalise(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


class MemoryCredentialStore:
    """In-process store. Used by tests and whenever durable storage is unusable."""

    def __init__(self, value: str | None = None) -> None:
        self._value = _normalise(value)
        self._listeners: list[Listener] = []

    def get(self) -> str | None:
        return self._value

    def set(self, value: str | None) -> None:
        self._update(_normalise(value))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, value: str | None) -> None:
        if value == self._value:
            return
        self._value = value
        for listener in list(self._listeners):
            listener(value)


class FileCredentialStore(MemoryCredentialStore):
    """
    Durable store backed by a small JSON key/value file.

    The file plays the role of browser local storage: several sessions (tabs)
    or processes may point at the same file and each keeps its own in-memory
    copy of the slot. A session notices writes made elsewhere the next time it
    reads (or calls refresh()), adopts the new value and notifies listeners.
    Last write wins.

    Storage problems (missing permissions, full disk, corrupt file) are logged
    and the store carries on with its in-memory value.
    """

    def __init__(self, path: str | Path, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.path = Path(path).expanduser()
        self.key = key
        self._lock = threading.Lock()
        self._stamp: tuple[int, int, int] | None = None
        super().__init__(self._read_slot())

    # -----------------------------
    # Public API
    # -----------------------------
    def get(self) -> str | None:
        self.refresh()
        return self._value

    def set(self, value: str | None) -> None:
        value = _normalise(value)
        with self._lock:
            self._write_slot(value)
        self._update(value)

    def refresh(self) -> None:
        """Pick up a value written to the file by another session."""
        stamp = self._file_stamp()
        if stamp == self._stamp:
            return
        value = self._read_slot()
        if value != self._value:
            logger.info("Credential changed in %s by another session", self.path)
        self._update(value)

    # -----------------------------
    # File access
    # -----------------------------
    def _file_stamp(self) -> tuple[int, int, int] | None:
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("Could not stat credential storage %s: %s", self.path, e)
            return self._stamp
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError("storage file does not contain a JSON object")
        return data

    def _read_slot(self) -> str | None:
        self._stamp = self._file_stamp()
        try:
            data = self._load()
        except (OSError, ValueError) as e:
            logger.error("Could not read credential storage %s: %s", self.path, e)
            # keep whatever we already have in memory
            return getattr(self, "_value", None)
        value = data.get(self.key)
        return _normalise(value) if isinstance(value, str) else None

    def _write_slot(self, value: str | None) -> None:
        try:
            try:
                data = self._load()
            except ValueError:
                logger.warning("Discarding unreadable credential storage %s", self.path)
                data = {}

            if value is None:
                data.pop(self.key, None)
            else:
                data[self.key] = value

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh)
                os.chmod(tmp_path, 0o600)
                os.replace(tmp_path, self.path)
            except BaseException:
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
                raise
        except OSError as e:
            logger.error("Could not write credential storage %s: %s", self.path, e)
            return
        self._stamp = self._file_stamp()
