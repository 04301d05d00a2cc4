"""Client-side session storage.

A store holds string values under string keys. AdminAuth keeps exactly one
key in it (``SESSION_STORAGE_KEY``). Stores report availability up front so
code running where no client storage exists (server rendering, background
jobs) can bail out instead of failing.
"""
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from voyage_admin.config import Settings, settings


class SessionStore(Protocol):
    def is_available(self) -> bool: ...

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class NullSessionStore:
    """No storage at all; every read misses and writes are refused"""

    def is_available(self) -> bool:
        return False

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str) -> None:
        raise RuntimeError("Session storage is not available in this context")

    def remove(self, key: str) -> None:
        return None


class MemorySessionStore:
    """Process-local store; used for per-request sessions and in tests"""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def is_available(self) -> bool:
        return True

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileSessionStore:
    """Durable store: one JSON file per key inside a private directory.

    Writes go through a temporary file and ``os.replace`` so a reader never
    sees a half-written session.
    """

    def __init__(self, directory: Union[str, Path, None] = None):
        self.directory = Path(directory) if directory else Path.home() / ".voyage_admin"

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid session key: {key!r}")
        return self.directory / f"{key}.json"

    def is_available(self) -> bool:
        try:
            self.directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self.directory, os.W_OK)

    def get(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def get_session_store(config: Settings = settings) -> FileSessionStore:
    """Durable store for command-line clients, rooted at ``SESSION_STORE_DIR``."""
    return FileSessionStore(config.SESSION_STORE_DIR)
