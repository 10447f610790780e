"""Thread-safe registry of temporary audio files handed to the output backend."""
import logging
import os
import tempfile
import threading
import uuid
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class AudioHandle:
    """A temporary audio file. release() deletes it; only the first call has any effect."""

    def __init__(self, path: str, registry: "HandleRegistry", handle_id: Optional[str] = None):
        self.path = path
        self.id = handle_id or uuid.uuid4().hex
        self.cached = False
        self._registry = registry
        self._released = False
        self._lock = threading.Lock()

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        with self._lock:
            if self._released:
                return False
            self._released = True
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not delete audio file {self.path}: {e}")
        self._registry.unregister(self.id)
        return True

    def __repr__(self):
        return f"AudioHandle({self.id[:8]}, released={self._released})"


class HandleRegistry:
    def __init__(self, directory: Optional[str] = None):
        self.directory = directory
        self._lock = threading.Lock()
        self._handles: Dict[str, AudioHandle] = {}

    def create(self, data: bytes, suffix: str = ".mp3") -> AudioHandle:
        """Write audio bytes to a temp file and track it until released"""
        fd, path = tempfile.mkstemp(prefix="palace-audio-", suffix=suffix, dir=self.directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except Exception:
            os.remove(path)
            raise
        handle = AudioHandle(path, self)
        with self._lock:
            self._handles[handle.id] = handle
        logger.debug(f"Registered audio handle {handle.id} ({len(data)} bytes)")
        return handle

    def unregister(self, handle_id: str) -> None:
        with self._lock:
            self._handles.pop(handle_id, None)

    def live_count(self) -> int:
        with self._lock:
            return len(self._handles)

    def release_all(self) -> int:
        """Release every live handle. Returns how many were released."""
        with self._lock:
            handles = list(self._handles.values())
        released = sum(1 for handle in handles if handle.release())
        if released:
            logger.debug(f"Released {released} audio handle(s)")
        return released
