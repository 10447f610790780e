import logging
import threading
from typing import Optional

import requests

from palace.config import settings

logger = logging.getLogger(__name__)

ONLINE = "online"
OFFLINE = "offline"
SLOW = "slow"


class NetworkMonitor:
    """Tracks connectivity as online, offline or slow.

    ``slow`` is set by the narrator when a remote call times out; a later
    successful probe or remote call sets it back to ``online``.
    """

    def __init__(self, probe_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: float = 3.0, initial_status: str = ONLINE):
        self.probe_url = probe_url or settings.network_probe_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self._lock = threading.Lock()
        self._status = initial_status

    @property
    def status(self) -> str:
        with self._lock:
            return self._status

    @property
    def is_offline(self) -> bool:
        return self.status == OFFLINE

    def set_status(self, status: str) -> None:
        if status not in (ONLINE, OFFLINE, SLOW):
            raise ValueError(f"Unknown network status: {status}")
        with self._lock:
            previous, self._status = self._status, status
        if previous != status:
            logger.info(f"Network status {previous} -> {status}")

    def mark_slow(self) -> None:
        self.set_status(SLOW)

    def mark_online(self) -> None:
        self.set_status(ONLINE)

    def check(self) -> str:
        """Probe connectivity and update the status"""
        try:
            response = self.session.head(self.probe_url, timeout=self.timeout, allow_redirects=True)
            status = ONLINE if response.status_code < 500 else OFFLINE
        except requests.Timeout:
            status = SLOW
        except requests.RequestException as e:
            logger.debug(f"Network probe failed: {e}")
            status = OFFLINE
        self.set_status(status)
        return status
