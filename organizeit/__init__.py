from __future__ import annotations

__version__ = "0.1.0"

import threading
from types import TracebackType


class OrganizeIT:
    """Embeddable OrganizeIT server -- runs the API in a background thread."""

    def __init__(self, host: str = "127.0.0.1", port: int = 8080) -> None:
        self._host = host
        self._port = port
        self._server_thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the API server in a background thread."""
        import uvicorn
        from organizeit.api import app

        with self._lock:
            if self._running:
                return
            self._running = True
            self._server_thread = threading.Thread(
                target=uvicorn.run,
                kwargs={"app": app, "host": self._host, "port": self._port, "log_level": "warning"},
                daemon=True,
            )
            self._server_thread.start()

    def stop(self) -> None:
        """Mark the server as stopped. The daemon thread exits with the process."""
        with self._lock:
            self._running = False
            self._server_thread = None

    def __enter__(self) -> OrganizeIT:
        self.start()
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None) -> bool:
        self.stop()
        return False
