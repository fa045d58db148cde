# app/engine/rest_timer.py
from __future__ import annotations
import logging
import threading
from typing import Optional

log = logging.getLogger(__name__)


class RestTimer:
    """
    Countdown between sets, owned by one workout engine.

    Only one ticker exists at a time: ``start`` stops the previous ticker before
    arming a new one, and a ticker that has been replaced exits without touching
    ``remaining``. With ``autostart=False`` no thread is spawned and the owner
    drives the countdown through ``tick()``.
    """

    def __init__(
        self,
        *,
        tick_seconds: float = 1.0,
        autostart: bool = True,
    ):
        self.tick_seconds = tick_seconds
        self.autostart = autostart
        self._lock = threading.RLock()
        self._remaining = 0
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._remaining > 0

    def start(self, seconds: int) -> None:
        with self._lock:
            self._release()
            self._remaining = max(int(seconds), 0)
            if self._remaining == 0 or not self.autostart:
                return
            stop = threading.Event()
            self._stop = stop
            self._thread = threading.Thread(
                target=self._run, args=(stop,), name="rest-timer", daemon=True
            )
            self._thread.start()
        log.debug("rest timer started for %ss", seconds)

    def tick(self) -> bool:
        """Count down one step. Returns False once the countdown is over."""
        with self._lock:
            if self._remaining <= 0:
                return False
            self._remaining -= 1
            if self._remaining == 0:
                self._release()
                return False
            return True

    def cancel(self) -> None:
        with self._lock:
            self._release()
            self._remaining = 0

    def _release(self) -> None:
        if self._stop is not None:
            self._stop.set()
            self._stop = None
            self._thread = None

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.tick_seconds):
            with self._lock:
                # replaced or cancelled while we were waiting
                if stop is not self._stop:
                    return
                if not self.tick():
                    return

    def __enter__(self) -> "RestTimer":
        return self

    def __exit__(self, *exc) -> None:
        self.cancel()
