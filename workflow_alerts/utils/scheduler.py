"""Periodic background tasks"""

import threading
from typing import Callable, Optional

from workflow_alerts.utils.logger import get_logger


class PeriodicTask:
    """Runs a callable on a daemon thread every ``interval`` seconds until stopped"""

    def __init__(self, name: str, interval: float, func: Callable[[], None],
                 run_immediately: bool = False):
        """
        Initialize periodic task

        Args:
            name: Thread name, also used in log messages
            interval: Seconds between runs
            func: Callable invoked on every run
            run_immediately: Run once right after start instead of waiting a full interval
        """
        if interval <= 0:
            raise ValueError(f"Invalid interval for {name}: {interval}. Must be > 0")

        self.name = name
        self.interval = interval
        self.func = func
        self.run_immediately = run_immediately
        self.logger = get_logger(self.__class__.__name__)

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread"""
        if self.running:
            self.logger.warning(f"Task {self.name} already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True, name=self.name)
        self._thread.start()
        self.logger.debug(f"Started task {self.name} (interval: {self.interval}s)")

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to exit and wait for the thread"""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                self.logger.warning(f"Task {self.name} did not stop within {timeout}s")
            self._thread = None
        self.logger.debug(f"Stopped task {self.name}")

    def _run_loop(self) -> None:
        if not self.run_immediately and self._stop_event.wait(self.interval):
            return

        while not self._stop_event.is_set():
            try:
                self.func()
            except Exception as e:
                self.logger.error(f"Error in task {self.name}: {e}", exc_info=True)

            if self._stop_event.wait(self.interval):
                break
