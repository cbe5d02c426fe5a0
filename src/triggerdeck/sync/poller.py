"""Periodic catalog fetch.

The poll channel is the correctness floor: it keeps fetching on a fixed
interval whether or not the push channel is up, and a failed fetch only
skips that tick.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Optional

from triggerdeck.exceptions import TriggerDeckError

logger = logging.getLogger(__name__)


class CatalogPoller:
    """
    Background poller that fetches one payload per tick.

    The first fetch happens immediately on start. Ticks start on a fixed
    grid of ``interval`` seconds measured with a monotonic clock, so the
    fetch time does not stretch the period. Ticks run sequentially on one
    thread: a request that outlasts the interval skips the ticks it
    overlapped instead of running concurrently with them.
    """

    def __init__(
        self,
        fetch: Callable[[], Any],
        on_payload: Callable[[Any], None],
        interval: float = 2.0,
    ):
        """
        Initialize poller.

        Args:
            fetch: Returns one raw payload; may raise
            on_payload: Receives every successfully fetched payload
            interval: Seconds between ticks
        """
        self._fetch = fetch
        self._on_payload = on_payload
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._failures = 0

    def start(self) -> None:
        """Start polling in a daemon thread."""
        if self.is_running:
            logger.warning("CatalogPoller is already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="catalog-poller", daemon=True)
        self._thread.start()
        logger.debug(f"CatalogPoller started (interval={self._interval}s)")

    def stop(self) -> None:
        """Stop polling. An in-flight fetch is not cancelled; its result is discarded."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=self._interval + 1.0)
        self._thread = None
        logger.debug("CatalogPoller stopped")

    def poll_once(self) -> bool:
        """
        Run a single tick.

        Returns:
            True if a payload was fetched and handed over
        """
        try:
            payload = self._fetch()
        except TriggerDeckError as e:
            self._log_failure(e.technical_message)
            return False
        except Exception as e:
            self._log_failure(f"{type(e).__name__}: {e}")
            return False

        if self._stop_event.is_set():
            return False

        if self._failures:
            logger.info(f"Catalog fetch recovered after {self._failures} failure(s)")
            self._failures = 0

        self._on_payload(payload)
        return True

    def _log_failure(self, detail: str) -> None:
        self._failures += 1
        # Log the first failure loudly, then only every 30th to keep the log readable
        if self._failures == 1 or self._failures % 30 == 0:
            logger.error(f"Could not fetch events ({self._failures} consecutive): {detail}")
        else:
            logger.debug(f"Could not fetch events: {detail}")

    def _next_delay(self, deadline: float, now: float) -> tuple[float, float]:
        """Advance ``deadline`` past ``now`` by whole intervals; return it and the wait."""
        deadline += self._interval
        if deadline <= now:
            skipped = int((now - deadline) // self._interval) + 1
            logger.debug(f"Catalog fetch overran, skipping {skipped} tick(s)")
            deadline += skipped * self._interval
        return deadline, deadline - now

    def _run(self) -> None:
        logger.debug("Starting catalog polling")
        deadline = time.monotonic()
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception as e:
                logger.error(f"Error in catalog poll handler: {e}", exc_info=True)
            deadline, delay = self._next_delay(deadline, time.monotonic())
            self._stop_event.wait(delay)

    @property
    def is_running(self) -> bool:
        """Check if the polling thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self._interval
