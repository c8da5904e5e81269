"""
Periodic battery sampler.

Runs a background thread that reads the battery every ``interval_s`` seconds
and appends the reading to the shared SampleStore. Event handlers call
``update_now()`` directly for a synchronous single-shot reading; those calls
may race with the periodic thread, which the store lock makes safe.

Read failures never stop the loop: the next attempt is scheduled with
exponential backoff (base_backoff_s -> 2x -> 4x ...), capped at the regular
interval, and the backoff resets after any successful read.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-005)

TODO:
- None
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from battery_report.src.errors import (
    BatteryReadError,
    StoreAlreadyInitializedError,
    StoreNotInitializedError,
)
from battery_report.src.models import Sample

if TYPE_CHECKING:
    from battery_report.src.reader import BatteryReader
    from battery_report.src.store import SampleStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S: float = 300.0
"""Seconds between periodic samples."""

DEFAULT_BASE_BACKOFF_S: float = 5.0
"""Retry delay after the first consecutive read failure."""


class Sampler:
    """Feeds battery readings into a SampleStore.

    Args:
        reader: Battery reader queried on every update.
        store: Initialized store the readings are appended to.
        interval_s: Seconds between periodic samples.
        base_backoff_s: Retry delay after the first read failure.
    """

    def __init__(
        self,
        *,
        reader: BatteryReader,
        store: SampleStore,
        interval_s: float = DEFAULT_INTERVAL_S,
        base_backoff_s: float = DEFAULT_BASE_BACKOFF_S,
    ) -> None:
        self._reader = reader
        self._store = store
        self._interval_s = interval_s
        self._base_backoff_s = base_backoff_s
        self._consecutive_failures: int = 0

    @property
    def consecutive_failures(self) -> int:
        """Number of periodic reads that failed in a row."""
        return self._consecutive_failures

    def update_now(self) -> Sample:
        """Read the battery once and append the reading to the store.

        The store lock is only taken for the append, after the read has
        completed.

        Returns:
            The appended sample.

        Raises:
            BatteryReadError: If the battery query failed. Nothing is
                appended in that case.
        """
        ts, charge_pct = self._reader.read()
        sample = Sample(ts=ts, charge_pct=charge_pct)
        self._store.append(sample)
        logger.debug("Sampled charge=%.1f%% at %s", charge_pct, ts.isoformat())
        return sample

    def next_delay(self) -> float:
        """Seconds to wait before the next periodic attempt."""
        if self._consecutive_failures == 0:
            return self._interval_s
        return min(
            self._base_backoff_s * (2 ** (self._consecutive_failures - 1)),
            self._interval_s,
        )

    def tick(self) -> bool:
        """Run one periodic iteration, recording success or failure.

        Returns:
            True if a sample was appended.

        Raises:
            StoreNotInitializedError: If the store was never seeded. Store
                lifecycle errors are programming errors and are not retried.
        """
        try:
            self.update_now()
        except BatteryReadError as exc:
            self._consecutive_failures += 1
            logger.warning(
                "Battery read failed (consecutive failures: %d): %s",
                self._consecutive_failures,
                exc,
            )
            return False
        except (StoreAlreadyInitializedError, StoreNotInitializedError):
            raise
        except Exception:
            self._consecutive_failures += 1
            logger.error("Sampler iteration error", exc_info=True)
            return False
        self._consecutive_failures = 0
        return True

    def run(self, shutdown_event: threading.Event) -> None:
        """Sample periodically until shutdown_event is set.

        Sleeps first: the store is seeded at startup, so the first periodic
        sample is due one interval later.
        """
        logger.info("Sampler loop started (interval=%ss)", self._interval_s)
        while not shutdown_event.wait(timeout=self.next_delay()):
            self.tick()
        logger.info("Sampler loop stopped")

    def start(self, shutdown_event: threading.Event) -> threading.Thread:
        """Run the sampler loop on a daemon thread and return the thread."""
        thread = threading.Thread(
            target=self.run,
            args=(shutdown_event,),
            name="battery-sampler",
            daemon=True,
        )
        thread.start()
        return thread
