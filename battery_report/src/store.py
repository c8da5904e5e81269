"""
In-memory, append-only sample store shared by every thread of the daemon.

The store holds the battery samples taken during one run. Nothing is ever
removed or rewritten and nothing survives a restart. A single exclusive lock
guards the underlying list; it is held only for the duration of an append or
a copy, never across a battery query.

Operations:
- initialize(seed): install the first sample. Allowed exactly once.
- append(sample): add a sample to the end.
- snapshot(): copy of all samples, consistent with every completed append.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-003)

TODO:
- None
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from battery_report.src.errors import (
    StoreAlreadyInitializedError,
    StoreNotInitializedError,
)

if TYPE_CHECKING:
    from battery_report.src.models import Sample

logger = logging.getLogger(__name__)


class SampleStore:
    """Thread-safe, append-only ordered sequence of samples.

    Samples are kept in insertion order. The store does not sort or validate
    timestamps; callers append readings as they take them.

    Usage::

        store = SampleStore()
        store.initialize(seed)
        store.append(sample)
        samples = store.snapshot()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._samples: list[Sample] = []
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """True once initialize() has been called."""
        with self._lock:
            return self._initialized

    def initialize(self, seed: Sample) -> None:
        """Seed the store with its first sample.

        Args:
            seed: The reading taken at startup.

        Raises:
            StoreAlreadyInitializedError: If the store was already seeded.
        """
        with self._lock:
            if self._initialized:
                raise StoreAlreadyInitializedError("SampleStore.initialize() called twice")
            self._samples.append(seed)
            self._initialized = True
        logger.debug("Sample store seeded at %s", seed.ts.isoformat())

    def append(self, sample: Sample) -> None:
        """Add a sample to the end of the sequence.

        Raises:
            StoreNotInitializedError: If initialize() has not been called.
        """
        with self._lock:
            if not self._initialized:
                raise StoreNotInitializedError("SampleStore.append() before initialize()")
            self._samples.append(sample)

    def snapshot(self) -> list[Sample]:
        """Return a copy of every sample appended so far.

        Returns an empty list if the store was never initialized.
        """
        with self._lock:
            return list(self._samples)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
