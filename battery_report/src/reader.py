"""
Battery reader backed by psutil.

Wraps ``psutil.sensors_battery()`` and converts its result into a
``(timestamp, charge_pct)`` pair. psutil already reports a 0-100
percentage, which is the unit used everywhere in this package.

Failure modes:
- No battery present (psutil returns None): NoBatteryError.
- psutil raises, or reports no usable percentage: TransientReadError.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-004)

TODO:
- None
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

import psutil

from battery_report.src.errors import NoBatteryError, TransientReadError
from battery_report.src.models import Sample

logger = logging.getLogger(__name__)


class BatteryReader:
    """Reads the system's first battery through psutil.

    Safe to call repeatedly and from any thread; no state is kept between
    calls.
    """

    def read(self) -> tuple[datetime, float]:
        """Query the battery once.

        Returns:
            A ``(timestamp, charge_pct)`` tuple. The timestamp is local time
            with tzinfo attached.

        Raises:
            NoBatteryError: If the OS reports no battery.
            TransientReadError: If the query failed or returned garbage.
        """
        try:
            battery = psutil.sensors_battery()
        except Exception as exc:
            raise TransientReadError(f"Battery query failed: {exc}") from exc

        if battery is None:
            raise NoBatteryError("No battery detected")

        percent = getattr(battery, "percent", None)
        if percent is None or math.isnan(percent):
            raise TransientReadError("Battery reported no charge level")

        ts = datetime.now().astimezone()
        return ts, min(max(float(percent), 0.0), 100.0)

    def read_sample(self) -> Sample:
        """Query the battery once and wrap the result in a Sample."""
        ts, charge_pct = self.read()
        return Sample(ts=ts, charge_pct=charge_pct)

    def probe(self) -> Sample:
        """Startup check: the first reading, used to seed the store.

        Raises:
            NoBatteryError: If this machine has no battery.
            TransientReadError: If the first query failed.
        """
        sample = self.read_sample()
        logger.info("Battery detected, charge=%.1f%%", sample.charge_pct)
        return sample
