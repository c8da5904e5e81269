"""
Shared test fixtures for battery report tests.

Cleans every BATTERY_REPORT_* environment variable and moves into tmp_path
before each test so settings never leak in from the host or a .env file.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from battery_report.src.models import Sample

T0 = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)
"""Fixed reference time for sample timestamps."""


def make_sample(minutes: float = 0.0, charge_pct: float = 80.0) -> Sample:
    """Create a Sample *minutes* after T0."""
    return Sample(ts=T0 + timedelta(minutes=minutes), charge_pct=charge_pct)


@pytest.fixture(autouse=True)
def _clean_report_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Remove BATTERY_REPORT_* env vars and isolate from .env files."""
    for var in list(os.environ):
        if var.startswith("BATTERY_REPORT_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def fake_reader() -> MagicMock:
    """A BatteryReader stand-in returning 75% at T0 + 5 minutes."""
    reader = MagicMock()
    reader.read.return_value = (T0 + timedelta(minutes=5), 75.0)
    reader.probe.return_value = make_sample(0, 80.0)
    return reader
