"""
Pydantic models for battery samples and derived report summaries.

Charge is always a percentage in the range 0-100. The reader converts
whatever the OS reports into that unit before a Sample is built, and the
renderer formats it back out unchanged.

CHANGELOG:
- 2026-10-18: Add ReportSummary (STORY-006)
- 2026-10-18: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Sample(BaseModel):
    """A single battery charge reading.

    Attributes:
        ts: Time the reading was taken (injected by the caller).
        charge_pct: State of charge as a percentage (0-100).
    """

    model_config = ConfigDict(frozen=True)

    ts: datetime
    charge_pct: float = Field(ge=0.0, le=100.0)


class ReportSummary(BaseModel):
    """Aggregates computed from a full sample snapshot.

    Attributes:
        first_ts: Timestamp of the oldest sample.
        last_ts: Timestamp of the newest sample.
        sample_count: Number of samples in the snapshot.
        elapsed_hours: Whole hours between first and last sample.
        elapsed_minutes: Remaining minutes after whole hours (0-59).
        charge_delta_pct: Last charge minus first charge. Negative when
            the battery discharged.
        title: Chart title, e.g. ``"-20% in 2h 30m"``.
    """

    model_config = ConfigDict(frozen=True)

    first_ts: datetime
    last_ts: datetime
    sample_count: int
    elapsed_hours: int
    elapsed_minutes: int = Field(ge=0, le=59)
    charge_delta_pct: float
    title: str
