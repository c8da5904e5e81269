"""
Exception hierarchy for the battery report daemon.

All domain errors derive from BatteryReportError so callers at loop and
trigger boundaries can tell expected failures apart from programming errors.
The store lifecycle errors subclass RuntimeError instead: they signal misuse
and are never caught.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations


class BatteryReportError(Exception):
    """Base class for expected runtime failures."""


class BatteryReadError(BatteryReportError):
    """The battery could not be queried."""


class NoBatteryError(BatteryReadError):
    """The OS reports no battery at all."""


class TransientReadError(BatteryReadError):
    """A single battery query failed; a later attempt may succeed."""


class EmptyStoreError(BatteryReportError):
    """A report was requested from a store holding no samples."""


class ReportPublishError(BatteryReportError):
    """The report file could not be written or handed to the OS."""


class ReportTemplateError(BatteryReportError):
    """The report template is missing one or more placeholders."""


class StoreAlreadyInitializedError(RuntimeError):
    """SampleStore.initialize() was called more than once."""


class StoreNotInitializedError(RuntimeError):
    """SampleStore was written to before initialize()."""
