"""
Event triggers: the actions behind "show report", "quit" and termination.

A tray menu, a signal handler, or a test calls these methods; each one runs
the core's synchronous operations and handles its own errors so a failure
never escapes into the caller's event loop.

- show_report(): update, render, open in the OS viewer.
- quit(): show_report(), then request shutdown with exit code 0.
- terminate(): best-effort update, log the run summary, request shutdown.

Read failures during an event are logged and the report is rendered from
whatever the store already holds. Publish failures are logged at ERROR
level, which is the user-visible surface of this process.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-007)

TODO:
- None
"""

from __future__ import annotations

import logging
import threading
import webbrowser
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from battery_report.src.errors import (
    BatteryReadError,
    BatteryReportError,
    ReportPublishError,
)

if TYPE_CHECKING:
    from battery_report.src.report import ReportRenderer
    from battery_report.src.sampler import Sampler
    from battery_report.src.store import SampleStore

logger = logging.getLogger(__name__)


def open_in_viewer(path: Path, opener: Callable[[str], bool] = webbrowser.open) -> None:
    """Hand *path* to the OS viewer.

    Raises:
        ReportPublishError: If the opener fails or reports no viewer.
    """
    uri = path.resolve().as_uri()
    try:
        ok = opener(uri)
    except Exception as exc:
        raise ReportPublishError(f"Failed to open {uri}: {exc}") from exc
    if ok is False:
        raise ReportPublishError(f"No viewer available to open {uri}")


class EventTriggers:
    """Event-driven entry points into the sampler and renderer.

    Args:
        sampler: Sampler used for single-shot updates.
        store: The shared sample store.
        renderer: Report renderer publishing to the fixed report path.
        shutdown_event: Set when the process should exit.
        opener: Callable handing a URI to the OS viewer, or None to skip
            opening the report.
    """

    def __init__(
        self,
        *,
        sampler: Sampler,
        store: SampleStore,
        renderer: ReportRenderer,
        shutdown_event: threading.Event,
        opener: Callable[[str], bool] | None = webbrowser.open,
    ) -> None:
        self._sampler = sampler
        self._store = store
        self._renderer = renderer
        self._shutdown_event = shutdown_event
        self._opener = opener

    def _update(self) -> bool:
        try:
            self._sampler.update_now()
        except BatteryReadError as exc:
            logger.warning("Battery read failed, reporting existing samples: %s", exc)
            return False
        return True

    def show_report(self) -> Path | None:
        """Take a fresh sample, render the report and open it.

        Returns:
            Path of the written report, or None if rendering failed.
        """
        self._update()
        try:
            path = self._renderer.render(self._store)
        except BatteryReportError:
            logger.error("Failed to render battery report", exc_info=True)
            return None

        if self._opener is not None:
            try:
                open_in_viewer(path, self._opener)
            except ReportPublishError:
                logger.error("Failed to open battery report", exc_info=True)
        return path

    def quit(self) -> None:
        """Show the final report, then request shutdown."""
        logger.info("Quit requested")
        self.show_report()
        self._shutdown_event.set()

    def terminate(self) -> None:
        """Take one last best-effort sample and request shutdown."""
        logger.info("Received termination signal, taking final sample")
        self._update()
        try:
            summary = self._renderer.summarize(self._store.snapshot())
        except BatteryReportError:
            logger.warning("No samples to summarize at shutdown")
        else:
            logger.info(
                "Run summary: %s (%d samples)", summary.title, summary.sample_count
            )
        self._shutdown_event.set()

    def spawn(self, action: Callable[[], object]) -> threading.Thread:
        """Run *action* on its own daemon thread, fire-and-forget."""
        thread = threading.Thread(target=action, name="battery-event", daemon=True)
        thread.start()
        return thread
