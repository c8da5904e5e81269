"""
Battery report daemon entrypoint.

Seeds the sample store with a first reading, starts the periodic sampler
thread, and waits for an event to end the process:

- SIGUSR1: "show report" (update, render, open). Runs on its own thread.
- SIGUSR2: "quit" (show report, then exit 0). Runs on its own thread.
- SIGINT / SIGTERM: one best-effort final sample, then exit 0.

A tray icon or any other front end drives the same EventTriggers methods.
Startup fails with exit code 1 when no battery is present or the report
template is unusable.

Structured JSON logging is used for all events.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-008)

TODO:
- None
"""

from __future__ import annotations

import json
import logging
import signal
import sys
import threading
import webbrowser
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from battery_report.src.errors import BatteryReadError, ReportTemplateError
from battery_report.src.reader import BatteryReader
from battery_report.src.report import ReportRenderer
from battery_report.src.sampler import Sampler
from battery_report.src.store import SampleStore
from battery_report.src.triggers import EventTriggers

if TYPE_CHECKING:
    from battery_report.src.config import ReportSettings

logger = logging.getLogger(__name__)

_WAIT_SLICE_S = 1.0
"""Main thread wakes this often so signal handlers get a chance to run."""


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on the root logger.

    Replaces any existing root handlers with a single stderr handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def log_config_summary(settings: ReportSettings) -> None:
    """Log the effective configuration at startup."""
    logger.info(
        "Battery report starting with config: "
        "sample_interval_s=%s, base_backoff_s=%s, report_path=%s, "
        "template_path=%s, chart_asset_path=%s, decimal_places=%s, "
        "time_format=%s, open_report=%s, log_level=%s",
        settings.sample_interval_s,
        settings.base_backoff_s,
        settings.report_path,
        settings.template_path or "<bundled>",
        settings.chart_asset_path or "<bundled>",
        settings.decimal_places,
        settings.time_format,
        settings.open_report,
        settings.log_level,
    )


# ---------------------------------------------------------------------------
# Signal wiring
# ---------------------------------------------------------------------------


def install_signal_handlers(triggers: EventTriggers) -> None:
    """Bind OS signals to the event triggers.

    Must be called from the main thread. SIGUSR1/SIGUSR2 are only bound
    where the platform defines them.
    """

    def _on_terminate(signum: int, frame: object) -> None:
        triggers.terminate()

    signal.signal(signal.SIGINT, _on_terminate)
    signal.signal(signal.SIGTERM, _on_terminate)

    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, lambda signum, frame: triggers.spawn(triggers.show_report))
    if hasattr(signal, "SIGUSR2"):
        signal.signal(signal.SIGUSR2, lambda signum, frame: triggers.spawn(triggers.quit))


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def run(
    settings: ReportSettings,
    *,
    reader: BatteryReader | None = None,
    opener: Callable[[str], bool] = webbrowser.open,
    shutdown_event: threading.Event | None = None,
) -> int:
    """Build the components, sample until shutdown, and return an exit code.

    Args:
        settings: Loaded configuration.
        reader: Battery reader; defaults to the psutil-backed reader.
        opener: Callable handing the report URI to the OS viewer.
        shutdown_event: Event that ends the run when set; created if None.

    Returns:
        0 on a normal shutdown, 1 if startup failed.
    """
    log_config_summary(settings)

    try:
        renderer = ReportRenderer.from_settings(settings)
    except (ReportTemplateError, OSError):
        logger.critical("Unusable report template or chart asset", exc_info=True)
        return 1

    reader = reader or BatteryReader()
    try:
        seed = reader.probe()
    except BatteryReadError:
        logger.critical("Cannot read battery at startup", exc_info=True)
        return 1

    store = SampleStore()
    store.initialize(seed)

    if shutdown_event is None:
        shutdown_event = threading.Event()

    sampler = Sampler(
        reader=reader,
        store=store,
        interval_s=settings.sample_interval_s,
        base_backoff_s=settings.base_backoff_s,
    )
    triggers = EventTriggers(
        sampler=sampler,
        store=store,
        renderer=renderer,
        shutdown_event=shutdown_event,
        opener=opener if settings.open_report else None,
    )

    install_signal_handlers(triggers)
    sampler.start(shutdown_event)

    while not shutdown_event.wait(timeout=_WAIT_SLICE_S):
        pass

    logger.info("Shutdown complete (%d samples collected)", len(store))
    return 0


def main() -> None:
    """Synchronous entrypoint for the battery report daemon."""
    configure_logging()

    from battery_report.src.config import ReportSettings

    settings = ReportSettings()
    logging.getLogger().setLevel(settings.log_level)
    sys.exit(run(settings))


if __name__ == "__main__":
    main()
