"""
Tests for the event triggers behind "show report", "quit" and termination.

Tests verify:
- show_report() samples, renders and opens the report.
- A failed read still renders the existing samples.
- Publish and open failures are logged, never raised.
- quit() and terminate() request shutdown.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-007)

TODO:
- None
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from battery_report.src.errors import ReportPublishError, TransientReadError
from battery_report.src.report import ReportRenderer
from battery_report.src.sampler import Sampler
from battery_report.src.store import SampleStore
from battery_report.src.triggers import EventTriggers, open_in_viewer
from conftest import make_sample

_TEMPLATE = "{chart_asset}|{x}|{y}|{title}"


def _make_triggers(
    tmp_path: Path,
    reader: MagicMock,
    opener: MagicMock | None = None,
    output_path: Path | None = None,
) -> tuple[EventTriggers, SampleStore, threading.Event]:
    store = SampleStore()
    store.initialize(make_sample(0, 80.0))
    renderer = ReportRenderer(
        template=_TEMPLATE,
        chart_asset="",
        output_path=output_path or tmp_path / "report.html",
    )
    shutdown = threading.Event()
    triggers = EventTriggers(
        sampler=Sampler(reader=reader, store=store),
        store=store,
        renderer=renderer,
        shutdown_event=shutdown,
        opener=opener,
    )
    return triggers, store, shutdown


# ---------------------------------------------------------------------------
# open_in_viewer
# ---------------------------------------------------------------------------


class TestOpenInViewer:
    """The OS open action is wrapped in ReportPublishError."""

    def test_passes_file_uri(self, tmp_path: Path) -> None:
        opener = MagicMock(return_value=True)
        path = tmp_path / "report.html"

        open_in_viewer(path, opener)

        opener.assert_called_once_with(path.resolve().as_uri())

    def test_false_return_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ReportPublishError, match="No viewer"):
            open_in_viewer(tmp_path / "r.html", MagicMock(return_value=False))

    def test_exception_wrapped(self, tmp_path: Path) -> None:
        opener = MagicMock(side_effect=OSError("no display"))

        with pytest.raises(ReportPublishError, match="no display"):
            open_in_viewer(tmp_path / "r.html", opener)


# ---------------------------------------------------------------------------
# show_report
# ---------------------------------------------------------------------------


class TestShowReport:
    """The "show report" action: update, render, open."""

    def test_updates_renders_and_opens(
        self, tmp_path: Path, fake_reader: MagicMock
    ) -> None:
        opener = MagicMock(return_value=True)
        triggers, store, shutdown = _make_triggers(tmp_path, fake_reader, opener)

        path = triggers.show_report()

        assert path == tmp_path / "report.html"
        assert len(store) == 2
        assert path.read_text(encoding="utf-8").endswith("|-5% in 0h 5m")
        opener.assert_called_once()
        assert not shutdown.is_set()

    def test_read_failure_renders_existing_samples(
        self,
        tmp_path: Path,
        fake_reader: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        fake_reader.read.side_effect = TransientReadError("glitch")
        triggers, store, _ = _make_triggers(tmp_path, fake_reader)

        with caplog.at_level(logging.WARNING):
            path = triggers.show_report()

        assert path is not None
        assert len(store) == 1
        assert path.read_text(encoding="utf-8").endswith("|0% in 0h 0m")
        assert "Battery read failed" in caplog.text

    def test_publish_failure_logged(
        self,
        tmp_path: Path,
        fake_reader: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        opener = MagicMock(return_value=True)
        triggers, _, _ = _make_triggers(
            tmp_path, fake_reader, opener, output_path=blocker / "report.html"
        )

        with caplog.at_level(logging.ERROR):
            path = triggers.show_report()

        assert path is None
        opener.assert_not_called()
        assert "Failed to render battery report" in caplog.text

    def test_open_failure_logged(
        self,
        tmp_path: Path,
        fake_reader: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        opener = MagicMock(return_value=False)
        triggers, _, _ = _make_triggers(tmp_path, fake_reader, opener)

        with caplog.at_level(logging.ERROR):
            path = triggers.show_report()

        assert path is not None and path.exists()
        assert "Failed to open battery report" in caplog.text

    def test_no_opener_skips_open(
        self, tmp_path: Path, fake_reader: MagicMock
    ) -> None:
        triggers, _, _ = _make_triggers(tmp_path, fake_reader, opener=None)

        assert triggers.show_report() is not None


# ---------------------------------------------------------------------------
# quit / terminate
# ---------------------------------------------------------------------------


class TestQuit:
    """The "quit" action: show the report, then request shutdown."""

    def test_quit_renders_then_sets_shutdown(
        self, tmp_path: Path, fake_reader: MagicMock
    ) -> None:
        opener = MagicMock(return_value=True)
        triggers, store, shutdown = _make_triggers(tmp_path, fake_reader, opener)

        triggers.quit()

        assert shutdown.is_set()
        assert len(store) == 2
        assert (tmp_path / "report.html").exists()
        opener.assert_called_once()


class TestTerminate:
    """Termination takes a final sample and requests shutdown."""

    def test_final_sample_and_summary(
        self,
        tmp_path: Path,
        fake_reader: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        triggers, store, shutdown = _make_triggers(tmp_path, fake_reader)

        with caplog.at_level(logging.INFO):
            triggers.terminate()

        assert shutdown.is_set()
        assert len(store) == 2
        assert "Run summary: -5% in 0h 5m (2 samples)" in caplog.text
        assert not (tmp_path / "report.html").exists()

    def test_shutdown_even_if_read_fails(
        self, tmp_path: Path, fake_reader: MagicMock
    ) -> None:
        fake_reader.read.side_effect = TransientReadError("glitch")
        triggers, store, shutdown = _make_triggers(tmp_path, fake_reader)

        triggers.terminate()

        assert shutdown.is_set()
        assert len(store) == 1


class TestSpawn:
    """Event actions run fire-and-forget on their own thread."""

    def test_spawn_runs_action(self, tmp_path: Path, fake_reader: MagicMock) -> None:
        triggers, _, _ = _make_triggers(tmp_path, fake_reader)
        ran = threading.Event()

        thread = triggers.spawn(ran.set)
        thread.join(timeout=5)

        assert ran.is_set()
        assert thread.daemon
