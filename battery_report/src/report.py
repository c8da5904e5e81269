"""
Report renderer: sample snapshot -> self-contained HTML document -> file.

Pure transform apart from the final publish step. Every render regenerates
the whole document from a fresh store snapshot; nothing is updated
incrementally.

Template contract: the template must contain each of ``{chart_asset}``,
``{x}``, ``{y}`` and ``{title}``. Substitution is a single regex pass, so a
token that happens to appear inside substituted data (the chart script, for
instance) is left alone.

- ``{chart_asset}``: chart script text, inlined verbatim.
- ``{x}``: comma-joined JSON strings, one tick label per sample, with
  ``<`` escaped so the series is safe inside a ``<script>`` block.
- ``{y}``: comma-joined JSON strings such as ``"80%"``, one per sample.
- ``{title}``: HTML-escaped ``"<delta>% in <H>h <M>m"``.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-006)

TODO:
- None
"""

from __future__ import annotations

import contextlib
import html
import json
import logging
import os
import re
import tempfile
from datetime import timedelta
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from battery_report.src.errors import (
    EmptyStoreError,
    ReportPublishError,
    ReportTemplateError,
)
from battery_report.src.models import ReportSummary

if TYPE_CHECKING:
    from battery_report.src.config import ReportSettings
    from battery_report.src.models import Sample
    from battery_report.src.store import SampleStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PLACEHOLDERS: tuple[str, ...] = ("chart_asset", "x", "y", "title")
"""Tokens every template must contain, without braces."""

_PLACEHOLDER_RE = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")

DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M"

_ASSET_PACKAGE = "battery_report.src"
_TEMPLATE_NAME = "assets/report.html"
_CHART_ASSET_NAME = "assets/plot.js"


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def elapsed_parts(elapsed: timedelta) -> tuple[int, int]:
    """Split a duration into whole hours and remaining minutes (0-59).

    Negative durations are clamped to zero.
    """
    total_minutes = int(elapsed.total_seconds() // 60)
    if total_minutes < 0:
        logger.warning("Negative elapsed time %s clamped to zero", elapsed)
        total_minutes = 0
    hours, minutes = divmod(total_minutes, 60)
    return hours, minutes


def format_elapsed(elapsed: timedelta) -> str:
    """Render a duration as ``"<H>h <M>m"``, e.g. 125 minutes -> ``"2h 5m"``."""
    hours, minutes = elapsed_parts(elapsed)
    return f"{hours}h {minutes}m"


def format_charge(value: float, decimal_places: int = 1) -> str:
    """Round a percentage and drop trailing zeros: -20.0 -> ``"-20"``."""
    rounded = round(value, decimal_places)
    if rounded == 0:
        # avoid "-0"
        rounded = 0.0
    text = f"{rounded:.{decimal_places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def script_series(labels: list[str]) -> str:
    """Comma-joined JSON strings, safe to inline in a ``<script>`` block.

    ``<`` is written as ``\\u003c`` so a label can never close the script tag.
    """
    return ",".join(json.dumps(label) for label in labels).replace("<", "\\u003c")


def _read_asset(path: str | Path | None, name: str) -> str:
    if path is not None:
        return Path(path).read_text(encoding="utf-8")
    return resources.files(_ASSET_PACKAGE).joinpath(name).read_text(encoding="utf-8")


def load_template(path: str | Path | None = None) -> str:
    """Return the HTML template at *path*, or the bundled one when None."""
    return _read_asset(path, _TEMPLATE_NAME)


def load_chart_asset(path: str | Path | None = None) -> str:
    """Return the chart script at *path*, or the bundled one when None."""
    return _read_asset(path, _CHART_ASSET_NAME)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class ReportRenderer:
    """Renders sample snapshots into an HTML report at a fixed path.

    Args:
        template: HTML template text containing every placeholder.
        chart_asset: Chart script inlined into the document.
        output_path: File the report is written to on publish.
        decimal_places: Precision for charge labels and the title delta.
        time_format: strftime format for x-axis tick labels.

    Raises:
        ReportTemplateError: If the template lacks any placeholder.
    """

    def __init__(
        self,
        *,
        template: str,
        chart_asset: str,
        output_path: str | Path,
        decimal_places: int = 1,
        time_format: str = DEFAULT_TIME_FORMAT,
    ) -> None:
        missing = [p for p in PLACEHOLDERS if "{" + p + "}" not in template]
        if missing:
            raise ReportTemplateError(
                "Report template is missing placeholders: "
                + ", ".join("{" + p + "}" for p in missing)
            )
        self._template = template
        self._chart_asset = chart_asset
        self.output_path = Path(output_path)
        self._decimal_places = decimal_places
        self._time_format = time_format

    @classmethod
    def from_settings(cls, settings: ReportSettings) -> ReportRenderer:
        """Build a renderer from settings, loading template and chart asset."""
        return cls(
            template=load_template(settings.template_path),
            chart_asset=load_chart_asset(settings.chart_asset_path),
            output_path=settings.report_path,
            decimal_places=settings.decimal_places,
            time_format=settings.time_format,
        )

    def summarize(self, samples: list[Sample]) -> ReportSummary:
        """Compute elapsed time and net charge change over *samples*.

        Raises:
            EmptyStoreError: If *samples* is empty.
        """
        if not samples:
            raise EmptyStoreError("Cannot render a report without samples")

        first, last = samples[0], samples[-1]
        hours, minutes = elapsed_parts(last.ts - first.ts)
        delta = last.charge_pct - first.charge_pct
        title = f"{format_charge(delta, self._decimal_places)}% in {hours}h {minutes}m"

        return ReportSummary(
            first_ts=first.ts,
            last_ts=last.ts,
            sample_count=len(samples),
            elapsed_hours=hours,
            elapsed_minutes=minutes,
            charge_delta_pct=delta,
            title=title,
        )

    def x_labels(self, samples: list[Sample]) -> list[str]:
        """One formatted timestamp per sample."""
        return [s.ts.strftime(self._time_format) for s in samples]

    def y_labels(self, samples: list[Sample]) -> list[str]:
        """One percentage label per sample, e.g. ``"80%"``."""
        return [f"{format_charge(s.charge_pct, self._decimal_places)}%" for s in samples]

    def build(self, samples: list[Sample]) -> str:
        """Produce the complete HTML document for *samples*.

        Raises:
            EmptyStoreError: If *samples* is empty.
        """
        summary = self.summarize(samples)
        values = {
            "chart_asset": self._chart_asset,
            "x": script_series(self.x_labels(samples)),
            "y": script_series(self.y_labels(samples)),
            "title": html.escape(summary.title),
        }
        return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], self._template)

    def publish(self, document: str) -> Path:
        """Write *document* to the output path, replacing any previous report.

        Each call writes its own uniquely named sibling temporary file and
        then moves it into place, so concurrent publishes never share a
        file and readers never see a half-written report.

        Raises:
            ReportPublishError: If the file could not be written.
        """
        path = self.output_path
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(document)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise ReportPublishError(f"Failed to write report to {path}: {exc}") from exc
        return path

    def render(self, store: SampleStore) -> Path:
        """Snapshot *store*, build the document and publish it.

        Returns:
            Path of the written report.

        Raises:
            EmptyStoreError: If the store holds no samples.
            ReportPublishError: If the file could not be written.
        """
        samples = store.snapshot()
        document = self.build(samples)
        path = self.publish(document)
        logger.info("Report written to %s (%d samples)", path, len(samples))
        return path
