"""
Chart adapters: fetch chart rows, reshape them into labelled series and
render them with matplotlib.

Each adapter declares the selectors its endpoint requires, maps the API's
rows into ``ChartDataPoint`` values and can re-sort them for display.
``ChartAdapter.load`` never raises: failures come back as a
``ChartLoadResult`` carrying a user-facing message.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend; must be set before pyplot import
import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import pandas as pd

from app.client.api_client import ApiClientError, ConnectivityFailure, MeterApiClient
from app.config import settings
from app.utils.filters import is_all_years
from app.utils.aggregators import SORT_ORDERS, SortOrder, aggregate_monthly_average, sort_series, to_number
from app.utils.labels import division_chart_label, month_label

logger = logging.getLogger(__name__)

SELECTOR_LABELS = {
    "division": "Division",
    "financial_year": "Year",
    "industry": "Industry",
}

LINE_COLOR = "#10b981"
BAR_COLOR = "#3b82f6"


@dataclass
class ChartDataPoint:
    label: str
    value: float
    month_id: Optional[int] = None
    date: Optional[datetime] = None


@dataclass
class ChartLoadResult:
    """Outcome of one chart load: ``ok``, ``empty``, ``error`` or ``cancelled``."""
    status: str
    points: List[ChartDataPoint] = field(default_factory=list)
    message: str = ""
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def _format_axis_value(value: float, _pos=None) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"{value / 1000:.0f}K"
    return f"{value:,.0f}"


class ChartAdapter:
    """Base adapter; subclasses set the endpoint, selectors and row mapping."""

    name: str = ""
    endpoint: str = ""
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    chart_type: str = "bar"
    dataset_label: str = "Industry Consumption"
    empty_message: str = "No data available for selected criteria"

    def __init__(self, client: MeterApiClient):
        self.client = client

    def missing_selections(self, selections: Dict[str, Optional[str]]) -> List[str]:
        return [name for name in self.required if not selections.get(name)]

    def build_params(self, selections: Dict[str, Optional[str]]) -> Dict[str, str]:
        params = {name: selections[name] for name in self.required}
        for name in self.optional:
            if selections.get(name):
                params[name] = selections[name]
        return params

    def map_rows(self, rows: List[Dict[str, Any]]) -> List[ChartDataPoint]:
        raise NotImplementedError

    def title(self, selections: Dict[str, Optional[str]]) -> str:
        return self.dataset_label

    def fetch(self, **selections) -> List[ChartDataPoint]:
        """
        Request the chart endpoint and map its rows.

        A response that is not a list of objects maps to an empty series.

        Raises:
            ApiClientError: the request failed
        """
        params = self.build_params(selections)
        logger.info(f"{self.name} API call: {self.endpoint} params={params}")
        rows = self.client.get_json(self.endpoint, params=params)
        if not isinstance(rows, list):
            logger.error(f"{self.name}: API did not return an array: {rows!r}")
            return []
        return self.map_rows([r for r in rows if isinstance(r, dict)])

    def load(self, sort: SortOrder = "original", **selections) -> ChartLoadResult:
        """Fetch, map and sort the series, turning every failure into a message."""
        if sort not in SORT_ORDERS:
            return ChartLoadResult(status="error", message=f"Unknown sort order: {sort}")

        missing = self.missing_selections(selections)
        if missing:
            names = " and ".join(SELECTOR_LABELS.get(m, m) for m in missing)
            return ChartLoadResult(status="error", message=f"Please select {names}")

        try:
            points = self.fetch(**selections)
        except ConnectivityFailure as e:
            logger.error(f"{self.name}: {e.message}")
            return ChartLoadResult(
                status="error",
                message=f"{e.message}. Please ensure the backend server is running."
            )
        except ApiClientError as e:
            logger.error(f"{self.name}: API error {e.status}: {e.message}")
            return ChartLoadResult(
                status="error",
                message=f"Failed to load chart data: Server error {e.status} ({e.message})"
            )

        if not points:
            return ChartLoadResult(status="empty", message=self.empty_message)

        return ChartLoadResult(status="ok", points=sort_series(points, sort))

    def render(
        self,
        points: List[ChartDataPoint],
        output_path: Optional[str] = None,
        title: Optional[str] = None
    ) -> str:
        """
        Draw the series to a PNG file and return its absolute path.

        Defaults to ``{CHART_OUTPUT_DIR}/{name}.png``.
        """
        if output_path is None:
            output_path = str(Path(settings.CHART_OUTPUT_DIR) / f"{self.name}.png")
        path = Path(output_path).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)

        fig, ax = plt.subplots(figsize=(12, 6))
        try:
            self._draw(ax, points)
            ax.set_title(title or self.dataset_label, fontsize=14, fontweight="bold")
            ax.set_ylabel(self.dataset_label)
            ax.yaxis.set_major_formatter(plt.FuncFormatter(_format_axis_value))
            ax.grid(True, alpha=0.3)
            plt.tight_layout()
            fig.savefig(path, dpi=150, bbox_inches="tight")
        finally:
            plt.close(fig)

        logger.info(f"{self.name}: chart saved to {path}")
        return str(path)

    def _draw(self, ax, points: List[ChartDataPoint]) -> None:
        positions = range(len(points))
        values = [p.value for p in points]
        if self.chart_type == "line":
            ax.plot(positions, values, color=LINE_COLOR, linewidth=2, marker="o", label=self.dataset_label)
        else:
            ax.bar(positions, values, color=BAR_COLOR, label=self.dataset_label)
        ax.set_xticks(list(positions))
        ax.set_xticklabels([p.label for p in points], rotation=45, ha="right")
        ax.legend(loc="upper right")


class Chart1Adapter(ChartAdapter):
    """Industries in a division and year, ranked by consumption."""

    name = "chart1"
    endpoint = f"{settings.API_PREFIX}/chart1"
    required = ("division", "financial_year")
    empty_message = "No chart data available for the selected Division and Year combination."

    def map_rows(self, rows):
        return [
            ChartDataPoint(label=r.get("industryname") or "Unknown", value=to_number(r.get("total_diff")))
            for r in rows
        ]

    def title(self, selections):
        return f"Industry Consumption - {selections.get('division')} ({selections.get('financial_year')})"


class Chart2Adapter(ChartAdapter):
    """Division totals for one year."""

    name = "chart2"
    endpoint = f"{settings.API_PREFIX}/chart2"
    required = ("financial_year",)
    empty_message = "No data available for selected year"

    def map_rows(self, rows):
        return [
            ChartDataPoint(
                label=division_chart_label(r.get("division_id"), r.get("label")),
                value=to_number(r.get("total_diff"))
            )
            for r in rows
        ]

    def title(self, selections):
        return f"Division Analysis for {selections.get('financial_year')}"


class Chart3Adapter(ChartAdapter):
    """Yearly totals for one industry."""

    name = "chart3"
    endpoint = f"{settings.API_PREFIX}/chart3"
    required = ("industry",)
    empty_message = "No data available for selected industry"

    def map_rows(self, rows):
        return [
            ChartDataPoint(label=str(r.get("financial_year")), value=to_number(r.get("total_diff")))
            for r in rows
        ]

    def title(self, selections):
        return f"{selections.get('industry')} - Yearly Consumption"


class Chart4Adapter(ChartAdapter):
    """Industry time series, averaged per calendar month."""

    name = "chart4"
    endpoint = f"{settings.API_PREFIX}/chart4"
    required = ("industry",)
    chart_type = "line"
    empty_message = "No data available for selected industry"

    def map_rows(self, rows):
        df = pd.DataFrame(
            [{"date": r.get("insert_date"), "value": to_number(r.get("total_diff"))} for r in rows],
            columns=["date", "value"]
        )
        monthly = aggregate_monthly_average(df, "date", "value")
        return [
            ChartDataPoint(
                label=ts.strftime("%b %Y"),
                value=float(value),
                date=ts.to_pydatetime()
            )
            for ts, value in zip(monthly["date"], monthly["value"])
        ]

    def title(self, selections):
        return f"{selections.get('industry')} - Time Series Analysis"

    def _draw(self, ax, points):
        ax.plot(
            [p.date for p in points],
            [p.value for p in points],
            color=LINE_COLOR,
            linewidth=2,
            marker="o",
            label=self.dataset_label
        )
        ax.xaxis.set_major_formatter(mdates.DateFormatter("%b %Y"))
        ax.xaxis.set_major_locator(mdates.MonthLocator())
        plt.setp(ax.xaxis.get_majorticklabels(), rotation=30, ha="right")
        ax.set_xlabel("Date")
        ax.legend(loc="upper left")


class _MonthlyAdapter(ChartAdapter):
    """Shared mapping for the month-by-month charts."""

    def map_rows(self, rows):
        ordered = sorted(rows, key=lambda r: to_number(r.get("month_id")))
        return [
            ChartDataPoint(
                label=month_label(r.get("month_id"), r.get("monthname")),
                value=to_number(r.get("total_diff")),
                month_id=r.get("month_id")
            )
            for r in ordered
        ]


class Chart5Adapter(_MonthlyAdapter):
    """Monthly totals for an industry, one year or all years."""

    name = "chart5"
    endpoint = f"{settings.API_PREFIX}/chart5"
    required = ("industry",)
    optional = ("financial_year",)

    def build_params(self, selections):
        params = super().build_params(selections)
        if is_all_years(params.get("financial_year")):
            params.pop("financial_year", None)
        return params

    def title(self, selections):
        year = selections.get("financial_year")
        scope = "All Years" if is_all_years(year) else year
        return f"{selections.get('industry')} - Monthly Consumption ({scope})"


class Chart6Adapter(_MonthlyAdapter):
    """Monthly totals for a division in one year."""

    name = "chart6"
    endpoint = f"{settings.API_PREFIX}/chart6"
    required = ("division", "financial_year")
    empty_message = "No data available for selected division and year"

    def title(self, selections):
        return f"{selections.get('division')} - Monthly Consumption ({selections.get('financial_year')})"


CHART_ADAPTERS = {
    adapter.name: adapter
    for adapter in (
        Chart1Adapter,
        Chart2Adapter,
        Chart3Adapter,
        Chart4Adapter,
        Chart5Adapter,
        Chart6Adapter,
    )
}


class ChartLoader:
    """
    Runs loads for one chart in the background, newest request wins.

    Every ``load`` bumps a generation counter. A pending older load is
    cancelled if it has not started; one already running finishes but its
    result comes back as ``cancelled`` and never replaces ``latest``.
    """

    def __init__(self, adapter: ChartAdapter, executor: Optional[ThreadPoolExecutor] = None):
        self.adapter = adapter
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix=adapter.name)
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[Future] = None
        self.latest: Optional[ChartLoadResult] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def load(self, sort: SortOrder = "original", **selections) -> Future:
        """Start a load, superseding any earlier one; returns its future."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None and self._pending.cancel():
                logger.debug(f"{self.adapter.name}: cancelled queued load")
            future = self._executor.submit(self._run, generation, sort, selections)
            self._pending = future
        return future

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _run(self, generation: int, sort: SortOrder, selections: Dict[str, Any]) -> ChartLoadResult:
        superseded = ChartLoadResult(
            status="cancelled",
            message="Superseded by a newer request",
            generation=generation
        )
        if not self._is_current(generation):
            return superseded

        result = self.adapter.load(sort=sort, **selections)
        result.generation = generation

        with self._lock:
            if generation != self._generation:
                logger.info(f"{self.adapter.name}: discarding stale result of load #{generation}")
                return superseded
            self.latest = result
        return result

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
