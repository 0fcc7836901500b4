"""
Data aggregation utility functions for chart series.
"""
import pandas as pd
from typing import Any, Callable, List, Literal, Sequence, TypeVar, get_args

T = TypeVar("T")

SortOrder = Literal["original", "ascending", "descending"]
SORT_ORDERS = get_args(SortOrder)


def to_number(value: Any) -> float:
    """
    Coerce an aggregate value to float.

    Numeric columns may arrive as Decimal, str or None depending on the
    driver; None and unparseable values count as 0.
    """
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def aggregate_monthly_average(
    df: pd.DataFrame,
    date_column: str = 'date',
    value_column: str = 'value'
) -> pd.DataFrame:
    """
    Bucket date-stamped rows into calendar months and average each bucket.

    Rows without a date or with a zero/missing value are ignored, matching
    what the time-series chart plots.

    Args:
        df: Input DataFrame with date and value columns
        date_column: Name of date column
        value_column: Name of the numeric column to average

    Returns:
        DataFrame with one row per month (first day of month), sorted by date
    """
    if df.empty:
        return pd.DataFrame(columns=[date_column, value_column])

    df = df.copy()
    df[date_column] = pd.to_datetime(df[date_column], errors='coerce')
    df[value_column] = pd.to_numeric(df[value_column], errors='coerce')
    df = df.dropna(subset=[date_column, value_column])
    df = df[df[value_column] != 0]

    if df.empty:
        return pd.DataFrame(columns=[date_column, value_column])

    df['period'] = df[date_column].dt.to_period('M')
    agg_df = df.groupby('period')[value_column].mean().reset_index()
    agg_df[date_column] = agg_df['period'].dt.to_timestamp()
    agg_df = agg_df.drop('period', axis=1)

    return agg_df.sort_values(date_column).reset_index(drop=True)[[date_column, value_column]]


def sort_series(
    points: Sequence[T],
    order: SortOrder = "original",
    key: Callable[[T], float] = lambda p: p.value
) -> List[T]:
    """
    Re-order a chart series for display.

    ``original`` keeps the order the API returned; ``ascending`` and
    ``descending`` sort by value.
    """
    if order == "ascending":
        return sorted(points, key=key)
    if order == "descending":
        return sorted(points, key=key, reverse=True)
    if order == "original":
        return list(points)
    raise ValueError(f"Unknown sort order: {order}")
