"""Pandas integration for TSLN.

Usage:
    import tsln.pandas_ext  # registers the accessor

    document = df.tsln.encode()
    report = df.tsln.compare()

    # Or use the functional API
    points = tsln.pandas_ext.dataset_from_dataframe(df, timestamp_column="time")
    df = tsln.pandas_ext.dataset_to_dataframe(tsln.decode(text))
"""

import math
from typing import Optional

import numpy as np
import pandas as pd

import tsln
from .analysis import field_names
from .model import DataPoint


def _python_scalar(value, keep_nan: bool):
    """Convert numpy/pandas scalars to plain Python values."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value) and not keep_nan:
        return None
    if value is pd.NA:
        return None
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return value


def dataset_from_dataframe(
    df: pd.DataFrame,
    timestamp_column: Optional[str] = None,
) -> list[DataPoint]:
    """Convert a DataFrame to TSLN data points.

    Args:
        df: One row per data point.
        timestamp_column: Column holding the instants. If None, the index must
            be a DatetimeIndex.

    Returns:
        List of DataPoints in row order. Missing cells become None, except
        NaN in float columns which is kept as a value.
    """
    if timestamp_column is not None:
        if timestamp_column not in df.columns:
            raise ValueError(f"Missing timestamp column: {timestamp_column!r}")
        instants = pd.to_datetime(df[timestamp_column], utc=True)
        data = df.drop(columns=[timestamp_column])
    elif isinstance(df.index, pd.DatetimeIndex):
        instants = df.index.tz_localize("UTC") if df.index.tz is None else df.index.tz_convert("UTC")
        data = df
    else:
        raise ValueError("DataFrame needs a DatetimeIndex or a timestamp_column")

    float_columns = {c for c in data.columns if pd.api.types.is_float_dtype(data[c].dtype)}
    columns = [str(c) for c in data.columns]

    points = []
    for instant, row in zip(instants, data.itertuples(index=False, name=None)):
        values = {
            name: _python_scalar(value, keep_nan=col in float_columns)
            for name, col, value in zip(columns, data.columns, row)
        }
        points.append(DataPoint(instant.to_pydatetime(), values))
    return points


def dataset_to_dataframe(points) -> pd.DataFrame:
    """Convert data points to a DataFrame indexed by a UTC DatetimeIndex."""
    columns = field_names(points)
    index = pd.DatetimeIndex([p.timestamp for p in points], name="timestamp")
    records = [[p.values.get(c) for c in columns] for p in points]
    return pd.DataFrame(records, columns=columns, index=index)


# ---- Pandas accessor ----

@pd.api.extensions.register_dataframe_accessor("tsln")
class TSLNAccessor:
    """Pandas DataFrame accessor for TSLN encoding.

    Usage:
        import tsln.pandas_ext

        document = df.tsln.encode()
        report = df.tsln.compare()
    """

    def __init__(self, pandas_obj):
        self._obj = pandas_obj

    def to_dataset(self, timestamp_column: Optional[str] = None) -> list[DataPoint]:
        return dataset_from_dataframe(self._obj, timestamp_column=timestamp_column)

    def encode(self, options=None, timestamp_column: Optional[str] = None):
        """Encode this DataFrame to a TSLN EncodedDocument."""
        return tsln.encode(self.to_dataset(timestamp_column), options)

    def compare(self, options=None, timestamp_column: Optional[str] = None):
        """Compare TSLN against JSON, CSV and compact tabular for this DataFrame."""
        return tsln.compare_formats(self.to_dataset(timestamp_column), options)
