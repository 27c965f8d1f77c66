# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Access to forecast data one column at a time.

Distribution builders only need to walk a column as ``(valid_time, value)`` pairs,
so the parsed forecast is exposed through the small ``ColumnSource`` protocol.
"""
from typing import Iterator, Optional, Protocol

import numpy as np
import pandas as pd

ColumnRow = tuple[pd.Timestamp, float]


class ColumnSource(Protocol):
    def rows(self, column: str) -> Optional[Iterator[ColumnRow]]:
        """Iterate over the non missing rows of a column in valid time order.

        Returns None if there is no such column.
        """
        ...


class DataFrameColumnSource:
    """Column source backed by a DataFrame indexed by valid time.

    Args:
        data: Forecast data with one column per forecast quantity and a
            ``pd.DatetimeIndex`` of valid times.

    Raises:
        ValueError: If the index is not a datetime index.

    """

    def __init__(self, data: pd.DataFrame):
        if not isinstance(data.index, pd.DatetimeIndex):
            raise ValueError("Input dataframe does not have a datetime index.")
        self.data = data

    @property
    def columns(self) -> list[str]:
        return list(self.data.columns)

    def has_column(self, column: str) -> bool:
        return column in self.data.columns

    def rows(self, column: str) -> Optional[Iterator[ColumnRow]]:
        if not self.has_column(column):
            return None

        values = pd.to_numeric(self.data[column], errors="coerce")
        return _iterate_valid(values)


def _iterate_valid(values: pd.Series) -> Iterator[ColumnRow]:
    for valid_time, value in values.items():
        if np.isnan(value):
            continue
        yield valid_time, float(value)
