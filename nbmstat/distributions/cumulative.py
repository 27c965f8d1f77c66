# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Cumulative distributions built from percentile and exceedance columns.

A ``CumulativeDistribution`` maps percentiles (0-100) to physical values for a
single valid time. Points are appended while scanning the source columns and
cleaned up lazily the first time the distribution is queried.
"""
from bisect import bisect_right
from typing import Iterable, NamedTuple, Optional

import numpy as np
import pandas as pd

from nbmstat.data.column_source import ColumnSource
from nbmstat.exceptions import DistributionInvariantError, EmptyDistributionError
from nbmstat.logging.logger_factory import get_logger
from nbmstat.preprocessing.unit_conversion import Converter, identity
from nbmstat.settings import Settings

logger = get_logger(__name__)

MIN_PERCENTILE_COLUMN: int = 1
MAX_PERCENTILE_COLUMN: int = 99


class PercentilePoint(NamedTuple):
    """A single point of a CDF, ordered by percentile then value."""

    percentile: float
    value: float


class CumulativeDistribution:
    """Cumulative distribution function for one valid time.

    Args:
        points: Optional initial ``(percentile, value)`` pairs.
        quantile_mapped_value: The probability matched (quantile mapped)
            deterministic value, NaN if there is none.

    """

    def __init__(
        self,
        points: Optional[Iterable[tuple[float, float]]] = None,
        quantile_mapped_value: float = np.nan,
    ):
        self._points: list[PercentilePoint] = []
        self._sorted = False
        self.quantile_mapped_value = quantile_mapped_value
        for percentile, value in points or []:
            self.append(percentile, value)

    def __len__(self) -> int:
        self.finalize()
        return len(self._points)

    def __repr__(self) -> str:
        return (
            f"CumulativeDistribution(points={self._points!r}, "
            f"quantile_mapped_value={self.quantile_mapped_value!r})"
        )

    @property
    def sorted(self) -> bool:
        return self._sorted

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def points(self) -> tuple[PercentilePoint, ...]:
        self.finalize()
        return tuple(self._points)

    def append(self, percentile: float, value: float) -> None:
        self._points.append(PercentilePoint(float(percentile), float(value)))
        self._sorted = False

    def finalize(self) -> None:
        """Sort and clean the points so the distribution can be queried.

        Steps:
        1. Drop points with a percentile outside [0, 100].
        2. Sort by percentile, then value.
        3. Truncate after the first redundant 100th percentile end marker.
        4. Remove points whose value is lower than a value at a lower percentile.
        5. Keep only the first point of every run sharing a percentile.

        Calling this more than once has no further effect.

        """
        if self._sorted:
            return

        points = [p for p in self._points if 0.0 <= p.percentile <= 100.0]
        points.sort()
        points = _truncate_end_markers(points)
        points = _remove_monotonicity_violations(points)
        points = _deduplicate_percentiles(points)

        num_removed = len(self._points) - len(points)
        if num_removed > 0:
            logger.debug(
                "Removed inconsistent points from cumulative distribution",
                num_removed=num_removed,
                num_remaining=len(points),
            )

        self._points = points
        self._sorted = True

    def min_value(self) -> float:
        self._require_points()
        return self._points[0].value

    def max_value(self) -> float:
        self._require_points()
        return self._points[-1].value

    def value_at_percentile(self, percentile: float) -> float:
        """Get the value at a percentile by linear interpolation.

        Percentiles at or below the lowest stored percentile map to the lowest value
        and percentiles at or above the highest stored percentile map to the highest
        value.

        Args:
            percentile: Target percentile in [0, 100].

        Returns:
            The interpolated value.

        Raises:
            EmptyDistributionError: If the distribution has no points.

        """
        self._require_points()
        points = self._points

        if percentile <= points[0].percentile:
            return points[0].value
        if percentile >= points[-1].percentile:
            return points[-1].value

        # pct[i - 1] <= percentile < pct[i]
        i = bisect_right([p.percentile for p in points], percentile)
        left, right = points[i - 1], points[i]

        run = right.percentile - left.percentile
        if run <= 0.0:
            raise DistributionInvariantError(
                f"Non positive percentile run {run} between {left} and {right}"
            )

        slope = (right.value - left.value) / run
        return left.value + slope * (percentile - left.percentile)

    def probability_of_exceedance(self, target_value: float) -> float:
        """Get the probability (0-100) of meeting or exceeding a value.

        Args:
            target_value: The value to get the probability of exceedance for.

        Returns:
            The probability of exceedance in percent.

        Raises:
            EmptyDistributionError: If the distribution has no points.
            DistributionInvariantError: If the result falls outside [0, 100] while
                strict invariant checks are enabled.

        """
        self._require_points()
        points = self._points

        if target_value <= points[0].value:
            return 100.0
        if target_value >= points[-1].value:
            return 0.0

        # val[i - 1] <= target_value < val[i]
        i = bisect_right([p.value for p in points], target_value)
        left, right = points[i - 1], points[i]

        run = right.value - left.value
        if run <= 0.0:
            raise DistributionInvariantError(
                f"Non positive value run {run} between {left} and {right}"
            )

        slope = (right.percentile - left.percentile) / run
        cdf_value = left.percentile + slope * (target_value - left.value)

        return _check_probability(100.0 - cdf_value)

    def _require_points(self) -> None:
        self.finalize()
        if not self._points:
            raise EmptyDistributionError("Can not query an empty cumulative distribution")


def _truncate_end_markers(points: list[PercentilePoint]) -> list[PercentilePoint]:
    for i in range(2, len(points)):
        if points[i].percentile >= 100.0:
            return points[: i + 1]
    return points


def _remove_monotonicity_violations(
    points: list[PercentilePoint],
) -> list[PercentilePoint]:
    points = list(points)
    while not _is_monotonic(points):
        i = 0
        while i < len(points) - 1:
            anchor = points[i].value
            j = i + 1
            while j < len(points) and points[j].value < anchor:
                j += 1
            del points[i + 1 : j]
            i += 1
    return points


def _is_monotonic(points: list[PercentilePoint]) -> bool:
    return all(a.value <= b.value for a, b in zip(points, points[1:]))


def _deduplicate_percentiles(points: list[PercentilePoint]) -> list[PercentilePoint]:
    deduplicated = []
    for point in points:
        if deduplicated and deduplicated[-1].percentile == point.percentile:
            continue
        deduplicated.append(point)
    return deduplicated


def _check_probability(probability: float) -> float:
    if 0.0 <= probability <= 100.0:
        return probability

    if Settings.strict_invariants:
        raise DistributionInvariantError(
            f"Probability of exceedance {probability} outside [0, 100]"
        )

    logger.error(
        "Probability of exceedance out of range, clamping",
        probability=probability,
    )
    return float(np.clip(probability, 0.0, 100.0))


def extract_cdfs(
    source: ColumnSource,
    percentile_column_format: str,
    deterministic_column: Optional[str] = None,
    convert: Converter = identity,
) -> dict[pd.Timestamp, CumulativeDistribution]:
    """Build a CDF per valid time from percentile columns.

    Args:
        source: The forecast data.
        percentile_column_format: Column name with a ``{percentile}`` placeholder,
            e.g. ``"WIND24hr_10 m above ground_{percentile}% level"``.
        deterministic_column: Column with the probability matched value.
        convert: Unit conversion applied to every raw value.

    Returns:
        Mapping of valid time to CDF, in ascending time order.

    """
    cdfs: dict[pd.Timestamp, CumulativeDistribution] = {}

    num_columns = 0
    for percentile in range(MIN_PERCENTILE_COLUMN, MAX_PERCENTILE_COLUMN + 1):
        column = percentile_column_format.format(percentile=percentile)
        rows = source.rows(column)
        if rows is None:
            # Not every element publishes every percentile
            continue

        num_columns += 1
        for valid_time, value in rows:
            cdf = cdfs.get(valid_time)
            if cdf is None:
                cdf = cdfs[valid_time] = CumulativeDistribution()
            cdf.append(percentile, convert(value))

    if deterministic_column is not None:
        rows = source.rows(deterministic_column)
        for valid_time, value in rows or []:
            cdf = cdfs.get(valid_time)
            # Skip times without percentile information
            if cdf is not None:
                cdf.quantile_mapped_value = convert(value)

    logger.debug(
        "Extracted cumulative distributions",
        percentile_column_format=percentile_column_format,
        num_percentile_columns=num_columns,
        num_valid_times=len(cdfs),
    )

    return dict(sorted(cdfs.items()))


def extract_exceedance_to_cdfs(
    cdfs: dict[pd.Timestamp, CumulativeDistribution],
    source: ColumnSource,
    exceedance_column_format: str,
    thresholds: Iterable[str],
    convert: Converter = identity,
) -> dict[pd.Timestamp, CumulativeDistribution]:
    """Add points from probability of exceedance columns to existing CDFs.

    Args:
        cdfs: Mapping as returned by ``extract_cdfs``. Updated in place.
        source: The forecast data.
        exceedance_column_format: Column name with a ``{threshold}`` placeholder,
            e.g. ``"GUST24hr_10 m above ground_prob >{threshold}"``.
        thresholds: Threshold values in source units, written exactly as they
            appear in the column names (same number of decimals).
        convert: Unit conversion applied to the thresholds.

    Returns:
        The same mapping that was passed in.

    """
    for threshold in thresholds:
        column = exceedance_column_format.format(threshold=threshold)
        rows = source.rows(column)
        if rows is None:
            logger.debug("No exceedance column for threshold", column=column)
            continue

        value = convert(float(threshold))
        for valid_time, probability in rows:
            cdf = cdfs.get(valid_time)
            if cdf is not None:
                cdf.append(100.0 - probability, value)

    return cdfs
