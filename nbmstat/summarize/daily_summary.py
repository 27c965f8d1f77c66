# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Accumulate column values into one value per forecast day."""
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Union

import numpy as np
import pandas as pd

from nbmstat.data.column_source import ColumnSource
from nbmstat.data_classes.daily_summary import DailySummaryDataClass
from nbmstat.enums import AccumulationKind, KeepFilter, SummaryDay, UnitConversion
from nbmstat.exceptions import MissingColumnError
from nbmstat.logging.logger_factory import get_logger
from nbmstat.preprocessing.unit_conversion import (
    Converter,
    get_converter,
    identity,
    mps_to_mph,
)

logger = get_logger(__name__)

KeepFunc = Callable[[pd.Timestamp], bool]


@dataclass(frozen=True)
class RunningValue:
    """State of an accumulation, NaN until the first value arrives."""

    value: float = np.nan
    count: int = 0


def accumulate(
    state: RunningValue, value: float, kind: Union[AccumulationKind, str]
) -> RunningValue:
    """Fold a new value into the running state.

    Args:
        state: The state so far.
        value: The new value.
        kind: How to combine the values.

    Returns:
        The new state.

    Raises:
        ValueError: If a second value arrives for ``AccumulationKind.SINGLE``.

    """
    kind = AccumulationKind(kind)
    count = state.count + 1

    if state.count == 0 or np.isnan(state.value):
        if kind == AccumulationKind.SINGLE and state.count > 0:
            raise ValueError("Expected a single value per day")
        return RunningValue(value, count)

    if kind == AccumulationKind.SUM:
        return RunningValue(state.value + value, count)
    elif kind == AccumulationKind.MAX:
        return RunningValue(max(state.value, value), count)
    elif kind == AccumulationKind.LAST:
        return RunningValue(value, count)
    elif kind == AccumulationKind.AVERAGE:
        average = state.value * ((count - 1.0) / count) + value / count
        return RunningValue(average, count)
    else:
        raise ValueError("Expected a single value per day")


def keep_all(valid_time: pd.Timestamp) -> bool:
    return True


def keep_afternoon(valid_time: pd.Timestamp) -> bool:
    return valid_time.hour >= 18


def keep_morning(valid_time: pd.Timestamp) -> bool:
    return 12 <= valid_time.hour < 18


def keep_evening(valid_time: pd.Timestamp) -> bool:
    return valid_time.hour < 6


def keep_night(valid_time: pd.Timestamp) -> bool:
    return 6 <= valid_time.hour < 12


def keep_00z(valid_time: pd.Timestamp) -> bool:
    return valid_time.hour == 0


_KEEP_FILTERS: dict[KeepFilter, KeepFunc] = {
    KeepFilter.ALL: keep_all,
    KeepFilter.AFTERNOON: keep_afternoon,
    KeepFilter.MORNING: keep_morning,
    KeepFilter.EVENING: keep_evening,
    KeepFilter.NIGHT: keep_night,
    KeepFilter.ZERO_Z: keep_00z,
}


def get_keep_filter(keep_filter: Union[KeepFilter, str]) -> KeepFunc:
    return _KEEP_FILTERS[KeepFilter(keep_filter)]


def summary_date(
    valid_time: pd.Timestamp, summary_day: Union[SummaryDay, int]
) -> pd.Timestamp:
    """Map a valid time to the day of the summary period it ends in.

    A summary day runs from the start hour on one day up to and including the start
    hour on the next day, e.g. 18Z to 18Z. All valid times in that period map to
    midnight of the first day.

    """
    start = pd.Timedelta(hours=SummaryDay(summary_day).value)
    return (valid_time - start).ceil("D") - pd.Timedelta(days=1)


def extract_daily_summary_for_column(
    source: ColumnSource,
    column: str,
    summary_day: Union[SummaryDay, int],
    accumulation: Union[AccumulationKind, str],
    keep_filter: Union[KeepFilter, str] = KeepFilter.ALL,
    convert: Converter = identity,
    sums: Optional[dict[pd.Timestamp, RunningValue]] = None,
) -> dict[pd.Timestamp, RunningValue]:
    """Accumulate the values of a column per summary day.

    Args:
        source: The forecast data.
        column: Name of the column to summarize.
        summary_day: When a summary day starts.
        accumulation: How the values in a day are combined.
        keep_filter: Which valid times are taken into account.
        convert: Unit conversion applied to every raw value.
        sums: Existing summaries to add to, a new mapping is made if None.

    Returns:
        Mapping of summary day to accumulated value, in ascending order.

    Raises:
        MissingColumnError: If the column is not in the source.

    """
    rows = source.rows(column)
    if rows is None:
        raise MissingColumnError(column)

    keep = get_keep_filter(keep_filter)
    sums = {} if sums is None else sums

    for valid_time, value in rows:
        if not keep(valid_time):
            continue

        day = summary_date(valid_time, summary_day)
        state = sums.get(day, RunningValue())
        sums[day] = accumulate(state, convert(value), accumulation)

    logger.debug(
        "Extracted daily summary",
        column=column,
        accumulation=AccumulationKind(accumulation).value,
        num_days=len(sums),
    )

    return dict(sorted(sums.items()))


class DailySummaryColumn(NamedTuple):
    """How one column contributes to a field of ``DailySummaryDataClass``."""

    field: str
    column: str
    accumulation: AccumulationKind
    conversion: UnitConversion = UnitConversion.IDENTITY
    keep_filter: KeepFilter = KeepFilter.ALL


DAILY_SUMMARY_COLUMNS = (
    DailySummaryColumn(
        "max_t_f",
        "TMAX12hr_2 m above ground",
        AccumulationKind.LAST,
        UnitConversion.KELVIN_TO_FAHRENHEIT,
    ),
    DailySummaryColumn(
        "max_t_std",
        "TMAX12hr_2 m above ground_ens std dev",
        AccumulationKind.LAST,
        UnitConversion.KELVIN_DELTA_TO_FAHRENHEIT_DELTA,
    ),
    DailySummaryColumn(
        "min_t_f",
        "TMIN12hr_2 m above ground",
        AccumulationKind.LAST,
        UnitConversion.KELVIN_TO_FAHRENHEIT,
    ),
    DailySummaryColumn(
        "min_t_std",
        "TMIN12hr_2 m above ground_ens std dev",
        AccumulationKind.LAST,
        UnitConversion.KELVIN_DELTA_TO_FAHRENHEIT_DELTA,
    ),
    DailySummaryColumn(
        "precip", "APCP24hr_surface", AccumulationKind.LAST, UnitConversion.MM_TO_IN
    ),
    DailySummaryColumn(
        "snow", "ASNOW6hr_surface", AccumulationKind.SUM, UnitConversion.M_TO_IN
    ),
    DailySummaryColumn(
        "prob_ltg", "TSTM12hr_surface_probability forecast", AccumulationKind.MAX
    ),
    DailySummaryColumn(
        "mrn_sky",
        "TCDC_surface",
        AccumulationKind.AVERAGE,
        keep_filter=KeepFilter.MORNING,
    ),
    DailySummaryColumn(
        "aft_sky",
        "TCDC_surface",
        AccumulationKind.AVERAGE,
        keep_filter=KeepFilter.AFTERNOON,
    ),
)

WIND_SPEED_COLUMN = "WIND_10 m above ground"
WIND_SPEED_STD_COLUMN = "WIND_10 m above ground_ens std dev"
WIND_GUST_COLUMN = "GUST_10 m above ground"
WIND_GUST_STD_COLUMN = "GUST_10 m above ground_ens std dev"
WIND_DIRECTION_COLUMN = "WDIR_10 m above ground"


def extract_max_winds_to_summary(
    summaries: dict[pd.Timestamp, DailySummaryDataClass],
    source: ColumnSource,
    summary_day: Union[SummaryDay, int] = SummaryDay.FROM_06Z,
) -> dict[pd.Timestamp, DailySummaryDataClass]:
    """Add the maximum wind and gust of every day to the summaries.

    Speed, gust, their spreads and the direction are read together, valid times
    missing any of them are skipped. The spread and direction reported are those
    at the valid time of the maximum.

    Args:
        summaries: Summaries to update in place, new days are added.
        source: The forecast data.
        summary_day: When a summary day starts.

    Returns:
        The updated summaries.

    Raises:
        MissingColumnError: If one of the wind columns is not in the source.

    """
    columns = (
        WIND_SPEED_COLUMN,
        WIND_SPEED_STD_COLUMN,
        WIND_GUST_COLUMN,
        WIND_GUST_STD_COLUMN,
        WIND_DIRECTION_COLUMN,
    )
    values = {}
    for column in columns:
        rows = source.rows(column)
        if rows is None:
            raise MissingColumnError(column)
        values[column] = dict(rows)

    speeds, speed_stds, gusts, gust_stds, directions = (values[c] for c in columns)
    for valid_time in sorted(speeds):
        if not all(valid_time in values[c] for c in columns):
            continue

        day = summary_date(valid_time, summary_day)
        summary = summaries.setdefault(day, DailySummaryDataClass())

        speed = mps_to_mph(speeds[valid_time])
        if np.isnan(summary.max_wind_mph) or speed > summary.max_wind_mph:
            summary.max_wind_mph = speed
            summary.max_wind_std = mps_to_mph(speed_stds[valid_time])
            summary.max_wind_dir = directions[valid_time]

        gust = mps_to_mph(gusts[valid_time])
        if np.isnan(summary.max_wind_gust) or gust > summary.max_wind_gust:
            summary.max_wind_gust = gust
            summary.max_wind_gust_std = mps_to_mph(gust_stds[valid_time])

    return summaries


def build_daily_summaries(
    source: ColumnSource,
    summary_day: Union[SummaryDay, int] = SummaryDay.FROM_06Z,
) -> dict[pd.Timestamp, DailySummaryDataClass]:
    """Build a summary per forecast day.

    Temperature, precipitation, snow, thunder and cloud values come from
    ``DAILY_SUMMARY_COLUMNS``, the winds from ``extract_max_winds_to_summary``.

    Args:
        source: The forecast data.
        summary_day: When a summary day starts.

    Returns:
        Mapping of summary day to its summary, in ascending order. Use
        ``DailySummaryDataClass.is_complete`` to find the days that can be
        reported.

    Raises:
        MissingColumnError: If one of the required columns is not in the source.

    """
    summaries: dict[pd.Timestamp, DailySummaryDataClass] = {}

    for spec in DAILY_SUMMARY_COLUMNS:
        values = extract_daily_summary_for_column(
            source,
            spec.column,
            summary_day,
            spec.accumulation,
            keep_filter=spec.keep_filter,
            convert=get_converter(spec.conversion),
        )
        for day, state in values.items():
            summary = summaries.setdefault(day, DailySummaryDataClass())
            setattr(summary, spec.field, state.value)

    extract_max_winds_to_summary(summaries, source, summary_day)

    logger.info(
        "Built daily summaries",
        num_days=len(summaries),
        num_complete=sum(s.is_complete for s in summaries.values()),
    )

    return dict(sorted(summaries.items()))
