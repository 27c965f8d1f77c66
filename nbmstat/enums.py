# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0
from enum import Enum, StrEnum


class LoggerType(StrEnum):
    STANDARD = "logging"
    STRUCTLOG = "structlog"


class WeatherElement(Enum):
    WIND = "wind"
    GUST = "gust"
    PRECIPITATION = "precipitation"
    SNOW = "snow"
    ICE = "ice"


class UnitConversion(Enum):
    IDENTITY = "identity"
    KELVIN_TO_FAHRENHEIT = "kelvin_to_fahrenheit"
    KELVIN_DELTA_TO_FAHRENHEIT_DELTA = "kelvin_delta_to_fahrenheit_delta"
    MPS_TO_MPH = "mps_to_mph"
    MM_TO_IN = "mm_to_in"
    M_TO_IN = "m_to_in"


class AccumulationKind(Enum):
    SUM = "sum"
    MAX = "max"
    LAST = "last"
    AVERAGE = "average"
    SINGLE = "single"


class KeepFilter(Enum):
    ALL = "all"
    AFTERNOON = "afternoon"
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    ZERO_Z = "00z"


class SummaryDay(Enum):
    """Hour (UTC) at which a summary day starts."""

    FROM_18Z = 18
    FROM_12Z = 12
    FROM_06Z = 6
