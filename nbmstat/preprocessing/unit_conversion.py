# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Unit conversions applied to raw values before they enter a distribution."""
from typing import Callable, Union

from nbmstat.enums import UnitConversion

Converter = Callable[[float], float]

MPS_TO_MPH: float = 2.23694
MM_PER_IN: float = 25.4
IN_PER_M: float = 39.37008
ZERO_CELSIUS_IN_KELVIN: float = 273.15


def identity(value: float) -> float:
    return value


def kelvin_to_fahrenheit(kelvin: float) -> float:
    """Convert an absolute temperature in Kelvin to degrees Fahrenheit."""
    celsius = kelvin - ZERO_CELSIUS_IN_KELVIN
    return 9.0 / 5.0 * celsius + 32.0


def kelvin_delta_to_fahrenheit_delta(delta_kelvin: float) -> float:
    """Convert a temperature difference, e.g. a spread, from Kelvin to Fahrenheit."""
    return 9.0 / 5.0 * delta_kelvin


def mps_to_mph(speed: float) -> float:
    return MPS_TO_MPH * speed


def mm_to_in(depth: float) -> float:
    return depth / MM_PER_IN


def m_to_in(depth: float) -> float:
    return depth * IN_PER_M


_CONVERTERS: dict[UnitConversion, Converter] = {
    UnitConversion.IDENTITY: identity,
    UnitConversion.KELVIN_TO_FAHRENHEIT: kelvin_to_fahrenheit,
    UnitConversion.KELVIN_DELTA_TO_FAHRENHEIT_DELTA: kelvin_delta_to_fahrenheit_delta,
    UnitConversion.MPS_TO_MPH: mps_to_mph,
    UnitConversion.MM_TO_IN: mm_to_in,
    UnitConversion.M_TO_IN: m_to_in,
}


def get_converter(conversion: Union[UnitConversion, str]) -> Converter:
    """Look up the conversion function for a conversion kind.

    Args:
        conversion: The conversion kind, or its string value.

    Returns:
        A pure function mapping a raw value to the converted value.

    Raises:
        ValueError: If the conversion is unknown.

    """
    return _CONVERTERS[UnitConversion(conversion)]
