# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0
"""Specifies the values reported for one day of a daily summary."""
import numpy as np
from pydantic import BaseModel, Field


class DailySummaryDataClass(BaseModel):
    """Summary values of one forecast day, NaN where no data was found.

    Temperatures are in Fahrenheit, wind speeds in mph and depths in inches.
    """

    max_t_f: float = Field(np.nan, description="Maximum temperature.")
    max_t_std: float = Field(np.nan, description="Ensemble spread of the maximum temperature.")
    min_t_f: float = Field(np.nan, description="Minimum temperature.")
    min_t_std: float = Field(np.nan, description="Ensemble spread of the minimum temperature.")
    max_wind_mph: float = Field(np.nan, description="Maximum sustained wind speed.")
    max_wind_std: float = Field(
        np.nan, description="Ensemble spread of the wind speed at the time of the maximum."
    )
    max_wind_dir: float = Field(
        np.nan, description="Wind direction in degrees at the time of the maximum wind."
    )
    max_wind_gust: float = Field(np.nan, description="Maximum wind gust.")
    max_wind_gust_std: float = Field(
        np.nan, description="Ensemble spread of the gust at the time of the maximum gust."
    )
    precip: float = Field(np.nan, description="24 hour precipitation.")
    snow: float = Field(np.nan, description="Snowfall summed over the 6 hour periods.")
    prob_ltg: float = Field(np.nan, description="Maximum probability (0-100) of thunder.")
    mrn_sky: float = Field(np.nan, description="Average cloud cover (%) from 12Z to 18Z.")
    aft_sky: float = Field(np.nan, description="Average cloud cover (%) from 18Z.")

    @property
    def is_complete(self) -> bool:
        """Whether the temperature and wind values needed for a table row are known."""
        required = (
            self.max_t_f,
            self.max_t_std,
            self.min_t_f,
            self.min_t_std,
            self.max_wind_mph,
            self.max_wind_std,
            self.max_wind_gust,
            self.max_wind_gust_std,
            self.max_wind_dir,
        )
        return not any(np.isnan(value) for value in required)
