# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nbmstat.enums import LoggerType


class AppSettings(BaseSettings):
    """Global app settings."""

    model_config = SettingsConfigDict(
        env_prefix="nbmstat_", env_file=".env", extra="ignore"
    )

    logger_type: LoggerType = Field(
        LoggerType.STRUCTLOG,
        description="The type of logger to use.",
    )

    # Logging settings.
    log_level: str = Field("INFO", description="Log level used for logging statements.")

    # Scenario settings.
    min_smooth_radius: float = Field(
        1.0,
        gt=0.0,
        description="Default starting radius of the Gaussian kernel used when searching scenarios.",
    )
    smooth_radius_increment: float = Field(
        2.0,
        gt=0.0,
        description="Default amount the smoothing radius grows by when too many scenarios are found.",
    )
    max_scenarios: int = Field(
        4, ge=1, description="Maximum number of scenarios reported per valid time."
    )
    max_smoothing_iterations: int = Field(
        100,
        ge=1,
        description="Number of smoothing radii tried before the scenario search gives up and truncates.",
    )

    strict_invariants: bool = Field(
        True,
        description="Raise when a distribution invariant is violated instead of clamping the result.",
    )
