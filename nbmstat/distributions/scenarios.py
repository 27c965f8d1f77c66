# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Split a probability distribution into a few qualitatively distinct scenarios.

The density is smoothed and then walked from left to right. Every local minimum of
the density starts a new scenario, every local maximum is the mode of the scenario
it is in. The smoothing radius is increased until only a handful of scenarios is
left.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np
import pandas as pd

from nbmstat.distributions.probability import ProbabilityDistribution
from nbmstat.exceptions import DistributionError
from nbmstat.logging.logger_factory import get_logger
from nbmstat.settings import Settings

logger = get_logger(__name__)


class _Trend(IntEnum):
    DOWN = -1
    UP = 1


@dataclass(frozen=True)
class Scenario:
    """A value range with its most likely value and probability."""

    minimum: float
    maximum: float
    mode: float
    probability: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return ``(minimum, mode, maximum, probability)``."""
        return self.minimum, self.mode, self.maximum, self.probability


@dataclass(frozen=True)
class ScenarioSearchResult:
    scenarios: list[Scenario]
    pdf: ProbabilityDistribution
    radius: float
    iterations: int
    converged: bool


def walk_extrema(pdf: ProbabilityDistribution) -> list[Scenario]:
    """Partition a distribution at the local minima of its density.

    Args:
        pdf: Distribution with at least one interval.

    Returns:
        Scenarios sorted from highest to lowest probability.

    """
    points = pdf.points
    if not points:
        raise DistributionError("Can not find scenarios in an empty distribution")

    scenarios: list[Scenario] = []

    minimum = points[0].minimum
    mode = np.nan
    if len(points) > 1 and points[1].density < points[0].density:
        # Starting at a maximum
        mode = points[0].center
        trend = _Trend.DOWN
    else:
        trend = _Trend.UP
    area = points[0].probability_area

    for previous, current in zip(points, points[1:]):
        new_trend = _Trend.DOWN if current.density < previous.density else _Trend.UP

        if trend == _Trend.UP and new_trend == _Trend.DOWN:
            mode = previous.center
        elif trend == _Trend.DOWN and new_trend == _Trend.UP:
            scenarios.append(Scenario(minimum, current.minimum, mode, area))
            minimum = current.minimum
            mode = np.nan
            area = 0.0

        area += current.probability_area
        trend = new_trend

    last = points[-1]
    if np.isnan(mode):
        mode = last.center
    scenarios.append(Scenario(minimum, last.maximum, mode, area))

    return sorted(scenarios, key=lambda sc: sc.probability, reverse=True)


def search_scenarios(
    pdf: ProbabilityDistribution,
    min_radius: Optional[float] = None,
    radius_increment: Optional[float] = None,
    max_scenarios: Optional[int] = None,
    max_iterations: Optional[int] = None,
) -> ScenarioSearchResult:
    """Smooth ``pdf`` with growing radii until few enough scenarios remain.

    If no radius within ``max_iterations`` attempts gives at most ``max_scenarios``
    scenarios, the most probable ones of the last attempt are kept and their
    probabilities rescaled to sum to one.

    Args:
        pdf: The distribution to analyze, it is not modified.
        min_radius: First smoothing radius tried.
        radius_increment: Amount the radius grows by per attempt.
        max_scenarios: Maximum number of scenarios.
        max_iterations: Maximum number of radii tried.

    Returns:
        The scenarios together with the smoothed distribution they came from.

    Raises:
        ValueError: If a radius is not strictly positive, or if ``max_scenarios``
            or ``max_iterations`` is smaller than one.

    """
    min_radius = Settings.min_smooth_radius if min_radius is None else min_radius
    radius_increment = (
        Settings.smooth_radius_increment
        if radius_increment is None
        else radius_increment
    )
    max_scenarios = Settings.max_scenarios if max_scenarios is None else max_scenarios
    max_iterations = (
        Settings.max_smoothing_iterations if max_iterations is None else max_iterations
    )

    if not min_radius > 0.0:
        raise ValueError(f"Minimum smoothing radius must be positive, got {min_radius}")
    if not radius_increment > 0.0:
        raise ValueError(
            f"Smoothing radius increment must be positive, got {radius_increment}"
        )
    if max_scenarios < 1:
        raise ValueError(f"At least one scenario must be allowed, got {max_scenarios}")
    if max_iterations < 1:
        raise ValueError(
            f"At least one smoothing iteration is required, got {max_iterations}"
        )

    radius = min_radius
    for iteration in range(1, max_iterations + 1):
        smoothed = pdf.smooth(radius)
        scenarios = walk_extrema(smoothed)
        if len(scenarios) <= max_scenarios:
            return ScenarioSearchResult(scenarios, smoothed, radius, iteration, True)
        radius += radius_increment

    logger.warning(
        "Scenario search did not converge, keeping most probable scenarios",
        radius=radius - radius_increment,
        num_scenarios=len(scenarios),
        max_scenarios=max_scenarios,
    )
    kept = scenarios[:max_scenarios]
    total = sum(sc.probability for sc in kept)
    kept = [
        Scenario(sc.minimum, sc.maximum, sc.mode, sc.probability / total)
        for sc in kept
    ]
    return ScenarioSearchResult(
        kept, smoothed, radius - radius_increment, max_iterations, False
    )


def find_scenarios(
    pdf: ProbabilityDistribution,
    min_radius: Optional[float] = None,
    radius_increment: Optional[float] = None,
) -> list[Scenario]:
    """Find at most four scenarios, sorted from most to least probable."""
    return search_scenarios(pdf, min_radius, radius_increment).scenarios


def search_scenarios_for_pdfs(
    pdfs: dict[pd.Timestamp, ProbabilityDistribution],
    min_radius: Optional[float] = None,
    radius_increment: Optional[float] = None,
    logger=logger,
) -> dict[pd.Timestamp, ScenarioSearchResult]:
    """Apply ``search_scenarios`` to every valid time.

    A valid time whose analysis fails is logged and left out.

    Args:
        pdfs: Mapping of valid time to probability distribution.
        min_radius: First smoothing radius tried.
        radius_increment: Amount the radius grows by per attempt.
        logger: Logger for skipped valid times, e.g. one bound with the element.

    Returns:
        Mapping of valid time to search result, in the order of ``pdfs``.

    """
    results = {}
    for valid_time, pdf in pdfs.items():
        try:
            results[valid_time] = search_scenarios(pdf, min_radius, radius_increment)
        except DistributionError as e:
            logger.warning(
                "Skipping scenarios",
                valid_time=str(valid_time),
                reason=str(e),
            )
    return results


def create_scenarios_from_pdfs(
    pdfs: dict[pd.Timestamp, ProbabilityDistribution],
    min_radius: Optional[float] = None,
    radius_increment: Optional[float] = None,
) -> dict[pd.Timestamp, list[Scenario]]:
    """Apply ``find_scenarios`` to every valid time.

    A valid time whose analysis fails is logged and left out.
    """
    results = search_scenarios_for_pdfs(pdfs, min_radius, radius_increment)
    return {valid_time: result.scenarios for valid_time, result in results.items()}
