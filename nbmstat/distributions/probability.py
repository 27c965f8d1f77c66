# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Piecewise constant probability density functions derived from a CDF."""
from typing import Iterable, NamedTuple

import numpy as np
import pandas as pd

from nbmstat.distributions.cumulative import CumulativeDistribution
from nbmstat.exceptions import (
    DegenerateDistributionError,
    DistributionError,
    DistributionInvariantError,
)
from nbmstat.logging.logger_factory import get_logger

logger = get_logger(__name__)


class PDFPoint(NamedTuple):
    """Constant density over the interval [minimum, maximum)."""

    minimum: float
    maximum: float
    density: float

    @property
    def width(self) -> float:
        return self.maximum - self.minimum

    @property
    def center(self) -> float:
        return (self.minimum + self.maximum) / 2.0

    @property
    def probability_area(self) -> float:
        # A point mass carries its density as probability
        if self.width > 0.0:
            return self.width * self.density
        return self.density


class ProbabilityDistribution:
    """A probability density function made of non overlapping intervals.

    Instances are not modified after creation, smoothing and normalizing return a
    new distribution.

    Args:
        points: The intervals, in ascending order.

    """

    def __init__(self, points: Iterable[PDFPoint]):
        self._points = tuple(PDFPoint(*p) for p in points)

    @classmethod
    def from_cdf(cls, cdf: CumulativeDistribution) -> "ProbabilityDistribution":
        """Differentiate a cumulative distribution.

        Every pair of consecutive CDF points becomes an interval with density
        ``delta percentile / delta value``. Points at the 100th percentile are end
        markers and do not start an interval. Zero width intervals are dropped; if
        nothing is left a single point mass is used.

        Args:
            cdf: The source distribution, it is finalized if needed.

        Returns:
            The normalized probability distribution.

        Raises:
            DegenerateDistributionError: If the CDF has fewer than two points.

        """
        cdf_points = cdf.points
        if len(cdf_points) < 2:
            raise DegenerateDistributionError(len(cdf_points), 2)

        pdf_points = []
        for left, right in zip(cdf_points, cdf_points[1:]):
            if right.percentile >= 100.0:
                continue

            width = right.value - left.value
            if width <= 0.0:
                continue

            density = (right.percentile - left.percentile) / width
            if np.isfinite(density):
                pdf_points.append(PDFPoint(left.value, right.value, density))

        if not pdf_points:
            value = cdf_points[0].value
            pdf_points.append(PDFPoint(value, value, 1.0))

        return cls(pdf_points).normalized()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __repr__(self) -> str:
        return f"ProbabilityDistribution(points={self._points!r})"

    @property
    def points(self) -> tuple[PDFPoint, ...]:
        return self._points

    def copy(self) -> "ProbabilityDistribution":
        return ProbabilityDistribution(self._points)

    def centers(self) -> np.ndarray:
        return np.array([p.center for p in self._points], dtype=float)

    def densities(self) -> np.ndarray:
        return np.array([p.density for p in self._points], dtype=float)

    def total_probability(self) -> float:
        return float(sum(p.probability_area for p in self._points))

    def to_pairs(self) -> list[tuple[float, float]]:
        """Export as ``(center, density)`` pairs, e.g. for plotting."""
        return [(p.center, p.density) for p in self._points]

    def normalized(self) -> "ProbabilityDistribution":
        """Rescale the densities so the total probability is 1.

        Raises:
            DistributionInvariantError: If the total probability is not positive.

        """
        total = self.total_probability()
        if not np.isfinite(total) or total <= 0.0:
            raise DistributionInvariantError(
                f"Can not normalize a distribution with total probability {total}"
            )

        return ProbabilityDistribution(
            p._replace(density=p.density / total) for p in self._points
        )

    def smooth(self, radius: float) -> "ProbabilityDistribution":
        """Smooth the densities with a Gaussian kernel over the interval centers.

        Args:
            radius: Standard deviation of the kernel, in value units.

        Returns:
            A new, normalized, distribution with the same intervals.

        Raises:
            ValueError: If the radius is not strictly positive.

        """
        if not radius > 0.0:
            raise ValueError(f"Smoothing radius must be positive, got {radius}")

        centers = self.centers()
        distance = centers[:, np.newaxis] - centers[np.newaxis, :]
        kernel = np.exp(-(distance**2) / (2.0 * radius * radius))

        numerator = kernel @ self.densities()
        denominator = kernel.sum(axis=1)
        with np.errstate(divide="ignore", invalid="ignore"):
            smoothed = np.where(denominator > 0.0, numerator / denominator, 0.0)

        return ProbabilityDistribution(
            p._replace(density=float(d)) for p, d in zip(self._points, smoothed)
        ).normalized()


def probability_dists_from_cdfs(
    cdfs: dict[pd.Timestamp, CumulativeDistribution],
) -> dict[pd.Timestamp, ProbabilityDistribution]:
    """Derive a probability distribution for every valid time.

    Valid times whose CDF can not be differentiated are logged and left out.
    """
    pdfs = {}
    for valid_time, cdf in cdfs.items():
        try:
            pdfs[valid_time] = ProbabilityDistribution.from_cdf(cdf)
        except DistributionError as e:
            logger.warning(
                "Skipping probability distribution",
                valid_time=str(valid_time),
                reason=str(e),
            )
    return pdfs
