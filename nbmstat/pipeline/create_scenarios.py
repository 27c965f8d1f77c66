# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0
from typing import Iterable, Optional

import pandas as pd

from nbmstat.data.column_source import ColumnSource
from nbmstat.data_classes.element_spec import ElementSpecDataClass
from nbmstat.distributions.cumulative import (
    CumulativeDistribution,
    extract_cdfs,
    extract_exceedance_to_cdfs,
)
from nbmstat.distributions.probability import (
    ProbabilityDistribution,
    probability_dists_from_cdfs,
)
from nbmstat.distributions.scenarios import Scenario, search_scenarios_for_pdfs
from nbmstat.exceptions import DistributionError
from nbmstat.logging.logger_factory import get_logger

logger = get_logger(__name__)

DEFAULT_PERCENTILES = (10.0, 25.0, 50.0, 75.0, 90.0)


class DistributionSummary:
    """CDFs, PDFs and scenarios of one element, keyed by valid time.

    PDFs and scenarios are derived on first access.

    Args:
        element_spec: The element the distributions belong to.
        cdfs: Mapping of valid time to cumulative distribution.

    """

    def __init__(
        self,
        element_spec: ElementSpecDataClass,
        cdfs: dict[pd.Timestamp, CumulativeDistribution],
    ):
        self.element_spec = element_spec
        self.cdfs = cdfs
        self._pdfs: Optional[dict[pd.Timestamp, ProbabilityDistribution]] = None
        self._smoothed_pdfs: Optional[dict[pd.Timestamp, ProbabilityDistribution]] = (
            None
        )
        self._scenarios: Optional[dict[pd.Timestamp, list[Scenario]]] = None
        self.logger = get_logger(__name__).bind(element=element_spec.name)

    @property
    def pdfs(self) -> dict[pd.Timestamp, ProbabilityDistribution]:
        if self._pdfs is None:
            self._pdfs = probability_dists_from_cdfs(self.cdfs)
        return self._pdfs

    @property
    def smoothed_pdfs(self) -> dict[pd.Timestamp, ProbabilityDistribution]:
        """The smoothed distributions the scenarios were found in."""
        if self._smoothed_pdfs is None:
            self._build_scenarios()
        return self._smoothed_pdfs

    @property
    def scenarios(self) -> dict[pd.Timestamp, list[Scenario]]:
        if self._scenarios is None:
            self._build_scenarios()
        return self._scenarios

    def _build_scenarios(self) -> None:
        results = search_scenarios_for_pdfs(
            self.pdfs,
            self.element_spec.min_smooth_radius,
            self.element_spec.smooth_radius_increment,
            logger=self.logger,
        )

        scenarios = {t: result.scenarios for t, result in results.items()}
        self._scenarios = scenarios
        self._smoothed_pdfs = {t: result.pdf for t, result in results.items()}
        self.logger.info(
            "Created scenarios",
            num_valid_times=len(scenarios),
            num_skipped=len(self.cdfs) - len(scenarios),
        )


def create_distribution_summary_pipeline(
    element_spec: ElementSpecDataClass,
    source: ColumnSource,
) -> DistributionSummary:
    """Build the distributions of a weather element.

    This pipeline has no network or file dependencies, the forecast data is read
    through ``source``.

    Args:
        element_spec: Which columns to read and how to convert them.
        source: The forecast data.

    Returns:
        Summary with a CDF per valid time, PDFs and scenarios are computed on
        demand.

    """
    logger = get_logger(__name__).bind(element=element_spec.name)
    convert = element_spec.converter

    cdfs = extract_cdfs(
        source,
        element_spec.percentile_column_format,
        element_spec.deterministic_column,
        convert,
    )

    if element_spec.exceedance_column_format and element_spec.exceedance_thresholds:
        cdfs = extract_exceedance_to_cdfs(
            cdfs,
            source,
            element_spec.exceedance_column_format,
            element_spec.exceedance_thresholds,
            convert,
        )

    if not cdfs:
        logger.warning("No percentile data found for element")
    else:
        logger.info("Extracted cumulative distributions", num_valid_times=len(cdfs))

    return DistributionSummary(element_spec, cdfs)


def build_probabilistic_summary(
    cdfs: dict[pd.Timestamp, CumulativeDistribution],
    percentiles: Iterable[float] = DEFAULT_PERCENTILES,
    thresholds: Iterable[float] = (),
) -> pd.DataFrame:
    """Tabulate deterministic values, percentiles and exceedance probabilities.

    Args:
        cdfs: Mapping of valid time to cumulative distribution.
        percentiles: Percentiles to report the value of.
        thresholds: Values to report the probability (0-100) of meeting or
            exceeding.

    Returns:
        DataFrame indexed by valid time with a ``deterministic`` column, a
        ``p<percentile>`` column per percentile and a ``prob_exc_<threshold>``
        column per threshold. Valid times with an empty CDF, or whose CDF can
        not be queried, have NaN values.

    """
    percentiles = list(percentiles)
    thresholds = list(thresholds)

    records = []
    for valid_time, cdf in cdfs.items():
        record = {"deterministic": cdf.quantile_mapped_value}
        if cdf.is_empty:
            records.append(record)
            continue

        try:
            for percentile in percentiles:
                record[f"p{percentile:g}"] = cdf.value_at_percentile(percentile)
            for threshold in thresholds:
                record[f"prob_exc_{threshold:g}"] = cdf.probability_of_exceedance(
                    threshold
                )
        except DistributionError as e:
            logger.warning(
                "Skipping probabilistic summary row",
                valid_time=str(valid_time),
                reason=str(e),
            )
            record = {"deterministic": cdf.quantile_mapped_value}
        records.append(record)

    columns = (
        ["deterministic"]
        + [f"p{p:g}" for p in percentiles]
        + [f"prob_exc_{t:g}" for t in thresholds]
    )
    return pd.DataFrame(
        records,
        index=pd.Index(list(cdfs.keys()), name="valid_time"),
        columns=columns,
        dtype=float,
    )
