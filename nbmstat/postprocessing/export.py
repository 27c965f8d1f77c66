# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""Export distributions as DataFrames or as plain text data files for plotting."""
from pathlib import Path
from typing import Optional, TextIO, Union

import pandas as pd

from nbmstat.distributions.cumulative import CumulativeDistribution
from nbmstat.distributions.probability import ProbabilityDistribution
from nbmstat.distributions.scenarios import Scenario
from nbmstat.logging.logger_factory import get_logger
from nbmstat.pipeline.create_scenarios import DistributionSummary

logger = get_logger(__name__)

CDF_COLUMNS = ["valid_time", "percentile", "value"]
PDF_COLUMNS = ["valid_time", "center", "density"]
SCENARIO_COLUMNS = ["valid_time", "rank", "minimum", "mode", "maximum", "probability"]


def cdfs_to_frame(cdfs: dict[pd.Timestamp, CumulativeDistribution]) -> pd.DataFrame:
    records = [
        (valid_time, point.percentile, point.value)
        for valid_time, cdf in cdfs.items()
        for point in cdf.points
    ]
    return pd.DataFrame(records, columns=CDF_COLUMNS)


def pdfs_to_frame(pdfs: dict[pd.Timestamp, ProbabilityDistribution]) -> pd.DataFrame:
    records = [
        (valid_time, center, density)
        for valid_time, pdf in pdfs.items()
        for center, density in pdf.to_pairs()
    ]
    return pd.DataFrame(records, columns=PDF_COLUMNS)


def scenarios_to_frame(scenarios: dict[pd.Timestamp, list[Scenario]]) -> pd.DataFrame:
    """Long format scenarios, rank 1 is the most probable scenario of a valid time."""
    records = [
        (valid_time, rank, *scenario.as_tuple())
        for valid_time, scenario_list in scenarios.items()
        for rank, scenario in enumerate(scenario_list, start=1)
    ]
    return pd.DataFrame(records, columns=SCENARIO_COLUMNS)


def _write_period_header(f: TextIO, valid_time: pd.Timestamp) -> None:
    f.write(f'\n\n"Period ending: {valid_time.strftime("%a, %Y-%m-%d %HZ")}"\n')


def write_distribution_files(
    summary: DistributionSummary,
    directory: Union[str, Path],
    file_prefix: Optional[str] = None,
) -> list[Path]:
    """Save the CDFs, smoothed PDFs and scenarios of a summary as data files.

    One block per valid time is written, so the files can be plotted with e.g.
    gnuplot. The files are called ``<prefix>_<element>_cdfs.dat``,
    ``..._pdfs.dat`` and ``..._scenarios.dat``.

    Args:
        summary: The summary to save.
        directory: Existing directory to save the files in.
        file_prefix: Optional prefix for the file names.

    Returns:
        Paths of the written files.

    Raises:
        FileNotFoundError: If the directory does not exist.

    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Directory does not exist: {directory}")

    stem = summary.element_spec.name
    if file_prefix:
        stem = f"{file_prefix}_{stem}"

    cdf_path = directory / f"{stem}_cdfs.dat"
    pdf_path = directory / f"{stem}_pdfs.dat"
    scenario_path = directory / f"{stem}_scenarios.dat"

    with open(cdf_path, "w") as f:
        for valid_time, cdf in summary.cdfs.items():
            _write_period_header(f, valid_time)
            for point in cdf.points:
                f.write(f"{point.value:8f} {point.percentile:8f}\n")

    with open(pdf_path, "w") as f:
        for valid_time, pdf in summary.smoothed_pdfs.items():
            _write_period_header(f, valid_time)
            for center, density in pdf.to_pairs():
                f.write(f"{center:8f} {density:8f}\n")

    with open(scenario_path, "w") as f:
        for valid_time, scenario_list in summary.scenarios.items():
            _write_period_header(f, valid_time)
            for scenario in scenario_list:
                f.write(
                    "{:8f} {:8f} {:8f} {:8f}\n".format(*scenario.as_tuple())
                )

    logger.info(
        "Saved distribution files",
        element=summary.element_spec.name,
        directory=str(directory),
    )

    return [cdf_path, pdf_path, scenario_path]
