# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

from pathlib import Path

from setuptools import find_packages, setup

pkg_dir = Path(__file__).parent.absolute()


def read_requirements_from_file():
    with open(pkg_dir / "requirements.txt") as fh:
        requirements = []
        for line in fh:
            line = line.strip()
            if "#" in line:
                line = line[: line.index("#")].strip()
            if len(line) == 0:
                continue
            requirements.append(line)
        return requirements


def read_long_description_from_readme():
    with open(pkg_dir / "README.md", "r", encoding="utf-8") as fh:
        return fh.read()


setup(
    name="nbmstat",
    version="1.0.0",
    packages=find_packages(include=["nbmstat", "nbmstat.*"]),
    description="Probabilistic summaries and scenarios from percentile based ensemble forecasts",
    long_description=read_long_description_from_readme(),
    long_description_content_type="text/markdown",
    license="MPL-2.0",
    keywords=["weather", "forecasting", "probabilistic", "ensemble"],
    python_requires=">=3.11.0",
    install_requires=read_requirements_from_file(),
    setup_requires=["wheel"],
    tests_require=["pytest", "pytest-cov", "flake8"],
    extras_require={
        "test": ["pytest", "pytest-cov", "flake8"],
    },
    classifiers=[
        r"Development Status :: 5 - Production/Stable",
        "Intended Audience :: Science/Research",
        r"License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)",
        "Programming Language :: Python :: 3.11",
    ],
)
