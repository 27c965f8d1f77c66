# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0

"""nbmstat custom exceptions."""


class DistributionError(Exception):
    """Base class for errors computing a distribution for a single valid time."""


class EmptyDistributionError(DistributionError):
    """A distribution without any points was queried."""


class DegenerateDistributionError(DistributionError):
    """Too few points to derive the requested quantity."""

    def __init__(self, num_points: int, required: int, message: str = None):
        self.num_points = num_points
        self.required = required
        if message is None:
            message = (
                f"Distribution has {num_points} points, at least {required} required"
            )
        self.message = message
        super().__init__(self.message)


class DistributionInvariantError(DistributionError):
    """A numeric invariant of a distribution does not hold.

    This points to a defect in the cleanup of the cumulative distribution.
    """


class MissingColumnError(Exception):
    """A column required for a summary is not present in the source data."""

    def __init__(self, column: str, message: str = "Column not found in source data"):
        self.column = column
        self.message = f"{message}: '{column}'"
        super().__init__(self.message)


class InvalidElementSpecError(ValueError):
    """The element specification can not be used to build distributions."""
