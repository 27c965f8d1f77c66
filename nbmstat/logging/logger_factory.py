# SPDX-FileCopyrightText: 2017-2025 Contributors to the OpenSTEF project <korte.termijn.prognoses@alliander.com> # noqa E501>
#
# SPDX-License-Identifier: MPL-2.0
import logging
from typing import Optional, Union

import structlog

from nbmstat.enums import LoggerType
from nbmstat.settings import Settings


def get_logger(name: str, logger_type: Optional[Union[LoggerType, str]] = None):
    """Get a bound logger that accepts key/value context.

    Args:
        name: Name of the logger, usually ``__name__``.
        logger_type: Backend to use. Defaults to ``Settings.logger_type``.

    Returns:
        A structlog bound logger.

    Raises:
        ValueError: If the logger type is unknown.

    """
    if logger_type is None:
        logger_type = Settings.logger_type

    if logger_type == LoggerType.STRUCTLOG:
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(Settings.log_level)
            )
        )
        return structlog.get_logger(name)
    elif logger_type == LoggerType.STANDARD:
        logging.basicConfig(level=Settings.log_level)
        # Render the context into the message so stdlib handlers keep it
        return structlog.wrap_logger(
            logging.getLogger(name),
            wrapper_class=structlog.stdlib.BoundLogger,
            processors=[structlog.processors.KeyValueRenderer(key_order=["event"])],
        )
    else:
        raise ValueError(f"Unknown logger type: {logger_type}")
