# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Logging setup for the arazzo-check command line."""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"
LOG_DATE_FORMAT = "[%X]"

# Records from these loggers are what the CLI has to say about loading.
PACKAGE_LOGGERS = ("arazzo_common", "arazzo_core")


def configure_logging(level: Union[int, str] = logging.WARNING, console: Optional[Console] = None) -> RichHandler:
    """Send package log records to a RichHandler on stderr.

    Calling it again replaces the handler installed by the previous call.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        for old in [h for h in logger.handlers if isinstance(h, RichHandler)]:
            logger.removeHandler(old)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return handler
