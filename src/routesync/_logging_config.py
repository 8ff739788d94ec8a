# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional, Union

"""
Provide default logging setup
"""

LOG_DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"
LOG_FORMAT = "%(levelname)s | %(asctime)-15s | %(message)s"
CORE_LOG_FILE = "routesync_core.log"

_ROUTESYNC_HANDLER_MARKER = "_routesync_handler"


def resolve_log_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level {level!r}")
        return resolved
    return level


def init_basic_logging(log_dir=None, enable_console_logging=True, root_level: Union[int, str] = logging.INFO):
    root_level = resolve_log_level(root_level)
    logger = logging.getLogger()
    logger.setLevel(root_level)

    # warm Lambda containers re-enter the handler, do not stack handlers
    for handler in list(logger.handlers):
        if getattr(handler, _ROUTESYNC_HANDLER_MARKER, False):
            logger.removeHandler(handler)

    if enable_console_logging:
        # add stdout handler, with level INFO
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(root_level)
        console_formatter = logging.Formatter("%(asctime)s - %(name)-13s: %(levelname)-8s %(message)s")
        console.setFormatter(console_formatter)
        setattr(console, _ROUTESYNC_HANDLER_MARKER, True)
        logger.addHandler(console)

    # Add file rotating handler, with level DEBUG
    if log_dir:
        if not Path(log_dir).exists():
            Path(log_dir).mkdir(parents=True)
        rotatingHandler = logging.handlers.RotatingFileHandler(filename=log_dir + os.path.sep + CORE_LOG_FILE, maxBytes=5000, backupCount=5)
        rotatingHandler.setLevel(logging.DEBUG)
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        rotatingHandler.setFormatter(formatter)
        setattr(rotatingHandler, _ROUTESYNC_HANDLER_MARKER, True)
        logger.addHandler(rotatingHandler)

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(max(root_level, logging.INFO))

    # refer
    #   https: // docs.python.org / 3 / library / logging.html  # logging.basicConfig
    # for more details.
    logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, level=root_level)

    return logger


def request_log_prefix(request_id: Optional[str]) -> str:
    """'[<request_id>] ' for log lines emitted on behalf of a request, empty outside of one."""
    return f"[{request_id}] " if request_id else ""
