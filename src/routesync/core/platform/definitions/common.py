# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import os
from enum import Enum, unique
from typing import Mapping, Optional

from routesync._logging_config import resolve_log_level
from routesync.core.entity import CoreData
from routesync.core.errors import ConfigurationError

DEFAULT_MAX_WORKERS = 16
DEFAULT_LOG_LEVEL = "INFO"


@unique
class RuntimeParams(str, Enum):
    SNS_TOPIC_ARN = "SNS_TOPIC_ARN"
    REGION = "AWS_REGION"
    MAX_WORKERS = "ROUTESYNC_MAX_WORKERS"
    LOG_LEVEL = "ROUTESYNC_LOG_LEVEL"


class RuntimeConfig(CoreData):
    def __init__(
        self,
        sns_topic_arn: str,
        region: Optional[str] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        log_level: str = DEFAULT_LOG_LEVEL,
    ) -> None:
        if not sns_topic_arn:
            raise ConfigurationError(f"{RuntimeParams.SNS_TOPIC_ARN.value!r} must be provided.")
        if max_workers < 1:
            raise ConfigurationError(f"{RuntimeParams.MAX_WORKERS.value!r} must be a positive integer, got {max_workers!r}.")
        try:
            resolve_log_level(log_level)
        except ValueError:
            raise ConfigurationError(f"{RuntimeParams.LOG_LEVEL.value!r} must be a logging level name, got {log_level!r}.")
        self.sns_topic_arn = sns_topic_arn
        self.region = region
        self.max_workers = max_workers
        self.log_level = log_level

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeConfig":
        environ = os.environ if environ is None else environ
        raw_max_workers = environ.get(RuntimeParams.MAX_WORKERS.value, str(DEFAULT_MAX_WORKERS))
        try:
            max_workers = int(raw_max_workers)
        except ValueError:
            raise ConfigurationError(f"{RuntimeParams.MAX_WORKERS.value!r} must be an integer, got {raw_max_workers!r}.")

        return cls(
            sns_topic_arn=environ.get(RuntimeParams.SNS_TOPIC_ARN.value, ""),
            region=environ.get(RuntimeParams.REGION.value) or None,
            max_workers=max_workers,
            log_level=environ.get(RuntimeParams.LOG_LEVEL.value, DEFAULT_LOG_LEVEL),
        )
