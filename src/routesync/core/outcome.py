# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from enum import Enum, unique
from typing import Optional

from routesync.core.entity import CoreData
from routesync.core.planning import SyncDecision


@unique
class SyncStatus(str, Enum):
    SUCCESS = "SUCCESS"
    DRYRUN = "DRYRUN"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@unique
class FailureSource(str, Enum):
    ROUTE_WRITE = "ROUTE_WRITE"
    NOTIFICATION = "NOTIFICATION"
    INTERNAL = "INTERNAL"


class SyncOutcome(CoreData):
    """Result of the unit of work for a single custom route table.

    `modified` is True only if the backend committed a route change, which can be the case for a FAILED outcome
    as well (change applied, notification failed).
    """

    def __init__(
        self,
        decision: SyncDecision,
        status: SyncStatus,
        modified: bool = False,
        error: Optional[str] = None,
        error_code: Optional[str] = None,
        failure_source: Optional[FailureSource] = None,
    ) -> None:
        self.decision = decision
        self.status = status
        self.modified = modified
        self.error = error
        self.error_code = error_code
        self.failure_source = failure_source

    @property
    def route_table_id(self) -> str:
        return self.decision.route_table_id

    @property
    def is_failure(self) -> bool:
        return self.status == SyncStatus.FAILED
