# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Optional

import shortuuid
from dateutil.tz import tzutc

from routesync.core.entity import CoreData


def utc_now() -> datetime:
    return datetime.now(tz=tzutc())


def format_timestamp(timestamp: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g '2021-03-04T05:06:07.089Z'"""
    timestamp = timestamp.astimezone(tzutc())
    return timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp.microsecond // 1000:03d}Z"


class SyncRequest(CoreData):
    """Inputs of one synchronization run. Identifiers are expected to be validated and lower-cased already."""

    def __init__(
        self,
        vpc_id: str,
        route_table_id: str,
        destination_cidr_block: str,
        dry_run: bool = False,
        request_id: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ) -> None:
        self.vpc_id = vpc_id
        self.route_table_id = route_table_id
        self.destination_cidr_block = destination_cidr_block
        self.dry_run = dry_run
        self.request_id = request_id if request_id else shortuuid.uuid()
        self.started_at = started_at if started_at else utc_now()
