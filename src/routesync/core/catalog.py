# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import List, Optional, Sequence

from routesync._logging_config import request_log_prefix
from routesync.core.entity import CoreData
from routesync.core.errors import VpcNotFoundError
from routesync.core.platform.definitions.aws.ec2.client_wrapper import describe_route_tables
from routesync.core.route_tables import RouteTable, get_custom_route_tables, get_main_route_table

module_logger = logging.getLogger(__name__)


class RouteTableSnapshot(CoreData):
    """Read-only view of a VPC's route tables, shared by all of the per-table workers of a request."""

    def __init__(self, vpc_id: str, route_tables: Sequence[RouteTable]) -> None:
        self.vpc_id = vpc_id
        self.route_tables = tuple(route_tables)

    @property
    def sync_needed(self) -> bool:
        # a main table and at least one other table are required
        return len(self.route_tables) > 1

    def main_route_table(self, request_id: Optional[str] = None) -> Optional[RouteTable]:
        return get_main_route_table(self.route_tables, request_id)

    def custom_route_tables(self, main_route_table_id: str) -> List[RouteTable]:
        return get_custom_route_tables(self.route_tables, main_route_table_id)


class RouteTableCatalog:
    def __init__(self, ec2) -> None:
        self._ec2 = ec2

    def load(self, vpc_id: str, request_id: Optional[str] = None) -> RouteTableSnapshot:
        """Fetch the route tables of `vpc_id`.

        :raises DescribeError: the read failed or returned a malformed collection
        :raises VpcNotFoundError: no route table is visible for the VPC
        """
        route_tables = describe_route_tables(self._ec2, vpc_id, request_id)
        module_logger.info(f"{request_log_prefix(request_id)}Found {len(route_tables)} route table(s) in VPC {vpc_id!r}.")
        if not route_tables:
            raise VpcNotFoundError(vpc_id)
        return RouteTableSnapshot(vpc_id, route_tables)
