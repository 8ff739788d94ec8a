# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from enum import Enum, unique
from typing import Optional

from routesync._logging_config import request_log_prefix
from routesync.core.entity import CoreData
from routesync.core.route_tables import Route, RouteTable, get_route, is_network_interface_id

module_logger = logging.getLogger(__name__)


@unique
class SyncAction(str, Enum):
    CREATE = "CREATE"
    REPLACE = "REPLACE"
    SKIP = "SKIP"


@unique
class SkipReason(str, Enum):
    NO_TARGET = "NO_TARGET"
    IN_SYNC = "IN_SYNC"
    UNMANAGED_TARGET = "UNMANAGED_TARGET"


class SyncDecision(CoreData):
    def __init__(
        self,
        route_table_id: str,
        action: SyncAction,
        destination_cidr_block: str,
        network_interface_id: str,
        current_network_interface_id: Optional[str] = None,
        skip_reason: Optional[SkipReason] = None,
    ) -> None:
        self.route_table_id = route_table_id
        self.action = action
        self.destination_cidr_block = destination_cidr_block
        # target the custom table should end up with (taken from the main table's route)
        self.network_interface_id = network_interface_id
        self.current_network_interface_id = current_network_interface_id
        self.skip_reason = skip_reason

    @property
    def is_write(self) -> bool:
        return self.action in (SyncAction.CREATE, SyncAction.REPLACE)


def plan_sync(
    custom_route_table: RouteTable, destination_cidr_block: str, source_route: Route, request_id: Optional[str] = None
) -> SyncDecision:
    """Decide what has to happen to `custom_route_table` so that its route for `destination_cidr_block`
    targets the same network interface as the (already validated) `source_route`.
    """
    log_prefix = request_log_prefix(request_id)
    route_table_id = custom_route_table.route_table_id
    target = source_route.network_interface_id
    current_route = get_route(custom_route_table, destination_cidr_block)

    if current_route is None:
        module_logger.info(f"{log_prefix}Route to {destination_cidr_block!r} will be created in custom route table {route_table_id!r}.")
        return SyncDecision(route_table_id, SyncAction.CREATE, destination_cidr_block, target)

    current_target = current_route.network_interface_id

    def skip(reason: SkipReason) -> SyncDecision:
        return SyncDecision(route_table_id, SyncAction.SKIP, destination_cidr_block, target, current_target, reason)

    if not current_route.has_target:
        # a partial route (gateway, peering, ...) is never overwritten
        module_logger.warning(
            f"{log_prefix}The route with destination CIDR block: {destination_cidr_block!r} "
            f"in custom route table: {route_table_id!r} does not have an ENI target."
        )
        return skip(SkipReason.NO_TARGET)

    if current_target == target:
        module_logger.info(f"{log_prefix}Custom route table {route_table_id!r} is already in sync for {destination_cidr_block!r}.")
        return skip(SkipReason.IN_SYNC)

    if not is_network_interface_id(current_target):
        module_logger.warning(
            f"{log_prefix}The route with destination CIDR block: {destination_cidr_block!r} "
            f"in custom route table: {route_table_id!r} has an unacceptable ENI target: {current_target!r}."
        )
        return skip(SkipReason.UNMANAGED_TARGET)

    module_logger.info(
        f"{log_prefix}Route to {destination_cidr_block!r} in custom route table {route_table_id!r} "
        f"will be moved from {current_target!r} to {target!r}."
    )
    return SyncDecision(route_table_id, SyncAction.REPLACE, destination_cidr_block, target, current_target)
