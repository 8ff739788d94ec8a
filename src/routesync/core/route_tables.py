# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""Route table entities as read from the cloud provider and the pure functions that classify them.

Everything in this module operates on an immutable snapshot taken at the beginning of a request, so the same
snapshot can be shared by the per-table workers without any locking.
"""

import logging
import re
from enum import Enum, unique
from typing import List, Optional, Sequence, Tuple

from routesync._logging_config import request_log_prefix
from routesync.core.entity import CoreData

module_logger = logging.getLogger(__name__)

# resource IDs come in the legacy 8 and the current 17 hex digit forms
VPC_ID_SHAPE = r"vpc-[0-9a-f]{8}(?:[0-9a-f]{9})?"
ROUTE_TABLE_ID_SHAPE = r"rtb-[0-9a-f]{8}(?:[0-9a-f]{9})?"
NETWORK_INTERFACE_ID_PATTERN = re.compile(r"^eni-[a-f0-9]{8}(?:[a-f0-9]{9})?$")


@unique
class RouteState(str, Enum):
    ACTIVE = "active"
    BLACKHOLE = "blackhole"


@unique
class RouteOrigin(str, Enum):
    CREATE_ROUTE = "CreateRoute"
    CREATE_ROUTE_TABLE = "CreateRouteTable"
    ENABLE_VGW_ROUTE_PROPAGATION = "EnableVgwRoutePropagation"


def is_network_interface_id(value: Optional[str]) -> bool:
    return bool(value) and bool(NETWORK_INTERFACE_ID_PATTERN.match(value))


class RouteTableAssociation(CoreData):
    def __init__(self, is_main: bool, association_id: Optional[str] = None, subnet_id: Optional[str] = None) -> None:
        self.is_main = is_main
        self.association_id = association_id
        self.subnet_id = subnet_id


class Route(CoreData):
    """A single route entry. `state` and `origin` are kept as the raw strings returned by the provider so that
    values unknown to :class:`RouteState` / :class:`RouteOrigin` can still be reported back to the caller.

    A route without `network_interface_id` is a partial route (its target is a gateway, a peering connection, etc.).
    """

    def __init__(
        self,
        destination_cidr_block: Optional[str],
        state: Optional[str],
        origin: Optional[str],
        network_interface_id: Optional[str] = None,
    ) -> None:
        self.destination_cidr_block = destination_cidr_block
        self.state = state
        self.origin = origin
        self.network_interface_id = network_interface_id

    @property
    def has_target(self) -> bool:
        return bool(self.network_interface_id)


class RouteTable(CoreData):
    def __init__(
        self,
        route_table_id: str,
        associations: Sequence[RouteTableAssociation] = (),
        routes: Sequence[Route] = (),
        vpc_id: Optional[str] = None,
    ) -> None:
        self.route_table_id = route_table_id
        self.associations: Tuple[RouteTableAssociation, ...] = tuple(associations)
        self.routes: Tuple[Route, ...] = tuple(routes)
        self.vpc_id = vpc_id

    @property
    def main_association_count(self) -> int:
        return len([association for association in self.associations if association.is_main is True])


def get_main_route_table(route_tables: Sequence[RouteTable], request_id: Optional[str] = None) -> Optional[RouteTable]:
    """Return the unique table with exactly one main association.

    Zero or multiple qualifying tables is an ambiguous snapshot and is treated as if there were no main table.
    """
    main_route_tables = [route_table for route_table in route_tables if route_table.main_association_count == 1]
    if len(main_route_tables) != 1:
        module_logger.warning(
            f"{request_log_prefix(request_id)}Expected exactly one main route table, found {len(main_route_tables)} "
            f"({[route_table.route_table_id for route_table in main_route_tables]!r})."
        )
        return None
    return main_route_tables[0]


def get_custom_route_tables(route_tables: Sequence[RouteTable], main_route_table_id: str) -> List[RouteTable]:
    """Every table other than `main_route_table_id` that carries no main association."""
    return [
        route_table
        for route_table in route_tables
        if route_table.route_table_id != main_route_table_id and route_table.main_association_count == 0
    ]


def get_route(route_table: RouteTable, destination_cidr_block: str) -> Optional[Route]:
    """Locate the route for `destination_cidr_block` using exact string comparison.

    Returns None if there is no match or if the match is ambiguous; an arbitrary pick is never made.
    """
    routes = [
        route
        for route in route_table.routes
        if route.destination_cidr_block and route.destination_cidr_block == destination_cidr_block
    ]
    return routes[0] if len(routes) == 1 else None
