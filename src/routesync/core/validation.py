# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Optional

from routesync._logging_config import request_log_prefix
from routesync.core.errors import NoTargetError, RouteNotActiveError, RouteNotFoundError, UnacceptableOriginError, UnacceptableTargetError
from routesync.core.route_tables import Route, RouteOrigin, RouteState, is_network_interface_id

module_logger = logging.getLogger(__name__)


def validate_source_route(
    route: Optional[Route], destination_cidr_block: str, main_route_table_id: str, request_id: Optional[str] = None
) -> Route:
    """Check that the main table's route can be propagated to the custom tables.

    Rules are evaluated in order and the first violation is raised.

    :raises RouteNotFoundError: no (unambiguous) route for the destination
    :raises RouteNotActiveError: route state is not 'active'
    :raises UnacceptableOriginError: route was not created with CreateRoute
    :raises NoTargetError: route does not target a network interface
    :raises UnacceptableTargetError: network interface ID is malformed
    """
    route_desc = f"route with destination CIDR block: '{destination_cidr_block}' "
    if route is None:
        raise RouteNotFoundError(f"A {route_desc}not found in main route table: '{main_route_table_id}'.")

    route_desc = f"The {route_desc}in main route table: '{main_route_table_id}' "
    if route.state != RouteState.ACTIVE.value:
        raise RouteNotActiveError(f"{route_desc}is not in an 'active' state: '{route.state}'.")

    # routes present since the creation of the table (CreateRouteTable) or propagated from a virtual private
    # gateway (EnableVgwRoutePropagation) cannot be managed on their own
    if route.origin != RouteOrigin.CREATE_ROUTE.value:
        raise UnacceptableOriginError(f"{route_desc}has an origin value that is not 'CreateRoute': '{route.origin}'.")

    if not route.has_target:
        raise NoTargetError(f"{route_desc}does not have an ENI target.")

    if not is_network_interface_id(route.network_interface_id):
        raise UnacceptableTargetError(f"{route_desc}has an unacceptable ENI target: '{route.network_interface_id}'.")

    module_logger.info(f"{request_log_prefix(request_id)}{route_desc}is acceptable.")
    return route
