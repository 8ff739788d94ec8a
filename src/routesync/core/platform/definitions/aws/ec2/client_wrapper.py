# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from routesync._logging_config import request_log_prefix
from routesync.core.errors import DescribeError
from routesync.core.route_tables import RouteTable

from ..common import get_code_for_exception, get_message_for_exception
from .schema import DescribeRouteTablesResponse

module_logger = logging.getLogger(__name__)


def describe_route_tables(ec2, vpc_id: str, request_id: Optional[str] = None) -> List[RouteTable]:
    """Read every route table that belongs to `vpc_id`.

    :param ec2: boto3 EC2 client
    :param vpc_id: previously validated VPC resource ID
    :param request_id: prefixes the log lines of the call
    :returns the route tables in the order returned by EC2
    :raises DescribeError: if the call fails or returns a payload that does not satisfy
            :class:`DescribeRouteTablesResponse`
    """
    params: Dict[str, Any] = {
        "DryRun": False,
        # only evaluate route tables in the specified VPC
        "Filters": [{"Name": "vpc-id", "Values": [vpc_id]}],
    }
    route_tables: List[RouteTable] = []
    while True:
        try:
            page = ec2.describe_route_tables(**params)
        except (ClientError, BotoCoreError) as error:
            module_logger.error(
                f"{request_log_prefix(request_id)}DescribeRouteTables failed for VPC {vpc_id!r} "
                f"with {get_code_for_exception(error)!r}: {error}"
            )
            raise DescribeError(vpc_id, None, get_message_for_exception(error)) from error

        try:
            response = DescribeRouteTablesResponse.model_validate(page)
        except ValidationError as error:
            module_logger.error(
                f"{request_log_prefix(request_id)}DescribeRouteTables returned a malformed response for VPC {vpc_id!r}: {error}"
            )
            raise DescribeError(vpc_id, _diagnostic_payload(page), str(error)) from error

        route_tables.extend(route_table.to_route_table() for route_table in response.route_tables)

        if not response.next_token:
            break
        params["NextToken"] = response.next_token

    return route_tables


def _diagnostic_payload(page: Any) -> Any:
    if isinstance(page, dict):
        return {key: value for key, value in page.items() if key != "ResponseMetadata"}
    return page


def create_route(ec2, route_table_id: str, destination_cidr_block: str, network_interface_id: str, dry_run: bool = False):
    return ec2.create_route(
        RouteTableId=route_table_id,
        DestinationCidrBlock=destination_cidr_block,
        NetworkInterfaceId=network_interface_id,
        DryRun=dry_run,
    )


def replace_route(ec2, route_table_id: str, destination_cidr_block: str, network_interface_id: str, dry_run: bool = False):
    return ec2.replace_route(
        RouteTableId=route_table_id,
        DestinationCidrBlock=destination_cidr_block,
        NetworkInterfaceId=network_interface_id,
        DryRun=dry_run,
    )
