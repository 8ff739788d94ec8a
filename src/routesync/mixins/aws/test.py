# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import json
import os
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from routesync.core.route_tables import Route, RouteOrigin, RouteState, RouteTable, RouteTableAssociation

DRY_RUN_MESSAGE = "Request would have succeeded, but DryRun flag is set."


def client_error(code: str, message: str = "", operation_name: str = "op") -> ClientError:
    return ClientError(operation_name=operation_name, error_response={"Error": {"Code": code, "Message": message}})


def route_dict(
    destination_cidr_block: str,
    network_interface_id: Optional[str] = None,
    state: str = RouteState.ACTIVE.value,
    origin: str = RouteOrigin.CREATE_ROUTE.value,
    gateway_id: Optional[str] = None,
) -> Dict[str, Any]:
    route = {"DestinationCidrBlock": destination_cidr_block, "State": state, "Origin": origin}
    if network_interface_id:
        route["NetworkInterfaceId"] = network_interface_id
    if gateway_id:
        route["GatewayId"] = gateway_id
    return route


def route_table_dict(route_table_id: str, vpc_id: str, main: bool = False, routes: Sequence[Dict[str, Any]] = ()) -> Dict[str, Any]:
    """Route table in the shape returned by EC2 DescribeRouteTables"""
    associations = []
    if main:
        associations.append({"Main": True, "RouteTableAssociationId": f"rtbassoc-{route_table_id[4:]}", "RouteTableId": route_table_id})
    return {
        "RouteTableId": route_table_id,
        "VpcId": vpc_id,
        "Associations": associations,
        "Routes": [route_dict("10.0.0.0/16", gateway_id="local", origin=RouteOrigin.CREATE_ROUTE_TABLE.value)] + list(routes),
        "PropagatingVgws": [],
        "Tags": [],
        "OwnerId": "123456789012",
    }


def make_route(
    destination_cidr_block: str = "10.0.0.0/24",
    network_interface_id: Optional[str] = "eni-aaaaaaaa",
    state: Optional[str] = RouteState.ACTIVE.value,
    origin: Optional[str] = RouteOrigin.CREATE_ROUTE.value,
) -> Route:
    return Route(destination_cidr_block, state, origin, network_interface_id)


def make_route_table(route_table_id: str, main: bool = False, routes: Sequence[Route] = (), main_associations: int = None) -> RouteTable:
    count = main_associations if main_associations is not None else (1 if main else 0)
    associations = [RouteTableAssociation(True, f"rtbassoc-{i}") for i in range(count)]
    associations.append(RouteTableAssociation(False, "rtbassoc-subnet", "subnet-12345678"))
    return RouteTable(route_table_id, associations, routes)


class SimulatedEC2:
    """In-memory stand-in for the EC2 route table API (describe/create/replace) with DryRun semantics.

    Behaves like a boto3 EC2 client for the calls made by route synchronization. Failures can be injected per
    (operation, route table) via :meth:`fail`.
    """

    def __init__(self, route_tables: Sequence[Dict[str, Any]] = (), page_size: Optional[int] = None) -> None:
        self._route_tables: List[Dict[str, Any]] = json.loads(json.dumps(list(route_tables)))
        self._page_size = page_size
        self._failures: Dict[Tuple[str, Optional[str]], ClientError] = {}
        self._lock = threading.Lock()
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def fail(self, operation: str, route_table_id: Optional[str], code: str, message: str = "") -> None:
        self._failures[(operation, route_table_id)] = client_error(code, message, operation)

    def _check_failure(self, operation: str, route_table_id: Optional[str]) -> None:
        error = self._failures.get((operation, route_table_id)) or self._failures.get((operation, None))
        if error:
            raise error

    def _record(self, operation: str, params: Dict[str, Any]) -> None:
        with self._lock:
            self.calls.append((operation, dict(params)))

    def _table(self, route_table_id: str) -> Dict[str, Any]:
        for route_table in self._route_tables:
            if route_table["RouteTableId"] == route_table_id:
                return route_table
        raise client_error("InvalidRouteTableID.NotFound", f"The routeTable ID '{route_table_id}' does not exist")

    def route_targets(self, route_table_id: str) -> Dict[str, Optional[str]]:
        return {route.get("DestinationCidrBlock"): route.get("NetworkInterfaceId") for route in self._table(route_table_id)["Routes"]}

    def describe_route_tables(self, DryRun: bool = False, Filters: Sequence[Dict[str, Any]] = (), NextToken: Optional[str] = None):
        self._record("DescribeRouteTables", {"Filters": Filters, "NextToken": NextToken})
        self._check_failure("DescribeRouteTables", None)
        vpc_ids = set()
        for filter_ in Filters:
            if filter_["Name"] == "vpc-id":
                vpc_ids.update(filter_["Values"])
        with self._lock:
            matching = [json.loads(json.dumps(rt)) for rt in self._route_tables if not vpc_ids or rt["VpcId"] in vpc_ids]

        start = int(NextToken) if NextToken else 0
        end = start + self._page_size if self._page_size else len(matching)
        response = {"RouteTables": matching[start:end], "ResponseMetadata": {"HTTPStatusCode": 200}}
        if end < len(matching):
            response["NextToken"] = str(end)
        return response

    def create_route(self, RouteTableId: str, DestinationCidrBlock: str, NetworkInterfaceId: str, DryRun: bool = False):
        self._record("CreateRoute", {"RouteTableId": RouteTableId, "DestinationCidrBlock": DestinationCidrBlock, "NetworkInterfaceId": NetworkInterfaceId, "DryRun": DryRun})
        self._check_failure("CreateRoute", RouteTableId)
        with self._lock:
            route_table = self._table(RouteTableId)
            if DryRun:
                raise client_error("DryRunOperation", DRY_RUN_MESSAGE, "CreateRoute")
            if any(route.get("DestinationCidrBlock") == DestinationCidrBlock for route in route_table["Routes"]):
                raise client_error("RouteAlreadyExists", f"The route identified by {DestinationCidrBlock} already exists.", "CreateRoute")
            route_table["Routes"].append(route_dict(DestinationCidrBlock, NetworkInterfaceId))
        return {"Return": True}

    def replace_route(self, RouteTableId: str, DestinationCidrBlock: str, NetworkInterfaceId: str, DryRun: bool = False):
        self._record("ReplaceRoute", {"RouteTableId": RouteTableId, "DestinationCidrBlock": DestinationCidrBlock, "NetworkInterfaceId": NetworkInterfaceId, "DryRun": DryRun})
        self._check_failure("ReplaceRoute", RouteTableId)
        with self._lock:
            route_table = self._table(RouteTableId)
            if DryRun:
                raise client_error("DryRunOperation", DRY_RUN_MESSAGE, "ReplaceRoute")
            for route in route_table["Routes"]:
                if route.get("DestinationCidrBlock") == DestinationCidrBlock:
                    route.update(route_dict(DestinationCidrBlock, NetworkInterfaceId))
                    return {}
        raise client_error("InvalidRoute.NotFound", f"no route with destination-cidr-block {DestinationCidrBlock} in route table {RouteTableId}", "ReplaceRoute")


class SimulatedSNS:
    """Records published messages, enforcing the subject length limit of SNS."""

    def __init__(self) -> None:
        self.messages: List[Dict[str, str]] = []
        self._error: Optional[ClientError] = None
        self._lock = threading.Lock()

    def fail(self, code: str = "InternalError", message: str = "SNS is unavailable") -> None:
        self._error = client_error(code, message, "Publish")

    def publish(self, TopicArn: str, Subject: str, Message: str):
        if self._error:
            raise self._error
        if len(Subject) >= 100:
            raise client_error("InvalidParameter", "Invalid parameter: Subject", "Publish")
        with self._lock:
            self.messages.append({"TopicArn": TopicArn, "Subject": Subject, "Message": Message})
            return {"MessageId": str(len(self.messages))}

    @property
    def subjects(self) -> List[str]:
        return [message["Subject"] for message in self.messages]


class AWSTestBase:
    testing_keyname = "testing"
    region = "us-east-1"
    # default moto acc id
    account_id = "123456789012"
    topic_arn = "arn:aws:sns:us-east-1:123456789012:route-sync"

    @pytest.fixture(scope="class")
    def aws_credentials(self):
        os.environ["AWS_ACCESS_KEY_ID"] = self.testing_keyname
        os.environ["AWS_SECRET_ACCESS_KEY"] = self.testing_keyname
        os.environ["AWS_SECURITY_TOKEN"] = self.testing_keyname
        os.environ["AWS_SESSION_TOKEN"] = self.testing_keyname
        os.environ["AWS_DEFAULT_REGION"] = self.region

    @pytest.fixture()
    def mocked_aws(self, aws_credentials):
        with mock_aws():
            yield

    @pytest.fixture()
    def simulated_sns(self) -> SimulatedSNS:
        return SimulatedSNS()
