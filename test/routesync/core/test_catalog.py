# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from routesync.core.catalog import RouteTableCatalog
from routesync.core.errors import DescribeError, VpcNotFoundError
from routesync.mixins.aws.test import route_dict, route_table_dict

VPC_ID = "vpc-0123abcd"


class TestRouteTableCatalog:
    def test_load(self, simulated_ec2_factory):
        ec2 = simulated_ec2_factory(
            route_table_dict("rtb-0000aaaa", VPC_ID, main=True, routes=[route_dict("10.0.0.0/24", "eni-aaaaaaaa")]),
            route_table_dict("rtb-1111bbbb", VPC_ID),
            route_table_dict("rtb-9999ffff", "vpc-99999999", main=True),
        )
        snapshot = RouteTableCatalog(ec2).load(VPC_ID)

        assert [rt.route_table_id for rt in snapshot.route_tables] == ["rtb-0000aaaa", "rtb-1111bbbb"]
        assert snapshot.sync_needed
        assert snapshot.main_route_table().route_table_id == "rtb-0000aaaa"
        assert [rt.route_table_id for rt in snapshot.custom_route_tables("rtb-0000aaaa")] == ["rtb-1111bbbb"]

    def test_load_single_table_needs_no_sync(self, simulated_ec2_factory):
        ec2 = simulated_ec2_factory(route_table_dict("rtb-0000aaaa", VPC_ID, main=True))
        snapshot = RouteTableCatalog(ec2).load(VPC_ID)
        assert not snapshot.sync_needed

    def test_load_unknown_vpc(self, simulated_ec2_factory):
        ec2 = simulated_ec2_factory(route_table_dict("rtb-0000aaaa", "vpc-99999999", main=True))
        with pytest.raises(VpcNotFoundError) as error:
            RouteTableCatalog(ec2).load(VPC_ID)
        assert error.value.status_code == 404
        assert error.value.message == f"VPC: '{VPC_ID}' not found."

    def test_load_describe_failure(self, simulated_ec2_factory):
        ec2 = simulated_ec2_factory()
        ec2.fail("DescribeRouteTables", None, "UnauthorizedOperation", "You are not authorized to perform this operation.")
        with pytest.raises(DescribeError) as error:
            RouteTableCatalog(ec2).load(VPC_ID)
        assert error.value.status_code == 500
        assert error.value.cause == "You are not authorized to perform this operation."
