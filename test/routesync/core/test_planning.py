# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from routesync.core.planning import SkipReason, SyncAction, plan_sync
from routesync.mixins.aws.test import make_route, make_route_table

DESTINATION = "10.0.0.0/24"
SOURCE = make_route(DESTINATION, "eni-aaaaaaaa")


class TestPlanSync:
    def test_create_when_route_missing(self):
        decision = plan_sync(make_route_table("rtb-1111bbbb", routes=[make_route("10.0.1.0/24")]), DESTINATION, SOURCE)
        assert decision.action == SyncAction.CREATE
        assert decision.route_table_id == "rtb-1111bbbb"
        assert decision.destination_cidr_block == DESTINATION
        assert decision.network_interface_id == "eni-aaaaaaaa"
        assert decision.current_network_interface_id is None
        assert decision.is_write

    def test_create_when_route_ambiguous(self):
        # ambiguous match is treated as absence
        route_table = make_route_table("rtb-1111bbbb", routes=[make_route(DESTINATION, "eni-bbbbbbbb"), make_route(DESTINATION, "eni-cccccccc")])
        assert plan_sync(route_table, DESTINATION, SOURCE).action == SyncAction.CREATE

    def test_skip_partial_route(self):
        route_table = make_route_table("rtb-1111bbbb", routes=[make_route(DESTINATION, network_interface_id=None)])
        decision = plan_sync(route_table, DESTINATION, SOURCE)
        assert decision.action == SyncAction.SKIP
        assert decision.skip_reason == SkipReason.NO_TARGET
        assert not decision.is_write

    def test_skip_in_sync(self):
        route_table = make_route_table("rtb-1111bbbb", routes=[make_route(DESTINATION, "eni-aaaaaaaa")])
        decision = plan_sync(route_table, DESTINATION, SOURCE)
        assert decision.action == SyncAction.SKIP
        assert decision.skip_reason == SkipReason.IN_SYNC

    def test_skip_unmanaged_target(self):
        route_table = make_route_table("rtb-1111bbbb", routes=[make_route(DESTINATION, "eni-NOT-OURS")])
        decision = plan_sync(route_table, DESTINATION, SOURCE)
        assert decision.action == SyncAction.SKIP
        assert decision.skip_reason == SkipReason.UNMANAGED_TARGET
        assert decision.current_network_interface_id == "eni-NOT-OURS"

    def test_replace_stale_target(self):
        route_table = make_route_table("rtb-1111bbbb", routes=[make_route(DESTINATION, "eni-0123456789abcdef0")])
        decision = plan_sync(route_table, DESTINATION, SOURCE)
        assert decision.action == SyncAction.REPLACE
        assert decision.current_network_interface_id == "eni-0123456789abcdef0"
        assert decision.network_interface_id == "eni-aaaaaaaa"

    def test_replace_ignores_state_of_custom_route(self):
        route_table = make_route_table("rtb-1111bbbb", routes=[make_route(DESTINATION, "eni-bbbbbbbb", state="blackhole")])
        assert plan_sync(route_table, DESTINATION, SOURCE).action == SyncAction.REPLACE
