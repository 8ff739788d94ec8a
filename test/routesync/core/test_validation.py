# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from routesync.core.errors import NoTargetError, RouteNotActiveError, RouteNotFoundError, UnacceptableOriginError, UnacceptableTargetError
from routesync.core.validation import validate_source_route
from routesync.mixins.aws.test import make_route

DESTINATION = "10.0.0.0/24"
MAIN_RTB = "rtb-0000aaaa"


class TestValidateSourceRoute:
    def test_acceptable_route(self):
        route = make_route(DESTINATION, "eni-0123456789abcdef0")
        assert validate_source_route(route, DESTINATION, MAIN_RTB) is route

    def test_missing_route(self):
        with pytest.raises(RouteNotFoundError) as error:
            validate_source_route(None, DESTINATION, MAIN_RTB)
        assert error.value.status_code == 404
        assert error.value.message == (
            f"A route with destination CIDR block: '{DESTINATION}' not found in main route table: '{MAIN_RTB}'."
        )

    def test_blackhole_route_cites_state(self):
        with pytest.raises(RouteNotActiveError) as error:
            validate_source_route(make_route(DESTINATION, state="blackhole"), DESTINATION, MAIN_RTB)
        assert error.value.status_code == 422
        assert "'blackhole'" in error.value.message

    @pytest.mark.parametrize("origin", ["CreateRouteTable", "EnableVgwRoutePropagation", None])
    def test_unacceptable_origin(self, origin):
        with pytest.raises(UnacceptableOriginError) as error:
            validate_source_route(make_route(DESTINATION, origin=origin), DESTINATION, MAIN_RTB)
        assert error.value.status_code == 422
        assert f"'{origin}'" in error.value.message

    def test_no_target(self):
        with pytest.raises(NoTargetError) as error:
            validate_source_route(make_route(DESTINATION, network_interface_id=None), DESTINATION, MAIN_RTB)
        assert error.value.status_code == 400
        assert error.value.message.endswith("does not have an ENI target.")

    def test_unacceptable_target(self):
        with pytest.raises(UnacceptableTargetError) as error:
            validate_source_route(make_route(DESTINATION, network_interface_id="eni-xyz"), DESTINATION, MAIN_RTB)
        assert error.value.status_code == 422
        assert "'eni-xyz'" in error.value.message

    def test_rules_short_circuit_in_order(self):
        # inactive, wrong origin and no target: state is reported first
        route = make_route(DESTINATION, network_interface_id=None, state="blackhole", origin="CreateRouteTable")
        with pytest.raises(RouteNotActiveError):
            validate_source_route(route, DESTINATION, MAIN_RTB)

        route = make_route(DESTINATION, network_interface_id=None, origin="CreateRouteTable")
        with pytest.raises(UnacceptableOriginError):
            validate_source_route(route, DESTINATION, MAIN_RTB)
