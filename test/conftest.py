# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest

from routesync.mixins.aws.test import SimulatedEC2, SimulatedSNS


def pytest_configure(config):
    logging.getLogger("botocore").setLevel(logging.WARNING)


@pytest.fixture
def simulated_ec2_factory():
    def factory(*route_tables, page_size=None):
        return SimulatedEC2(route_tables, page_size=page_size)

    return factory


@pytest.fixture
def sns_backend():
    return SimulatedSNS()
