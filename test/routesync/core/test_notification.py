# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime

import pytest
from dateutil.tz import tzutc
from mock import MagicMock

from routesync.core.errors import NotificationFault
from routesync.core.notification import (
    SNSNotificationSink,
    format_describe_failure_subject,
    format_route_change_message,
    format_route_change_subject,
)
from routesync.core.outcome import SyncStatus
from routesync.core.planning import SyncAction, SyncDecision
from routesync.core.request import SyncRequest
from routesync.mixins.aws.test import client_error

TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:route-sync"
MAIN_RTB = "rtb-0000aaaa"

CREATE = SyncDecision("rtb-1111bbbb", SyncAction.CREATE, "10.0.0.0/24", "eni-aaaaaaaa")
REPLACE = SyncDecision("rtb-1111bbbb", SyncAction.REPLACE, "10.0.0.0/24", "eni-aaaaaaaa", "eni-bbbbbbbb")
STARTED = datetime(2021, 3, 4, 5, 6, 7, 89000, tzinfo=tzutc())
COMPLETED = datetime(2021, 3, 4, 5, 6, 8, 0, tzinfo=tzutc())


@pytest.fixture
def request_():
    return SyncRequest("vpc-0123abcd", MAIN_RTB, "10.0.0.0/24", request_id="req-1", started_at=STARTED)


class TestSubjects:
    @pytest.mark.parametrize(
        "status, decision, prefix",
        [
            (SyncStatus.SUCCESS, CREATE, "SUCCESS: Add"),
            (SyncStatus.SUCCESS, REPLACE, "SUCCESS: Sync"),
            (SyncStatus.DRYRUN, CREATE, "DRYRUN: Add"),
            (SyncStatus.FAILED, REPLACE, "FAILED: Sync"),
        ],
    )
    def test_route_change_subject(self, status, decision, prefix):
        assert format_route_change_subject(status, decision, MAIN_RTB) == (
            f"{prefix} '10.0.0.0/24' from: '{MAIN_RTB}' to 'rtb-1111bbbb'"
        )

    def test_route_change_subject_is_capped(self):
        decision = SyncDecision("rtb-0123456789abcdef0-with-a-long-suffix", SyncAction.REPLACE, "100.100.100.100/32", "eni-aaaaaaaa")
        subject = format_route_change_subject(SyncStatus.SUCCESS, decision, "rtb-0123456789abcdef1")
        assert len(subject) == 99
        assert subject.startswith("SUCCESS: Sync '100.100.100.100/32' from: 'rtb-0123456789abcdef1'")

    def test_skip_is_not_reportable(self):
        decision = SyncDecision("rtb-1111bbbb", SyncAction.SKIP, "10.0.0.0/24", "eni-aaaaaaaa")
        with pytest.raises(ValueError):
            format_route_change_subject(SyncStatus.SKIPPED, decision, MAIN_RTB)

    def test_describe_failure_subject(self):
        assert format_describe_failure_subject("vpc-0123abcd") == "FAILED: Describe route tables in VPC: 'vpc-0123abcd'"


class TestMessages:
    def test_create_message(self, request_):
        message = format_route_change_message(request_, CREATE, MAIN_RTB, COMPLETED)
        assert message == (
            "NOTICE:\r\n"
            "* Request ID: 'req-1'\r\n"
            f"* Main route table ID: '{MAIN_RTB}'\r\n"
            "* Custom route table ID: 'rtb-1111bbbb'\r\n"
            "* Destination CIDR block: '10.0.0.0/24'\r\n"
            "* Target ENI: 'eni-aaaaaaaa'\r\n"
            "* Start: 2021-03-04T05:06:07.089Z\r\n"
            "* End: 2021-03-04T05:06:08.000Z\r\n"
        )

    def test_replace_message_with_error(self, request_):
        message = format_route_change_message(request_, REPLACE, MAIN_RTB, COMPLETED, "DryRunOperation: would have succeeded")
        assert "* Old target ENI: 'eni-bbbbbbbb'\r\n* New target ENI: 'eni-aaaaaaaa'\r\n" in message
        assert message.endswith("\r\n\r\n\r\nDryRunOperation: would have succeeded")


class TestSNSNotificationSink:
    def test_publish_route_change(self, request_, sns_backend):
        sink = SNSNotificationSink(sns_backend, TOPIC_ARN)
        sink.notify_route_change(request_, CREATE, MAIN_RTB, SyncStatus.SUCCESS, COMPLETED)

        assert len(sns_backend.messages) == 1
        assert sns_backend.messages[0]["TopicArn"] == TOPIC_ARN
        assert sns_backend.subjects[0].startswith("SUCCESS: Add")

    def test_publish_failure_surfaces_as_fault(self, request_, sns_backend):
        sns_backend.fail("AuthorizationError", "not allowed to publish")
        sink = SNSNotificationSink(sns_backend, TOPIC_ARN)
        with pytest.raises(NotificationFault) as error:
            sink.notify_route_change(request_, CREATE, MAIN_RTB, SyncStatus.SUCCESS, COMPLETED)
        assert error.value.message == "not allowed to publish"

    def test_describe_failure(self):
        sns = MagicMock()
        sns.publish.return_value = {"MessageId": "1"}
        SNSNotificationSink(sns, TOPIC_ARN).notify_describe_failure("vpc-0123abcd", "UnauthorizedOperation")
        sns.publish.assert_called_once_with(
            TopicArn=TOPIC_ARN, Subject="FAILED: Describe route tables in VPC: 'vpc-0123abcd'", Message="UnauthorizedOperation"
        )

    def test_unexpected_error_is_not_swallowed(self, request_):
        sns = MagicMock()
        sns.publish.side_effect = client_error("Throttling", "slow down")
        with pytest.raises(NotificationFault):
            SNSNotificationSink(sns, TOPIC_ARN).notify_route_change(request_, CREATE, MAIN_RTB, SyncStatus.SUCCESS, COMPLETED)
