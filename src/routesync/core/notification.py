# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from overrides import overrides

from routesync.core.errors import NotificationFault
from routesync.core.outcome import SyncStatus
from routesync.core.planning import SyncAction, SyncDecision
from routesync.core.platform.definitions.aws.common import get_message_for_exception
from routesync.core.platform.definitions.aws.sns.client_wrapper import publish, truncate_subject
from routesync.core.request import SyncRequest, format_timestamp

module_logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\r\n"

ACTION_LABELS: Dict[SyncAction, str] = {SyncAction.CREATE: "Add", SyncAction.REPLACE: "Sync"}

# only the statuses of an attempted write are ever reported
STATUS_LABELS: Dict[SyncStatus, str] = {
    SyncStatus.SUCCESS: "SUCCESS",
    SyncStatus.DRYRUN: "DRYRUN",
    SyncStatus.FAILED: "FAILED",
}


def format_route_change_subject(status: SyncStatus, decision: SyncDecision, main_route_table_id: str) -> str:
    if status not in STATUS_LABELS or decision.action not in ACTION_LABELS:
        raise ValueError(f"Cannot report {decision.action.value!r} with status {status.value!r}.")
    return truncate_subject(
        f"{STATUS_LABELS[status]}: {ACTION_LABELS[decision.action]} '{decision.destination_cidr_block}' "
        f"from: '{main_route_table_id}' to '{decision.route_table_id}'"
    )


def format_route_change_message(
    request: SyncRequest,
    decision: SyncDecision,
    main_route_table_id: str,
    completed_at: datetime,
    error: Optional[str] = None,
) -> str:
    lines: List[str] = [
        "NOTICE:",
        f"* Request ID: '{request.request_id}'",
        f"* Main route table ID: '{main_route_table_id}'",
        f"* Custom route table ID: '{decision.route_table_id}'",
        f"* Destination CIDR block: '{decision.destination_cidr_block}'",
    ]
    if decision.action == SyncAction.CREATE:
        lines.append(f"* Target ENI: '{decision.network_interface_id}'")
    else:
        lines.append(f"* Old target ENI: '{decision.current_network_interface_id}'")
        lines.append(f"* New target ENI: '{decision.network_interface_id}'")
    lines.append(f"* Start: {format_timestamp(request.started_at)}")
    lines.append(f"* End: {format_timestamp(completed_at)}")

    message = LINE_SEPARATOR.join(lines) + LINE_SEPARATOR
    if error:
        message += f"{LINE_SEPARATOR}{LINE_SEPARATOR}{error}"
    return message


def format_describe_failure_subject(vpc_id: str) -> str:
    return truncate_subject(f"FAILED: Describe route tables in VPC: '{vpc_id}'")


class NotificationSink(ABC):
    """Reports synchronization outcomes to an external channel.

    Implementations only need to provide :meth:`publish`; any error raised from it surfaces as
    :class:`NotificationFault` so that callers can attribute the failure to the owning unit of work.
    """

    @abstractmethod
    def publish(self, subject: str, message: str, request_id: Optional[str] = None) -> None: ...

    def notify_route_change(
        self,
        request: SyncRequest,
        decision: SyncDecision,
        main_route_table_id: str,
        status: SyncStatus,
        completed_at: datetime,
        error: Optional[str] = None,
    ) -> None:
        subject = format_route_change_subject(status, decision, main_route_table_id)
        message = format_route_change_message(request, decision, main_route_table_id, completed_at, error)
        self._safe_publish(subject, message, request.request_id)

    def notify_describe_failure(self, vpc_id: str, error: Optional[str], request_id: Optional[str] = None) -> None:
        self._safe_publish(format_describe_failure_subject(vpc_id), error or "Unknown error.", request_id)

    def _safe_publish(self, subject: str, message: str, request_id: Optional[str]) -> None:
        try:
            self.publish(subject, message, request_id)
        except NotificationFault:
            raise
        except (ClientError, BotoCoreError) as error:
            raise NotificationFault(get_message_for_exception(error)) from error


class SNSNotificationSink(NotificationSink):
    def __init__(self, sns, topic_arn: str) -> None:
        self._sns = sns
        self._topic_arn = topic_arn

    @overrides
    def publish(self, subject: str, message: str, request_id: Optional[str] = None) -> None:
        publish(self._sns, self._topic_arn, subject, message, request_id)
