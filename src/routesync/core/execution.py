# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Callable, Dict

from botocore.exceptions import BotoCoreError, ClientError

from routesync.core.errors import NotificationFault
from routesync.core.notification import NotificationSink
from routesync.core.outcome import FailureSource, SyncOutcome, SyncStatus
from routesync.core.planning import SyncAction, SyncDecision
from routesync.core.platform.definitions.aws.common import get_code_for_exception, get_message_for_exception, is_dry_run_signal
from routesync.core.platform.definitions.aws.ec2.client_wrapper import create_route, replace_route
from routesync.core.request import SyncRequest, utc_now

module_logger = logging.getLogger(__name__)


class SyncExecutor:
    """Applies a :class:`SyncDecision` to its custom route table and reports the attempt.

    Never raises for backend or notification errors; they are captured in the returned :class:`SyncOutcome`
    so that one table cannot prevent the others from being attempted.
    """

    def __init__(self, ec2, notification_sink: NotificationSink) -> None:
        self._ec2 = ec2
        self._notification_sink = notification_sink
        self._writers: Dict[SyncAction, Callable] = {SyncAction.CREATE: create_route, SyncAction.REPLACE: replace_route}

    def execute(self, request: SyncRequest, main_route_table_id: str, decision: SyncDecision) -> SyncOutcome:
        if not decision.is_write:
            return SyncOutcome(decision, SyncStatus.SKIPPED)

        write = self._writers[decision.action]
        error_text = None
        error_message = None
        error_code = None
        try:
            write(
                self._ec2,
                decision.route_table_id,
                decision.destination_cidr_block,
                decision.network_interface_id,
                request.dry_run,
            )
            status = SyncStatus.SUCCESS
            module_logger.info(
                f"[{request.request_id}] {decision.action.value} of route {decision.destination_cidr_block!r} "
                f"-> {decision.network_interface_id!r} succeeded on {decision.route_table_id!r}."
            )
        except (ClientError, BotoCoreError) as error:
            error_code = get_code_for_exception(error)
            error_message = get_message_for_exception(error)
            error_text = f"{error_code}: {error_message}"
            if is_dry_run_signal(error):
                status = SyncStatus.DRYRUN
                module_logger.info(f"[{request.request_id}] Dry run of {decision.action.value} on {decision.route_table_id!r}: {error_text}")
            else:
                status = SyncStatus.FAILED
                module_logger.error(f"[{request.request_id}] {decision.action.value} on {decision.route_table_id!r} failed: {error_text}")

        modified = status == SyncStatus.SUCCESS
        try:
            self._notification_sink.notify_route_change(request, decision, main_route_table_id, status, utc_now(), error_text)
        except NotificationFault as fault:
            module_logger.error(f"[{request.request_id}] Notification for {decision.route_table_id!r} could not be published: {fault.message}")
            return SyncOutcome(decision, SyncStatus.FAILED, modified, fault.message, None, FailureSource.NOTIFICATION)

        if status == SyncStatus.FAILED:
            return SyncOutcome(decision, status, modified, error_message, error_code, FailureSource.ROUTE_WRITE)
        return SyncOutcome(decision, status, modified, error_message, error_code)
