# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import concurrent.futures
import logging
from typing import List, Sequence

from routesync.core.catalog import RouteTableCatalog
from routesync.core.entity import CoreData
from routesync.core.errors import DescribeError, MainRouteTableNotFoundError, MainTableMismatchError, NotificationFault, WriteError
from routesync.core.execution import SyncExecutor
from routesync.core.notification import NotificationSink
from routesync.core.outcome import FailureSource, SyncOutcome, SyncStatus
from routesync.core.planning import SyncAction, SyncDecision, plan_sync
from routesync.core.platform.definitions.common import DEFAULT_MAX_WORKERS
from routesync.core.request import SyncRequest
from routesync.core.route_tables import Route, RouteTable, get_route
from routesync.core.validation import validate_source_route

module_logger = logging.getLogger(__name__)

SYNC_NOT_NECESSARY_MESSAGE = "Route synchronization not necessary."
SYNC_SUCCESS_MESSAGE = "Success!"


class SyncResult(CoreData):
    def __init__(self, message: str, outcomes: Sequence[SyncOutcome] = ()) -> None:
        self.message = message
        self.outcomes = tuple(outcomes)

    @property
    def updated_custom_route_table_count(self) -> int:
        return len([outcome for outcome in self.outcomes if outcome.modified])

    @classmethod
    def not_necessary(cls, outcomes: Sequence[SyncOutcome] = ()) -> "SyncResult":
        return cls(SYNC_NOT_NECESSARY_MESSAGE, outcomes)


def aggregate_outcomes(outcomes: Sequence[SyncOutcome]) -> SyncResult:
    """Reduce the per-table outcomes (collected after the barrier) into a single result.

    :raises WriteError/NotificationFault: for the first failed outcome in catalog order. Dry runs are not failures.
    """
    failures = [outcome for outcome in outcomes if outcome.is_failure]
    if failures:
        first_failure = failures[0]
        if first_failure.failure_source == FailureSource.NOTIFICATION:
            raise NotificationFault(first_failure.error)
        raise WriteError(first_failure.error)

    result = SyncResult(SYNC_SUCCESS_MESSAGE, outcomes)
    if result.updated_custom_route_table_count < 1:
        return SyncResult.not_necessary(outcomes)
    return result


class RouteReconciler:
    """Propagates the main route table's route for a destination to every custom route table of the VPC.

    The catalog read and the source route validation complete before any table is touched. Then each custom table
    is planned and executed in its own worker; all workers finish before the outcome is aggregated.
    """

    def __init__(
        self,
        catalog: RouteTableCatalog,
        executor: SyncExecutor,
        notification_sink: NotificationSink,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._catalog = catalog
        self._executor = executor
        self._notification_sink = notification_sink
        self._max_workers = max_workers

    def reconcile(self, request: SyncRequest) -> SyncResult:
        module_logger.info(
            f"[{request.request_id}] Synchronizing route {request.destination_cidr_block!r} from {request.route_table_id!r} "
            f"in VPC {request.vpc_id!r} (dry_run={request.dry_run})."
        )
        try:
            snapshot = self._catalog.load(request.vpc_id, request.request_id)
        except DescribeError as error:
            self._report_describe_failure(request, error)
            raise

        if not snapshot.sync_needed:
            module_logger.info(f"[{request.request_id}] VPC {request.vpc_id!r} has a single route table.")
            return SyncResult.not_necessary()

        main_route_table = snapshot.main_route_table(request.request_id)
        if main_route_table is None:
            raise MainRouteTableNotFoundError(request.route_table_id, request.vpc_id)
        if request.route_table_id != main_route_table.route_table_id.lower():
            raise MainTableMismatchError(request.route_table_id)

        source_route = validate_source_route(
            get_route(main_route_table, request.destination_cidr_block),
            request.destination_cidr_block,
            main_route_table.route_table_id,
            request.request_id,
        )

        custom_route_tables = snapshot.custom_route_tables(main_route_table.route_table_id)
        if not custom_route_tables:
            module_logger.info(f"[{request.request_id}] No custom route tables in VPC {request.vpc_id!r}.")
            return SyncResult.not_necessary()

        outcomes = self._sync_all(request, main_route_table, source_route, custom_route_tables)
        for outcome in outcomes:
            module_logger.info(
                f"[{request.request_id}] {outcome.route_table_id!r}: {outcome.decision.action.value} -> {outcome.status.value}"
                + (f" ({outcome.error})" if outcome.error else "")
            )

        result = aggregate_outcomes(outcomes)
        module_logger.info(
            f"[{request.request_id}] All custom route tables have been evaluated, "
            f"{result.updated_custom_route_table_count} updated."
        )
        return result

    def _sync_all(
        self, request: SyncRequest, main_route_table: RouteTable, source_route: Route, custom_route_tables: List[RouteTable]
    ) -> List[SyncOutcome]:
        pool_size = min(self._max_workers, len(custom_route_tables))
        with concurrent.futures.ThreadPoolExecutor(max_workers=pool_size) as pool:
            futures = [
                pool.submit(self._sync_table, request, main_route_table.route_table_id, source_route, custom_route_table)
                for custom_route_table in custom_route_tables
            ]
            concurrent.futures.wait(futures)
        # catalog order, independent of completion order
        return [future.result() for future in futures]

    def _sync_table(
        self, request: SyncRequest, main_route_table_id: str, source_route: Route, custom_route_table: RouteTable
    ) -> SyncOutcome:
        decision = None
        try:
            decision = plan_sync(custom_route_table, request.destination_cidr_block, source_route, request.request_id)
            return self._executor.execute(request, main_route_table_id, decision)
        except Exception as error:
            # keep the other tables going, the failure is reported through the aggregate
            module_logger.exception(f"[{request.request_id}] Unexpected error while synchronizing {custom_route_table.route_table_id!r}")
            if decision is None:
                decision = SyncDecision(
                    custom_route_table.route_table_id,
                    SyncAction.SKIP,
                    request.destination_cidr_block,
                    source_route.network_interface_id,
                )
            return SyncOutcome(decision, SyncStatus.FAILED, False, str(error), error.__class__.__name__, FailureSource.INTERNAL)

    def _report_describe_failure(self, request: SyncRequest, error: DescribeError) -> None:
        try:
            self._notification_sink.notify_describe_failure(request.vpc_id, error.cause, request.request_id)
        except NotificationFault as fault:
            module_logger.error(f"[{request.request_id}] Describe failure for VPC {request.vpc_id!r} could not be reported: {fault.message}")
