# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""HTTP surface of route synchronization, served as an API Gateway (Lambda proxy integration) handler:

    PATCH /vpcs/{vpcId}/route-tables/{routeTableId}
    {"destination-cidr-block": "10.0.0.0/24", "dry-run": false}

Every other method or path is answered with a 400.
"""

import argparse
import base64
import json
import logging
import re
import sys
import traceback
from ipaddress import IPv4Network, ip_network
from typing import Any, Dict, Optional

import boto3

from routesync._logging_config import init_basic_logging
from routesync.core.catalog import RouteTableCatalog
from routesync.core.errors import InvalidRequestError, RequestValidationError, RouteSyncError
from routesync.core.execution import SyncExecutor
from routesync.core.notification import SNSNotificationSink
from routesync.core.platform.definitions.aws.common import create_client, get_session
from routesync.core.platform.definitions.common import RuntimeConfig
from routesync.core.reconciler import RouteReconciler
from routesync.core.request import SyncRequest
from routesync.core.route_tables import ROUTE_TABLE_ID_SHAPE, VPC_ID_SHAPE

from .json_utils import routesync_jsonify

module_logger = logging.getLogger(__name__)

ALLOWED_METHOD = "PATCH"

SYNC_PATH_PATTERN = re.compile(
    rf"^/vpcs/(?P<vpc_id>{VPC_ID_SHAPE})/route-tables/(?P<route_table_id>{ROUTE_TABLE_ID_SHAPE})/?$",
    re.IGNORECASE,
)

DESTINATION_CIDR_BLOCK_KEY = "destination-cidr-block"
DRY_RUN_KEY = "dry-run"

RESPONSE_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "OPTIONS,PATCH",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
}


def build_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {"statusCode": status_code, "headers": dict(RESPONSE_HEADERS), "body": routesync_jsonify(body)}


def _get_method(event: Dict[str, Any]) -> str:
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    return method.upper()


def _get_path(event: Dict[str, Any]) -> str:
    return event.get("path") or event.get("rawPath") or ""


def _get_body(event: Dict[str, Any]) -> Dict[str, Any]:
    raw_body = event.get("body")
    if raw_body is None or raw_body == "":
        raise RequestValidationError("Request body must be a JSON object.")
    try:
        if event.get("isBase64Encoded"):
            raw_body = base64.b64decode(raw_body).decode("utf-8")
        body = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError):
        raise RequestValidationError("Request body must be a JSON object.")
    if not isinstance(body, dict):
        raise RequestValidationError("Request body must be a JSON object.")
    return body


def _validate_destination_cidr_block(value: Any) -> str:
    message = f"'{DESTINATION_CIDR_BLOCK_KEY}' must be an IPv4 CIDR block."
    if not isinstance(value, str) or "/" not in value:
        raise RequestValidationError(message)
    try:
        network = ip_network(value, strict=False)
    except ValueError:
        raise RequestValidationError(message)
    if not isinstance(network, IPv4Network):
        raise RequestValidationError(message)
    return value


def parse_request(event: Dict[str, Any]) -> SyncRequest:
    """Validate the method, path and body of an API Gateway proxy event.

    :raises InvalidRequestError: method or path does not address the synchronization endpoint
    :raises RequestValidationError: malformed body
    """
    if _get_method(event) != ALLOWED_METHOD:
        raise InvalidRequestError()
    path_match = SYNC_PATH_PATTERN.match(_get_path(event))
    if not path_match:
        raise InvalidRequestError()

    body = _get_body(event)
    destination_cidr_block = _validate_destination_cidr_block(body.get(DESTINATION_CIDR_BLOCK_KEY))
    dry_run = body.get(DRY_RUN_KEY)
    if dry_run is None:
        dry_run = False
    elif not isinstance(dry_run, bool):
        raise RequestValidationError(f"'{DRY_RUN_KEY}' must be a boolean.")

    return SyncRequest(
        vpc_id=path_match.group("vpc_id").lower(),
        route_table_id=path_match.group("route_table_id").lower(),
        destination_cidr_block=destination_cidr_block,
        dry_run=dry_run,
    )


def build_reconciler(config: RuntimeConfig, session: Optional[boto3.Session] = None) -> RouteReconciler:
    session = session if session else get_session(config.region)
    ec2 = create_client(session, "ec2", config.region)
    sns = create_client(session, "sns", config.region)
    notification_sink = SNSNotificationSink(sns, config.sns_topic_arn)
    return RouteReconciler(
        RouteTableCatalog(ec2),
        SyncExecutor(ec2, notification_sink),
        notification_sink,
        config.max_workers,
    )


class RequestHandler:
    def __init__(self, reconciler: RouteReconciler) -> None:
        self._reconciler = reconciler

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = parse_request(event)
        except RouteSyncError as error:
            module_logger.warning(f"Rejected request {_get_method(event)} {_get_path(event)!r}: {error.message}")
            return build_response(error.status_code, error.to_response_body())

        try:
            result = self._reconciler.reconcile(request)
        except RouteSyncError as error:
            log = module_logger.error if error.status_code >= 500 else module_logger.warning
            log(f"[{request.request_id}] Synchronization failed with {error.status_code}: {error.message}")
            return build_response(error.status_code, error.to_response_body())

        module_logger.info(f"[{request.request_id}] {result.message}")
        return build_response(200, {"message": result.message})


_handler: Optional[RequestHandler] = None


def _get_handler() -> RequestHandler:
    global _handler
    if _handler is None:
        config = RuntimeConfig.from_environ()
        init_basic_logging(None, True, config.log_level)
        _handler = RequestHandler(build_reconciler(config))
    return _handler


def lambda_handler(event, context):
    """Lambda entry point for the API Gateway proxy integration."""
    try:
        return _get_handler().handle(event)
    except Exception as error:
        module_logger.error(f"Route synchronization Lambda error: {str(error)}")
        traceback.print_exc()
        return build_response(
            500,
            {"message": "Internal server error", "error": str(error), "error_type": error.__class__.__name__},
        )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Invoke the route synchronization handler with a saved API Gateway event.")
    parser.add_argument("event", help="path of a JSON file holding the API Gateway proxy event")
    args = parser.parse_args(argv)

    with open(args.event, "r") as event_file:
        event = json.load(event_file)
    response = lambda_handler(event, None)
    print(json.dumps(response, indent=2))
    return 0 if response["statusCode"] < 500 else 1


if __name__ == "__main__":
    sys.exit(main())
