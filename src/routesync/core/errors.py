# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar, Dict, Optional


class RouteSyncError(Exception):
    """Base of all errors that terminate a synchronization request before (or instead of) the per-table work.

    Each subclass carries the HTTP status it maps to so the control layer does not need to know the taxonomy.
    """

    status_code: ClassVar[int] = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self._message = message

    @property
    def message(self) -> str:
        return self._message

    def to_response_body(self) -> Dict[str, Any]:
        return {"message": self._message}


class RequestValidationError(RouteSyncError):
    status_code = 400


INVALID_REQUEST_MESSAGE = "Invalid request."


class InvalidRequestError(RequestValidationError):
    """Unmatched path or method."""

    def __init__(self) -> None:
        super().__init__(INVALID_REQUEST_MESSAGE)


class NotFoundError(RouteSyncError):
    status_code = 404


class VpcNotFoundError(NotFoundError):
    def __init__(self, vpc_id: str) -> None:
        super().__init__(f"VPC: '{vpc_id}' not found.")


class MainRouteTableNotFoundError(NotFoundError):
    def __init__(self, route_table_id: str, vpc_id: str) -> None:
        super().__init__(f"Route table: '{route_table_id}' not found in VPC: '{vpc_id}'.")


class RouteNotFoundError(NotFoundError):
    pass


class StateError(RouteSyncError):
    status_code = 422


class MainTableMismatchError(StateError):
    def __init__(self, route_table_id: str) -> None:
        super().__init__(f"Route table: '{route_table_id}' does not have a main route table association.")


class RouteNotActiveError(StateError):
    pass


class UnacceptableOriginError(StateError):
    pass


class UnacceptableTargetError(StateError):
    pass


class NoTargetError(RouteSyncError):
    status_code = 400


class BackendFault(RouteSyncError):
    status_code = 500


class DescribeError(BackendFault):
    def __init__(self, vpc_id: str, route_table_descriptions: Optional[Any] = None, cause: Optional[str] = None) -> None:
        super().__init__(f"Failed to describe route tables for VPC: '{vpc_id}'.")
        self.vpc_id = vpc_id
        self.route_table_descriptions = route_table_descriptions
        self.cause = cause

    def to_response_body(self) -> Dict[str, Any]:
        return {"message": self.message, "routeTableDescriptions": self.route_table_descriptions}


class WriteError(BackendFault):
    pass


class NotificationFault(BackendFault):
    pass


class ConfigurationError(RouteSyncError):
    status_code = 500
