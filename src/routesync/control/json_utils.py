# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""
JSON serialization of handler responses.

Responses carry messages and, for describe failures, the raw EC2 response which botocore may have parsed
timestamps into.
"""

import json
from datetime import datetime
from typing import Any

from routesync.core.request import format_timestamp


class RouteSyncJSONEncoder(json.JSONEncoder):
    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return format_timestamp(obj) if obj.tzinfo else obj.isoformat()
        # a malformed describe response is echoed back as-is for diagnosis
        return repr(obj)


def routesync_jsonify(obj: Any, **kwargs: Any) -> str:
    """
    Serialize `obj` to a JSON string.

    Args:
        obj: Object to serialize to JSON
        **kwargs: Additional arguments passed to json.dumps

    Example:
        >>> routesync_jsonify({"message": "Success!"})
        '{"message": "Success!"}'
    """
    default_kwargs = {"ensure_ascii": False, "cls": RouteSyncJSONEncoder}
    default_kwargs.update(kwargs)
    return json.dumps(obj, **default_kwargs)


__all__ = ["routesync_jsonify", "RouteSyncJSONEncoder"]
