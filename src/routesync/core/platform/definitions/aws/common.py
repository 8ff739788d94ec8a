# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, WaiterError

from routesync import __version__

module_logger = logging.getLogger(__name__)

# returned by EC2 for a request that would have succeeded had 'DryRun' not been set
DRY_RUN_OPERATION_ERROR_CODE = "DryRunOperation"

USER_AGENT_EXTRA = f"routesync/{__version__}"


def get_code_for_exception(error):
    if isinstance(error, ClientError) and "Code" in error.response.get("Error", {}):
        return error.response["Error"]["Code"]
    elif isinstance(error, WaiterError) and "Error" in error.last_response:
        return error.last_response["Error"]["Code"]
    elif hasattr(error, "error_code"):
        return error.error_code

    return error.__class__.__name__


def get_message_for_exception(error) -> str:
    if isinstance(error, ClientError):
        message = error.response.get("Error", {}).get("Message")
        if message:
            return message
    return str(error)


def is_dry_run_signal(error) -> bool:
    return get_code_for_exception(error) == DRY_RUN_OPERATION_ERROR_CODE


def get_botocore_config() -> Config:
    # botocore defaults for retries and timeouts are kept as is
    return Config(user_agent_extra=USER_AGENT_EXTRA)


def get_session(region: Optional[str] = None) -> boto3.Session:
    """
    Wrapper around boto3.Session()

    Parameters
    region: string, AWS region. Falls back to the default resolution chain (env, ~/.aws) if not provided.

    Returns
    boto3.Session
    """
    module_logger.debug("Creating boto3.Session with system defaults.")
    return boto3.Session(region_name=region)


def create_client(session: boto3.Session, service_name: str, region: Optional[str] = None):
    return session.client(service_name, region_name=region, config=get_botocore_config())
