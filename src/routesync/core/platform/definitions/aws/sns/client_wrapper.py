# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Optional

from routesync._logging_config import request_log_prefix

module_logger = logging.getLogger(__name__)

# SNS rejects subjects of 100 characters or more
SNS_SUBJECT_LENGTH_LIMIT = 99


def truncate_subject(subject: str) -> str:
    return subject[:SNS_SUBJECT_LENGTH_LIMIT]


def publish(sns, topic_arn: str, subject: str, message: str, request_id: Optional[str] = None) -> str:
    """Publish a plain text notification to `topic_arn`.

    :returns the MessageId assigned by SNS
    """
    response = sns.publish(TopicArn=topic_arn, Subject=truncate_subject(subject), Message=message)
    message_id = response.get("MessageId")
    module_logger.debug(f"{request_log_prefix(request_id)}Published message {message_id!r} to {topic_arn!r}.")
    return message_id
