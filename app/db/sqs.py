"""boto3 SQS client singleton.

Provides ``get_sqs_client()`` which returns a lazily-initialized, process-wide
SQS client.  ``SQS_ENDPOINT_URL`` points the client at LocalStack or
ElasticMQ during development; leave it unset to talk to AWS.
"""

from __future__ import annotations

from typing import Any

import boto3

from app.core.config import settings

_client: Any | None = None


def get_sqs_client() -> Any:
    """Return the singleton SQS client, creating it on first call."""
    global _client
    if _client is None:
        _client = boto3.client(
            "sqs",
            region_name=settings.AWS_REGION,
            endpoint_url=settings.SQS_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )
    return _client
