"""
CloudWatch Logs client abstraction.

``LogsClient`` is the capability set the writer needs. ``CloudWatchLogs``
implements it on top of a boto3 ``logs`` client and translates botocore
errors into the typed errors of :mod:`cloudwatch_writer.errors`.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

import boto3
from botocore.exceptions import ClientError

from .errors import map_client_error
from .models import LogEvent, LogStream


class LogsClient(Protocol):
    def describe_streams(self, group_name: str, stream_prefix: str) -> List[LogStream]: ...

    def create_group(self, group_name: str) -> None: ...

    def create_stream(self, group_name: str, stream_name: str) -> None: ...

    def put_events(
        self,
        group_name: str,
        stream_name: str,
        events: Sequence[LogEvent],
        sequence_token: Optional[str],
    ) -> Optional[str]: ...


class CloudWatchLogs:
    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_region(cls, region_name: Optional[str] = None, **client_kwargs: Any) -> "CloudWatchLogs":
        """Build on ``boto3.client("logs")``; credentials come from boto3's default chain."""
        return cls(boto3.client("logs", region_name=region_name, **client_kwargs))

    def describe_streams(self, group_name: str, stream_prefix: str) -> List[LogStream]:
        try:
            resp = self._client.describe_log_streams(
                logGroupName=group_name,
                logStreamNamePrefix=stream_prefix,
            )
        except ClientError as e:
            raise map_client_error(e) from e
        return [LogStream.model_validate(s) for s in resp.get("logStreams", [])]

    def create_group(self, group_name: str) -> None:
        try:
            self._client.create_log_group(logGroupName=group_name)
        except ClientError as e:
            raise map_client_error(e) from e

    def create_stream(self, group_name: str, stream_name: str) -> None:
        try:
            self._client.create_log_stream(logGroupName=group_name, logStreamName=stream_name)
        except ClientError as e:
            raise map_client_error(e) from e

    def put_events(
        self,
        group_name: str,
        stream_name: str,
        events: Sequence[LogEvent],
        sequence_token: Optional[str],
    ) -> Optional[str]:
        kwargs: dict[str, Any] = {
            "logGroupName": group_name,
            "logStreamName": stream_name,
            "logEvents": [e.as_input() for e in events],
        }
        # the very first batch on a fresh stream has no token
        if sequence_token is not None:
            kwargs["sequenceToken"] = sequence_token
        try:
            resp = self._client.put_log_events(**kwargs)
        except ClientError as e:
            raise map_client_error(e) from e
        return resp.get("nextSequenceToken")
