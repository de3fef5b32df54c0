from __future__ import annotations

from typing import List, Optional

from loguru import logger

from .client import LogsClient
from .errors import BootstrapError, ResourceAlreadyExists, ResourceNotFound
from .models import LogStream


def _create_group(client: LogsClient, group_name: str) -> None:
    try:
        client.create_group(group_name)
        logger.info(f"Created log group {group_name}")
    except ResourceAlreadyExists:
        logger.debug(f"Log group {group_name} was created concurrently")
    except Exception as exc:
        raise BootstrapError(f"create log group {group_name!r}: {exc}") from exc


def _describe(client: LogsClient, group_name: str, stream_name: str) -> List[LogStream]:
    try:
        return client.describe_streams(group_name, stream_name)
    except ResourceNotFound:
        logger.debug(f"Log group {group_name} not found")
    except Exception as exc:
        raise BootstrapError(f"describe log streams in {group_name!r}: {exc}") from exc

    # A freshly created group cannot be missing again, so one retry is enough.
    _create_group(client, group_name)
    try:
        return client.describe_streams(group_name, stream_name)
    except Exception as exc:
        raise BootstrapError(f"describe log streams in {group_name!r}: {exc}") from exc


def resolve_stream(client: LogsClient, group_name: str, stream_name: str) -> Optional[str]:
    """Find or create the log group/stream and return the upload sequence token.

    ``None`` means the stream has not received any events yet. Every failure
    is raised as :class:`BootstrapError`.
    """
    logger.debug(f"Resolving log stream {group_name}/{stream_name}")
    for stream in _describe(client, group_name, stream_name):
        # describe matches on prefix, so "app" also lists "app-2"
        if stream.name == stream_name:
            return stream.upload_sequence_token

    try:
        client.create_stream(group_name, stream_name)
        logger.info(f"Created log stream {group_name}/{stream_name}")
    except ResourceAlreadyExists:
        logger.debug(f"Log stream {group_name}/{stream_name} was created concurrently")
    except Exception as exc:
        raise BootstrapError(f"create log stream {group_name}/{stream_name}: {exc}") from exc
    return None
