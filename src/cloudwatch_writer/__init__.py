"""
CloudWatch Writer

Ships log lines to an AWS CloudWatch Logs stream in batches, from a
background thread, without blocking the code that logs.

Usage:
    from cloudwatch_writer import CloudWatchWriter

    writer = CloudWatchWriter.new("my-group", "my-stream", region_name="eu-west-1")
    writer.write("something happened")
    writer.close()

    # or as a loguru sink
    from loguru import logger
    logger.add(writer, serialize=True)

The library's own diagnostics are disabled by default (loguru convention);
turn them on with ``logger.enable("cloudwatch_writer")``.
"""

from loguru import logger

from .client import CloudWatchLogs, LogsClient
from .errors import (
    BootstrapError,
    ConfigError,
    DeliveryError,
    LogsServiceError,
    OrderingConflict,
    ResourceAlreadyExists,
    ResourceNotFound,
    WriterError,
)
from .models import EVENT_OVERHEAD_BYTES, MAX_BATCH_BYTES, MAX_BATCH_EVENTS, LogEvent, LogStream
from .sender import MAX_RETRIES
from .settings import WriterSettings, get_settings
from .writer import DEFAULT_BATCH_INTERVAL, MIN_BATCH_INTERVAL, CloudWatchWriter

logger.disable("cloudwatch_writer")

__version__ = "1.0.0"
__all__ = [
    "CloudWatchWriter",
    "CloudWatchLogs",
    "LogsClient",
    "LogEvent",
    "LogStream",
    "WriterSettings",
    "get_settings",
    # errors
    "WriterError",
    "ConfigError",
    "BootstrapError",
    "DeliveryError",
    "LogsServiceError",
    "OrderingConflict",
    "ResourceAlreadyExists",
    "ResourceNotFound",
    # limits
    "MIN_BATCH_INTERVAL",
    "DEFAULT_BATCH_INTERVAL",
    "MAX_BATCH_BYTES",
    "MAX_BATCH_EVENTS",
    "EVENT_OVERHEAD_BYTES",
    "MAX_RETRIES",
]
