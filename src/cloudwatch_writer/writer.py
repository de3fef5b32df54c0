from __future__ import annotations

import math
from typing import Optional, Union

from loguru import logger

from .bootstrap import resolve_stream
from .client import CloudWatchLogs, LogsClient
from .dispatcher import BatchDispatcher
from .errors import ConfigError
from .models import LogEvent
from .queue import EventQueue
from .sender import DeliverySender
from .settings import WriterSettings, get_settings
from .state import WriterState

# PutLogEvents is limited to 5 requests per second per log stream.
MIN_BATCH_INTERVAL = 0.2
DEFAULT_BATCH_INTERVAL = 5.0


class CloudWatchWriter:
    """
    Non-blocking writer that ships log lines to one CloudWatch Logs stream.

    ``write`` only queues the line; a background thread batches and sends.
    A failed send is raised (once) from the next ``write`` call.

    Usage:
        writer = CloudWatchWriter.new("my-group", "my-stream", region_name="eu-west-1")
        writer.write(b"hello\\n")
        writer.close()  # blocks until everything queued so far was sent

    The writer also works as a loguru sink: ``logger.add(writer)``.
    """

    def __init__(
        self,
        client: LogsClient,
        log_group_name: str,
        log_stream_name: str,
        batch_interval: float = DEFAULT_BATCH_INTERVAL,
    ):
        self._state = WriterState()
        try:
            self.set_batch_interval(batch_interval)
        except ConfigError as exc:
            raise ConfigError(f"set batch interval: {batch_interval}: {exc}") from exc

        self.log_group_name = log_group_name
        self.log_stream_name = log_stream_name
        self._state.sequence_token = resolve_stream(client, log_group_name, log_stream_name)

        self._queue: EventQueue[LogEvent] = EventQueue()
        self._dispatcher = BatchDispatcher(
            self._queue,
            self._state,
            DeliverySender(client, self._state, log_group_name, log_stream_name),
            name=f"cloudwatch-writer:{log_group_name}/{log_stream_name}",
        )
        self._dispatcher.start()
        logger.debug(f"CloudWatch writer started for {log_group_name}/{log_stream_name}")

    @classmethod
    def new(
        cls,
        log_group_name: str,
        log_stream_name: str,
        region_name: Optional[str] = None,
        batch_interval: float = DEFAULT_BATCH_INTERVAL,
    ) -> "CloudWatchWriter":
        """Writer backed by a boto3 client for ``region_name``."""
        client = CloudWatchLogs.from_region(region_name)
        return cls(client, log_group_name, log_stream_name, batch_interval)

    @classmethod
    def from_settings(cls, settings: Optional[WriterSettings] = None) -> "CloudWatchWriter":
        s = settings or get_settings()
        return cls.new(s.LOG_GROUP_NAME, s.LOG_STREAM_NAME, s.REGION, s.BATCH_INTERVAL)

    # --------------------------- context management

    def __enter__(self) -> "CloudWatchWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------------------- public API

    @property
    def batch_interval(self) -> float:
        return self._state.batch_interval

    def set_batch_interval(self, interval: float) -> None:
        """Set the maximum time in seconds between batches."""
        if not math.isfinite(interval):
            raise ConfigError(f"batch interval {interval}s is not a finite number")
        if interval < MIN_BATCH_INTERVAL:
            raise ConfigError(
                f"batch interval {interval}s is less than the minimum of {MIN_BATCH_INTERVAL}s"
            )
        self._state.batch_interval = interval

    def write(self, message: Union[str, bytes]) -> int:
        """Queue ``message``; returns its length.

        Raises the pending :class:`DeliveryError` if an earlier batch failed.
        ``message`` is queued either way.
        """
        self._queue.put(LogEvent.create(message))

        err = self._state.take_error()
        if err is not None:
            raise err
        return len(message)

    def close(self) -> None:
        """Stop accepting batches and block until the queue is drained."""
        self._state.mark_closing()
        self._queue.close()
        self._dispatcher.wait()

    def take_error(self) -> Optional[Exception]:
        """Return and clear a delivery failure that no ``write`` has reported yet."""
        return self._state.take_error()
