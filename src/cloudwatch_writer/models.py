"""
Data models for the CloudWatch writer.

LogEvent is a frozen dataclass (it is created once per write on the hot
path); LogStream is a pydantic model parsed from the service response.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Limits imposed by CloudWatch Logs on a single PutLogEvents call, see
# https://docs.aws.amazon.com/AmazonCloudWatchLogs/latest/APIReference/API_PutLogEvents.html
MAX_BATCH_BYTES = 1_048_576
MAX_BATCH_EVENTS = 10_000
EVENT_OVERHEAD_BYTES = 26


def now_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class LogEvent:
    """A single log line, timestamped when it was queued."""

    message: str
    timestamp: int

    @classmethod
    def create(cls, message: Union[str, bytes]) -> "LogEvent":
        if isinstance(message, (bytes, bytearray)):
            message = bytes(message).decode("utf-8", errors="replace")
        return cls(message=message, timestamp=now_ms())

    @property
    def size(self) -> int:
        """Bytes this event counts for against the batch size limit."""
        return len(self.message.encode("utf-8")) + EVENT_OVERHEAD_BYTES

    def as_input(self) -> dict:
        return {"timestamp": self.timestamp, "message": self.message}


class Batch:
    """Ordered events plus the running size accumulator."""

    def __init__(self) -> None:
        self.events: List[LogEvent] = []
        self.size_bytes = 0

    def __len__(self) -> int:
        return len(self.events)

    def fits(self, event: LogEvent) -> bool:
        return self.size_bytes + event.size <= MAX_BATCH_BYTES

    def add(self, event: LogEvent) -> None:
        self.events.append(event)
        self.size_bytes += event.size

    @property
    def full(self) -> bool:
        return len(self.events) >= MAX_BATCH_EVENTS


class LogStream(BaseModel):
    """Log stream as described by DescribeLogStreams."""

    name: str = Field(alias="logStreamName")
    upload_sequence_token: Optional[str] = Field(default=None, alias="uploadSequenceToken")

    model_config = ConfigDict(populate_by_name=True)
