"""
Pytest configuration and fixtures for cloudwatch-writer.

Provides an in-memory LogsClient that records every call, plus helpers for
waiting on the background dispatcher.
"""

import threading
import time
from typing import Callable, List, Optional

import pytest

from cloudwatch_writer.errors import ResourceNotFound
from cloudwatch_writer.models import LogStream


class FakeLogsClient:
    """Thread-safe LogsClient double.

    ``put_results`` is consumed one entry per put_events call: an exception
    instance is raised, anything else is returned as the next token. When it
    is empty a fresh token ``t-<n>`` is returned.
    """

    def __init__(
        self,
        streams: Optional[List[LogStream]] = None,
        group_exists: bool = True,
        put_results: Optional[list] = None,
    ):
        self.streams = list(streams or [])
        self.group_exists = group_exists
        self.put_results = list(put_results or [])
        self.calls: List[tuple] = []
        self.puts: List[dict] = []
        self._lock = threading.Lock()

    def describe_streams(self, group_name, stream_prefix):
        with self._lock:
            self.calls.append(("describe_streams", group_name, stream_prefix))
            if not self.group_exists:
                raise ResourceNotFound(f"The specified log group does not exist: {group_name}")
            return [s for s in self.streams if s.name.startswith(stream_prefix)]

    def create_group(self, group_name):
        with self._lock:
            self.calls.append(("create_group", group_name))
            self.group_exists = True

    def create_stream(self, group_name, stream_name):
        with self._lock:
            self.calls.append(("create_stream", group_name, stream_name))
            self.streams.append(LogStream(name=stream_name))

    def put_events(self, group_name, stream_name, events, sequence_token):
        with self._lock:
            self.calls.append(("put_events", group_name, stream_name))
            self.puts.append(
                {
                    "messages": [e.message for e in events],
                    "sizes": [e.size for e in events],
                    "token": sequence_token,
                    "at": time.monotonic(),
                }
            )
            if self.put_results:
                result = self.put_results.pop(0)
                if isinstance(result, Exception):
                    raise result
                return result
            return f"t-{len(self.puts)}"

    @property
    def call_names(self) -> List[str]:
        with self._lock:
            return [c[0] for c in self.calls]


@pytest.fixture
def fake_client():
    return FakeLogsClient(streams=[LogStream(name="app", upload_sequence_token="t-0")])


def wait_until(predicate: Callable[[], bool], timeout: float = 3.0, step: float = 0.01) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


@pytest.fixture(name="wait_until")
def wait_until_fixture():
    return wait_until


@pytest.fixture
def fake_client_cls():
    return FakeLogsClient
