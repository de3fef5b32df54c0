"""
Batch dispatcher: the single background thread that drains the event queue.

A batch is flushed when any of three limits is reached:

- the batch interval elapsed since the last flush,
- the next event would push the batch over ``MAX_BATCH_BYTES``,
- the batch holds ``MAX_BATCH_EVENTS`` events.

The size limit is checked before appending, so a batch never exceeds it.
"""

from __future__ import annotations

import threading
from time import monotonic
from typing import Optional

from loguru import logger

from .errors import DeliveryError
from .models import MAX_BATCH_BYTES, Batch, LogEvent
from .queue import EventQueue
from .sender import DeliverySender
from .state import WriterState

# Upper bound on a single queue wait; the loop re-checks the deadline after it.
MAX_IDLE_WAIT = 60.0


class BatchDispatcher:
    def __init__(
        self,
        queue: EventQueue[LogEvent],
        state: WriterState,
        sender: DeliverySender,
        *,
        name: str = "cloudwatch-writer",
    ):
        self._queue = queue
        self._state = state
        self._sender = sender
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the final batch has been flushed."""
        return self._done.wait(timeout)

    # --------------------------- internals

    def _next_deadline(self) -> float:
        return monotonic() + self._state.batch_interval

    def _flush(self, batch: Batch, reason: str) -> None:
        if not batch:
            return
        logger.debug(f"Flushing {len(batch)} events ({batch.size_bytes} bytes) on {reason}")
        self._sender.send(batch.events)

    def _run(self) -> None:
        try:
            self._loop()
        except Exception as exc:
            logger.exception("Batch dispatcher stopped unexpectedly")
            err = DeliveryError(f"batch dispatcher stopped: {exc}")
            err.__cause__ = exc
            self._state.last_error = err
        finally:
            # close() must never hang, even if the loop died
            self._done.set()

    def _loop(self) -> None:
        batch = Batch()
        deadline = self._next_deadline()

        while True:
            if monotonic() >= deadline:
                self._flush(batch, "interval")
                batch = Batch()
                deadline = self._next_deadline()

            wait = min(max(0.0, deadline - monotonic()), MAX_IDLE_WAIT)
            event = self._queue.get(timeout=wait)
            if event is None:
                if not self._state.closing:
                    continue
                # anything put before closing was set is visible by now
                event = self._queue.get_nowait()
                if event is None:
                    self._flush(batch, "close")
                    return

            if event.size > MAX_BATCH_BYTES:
                self._state.last_error = DeliveryError(
                    f"log event of {event.size} bytes exceeds the {MAX_BATCH_BYTES} byte batch limit"
                )
                logger.warning(f"Dropped oversized log event ({event.size} bytes)")
                continue

            if not batch.fits(event):
                self._flush(batch, "size")
                batch = Batch()
                deadline = self._next_deadline()

            batch.add(event)

            if batch.full:
                self._flush(batch, "count")
                batch = Batch()
                deadline = self._next_deadline()
