from __future__ import annotations

from time import monotonic
from typing import Sequence

from loguru import logger

from .client import LogsClient
from .errors import DeliveryError, OrderingConflict
from .metrics import metrics_registry
from .models import LogEvent
from .state import WriterState

# Only one retry after an InvalidSequenceTokenException: the expected token
# it reports is authoritative, a second conflict means another writer.
MAX_RETRIES = 1


class DeliverySender:
    """Sends batches with PutLogEvents and keeps the sequence token current.

    Only the dispatcher thread calls ``send``, so sends are strictly
    sequential.
    """

    def __init__(self, client: LogsClient, state: WriterState, group_name: str, stream_name: str):
        self._client = client
        self._state = state
        self._group = group_name
        self._stream = stream_name

    def send(self, events: Sequence[LogEvent]) -> bool:
        """Deliver ``events``; returns True when the service accepted them."""
        if not events:
            return False

        for attempt in range(MAX_RETRIES + 1):
            t0 = monotonic()
            try:
                token = self._client.put_events(
                    self._group, self._stream, events, self._state.sequence_token
                )
            except OrderingConflict as exc:
                metrics_registry.sequence_conflicts_total.inc()
                logger.debug(
                    f"Sequence token rejected (attempt {attempt + 1}), "
                    f"adopting expected token {exc.expected_token}"
                )
                self._state.sequence_token = exc.expected_token
                continue
            except Exception as exc:
                err = exc if isinstance(exc, DeliveryError) else DeliveryError(str(exc))
                if err is not exc:
                    err.__cause__ = exc
                self._state.last_error = err
                metrics_registry.record_batch("failed", len(events))
                logger.warning(f"Dropped batch of {len(events)} events: {err}")
                return False
            finally:
                metrics_registry.put_latency_ms.observe((monotonic() - t0) * 1000.0)

            self._state.sequence_token = token
            metrics_registry.record_batch("sent", len(events))
            return True

        metrics_registry.record_batch("dropped", len(events))
        logger.warning(
            f"Dropped batch of {len(events)} events after {MAX_RETRIES + 1} sequence token conflicts"
        )
        return False
