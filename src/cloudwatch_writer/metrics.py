"""
Prometheus metrics for the CloudWatch writer.

Registered on the global REGISTRY at import time; expose them with
``prometheus_client.start_http_server`` in the host application.
"""

from prometheus_client import Counter, Histogram

BATCHES_TOTAL = Counter(
    "cloudwatch_writer_batches_total",
    "Batches handed to PutLogEvents, by outcome",
    ["outcome"],  # sent | failed | dropped
)

EVENTS_TOTAL = Counter(
    "cloudwatch_writer_events_total",
    "Log events handed to PutLogEvents, by outcome",
    ["outcome"],
)

SEQUENCE_CONFLICTS_TOTAL = Counter(
    "cloudwatch_writer_sequence_conflicts_total",
    "PutLogEvents calls rejected with InvalidSequenceTokenException",
)

PUT_LATENCY_MS = Histogram(
    "cloudwatch_writer_put_latency_ms",
    "PutLogEvents latency in milliseconds",
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
)


class MetricsRegistry:
    """Groups the writer metrics for callers that want one handle."""

    batches_total = BATCHES_TOTAL
    events_total = EVENTS_TOTAL
    sequence_conflicts_total = SEQUENCE_CONFLICTS_TOTAL
    put_latency_ms = PUT_LATENCY_MS

    def record_batch(self, outcome: str, events: int) -> None:
        self.batches_total.labels(outcome=outcome).inc()
        self.events_total.labels(outcome=outcome).inc(events)


metrics_registry = MetricsRegistry()
