"""
Unit tests for writer metrics (light sanity checks).
"""

from prometheus_client import REGISTRY

from cloudwatch_writer.errors import OrderingConflict
from cloudwatch_writer.models import LogEvent
from cloudwatch_writer.sender import DeliverySender
from cloudwatch_writer.state import WriterState


def _value(name, **labels):
    return REGISTRY.get_sample_value(name, labels or None) or 0.0


def test_sender_records_outcomes(fake_client_cls):
    client = fake_client_cls(
        put_results=[
            "t-1",
            OrderingConflict("stale", "T1"),
            OrderingConflict("stale", "T2"),
            RuntimeError("down"),
        ]
    )
    sender = DeliverySender(client, WriterState(), "grp", "app")
    before = {
        "sent": _value("cloudwatch_writer_batches_total", outcome="sent"),
        "dropped": _value("cloudwatch_writer_batches_total", outcome="dropped"),
        "failed": _value("cloudwatch_writer_batches_total", outcome="failed"),
        "events": _value("cloudwatch_writer_events_total", outcome="sent"),
        "conflicts": _value("cloudwatch_writer_sequence_conflicts_total"),
        "latency": _value("cloudwatch_writer_put_latency_ms_count"),
    }

    sender.send([LogEvent.create("a"), LogEvent.create("b")])
    sender.send([LogEvent.create("c")])
    sender.send([LogEvent.create("d")])

    assert _value("cloudwatch_writer_batches_total", outcome="sent") - before["sent"] == 1
    assert _value("cloudwatch_writer_events_total", outcome="sent") - before["events"] == 2
    assert _value("cloudwatch_writer_batches_total", outcome="dropped") - before["dropped"] == 1
    assert _value("cloudwatch_writer_batches_total", outcome="failed") - before["failed"] == 1
    assert _value("cloudwatch_writer_sequence_conflicts_total") - before["conflicts"] == 2
    assert _value("cloudwatch_writer_put_latency_ms_count") - before["latency"] == 4
