"""
Unit tests for DeliverySender (token handling and the single conflict retry).
"""

from cloudwatch_writer.errors import DeliveryError, OrderingConflict
from cloudwatch_writer.models import LogEvent
from cloudwatch_writer.sender import MAX_RETRIES, DeliverySender
from cloudwatch_writer.state import WriterState


def _events(*messages):
    return [LogEvent.create(m) for m in messages]


def _sender(client, token="t-0"):
    state = WriterState(batch_interval=5.0)
    state.sequence_token = token
    return DeliverySender(client, state, "grp", "app"), state


def test_retry_ceiling_is_one():
    assert MAX_RETRIES == 1


def test_empty_batch_is_a_noop(fake_client_cls):
    client = fake_client_cls()
    sender, _ = _sender(client)
    assert sender.send([]) is False
    assert client.puts == []


def test_success_stores_next_token(fake_client_cls):
    client = fake_client_cls(put_results=["t-next"])
    sender, state = _sender(client)
    assert sender.send(_events("a", "b")) is True
    assert client.puts[0]["token"] == "t-0"
    assert client.puts[0]["messages"] == ["a", "b"]
    assert state.sequence_token == "t-next"
    assert state.last_error is None


def test_conflict_adopts_expected_token_and_retries_once(fake_client_cls):
    client = fake_client_cls(put_results=[OrderingConflict("stale", expected_token="T"), "t-after"])
    sender, state = _sender(client)
    assert sender.send(_events("a")) is True
    assert [p["token"] for p in client.puts] == ["t-0", "T"]
    assert state.sequence_token == "t-after"
    assert state.last_error is None


def test_two_conflicts_drop_the_batch_without_third_attempt(fake_client_cls):
    client = fake_client_cls(
        put_results=[
            OrderingConflict("stale", expected_token="T1"),
            OrderingConflict("stale again", expected_token="T2"),
            "never-used",
        ]
    )
    sender, state = _sender(client)
    assert sender.send(_events("a")) is False
    assert len(client.puts) == 2
    assert [p["token"] for p in client.puts] == ["t-0", "T1"]
    # the last expected token is still adopted, the error is not surfaced
    assert state.sequence_token == "T2"
    assert state.last_error is None


def test_conflict_with_no_expected_token(fake_client_cls):
    client = fake_client_cls(put_results=[OrderingConflict("fresh stream", expected_token=None), "t-1"])
    sender, state = _sender(client, token="bogus")
    assert sender.send(_events("a")) is True
    assert client.puts[1]["token"] is None


def test_other_failure_is_recorded_and_token_kept(fake_client_cls):
    client = fake_client_cls(put_results=[RuntimeError("connection reset")])
    sender, state = _sender(client)
    assert sender.send(_events("a")) is False
    assert len(client.puts) == 1
    assert state.sequence_token == "t-0"

    err = state.last_error
    assert isinstance(err, DeliveryError)
    assert "connection reset" in str(err)
    assert isinstance(err.__cause__, RuntimeError)


def test_delivery_error_is_stored_as_is(fake_client_cls):
    original = DeliveryError("ThrottlingException: Rate exceeded")
    client = fake_client_cls(put_results=[original])
    sender, state = _sender(client)
    sender.send(_events("a"))
    assert state.last_error is original


def test_success_does_not_clear_pending_error(fake_client_cls):
    client = fake_client_cls(put_results=[RuntimeError("x"), "t-1"])
    sender, state = _sender(client)
    sender.send(_events("a"))
    sender.send(_events("b"))
    assert isinstance(state.last_error, DeliveryError)
    assert state.sequence_token == "t-1"
