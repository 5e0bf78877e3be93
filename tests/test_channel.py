import logging
from visual_query.channel import HostChannel, RecordingChannel


def test_send_uses_host_primitive():
    sent = []
    channel = HostChannel(lambda payload, node_id: sent.append((payload, node_id)))
    channel.send("n1", 2)
    assert sent == [(2, "n1")]


def test_send_without_backend(caplog):
    channel = HostChannel()
    channel.send("n1", 2)
    assert "No backend connected" in caplog.text


def test_send_failure_is_not_raised(caplog):
    def broken(payload, node_id):
        raise ConnectionError("backend gone")

    channel = HostChannel(broken)
    channel.send("n1", 2)
    assert "Failed to send a message for node 'n1'" in caplog.text


def test_receive_routes_by_node_id():
    channel = HostChannel()
    received = {"a": [], "b": []}
    channel.on_receive("a", received["a"].append)
    channel.on_receive("b", received["b"].append)
    assert channel.receive("a", 1)
    assert channel.receive("b", 2)
    assert channel.receive("a", 3)
    assert received == {"a": [1, 3], "b": [2]}


def test_receive_unknown_node_is_dropped(caplog):
    caplog.set_level(logging.DEBUG, logger="visual_query.channel")
    channel = HostChannel()
    assert channel.receive("ghost", ["Mean"]) is False
    assert "StaleMessageIgnored" in caplog.text


def test_unregister():
    channel = HostChannel()
    received = []
    channel.on_receive("a", received.append)
    channel.unregister("a")
    assert not channel.is_registered("a")
    assert channel.receive("a", 1) is False
    assert received == []
    # unregistering twice is harmless
    channel.unregister("a")


def test_reentrant_messages_keep_order():
    channel = HostChannel()
    received = []

    def handler(payload):
        received.append(payload)
        if payload == 1:
            # delivered while the first message is still being handled
            channel.receive("a", 2)
            channel.receive("a", 3)

    channel.on_receive("a", handler)
    channel.receive("a", 1)
    assert received == [1, 2, 3]


def test_message_queued_for_node_removed_meanwhile():
    channel = HostChannel()
    received = []

    def handler(payload):
        received.append(payload)
        channel.receive("a", "late")
        channel.unregister("a")

    channel.on_receive("a", handler)
    channel.receive("a", "first")
    assert received == ["first"]


def test_handler_error_is_logged(caplog):
    channel = HostChannel()

    def handler(payload):
        raise ValueError("bad payload")

    channel.on_receive("a", handler)
    assert channel.receive("a", 1)
    assert "failed to handle backend message" in caplog.text
    # the channel keeps working afterwards
    received = []
    channel.on_receive("b", received.append)
    channel.receive("b", 2)
    assert received == [2]


def test_recording_channel():
    sent = []
    channel = RecordingChannel(lambda payload, node_id: sent.append(node_id))
    channel.send("n1", 0)
    channel.send("n2", 1)
    assert channel.outbox == [("n1", 0), ("n2", 1)]
    assert sent == ["n1", "n2"]
