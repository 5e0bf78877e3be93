import pytest
from visual_query import NodeGraph, SocketTypeRegistry
from visual_query.channel import RecordingChannel
from visual_query.registry import SocketType


@pytest.fixture
def socket_types():
    """A frozen registry with the built-in socket types."""
    return SocketTypeRegistry.from_config()


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def ng(channel):
    """A test node graph with a Sentinel and a WCSCoverageImage node."""
    ng = NodeGraph(name="test_nodegraph", channel=channel)
    ng.add_node("Sentinel", node_id="sentinel1")
    ng.add_node("WCSCoverageImage", node_id="image1")
    return ng


@pytest.fixture
def open_registry():
    """A registry that is still open for registration."""
    registry = SocketTypeRegistry()
    registry.register("Int", SocketType("Int"))
    registry.register("Real", SocketType("Real"))
    return registry
