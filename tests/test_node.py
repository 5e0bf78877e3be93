import pytest
from visual_query import NodeData, NodeDefinition, NodeGraph, NodeState
from visual_query.control import DropDownControl
from visual_query.errors import (
    BuilderContractError,
    DuplicateSocketError,
    LifecycleError,
    UnknownTypeError,
    UnregisteredSocketTypeError,
)


def _coverage_builder(node):
    node.add_input("coverageIn", "Coverage", "Coverage")
    node.add_input("boundsIn", "Long/Lat Bounds", "RVec4")
    node.add_input("wcsTimeIn", "Time", "WCSTime")
    node.add_input("resolutionIn", "Maximum Resolution", "Int")
    node.add_output("imageOut", "Image 2D", "Image2D")
    return node


def test_builder_declares_sockets(socket_types):
    definition = NodeDefinition("Coverage", "Test", _coverage_builder)
    node = definition.build(socket_types, "n1")
    assert {s.id: s.type.name for s in node.inputs} == {
        "coverageIn": "Coverage",
        "boundsIn": "RVec4",
        "wcsTimeIn": "WCSTime",
        "resolutionIn": "Int",
    }
    assert {s.id: s.type.name for s in node.outputs} == {"imageOut": "Image2D"}
    assert node.get_input_names() == ["coverageIn", "boundsIn", "wcsTimeIn", "resolutionIn"]
    assert node.inputs["boundsIn"].label == "Long/Lat Bounds"
    assert node.inputs[0].node is node
    assert node.state == NodeState.CONSTRUCTED


def test_unregistered_socket_type(socket_types):
    def builder(node):
        node.add_input("meshIn", "Mesh", "Mesh")
        return node

    definition = NodeDefinition("MeshNode", "Test", builder)
    with pytest.raises(UnregisteredSocketTypeError) as excinfo:
        definition.build(socket_types, "n1")
    assert excinfo.value.definition == "MeshNode"
    assert excinfo.value.socket == "meshIn"
    # still a lookup failure for callers catching the broader error
    assert isinstance(excinfo.value, UnknownTypeError)


def test_duplicate_socket(socket_types):
    def builder(node):
        node.add_input("x", "X", "Int")
        node.add_input("x", "X again", "Int")
        return node

    with pytest.raises(DuplicateSocketError):
        NodeDefinition("Dup", "Test", builder).build(socket_types, "n1")


def test_same_id_on_both_sides(socket_types):
    def builder(node):
        node.add_input("value", "Value", "Int")
        node.add_output("value", "Value", "Int")
        return node

    node = NodeDefinition("PassThrough", "Test", builder).build(socket_types, "n1")
    assert "value" in node.inputs
    assert "value" in node.outputs


def test_builder_must_return_instance(socket_types):
    definition = NodeDefinition("Broken", "Test", lambda node: None)
    with pytest.raises(BuilderContractError):
        definition.build(socket_types, "n1")


def test_builder_is_not_callable():
    with pytest.raises(TypeError):
        NodeDefinition("Broken", "Test", "not a function")


def test_controls_are_per_instance():
    ng = NodeGraph(name="test_controls_are_per_instance")
    n1 = ng.add_node("Sentinel")
    n2 = ng.add_node("Sentinel")
    assert n1.controls["operation"] is not n2.controls["operation"]
    ng.deliver(n1.id, ["Mean"])
    assert [o.text for o in n2.controls["operation"].options] == ["None"]


def test_node_data_defaults():
    data = NodeData.from_dict(None)
    assert data.operations == []
    assert data.selected_operation is None
    assert data.to_dict() == {"operations": []}


def test_node_data_keys():
    data = NodeData.from_dict({"operations": ["A", "B"], "selectedOperation": 1, "zoom": 2})
    assert data.operations == ["A", "B"]
    assert data.selected_operation == 1
    assert data.extra == {"zoom": 2}
    assert data.to_dict() == {"zoom": 2, "operations": ["A", "B"], "selectedOperation": 1}
    assert NodeData.from_dict({"selected_operation": 0}).selected_operation == 0


def test_lifecycle():
    ng = NodeGraph(name="test_lifecycle")
    node = ng.add_node("Sentinel")
    assert node.state == NodeState.CONSTRUCTED
    ng.attach_node(node.id, host_element="div")
    assert node.state == NodeState.ATTACHED
    with pytest.raises(LifecycleError, match="already attached"):
        node.attach()
    ng.deliver(node.id, ["Mean"])
    assert node.state == NodeState.SYNCED
    ng.deliver(node.id, ["Mean", "Max"])
    assert node.state == NodeState.SYNCED
    ng.remove_node(node.id)
    assert node.state == NodeState.REMOVED
    with pytest.raises(LifecycleError, match="removed"):
        node.attach()


def test_message_before_init():
    """A reply may arrive before the node is shown; on_init still runs once."""
    ng = NodeGraph(name="test_message_before_init")
    node = ng.add_node("Sentinel")
    ng.deliver(node.id, ["Mean", "Max"])
    assert node.state == NodeState.SYNCED
    ng.attach_node(node.id)
    assert node.state == NodeState.SYNCED
    control = node.controls["operation"]
    assert [o.text for o in control.options] == ["Mean", "Max"]


def test_removed_node_ignores_receive():
    ng = NodeGraph(name="test_removed_node_ignores_receive")
    node = ng.add_node("Sentinel")
    ng.remove_node(node.id)
    assert node.receive(["Mean"]) is False
    assert node.data.operations == []


def test_send_without_graph(socket_types, caplog):
    definition = NodeDefinition("Lonely", "Test", lambda node: node)
    node = definition.build(socket_types, "n1")
    node.send(1)
    assert "is not part of a graph" in caplog.text


def test_to_dict():
    ng = NodeGraph(name="test_to_dict")
    node = ng.add_node("Sentinel", node_id="s1", data={"selectedOperation": 0})
    data = node.to_dict()
    assert data["id"] == "s1"
    assert data["name"] == "Sentinel"
    assert data["category"] == "Data Extraction"
    assert data["state"] == "CONSTRUCTED"
    assert data["data"]["selectedOperation"] == 0
    assert [s["id"] for s in data["outputs"]] == ["imageOut"]
    assert data["controls"][0]["key"] == "operation"


def test_repr():
    ng = NodeGraph(name="test_repr")
    node = ng.add_node("WCSCoverageImage", node_id="w1")
    assert repr(node) == (
        "NodeInstance(name='WCSCoverageImage', id='w1', "
        "inputs=['coverageIn', 'boundsIn', 'wcsTimeIn', 'resolutionIn', 'layerIn'], "
        "outputs=['imageOut'])"
    )


def test_duplicate_control(socket_types):
    def builder(node):
        node.add_control(DropDownControl("operation"))
        node.add_control(DropDownControl("operation"))
        return node

    with pytest.raises(ValueError, match="already exists"):
        NodeDefinition("TwoControls", "Test", builder).build(socket_types, "n1")
