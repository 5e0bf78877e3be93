from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional
from visual_query.collection import ControlCollection, SocketCollection
from visual_query.control import Control
from visual_query.errors import (
    BuilderContractError,
    DuplicateSocketError,
    LifecycleError,
    UnknownTypeError,
    UnregisteredSocketTypeError,
)
from visual_query.socket import INPUT, OUTPUT, NodeSocket

if TYPE_CHECKING:
    from visual_query.node_graph import NodeGraph
    from visual_query.registry import SocketTypeRegistry

logger = logging.getLogger(__name__)

Builder = Callable[["NodeInstance"], "NodeInstance"]


def valid_name_string(s: str) -> bool:
    """Raise a ValueError unless ``s`` only contains letters, digits and underscores."""
    if not isinstance(s, str):
        raise ValueError(f"Invalid name: {s!r}: must be a string")
    if not re.fullmatch(r"[A-Za-z0-9_]+", s):
        raise ValueError(
            f"Invalid name: {s!r}. Only letters, digits and underscores are allowed"
        )
    return True


@dataclass(frozen=True)
class NodeDefinition:
    """Static description of a kind of node.

    Attributes:
        name: Must match the name of the operation in the execution backend.
        category: Submenu from which the node can be created.
        builder: Called with an empty instance each time a node is created;
            declares sockets and controls, assigns hooks and returns it.
    """

    name: str
    category: str
    builder: Builder
    description: str = ""

    def __post_init__(self):
        valid_name_string(self.name)
        if not callable(self.builder):
            raise TypeError(f"The builder of {self.name!r} must be callable.")

    def build(
        self,
        socket_types: "SocketTypeRegistry",
        node_id: str,
        data: Optional["NodeData"] = None,
    ) -> "NodeInstance":
        """Create an instance shell and run the builder on it."""
        shell = NodeInstance(
            self, socket_types=socket_types, node_id=node_id, data=data
        )
        node = self.builder(shell)
        if node is not shell:
            raise BuilderContractError(
                f"The builder of {self.name!r} must return the instance it was given, "
                f"got {node!r}."
            )
        return node

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "description": self.description,
        }


@dataclass
class NodeData:
    """Persisted state of a node, restored when the node is attached.

    ``operations`` is the last option list received from the backend and
    ``selected_operation`` the value the user picked. Other keys are kept
    in ``extra`` untouched.
    """

    operations: List[str] = field(default_factory=list)
    selected_operation: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NodeData":
        data = dict(data or {})
        operations = data.pop("operations", None) or []
        selected = data.pop("selectedOperation", None)
        if selected is None:
            selected = data.pop("selected_operation", None)
        else:
            data.pop("selected_operation", None)
        return cls(
            operations=[str(op) for op in operations],
            selected_operation=selected,
            extra=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["operations"] = list(self.operations)
        if self.selected_operation is not None:
            data["selectedOperation"] = self.selected_operation
        return data


class NodeState(str, Enum):
    CONSTRUCTED = "CONSTRUCTED"
    ATTACHED = "ATTACHED"
    SYNCED = "SYNCED"
    REMOVED = "REMOVED"


class NodeInstance:
    """Runtime node created by the graph from a :class:`NodeDefinition`.

    Attributes:
        id (str): Assigned by the graph, stable for the node's lifetime.
        name (str): The name of the definition, known to the backend.
        inputs (SocketCollection): Input sockets, keyed by socket id.
        outputs (SocketCollection): Output sockets, keyed by socket id.
        controls (ControlCollection): Controls, keyed by control key.
        data (NodeData): Persisted state.
        state (NodeState): Position in the construction/sync lifecycle.
        on_message_from_backend: Hook for messages from the backend.
            It may run any number of times, before or after ``on_init``.
        on_init: Hook run once, when the node is attached to the display.

    Examples:
        >>> node = ng.add_node("Sentinel")
        >>> node.inputs["coverageIn"].type.name
        'Coverage'
        >>> ng.deliver(node.id, ["Mean", "Max"])
    """

    def __init__(
        self,
        definition: NodeDefinition,
        socket_types: "SocketTypeRegistry",
        node_id: str,
        data: Optional[NodeData] = None,
        graph: Optional["NodeGraph"] = None,
    ) -> None:
        self.definition = definition
        self.name = definition.name
        self.id = node_id
        self.graph = graph
        self._socket_types = socket_types
        self.inputs = SocketCollection(self, INPUT)
        self.outputs = SocketCollection(self, OUTPUT)
        self.controls = ControlCollection(parent=self)
        self.data = data if data is not None else NodeData()
        self.state = NodeState.CONSTRUCTED
        self._attached = False
        self.on_message_from_backend: Optional[Callable[[Any], None]] = None
        self.on_init: Optional[Callable[[Any], None]] = None

    @property
    def category(self) -> str:
        return self.definition.category

    @property
    def label(self) -> str:
        return f"{self.name}[{self.id}]"

    def _new_socket(
        self, collection: SocketCollection, id: str, label: str, type_name: str
    ) -> NodeSocket:
        if id in collection:
            raise DuplicateSocketError(
                f"Node {self.name!r} already has an {collection.direction} "
                f"socket {id!r}."
            )
        try:
            socket_type = self._socket_types.lookup(type_name)
        except UnknownTypeError as e:
            raise UnregisteredSocketTypeError(
                f"Node {self.name!r}: socket {id!r} uses an unregistered type. {e}",
                definition=self.name,
                socket=id,
            ) from e
        socket = NodeSocket(
            id, label, socket_type, node=self, direction=collection.direction
        )
        collection._append(socket)
        return socket

    def add_input(self, id: str, label: str, type_name: str) -> NodeSocket:
        return self._new_socket(self.inputs, id, label, type_name)

    def add_output(self, id: str, label: str, type_name: str) -> NodeSocket:
        return self._new_socket(self.outputs, id, label, type_name)

    def add_control(self, control: Control) -> Control:
        self.controls._append(control)
        return control

    def get_input_names(self) -> List[str]:
        return self.inputs._get_keys()

    def get_output_names(self) -> List[str]:
        return self.outputs._get_keys()

    def send(self, payload: Any) -> None:
        """Send ``payload`` to the backend. Never waits for an answer."""
        if self.graph is None:
            logger.warning(
                f"Node {self.label} is not part of a graph, message {payload!r} dropped."
            )
            return
        self.graph.channel.send(self.id, payload)

    def attach(self, host_element: Any = None) -> None:
        """Run ``on_init`` once the node is shown on the display surface."""
        if self.state == NodeState.REMOVED:
            raise LifecycleError(f"Node {self.label} was removed from the graph.")
        if self._attached:
            raise LifecycleError(f"Node {self.label} is already attached.")
        if self.on_init is not None:
            self.on_init(host_element)
        self._attached = True
        # a reply may have arrived before the node was shown
        if self.state == NodeState.CONSTRUCTED:
            self.state = NodeState.ATTACHED

    def receive(self, payload: Any) -> bool:
        """Apply a backend message. Returns False if the node was removed."""
        if self.state == NodeState.REMOVED:
            logger.debug(f"Node {self.label} was removed, message ignored.")
            return False
        if self.on_message_from_backend is not None:
            self.on_message_from_backend(payload)
        self.state = NodeState.SYNCED
        return True

    def remove(self) -> None:
        self.state = NodeState.REMOVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "state": self.state.value,
            "data": self.data.to_dict(),
            "inputs": [socket.to_dict() for socket in self.inputs],
            "outputs": [socket.to_dict() for socket in self.outputs],
            "controls": [control.to_dict() for control in self.controls],
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name='{self.name}', id='{self.id}', "
            f"inputs=[{', '.join(repr(k) for k in self.get_input_names())}], "
            f"outputs=[{', '.join(repr(k) for k in self.get_output_names())}])"
        )
