from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from uuid import uuid1
from visual_query.channel import MessageChannel, RecordingChannel
from visual_query.collection import LinkCollection, NodeCollection
from visual_query.config import EditorConfig
from visual_query.link import NodeLink
from visual_query.node import NodeData, NodeDefinition, NodeInstance
from visual_query.registry import NodeRegistry, SocketTypeRegistry
from visual_query.socket import NodeSocket

logger = logging.getLogger(__name__)


class NodeGraph:
    """A collection of nodes and links, and the channel to the backend.

    The graph creates nodes from their definitions, routes backend messages
    to them and stops routing as soon as a node is removed.

    Attributes:
        name (str): The name of the node graph.
        uuid (str): The UUID of this node graph.
        socket_types (SocketTypeRegistry): Shared, read-only socket types.
        definitions (NodeRegistry): Node definitions available for creation.
        channel (MessageChannel): Connection to the execution backend.

    Examples:
        >>> from visual_query import NodeGraph
        >>> ng = NodeGraph(name="query")

        Add nodes:
        >>> sentinel = ng.add_node("Sentinel")
        >>> image = ng.add_node("WCSCoverageImage")

        Backend replies are routed by node id:
        >>> ng.deliver(sentinel.id, ["Mean", "Max", "Min"])
    """

    def __init__(
        self,
        name: str = "NodeGraph",
        socket_types: Optional[SocketTypeRegistry] = None,
        definitions: Optional[NodeRegistry] = None,
        channel: Optional[MessageChannel] = None,
        uuid: Optional[str] = None,
    ) -> None:
        if definitions is None:
            from visual_query.nodes import NodePool

            definitions = NodePool
        self.name = name
        self.uuid = uuid or str(uuid1())
        if socket_types is None:
            socket_types = SocketTypeRegistry.from_config()
        self.socket_types = socket_types
        self.definitions = definitions
        self.channel = channel if channel is not None else RecordingChannel()
        self.nodes = NodeCollection(parent=self)
        self.links = LinkCollection(parent=self)

    @classmethod
    def from_config(cls, config: EditorConfig, **kwargs: Any) -> "NodeGraph":
        return cls(socket_types=SocketTypeRegistry.from_config(config), **kwargs)

    def add_node(
        self,
        identifier: Union[str, NodeDefinition],
        data: Optional[Union[NodeData, Dict[str, Any]]] = None,
        node_id: Optional[str] = None,
    ) -> NodeInstance:
        """Create a node from a definition name or definition and add it.

        Errors raised while building the node propagate and leave the graph
        unchanged.
        """
        if isinstance(identifier, NodeDefinition):
            definition = identifier
        else:
            definition = self.definitions.get(identifier)
        if not isinstance(data, NodeData):
            data = NodeData.from_dict(data)
        node_id = node_id or str(uuid1())
        if node_id in self.nodes:
            raise ValueError(f"{node_id} already exists, please choose another id.")
        node = definition.build(self.socket_types, node_id, data=data)
        self.nodes._append(node)
        self.channel.on_receive(node.id, node.receive)
        logger.debug(f"Created new node '{node.id}' with identifier={definition.name}.")
        return node

    def attach_node(self, node_id: str, host_element: Any = None) -> NodeInstance:
        """Called once the node's element exists on the display surface."""
        node = self.nodes[node_id]
        node.attach(host_element)
        return node

    def remove_node(self, node_id: str) -> NodeInstance:
        """Remove a node, its links, and stop routing backend messages to it."""
        node = self.nodes[node_id]
        self.channel.unregister(node_id)
        link_keys = [
            key
            for key, link in self.links._items.items()
            if link.from_node is node or link.to_node is node
        ]
        for key in link_keys:
            self.links._pop(key)
        self.nodes._pop(node_id)
        node.remove()
        node.graph = None
        logger.debug(f"Removed node '{node_id}'.")
        return node

    def deliver(self, node_id: str, payload: Any) -> bool:
        """Entry point for backend messages addressed to ``node_id``."""
        return self.channel.receive(node_id, payload)

    def add_link(self, from_socket: NodeSocket, to_socket: NodeSocket) -> NodeLink:
        return self.links._new(from_socket, to_socket)

    def check_executable(self, known_names: Iterable[str]) -> List[str]:
        """Return the ids of nodes the backend has no operation for."""
        known = set(known_names)
        return [node.id for node in self.nodes if node.name not in known]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "uuid": self.uuid,
            "nodes": {node.id: node.to_dict() for node in self.nodes},
            "links": [link.to_dict() for link in self.links],
        }

    def __repr__(self) -> str:
        return f'NodeGraph(name="{self.name}", uuid="{self.uuid}")'
