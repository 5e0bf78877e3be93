from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from visual_query.config import INPUT_LINK_LIMIT, MAX_LINK_LIMIT

if TYPE_CHECKING:
    from visual_query.link import NodeLink
    from visual_query.node import NodeInstance
    from visual_query.registry import SocketType


INPUT = "input"
OUTPUT = "output"


class NodeSocket:
    """Typed connection point of a node.

    Attributes:
        id (str): Unique among the sockets of the same direction on a node.
            The backend reads and writes values through this id.
        label (str): Text shown on the node.
        type (SocketType): Used to check links against other sockets.
        direction (str): Either "input" or "output".
        links (List[NodeLink]): Connected links.
        link_limit (int): Maximum number of links, 1 for inputs.
    """

    def __init__(
        self,
        id: str,
        label: str,
        type: "SocketType",
        node: Optional["NodeInstance"] = None,
        direction: str = INPUT,
        link_limit: Optional[int] = None,
    ) -> None:
        if direction not in (INPUT, OUTPUT):
            raise ValueError(f"Invalid socket direction: {direction!r}")
        self.id = id
        self.label = label
        self.type = type
        self.node = node
        self.direction = direction
        self.links: List["NodeLink"] = []
        if link_limit is None:
            link_limit = INPUT_LINK_LIMIT if direction == INPUT else MAX_LINK_LIMIT
        self.link_limit = link_limit

    @property
    def is_input(self) -> bool:
        return self.direction == INPUT

    @property
    def full_name(self) -> str:
        node_name = self.node.label if self.node is not None else "<detached>"
        return f"{node_name}.{self.direction}s.{self.id}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.name,
            "direction": self.direction,
            "link_limit": self.link_limit,
        }

    def __repr__(self) -> str:
        return (
            f"NodeSocket(id={self.id!r}, label={self.label!r}, "
            f"type={self.type.name!r}, direction={self.direction!r})"
        )
