from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from visual_query.errors import SocketTypeMismatchError

if TYPE_CHECKING:
    from visual_query.registry import SocketTypeRegistry
    from visual_query.socket import NodeSocket


class NodeLink:
    """Link connect an output socket to an input socket."""

    def __init__(
        self,
        from_socket: "NodeSocket",
        to_socket: "NodeSocket",
        registry: Optional["SocketTypeRegistry"] = None,
    ) -> None:
        """init a instance of Link

        Args:
            from_socket (NodeSocket): The output socket where the link originates from.
            to_socket (NodeSocket): The input socket where the link connects to.
            registry (SocketTypeRegistry, optional): Declares extra compatible
                type pairs. Without it only identical types can be linked.
        """
        self.from_socket = from_socket
        self.from_node = from_socket.node
        self.to_socket = to_socket
        self.to_node = to_socket.node
        self.registry = registry
        self.check_socket_match()
        self.mount()

    @property
    def name(self) -> str:
        return "{}.{} -> {}.{}".format(
            self.from_node.id,
            self.from_socket.id,
            self.to_node.id,
            self.to_socket.id,
        )

    def check_socket_match(self) -> None:
        """Check the socket directions and types match, and belong to the same graph."""
        if self.from_socket.is_input or not self.to_socket.is_input:
            raise ValueError(
                f"A link must go from an output to an input socket, got "
                f"{self.from_socket.full_name} -> {self.to_socket.full_name}."
            )
        if self.from_node.graph is None or self.from_node.graph is not self.to_node.graph:
            raise ValueError(
                "Can not link sockets from different graphs. {} and {}".format(
                    self.from_node.graph,
                    self.to_node.graph,
                )
            )

        from_type = self.from_socket.type
        to_type = self.to_socket.type
        if from_type == to_type:
            return
        if self.registry is not None and self.registry.is_compatible(from_type, to_type):
            return

        lines = [
            "Socket type mismatch:",
            f"  {self.from_socket.full_name} [{from_type.name}] -> "
            f"{self.to_socket.full_name} [{to_type.name}] is not allowed.",
            "",
            "Suggestions:",
            "  • Double-check you are linking the intended sockets \n"
            "  • If this conversion is intentional, register a type promotion \n",
        ]
        raise SocketTypeMismatchError("\n".join(lines))

    def mount(self) -> None:
        """Attach the link to both sockets."""
        if len(self.to_socket.links) >= self.to_socket.link_limit:
            raise ValueError(
                "Socket {}: number of links {} larger than the link limit {}.".format(
                    self.to_socket.full_name,
                    len(self.to_socket.links) + 1,
                    self.to_socket.link_limit,
                )
            )
        self.from_socket.links.append(self)
        self.to_socket.links.append(self)

    def unmount(self) -> None:
        """Detach the link from both sockets."""
        for socket in (self.from_socket, self.to_socket):
            if self in socket.links:
                socket.links.remove(self)

    def to_dict(self) -> dict:
        return {
            "from_node": self.from_node.id,
            "from_socket": self.from_socket.id,
            "to_node": self.to_node.id,
            "to_socket": self.to_socket.id,
        }

    def __repr__(self) -> str:
        return 'NodeLink(from="{}.{}", to="{}.{}")'.format(
            self.from_node.id,
            self.from_socket.id,
            self.to_node.id,
            self.to_socket.id,
        )
