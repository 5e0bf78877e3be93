from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Union
import logging

if TYPE_CHECKING:
    from visual_query.control import Control
    from visual_query.link import NodeLink
    from visual_query.node import NodeInstance
    from visual_query.socket import NodeSocket

logger = logging.getLogger(__name__)


class Collection:
    """Collection of named items.
    Like an extended ordered dict, with the functions: append, pop, clear.
    """

    _key_attr: str = "name"

    def __init__(
        self,
        parent: Optional[object] = None,
        post_creation_hooks: Optional[List[Callable]] = None,
        post_deletion_hooks: Optional[List[Callable]] = None,
    ) -> None:
        """Init a collection instance

        Args:
            parent (object, optional): object this collection belongs to.
        """
        self._items: Dict[str, object] = {}
        self.parent = parent
        self.post_creation_hooks = post_creation_hooks or []
        self.post_deletion_hooks = post_deletion_hooks or []

    def _key(self, item: object) -> str:
        return getattr(item, self._key_attr)

    def __iter__(self) -> Iterator:
        # Iterate over items in insertion order
        return iter(self._items.values())

    def __getitem__(self, index: Union[int, str]) -> object:
        if isinstance(index, int):
            return self._items[list(self._items.keys())[index]]
        return self._items[index]

    def __getattr__(self, name: str) -> object:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._items:
            return self._items[name]
        raise AttributeError(
            f""""{name}" is not in the {self.__class__.__name__}.
Acceptable names are {self._get_keys()}. This collection belongs to {self.parent}."""
        )

    def __dir__(self):
        return sorted(set(self._get_keys()))

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def _append(self, item: object) -> None:
        """Append item into this collection."""
        key = self._key(item)
        if key in self._items:
            raise ValueError(f"{key} already exists, please choose another name.")
        self._items[key] = item
        self._execute_post_creation_hooks(item)

    def _get_keys(self) -> List[str]:
        return list(self._items.keys())

    def _pop(self, key: str) -> object:
        item = self._items.pop(key)
        self._execute_post_deletion_hooks(item)
        return item

    def _clear(self) -> None:
        """Remove all items from this collection."""
        for key in list(self._items):
            self._pop(key)

    def _execute_post_creation_hooks(self, item: object) -> None:
        """Execute all functions in post_creation_hooks with the given item."""
        for func in self.post_creation_hooks:
            func(self, item)

    def _execute_post_deletion_hooks(self, item: object) -> None:
        """Execute all functions in post_deletion_hooks with the given item."""
        for func in self.post_deletion_hooks:
            func(self, item)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}([{', '.join(repr(k) for k in self._items)}])"


class SocketCollection(Collection):
    """Input or output sockets of one node, keyed by socket id."""

    _key_attr = "id"

    def __init__(self, node: "NodeInstance", direction: str) -> None:
        super().__init__(parent=node)
        self.direction = direction

    def __getitem__(self, index: Union[int, str]) -> "NodeSocket":
        return super().__getitem__(index)

    def __repr__(self) -> str:
        node_name = self.parent.name if self.parent else ""
        return (
            f'SocketCollection(node = "{node_name}", {self.direction} = ['
            + ", ".join(f'"{x}"' for x in self._get_keys())
            + "])"
        )


class ControlCollection(Collection):
    """Controls of one node, keyed by control key."""

    _key_attr = "key"

    def __getitem__(self, index: Union[int, str]) -> "Control":
        return super().__getitem__(index)

    def __repr__(self) -> str:
        node_name = self.parent.name if self.parent else ""
        return (
            f'ControlCollection(node = "{node_name}", controls = ['
            + ", ".join(f'"{x}"' for x in self._get_keys())
            + "])"
        )


class NodeCollection(Collection):
    """Nodes of a graph, keyed by node id."""

    _key_attr = "id"

    def __getitem__(self, index: Union[int, str]) -> "NodeInstance":
        return super().__getitem__(index)

    def _append(self, item: "NodeInstance") -> None:
        if item.graph is not None and item.graph is not self.parent:
            raise ValueError(f"This node is already part of a graph: {item.graph}")
        super()._append(item)
        item.graph = self.parent
        logger.debug(f"Added node '{item.id}' ({item.name}) to the graph.")

    def __repr__(self) -> str:
        parent_name = self.parent.name if self.parent else ""
        return (
            f'NodeCollection(parent = "{parent_name}", nodes = ['
            + ", ".join(f'"{x}"' for x in self._get_keys())
            + "])"
        )


class LinkCollection(Collection):
    """Links of a graph, keyed by link name."""

    def _new(self, from_socket: "NodeSocket", to_socket: "NodeSocket") -> "NodeLink":
        from visual_query.link import NodeLink

        registry = getattr(self.parent, "socket_types", None)
        item = NodeLink(from_socket, to_socket, registry=registry)
        try:
            self._append(item)
        except ValueError:
            item.unmount()
            raise
        return item

    def _pop(self, key: str) -> "NodeLink":
        item = super()._pop(key)
        item.unmount()
        return item

    def __delitem__(self, index: Union[int, List[int], str]) -> None:
        if isinstance(index, str):
            self._pop(index)
        elif isinstance(index, int):
            self._pop(list(self._items.keys())[index])
        elif isinstance(index, list):
            keys = list(self._items.keys())
            for i in sorted(index, reverse=True):
                self._pop(keys[i])
        else:
            raise ValueError(
                f"Invalid index type for __delitem__: {index}, expected int or str, or list of int."
            )

    def clear(self) -> None:
        """Remove all links from this collection.
        And remove the link in the sockets.
        """
        self._clear()

    def __repr__(self) -> str:
        return "LinkCollection({} links)\n".format(len(self))
