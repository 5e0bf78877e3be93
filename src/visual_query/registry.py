from __future__ import annotations
from dataclasses import dataclass
import difflib
import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Set, Tuple
from visual_query.errors import (
    DuplicateDefinitionError,
    DuplicateTypeError,
    RegistryFrozenError,
    UnknownDefinitionError,
    UnknownTypeError,
)

if TYPE_CHECKING:
    from visual_query.config import EditorConfig
    from visual_query.node import NodeDefinition, NodeInstance

logger = logging.getLogger(__name__)

TypePromotionPair = Tuple[str, str]


@dataclass(frozen=True)
class SocketType:
    """Descriptor of a socket type. Only its name matters for compatibility."""

    name: str
    description: str = ""

    def __str__(self) -> str:
        return self.name


def _not_found_message(kind: str, name: str, known: List[str]) -> str:
    items = difflib.get_close_matches(name, known)
    if len(items) == 0:
        return f"{kind}: {name!r} is not defined."
    return f"{kind}: {name!r} is not defined. Did you mean {', '.join(items)}?"


class SocketTypeRegistry:
    """Mapping from socket type name to :class:`SocketType`.

    The registry must be fully populated before any node builder runs.
    After :meth:`freeze` it is read-only and can be shared by every node.

    Examples:
        >>> registry = SocketTypeRegistry()
        >>> registry.register("Int", SocketType("Int"))
        >>> registry.lookup("Int")
        SocketType(name='Int', description='')
    """

    def __init__(self) -> None:
        self._types: Dict[str, SocketType] = {}
        self._promotions: Set[TypePromotionPair] = set()
        self._frozen = False

    def register(self, name: str, descriptor: Optional[SocketType] = None) -> SocketType:
        """Register ``descriptor`` under ``name``.

        A descriptor is created from the name when none is given.
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Can not register socket type {name!r}: the registry is frozen."
            )
        if name in self._types:
            raise DuplicateTypeError(f"Socket type {name!r} is already registered.")
        if descriptor is None:
            descriptor = SocketType(name)
        self._types[name] = descriptor
        logger.debug(f"Registered socket type {name!r}.")
        return descriptor

    def lookup(self, name: str) -> SocketType:
        if name not in self._types:
            raise UnknownTypeError(
                _not_found_message("Socket type", name, list(self._types))
            )
        return self._types[name]

    def register_promotion(self, from_name: str, to_name: str) -> None:
        """Allow an output of type ``from_name`` to feed an input of ``to_name``."""
        if self._frozen:
            raise RegistryFrozenError(
                f"Can not register promotion {from_name!r} -> {to_name!r}: "
                "the registry is frozen."
            )
        self.lookup(from_name)
        self.lookup(to_name)
        self._promotions.add((from_name, to_name))

    def is_compatible(self, from_type: SocketType, to_type: SocketType) -> bool:
        if from_type.name == to_type.name:
            return True
        return (from_type.name, to_type.name) in self._promotions

    @property
    def promotions(self) -> Set[TypePromotionPair]:
        return set(self._promotions)

    def freeze(self) -> "SocketTypeRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> List[str]:
        return list(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[SocketType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"SocketTypeRegistry({', '.join(self._types)})"

    @classmethod
    def from_config(
        cls, config: Optional["EditorConfig"] = None, builtins: bool = True
    ) -> "SocketTypeRegistry":
        """Build and freeze a registry from the built-in types and ``config``."""
        from visual_query.sockets.builtins import socket_type_list, type_promotions

        registry = cls()
        if builtins:
            for socket_type in socket_type_list:
                registry.register(socket_type.name, socket_type)
            for from_name, to_name in type_promotions:
                registry.register_promotion(from_name, to_name)
        if config is not None:
            for entry in config.socket_types:
                registry.register(entry.name, SocketType(entry.name, entry.description))
            for from_name, to_name in config.promotions:
                registry.register_promotion(from_name, to_name)
        return registry.freeze()


class NodeRegistry:
    """Registry of :class:`~visual_query.node.NodeDefinition` values by name.

    The name of a definition is the key the execution backend uses to map a
    visual node to an executable operation, so it must be unique.
    """

    def __init__(self) -> None:
        self._definitions: Dict[str, "NodeDefinition"] = {}

    def register(self, definition: "NodeDefinition") -> "NodeDefinition":
        if definition.name in self._definitions:
            raise DuplicateDefinitionError(
                f"Node definition {definition.name!r} is already registered."
            )
        self._definitions[definition.name] = definition
        logger.debug(
            f"Registered node definition {definition.name!r} "
            f"in category {definition.category!r}."
        )
        return definition

    def get(self, name: str) -> "NodeDefinition":
        if name not in self._definitions:
            raise UnknownDefinitionError(
                _not_found_message("Node definition", name, list(self._definitions))
            )
        return self._definitions[name]

    def node_definition(
        self, name: str, category: str = "Others", description: str = ""
    ) -> Callable[[Callable[["NodeInstance"], "NodeInstance"]], "NodeDefinition"]:
        """Decorator registering a builder function as a node definition."""
        from visual_query.node import NodeDefinition

        def decorator(builder: Callable[["NodeInstance"], "NodeInstance"]):
            definition = NodeDefinition(
                name=name,
                category=category,
                builder=builder,
                description=description or (builder.__doc__ or "").strip(),
            )
            return self.register(definition)

        return decorator

    def categories(self) -> Dict[str, List[str]]:
        """Group definition names by category, for node creation menus."""
        result: Dict[str, List[str]] = {}
        for definition in self._definitions.values():
            result.setdefault(definition.category, []).append(definition.name)
        return {key: sorted(result[key]) for key in sorted(result)}

    def names(self) -> List[str]:
        return list(self._definitions)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator["NodeDefinition"]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"NodeRegistry({', '.join(self._definitions)})"
