"""Exceptions raised by the visual query editor core."""


class VisualQueryError(Exception):
    """Base class for all errors raised by visual_query."""


class RegistryError(VisualQueryError):
    """Misuse of a registry. Always a programming error."""


class DuplicateTypeError(RegistryError):
    """A socket type name was registered twice."""


class UnknownTypeError(RegistryError, KeyError):
    """A socket type name was looked up but never registered."""

    def __str__(self) -> str:
        # KeyError quotes its message, keep it readable
        return str(self.args[0]) if self.args else ""


class UnregisteredSocketTypeError(UnknownTypeError):
    """A node builder referenced a socket type that does not exist.

    Node construction is aborted and the graph refuses to add the node.
    """

    def __init__(self, message: str, definition: str = "", socket: str = "") -> None:
        super().__init__(message)
        self.definition = definition
        self.socket = socket


class RegistryFrozenError(RegistryError):
    """The registry was already frozen when a new entry was registered."""


class DuplicateDefinitionError(RegistryError):
    """A node definition name was registered twice."""


class UnknownDefinitionError(RegistryError, KeyError):
    """No node definition is registered under the requested name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NodeError(VisualQueryError):
    """Base class for errors raised while building or using a node."""


class DuplicateSocketError(NodeError, ValueError):
    """A socket id was declared twice on the same side of a node."""


class BuilderContractError(NodeError):
    """A builder did not return the node instance it was given."""


class LifecycleError(NodeError):
    """An operation is not allowed in the node's current state."""


class SocketTypeMismatchError(NodeError, TypeError):
    """Two sockets with incompatible types were linked."""


class StaleMessageIgnored(UserWarning):
    """Label for a backend message addressed to a node that no longer exists.

    This is never raised; it only tags the log record.
    """
