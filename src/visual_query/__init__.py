from .node_graph import NodeGraph
from .node import NodeData, NodeDefinition, NodeInstance, NodeState
from .registry import NodeRegistry, SocketType, SocketTypeRegistry
from .control import Control, DropDownControl, Option, options_from_names
from .channel import HostChannel, RecordingChannel
from .config import EditorConfig
from .nodes import NodePool

__version__ = "0.1.0"


__all__ = [
    "NodeGraph",
    "NodeData",
    "NodeDefinition",
    "NodeInstance",
    "NodeState",
    "NodeRegistry",
    "SocketType",
    "SocketTypeRegistry",
    "Control",
    "DropDownControl",
    "Option",
    "options_from_names",
    "HostChannel",
    "RecordingChannel",
    "EditorConfig",
    "NodePool",
]
