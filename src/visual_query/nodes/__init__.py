from .node_pool import NodePool
from . import extract, operations, sources  # noqa: F401  register the built-ins

__all__ = ["NodePool"]
