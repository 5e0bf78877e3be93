from visual_query.registry import NodeRegistry

# global instance
NodePool = NodeRegistry()
