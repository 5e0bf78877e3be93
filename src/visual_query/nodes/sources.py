from visual_query.node import NodeInstance
from .node_pool import NodePool


@NodePool.node_definition("WCSCoverageImage", category="Sources")
def wcs_coverage_image(node: NodeInstance) -> NodeInstance:
    """Load one layer of a coverage as an image.

    Unconnected inputs fall back to the request defaults in
    :mod:`visual_query.config` on the backend side.
    """
    node.add_input("coverageIn", "Coverage", "Coverage")
    node.add_input("boundsIn", "Long/Lat Bounds", "RVec4")
    node.add_input("wcsTimeIn", "Time", "WCSTime")
    node.add_input("resolutionIn", "Maximum Resolution", "Int")
    node.add_input("layerIn", "Layer", "Int")
    node.add_output("imageOut", "Image 2D", "Image2D")
    return node
