from visual_query.config import PLACEHOLDER_OPTION_TEXT
from visual_query.control import DropDownControl, Option, options_from_names
from visual_query.node import NodeInstance
from .node_pool import NodePool


@NodePool.node_definition("Sentinel", category="Data Extraction")
def sentinel(node: NodeInstance) -> NodeInstance:
    """Extract an image from a coverage with an operation chosen by the backend.

    The backend inspects the coverage and replies with the names of the
    operations it supports. The user's choice is sent back as an index.
    """
    node.add_input("coverageIn", "Coverage", "Coverage")
    node.add_input("boundsIn", "Long/Lat Bounds", "RVec4")
    node.add_input("wcsTimeIn", "Time", "WCSTime")
    node.add_input("resolutionIn", "Maximum Resolution", "Int")
    node.add_output("imageOut", "Image 2D", "Image2D")

    def on_select(selection):
        node.data.selected_operation = selection
        node.send(selection)

    placeholder = [Option(0, PLACEHOLDER_OPTION_TEXT)]
    operation = DropDownControl("operation", on_select, "Operation", placeholder)
    node.add_control(operation)

    def on_message_from_backend(message):
        if not isinstance(message, (list, tuple)):
            # malformed replies leave the current options in place
            return
        node.data.operations = [str(name) for name in message]
        # an empty reply shows the placeholder, as a reload of the same data does
        operation.set_options(options_from_names(message) or placeholder)
        node.data.selected_operation = operation.selected_value

    def on_init(host_element):
        options = options_from_names(node.data.operations) or None
        operation.init(
            host_element,
            options=options,
            selected_value=node.data.selected_operation,
        )

    node.on_message_from_backend = on_message_from_backend
    node.on_init = on_init
    return node
