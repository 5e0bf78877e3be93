import logging
from visual_query.control import Control
from visual_query.node import NodeInstance
from .node_pool import NodePool

logger = logging.getLogger(__name__)


@NodePool.node_definition("TransferFunction", category="Operations")
def transfer_function(node: NodeInstance) -> NodeInstance:
    """Provide a colour look-up table edited in the node.

    Every edit sends ``{"lut": ...}`` to the backend, which writes it to the
    ``lut`` output.
    """
    node.add_output("lut", "Transfer Function", "LUT")

    def on_edit(lut):
        node.data.extra["lut"] = lut
        node.send({"lut": lut})

    editor = Control("lut", on_edit, "Transfer Function")
    node.add_control(editor)

    def on_message_from_backend(message):
        if not isinstance(message, dict) or "lut" not in message:
            logger.debug(f"Node {node.label}: message without a lut ignored.")
            return
        node.data.extra["lut"] = message["lut"]
        editor.init(editor.host_element, value=message["lut"])

    def on_init(host_element):
        editor.init(host_element, value=node.data.extra.get("lut"))

    node.on_message_from_backend = on_message_from_backend
    node.on_init = on_init
    return node
