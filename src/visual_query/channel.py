"""Message channel between node instances and the execution backend.

Outbound messages are fire-and-forget: the sender never waits for an
answer. Inbound messages are routed by node id to the handler the node
registered, in the order they arrive. Messages for a node without a handler
(never registered, or removed from the graph) are dropped.
"""

from __future__ import annotations
from collections import deque
import logging
from typing import Any, Callable, Deque, Dict, List, Optional, Protocol, Tuple
from visual_query.errors import StaleMessageIgnored

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]
SendMessage = Callable[[Any, str], None]


class MessageChannel(Protocol):
    def send(self, node_id: str, payload: Any) -> None:
        ...

    def on_receive(self, node_id: str, handler: Handler) -> None:
        ...

    def unregister(self, node_id: str) -> None:
        ...

    def receive(self, node_id: str, payload: Any) -> bool:
        ...


class HostChannel:
    """Channel backed by the host's ``send_message(payload, node_id)`` primitive."""

    def __init__(self, send_message: Optional[SendMessage] = None) -> None:
        self._send_message = send_message
        self._handlers: Dict[str, Handler] = {}
        self._pending: Deque[Tuple[str, Any]] = deque()
        self._dispatching = False

    def send(self, node_id: str, payload: Any) -> None:
        if self._send_message is None:
            logger.warning(
                f"No backend connected, dropping message for node '{node_id}'."
            )
            return
        try:
            self._send_message(payload, node_id)
        except Exception:
            logger.exception(f"Failed to send a message for node '{node_id}'.")

    def on_receive(self, node_id: str, handler: Handler) -> None:
        self._handlers[node_id] = handler

    def unregister(self, node_id: str) -> None:
        self._handlers.pop(node_id, None)

    def is_registered(self, node_id: str) -> bool:
        return node_id in self._handlers

    def receive(self, node_id: str, payload: Any) -> bool:
        """Route a backend message to the node it is addressed to.

        Returns False if the message was dropped because no node handles
        ``node_id``. Messages arriving while a handler runs are queued and
        delivered afterwards, so every node sees them in arrival order.
        """
        if node_id not in self._handlers:
            logger.debug(
                f"{StaleMessageIgnored.__name__}: no node '{node_id}' to receive "
                f"{payload!r}."
            )
            return False
        self._pending.append((node_id, payload))
        if not self._dispatching:
            self._drain()
        return True

    def _drain(self) -> None:
        self._dispatching = True
        try:
            while self._pending:
                node_id, payload = self._pending.popleft()
                # the node may have been removed by an earlier message
                handler = self._handlers.get(node_id)
                if handler is None:
                    logger.debug(
                        f"{StaleMessageIgnored.__name__}: node '{node_id}' was "
                        "removed before its message was delivered."
                    )
                    continue
                try:
                    handler(payload)
                except Exception:
                    logger.exception(
                        f"Node '{node_id}' failed to handle backend message {payload!r}."
                    )
        finally:
            self._dispatching = False


class RecordingChannel(HostChannel):
    """Channel that keeps every outbound message in ``outbox``.

    Used when no backend is connected, e.g. in tests or dry runs.
    """

    def __init__(self, send_message: Optional[SendMessage] = None) -> None:
        super().__init__(send_message)
        self.outbox: List[Tuple[str, Any]] = []

    def send(self, node_id: str, payload: Any) -> None:
        self.outbox.append((node_id, payload))
        if self._send_message is not None:
            super().send(node_id, payload)
