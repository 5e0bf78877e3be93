from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Option:
    """One entry of a drop-down: the value sent to the backend and its text."""

    value: Any
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "text": self.text}

    @classmethod
    def from_data(cls, data: Union["Option", Dict[str, Any], Sequence]) -> "Option":
        """Accept an Option, a ``{value, text}`` mapping or a ``(value, text)`` pair."""
        if isinstance(data, Option):
            return data
        if isinstance(data, dict):
            return cls(value=data["value"], text=str(data["text"]))
        value, text = data
        return cls(value=value, text=str(text))


def options_from_names(names: Optional[Iterable[Any]]) -> List[Option]:
    """Map a list of names into options whose values are the list indices.

    >>> options_from_names(["Mean", "Max"])
    [Option(value=0, text='Mean'), Option(value=1, text='Max')]
    """
    if names is None:
        return []
    return [Option(value=index, text=str(name)) for index, name in enumerate(names)]


class Control:
    """Base class for interactive elements attached to a node.

    A control holds user-chosen state that is not carried by a socket.
    It is bound to exactly one node and never shares state with others.
    """

    identifier: str = "visual_query.control"

    def __init__(
        self,
        key: str,
        callback: Optional[Callable[[Any], None]] = None,
        label: str = "",
        value: Any = None,
    ) -> None:
        self.key = key
        self.callback = callback
        self.label = label or key
        self.host_element: Any = None
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def select(self, value: Any) -> Any:
        """Handle a user edit and forward the new value to the callback."""
        self._value = value
        if self.callback is not None:
            self.callback(value)
        return value

    def init(self, host_element: Any, value: Any = None, **state: Any) -> None:
        """Bind the control to its element on the display surface."""
        self.host_element = host_element
        if value is not None:
            self._value = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "identifier": self.identifier,
            "value": self.value,
        }

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(key="{self.key}", value={self.value!r})'


class DropDownControl(Control):
    """A drop-down selection whose options may arrive after construction.

    Each option has a value (sent to the backend) and a text (shown to the
    user). ``callback`` is invoked with the selected value on every user
    selection.

    >>> control = DropDownControl("operation", None, "Operation",
    ...                           [Option(0, "None")])
    >>> control.set_options(options_from_names(["Mean", "Max"]))
    >>> control.select(1)
    1
    """

    identifier: str = "visual_query.dropdown"

    def __init__(
        self,
        key: str,
        callback: Optional[Callable[[Any], None]] = None,
        label: str = "",
        options: Optional[Iterable[Any]] = None,
        selected_value: Any = None,
    ) -> None:
        super().__init__(key, callback, label, value=selected_value)
        self._options: List[Option] = [Option.from_data(o) for o in options or []]
        if self._value is None and self._options:
            self._value = self._options[0].value

    @property
    def options(self) -> List[Option]:
        return list(self._options)

    @property
    def values(self) -> List[Any]:
        return [option.value for option in self._options]

    @property
    def selected_value(self) -> Any:
        return self._value

    @property
    def selected_text(self) -> Optional[str]:
        for option in self._options:
            if option.value == self._value:
                return option.text
        return None

    def set_options(self, options: Iterable[Any]) -> None:
        """Replace the option list.

        A selection that is not part of the new list falls back to the first
        option, or to ``None`` when the list is empty.
        """
        self._options = [Option.from_data(o) for o in options]
        if self._value not in self.values:
            fallback = self._options[0].value if self._options else None
            logger.debug(
                f"Control '{self.key}': selection {self._value!r} is not "
                f"among the new options, falling back to {fallback!r}."
            )
            self._value = fallback

    def select(self, value: Any) -> Any:
        """Handle a user selection and forward it to the callback.

        The value is kept even when it is not among the current options: a
        backend reply may have narrowed the list while the user was choosing.
        """
        if value not in self.values:
            logger.debug(
                f"Control '{self.key}': selected value {value!r} is not among "
                f"the options {self.values}."
            )
        return super().select(value)

    def init(
        self,
        host_element: Any,
        options: Optional[Iterable[Any]] = None,
        selected_value: Any = None,
        **state: Any,
    ) -> None:
        """Materialize deferred state once the node is on the display surface.

        ``None`` keeps the current options or selection. A saved selection
        that is not among the options is resolved like in :meth:`set_options`.
        """
        super().init(host_element, **state)
        if options is not None:
            self.set_options(options)
        if selected_value is None:
            return
        if selected_value in self.values:
            self._value = selected_value
        else:
            fallback = self._options[0].value if self._options else None
            logger.debug(
                f"Control '{self.key}': saved selection {selected_value!r} is not "
                f"among the options {self.values}, falling back to {fallback!r}."
            )
            self._value = fallback

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["options"] = [option.to_dict() for option in self._options]
        return data
