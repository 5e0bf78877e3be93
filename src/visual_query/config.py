from __future__ import annotations
import dataclasses
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import yaml


# Defaults the backend uses for unconnected inputs of coverage nodes.
DEFAULT_BOUNDS: Tuple[float, float, float, float] = (-180.0, 180.0, -90.0, 90.0)
DEFAULT_MAX_RESOLUTION = 1024
DEFAULT_LAYER = 1
DEFAULT_IMAGE_FORMAT = "image/tiff"

# Drop-down placeholder shown until the backend sends the real option list.
PLACEHOLDER_OPTION_TEXT = "None"

INPUT_LINK_LIMIT = 1
MAX_LINK_LIMIT = 1000000

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclasses.dataclass(frozen=True)
class SocketTypeEntry:
    name: str
    description: str = ""


@dataclasses.dataclass(frozen=True)
class EditorConfig:
    """Settings supplied by the host application before graph editing starts.

    Attributes:
        socket_types: Extra socket types on top of the built-in ones.
        promotions: Extra ``(from, to)`` socket type promotions.
        backend_names: Node names the execution backend knows how to run.
        log_level: Level name passed to :func:`logging.basicConfig`.
    """

    socket_types: Tuple[SocketTypeEntry, ...] = ()
    promotions: Tuple[Tuple[str, str], ...] = ()
    backend_names: Tuple[str, ...] = ()
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EditorConfig":
        data = data or {}
        entries: List[SocketTypeEntry] = []
        for item in data.get("socket_types") or []:
            if isinstance(item, str):
                entries.append(SocketTypeEntry(name=item))
            elif isinstance(item, dict) and "name" in item:
                entries.append(
                    SocketTypeEntry(
                        name=str(item["name"]),
                        description=str(item.get("description", "")),
                    )
                )
            else:
                raise ValueError(
                    f"Invalid socket type entry: {item!r}. "
                    "Expected a name or a mapping with a 'name' key."
                )
        promotions = []
        for pair in data.get("promotions") or []:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError(f"Invalid promotion: {pair!r}, expected [from, to].")
            promotions.append((str(pair[0]), str(pair[1])))
        log_level = str(data.get("log_level", "WARNING")).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {log_level!r}, expected one of {list(LOG_LEVELS)}."
            )
        return cls(
            socket_types=tuple(entries),
            promotions=tuple(promotions),
            backend_names=tuple(str(n) for n in data.get("backend_names") or []),
            log_level=log_level,
        )

    @classmethod
    def from_yaml(
        cls, filepath: Optional[Union[str, Path]] = None, string: Optional[str] = None
    ) -> "EditorConfig":
        """Load the configuration from a yaml file or a yaml string."""
        if filepath is not None:
            with open(filepath, "r") as f:
                data = yaml.safe_load(f)
        elif string is not None:
            data = yaml.safe_load(string)
        else:
            raise ValueError("Please specify a filepath or string.")
        if data is not None and not isinstance(data, dict):
            raise ValueError("The configuration must be a mapping at the top level.")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "socket_types": [dataclasses.asdict(e) for e in self.socket_types],
            "promotions": [list(p) for p in self.promotions],
            "backend_names": list(self.backend_names),
            "log_level": self.log_level,
        }
