"""Data models for fslink-manager."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class LinkKind(str, Enum):
    """Kind of filesystem link."""

    SYMBOLIC = "symbolic"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | LinkKind") -> "LinkKind":
        """Parse a link kind name, accepting the historical aliases.

        Args:
            value: Kind name such as "symbolic", "hard", "Softlink" or "Hardlink"

        Returns:
            Matching LinkKind

        Raises:
            ValueError: If the name is not a known kind
        """
        if isinstance(value, LinkKind):
            return value
        normalized = value.strip().lower()
        if normalized in _ALIASES:
            return _ALIASES[normalized]
        raise ValueError(f"Unknown link kind: {value!r} (expected 'symbolic' or 'hard')")

    def __str__(self) -> str:
        return self.value


_ALIASES = {
    "symbolic": LinkKind.SYMBOLIC,
    "symlink": LinkKind.SYMBOLIC,
    "soft": LinkKind.SYMBOLIC,
    "softlink": LinkKind.SYMBOLIC,
    "hard": LinkKind.HARD,
    "hardlink": LinkKind.HARD,
}


@dataclass
class LinkRecord:
    """Persisted state of one tracked link.

    ``exists`` is the last state this tool observed or produced, not a live
    check of the filesystem.
    """

    source: Path
    target: Path
    link_kind: LinkKind = LinkKind.SYMBOLIC
    exists: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "source": str(self.source),
            "target": str(self.target),
            "exists": self.exists,
            "link_kind": self.link_kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LinkRecord":
        """Build a record from its serialized form.

        Unknown keys are ignored. The ``linktype`` key written by older
        versions is accepted in place of ``link_kind``.

        Raises:
            ValueError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        for key in ("source", "target"):
            if not isinstance(data.get(key), str) or not data[key]:
                raise ValueError(f"field '{key}' must be a non-empty string")

        exists = data.get("exists", False)
        if not isinstance(exists, bool):
            raise ValueError("field 'exists' must be a boolean")

        kind = data.get("link_kind", data.get("linktype"))
        if not isinstance(kind, str):
            raise ValueError("field 'link_kind' must be a string")

        return cls(
            source=Path(data["source"]),
            target=Path(data["target"]),
            link_kind=LinkKind.parse(kind),
            exists=exists,
        )

    def describe(self) -> str:
        """Return a one-line human readable summary."""
        state = "present" if self.exists else "absent"
        return f"{self.source} -> {self.target} ({self.link_kind}, {state})"
