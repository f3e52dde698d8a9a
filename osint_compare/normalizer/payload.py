"""Schema-less view over a parsed tool response.

Tool payloads have no shared schema, so extractors read them with dotted
paths ("analysis.summary", "findings.contact_info.emails"). A lookup never
raises: a missing key, a non-mapping intermediate node, null, false, an
empty string or zero all read as absent.
"""

from __future__ import annotations

from typing import Any


def _is_present(value: Any) -> bool:
    """None, false, empty strings and zero are absent; empty lists and objects are not."""
    if value is None or value is False:
        return False
    if isinstance(value, (str, int, float)):
        return bool(value)
    return True


class Payload:
    """Read-only wrapper with safe optional accessors over a parsed body."""

    __slots__ = ("_root",)

    def __init__(self, root: Any):
        self._root = root

    @property
    def root(self) -> Any:
        return self._root

    def get(self, path: str) -> Any | None:
        """Return the value at a dotted path, or None when it is absent."""
        node = self._root
        for part in path.split("."):
            if not isinstance(node, dict):
                return None
            node = node.get(part)
        return node if _is_present(node) else None

    def has(self, path: str) -> bool:
        return self.get(path) is not None

    def first(self, *paths: str) -> Any | None:
        """Return the value of the first present path, in the given order."""
        for path in paths:
            value = self.get(path)
            if value is not None:
                return value
        return None

    def get_list(self, path: str) -> list | None:
        """Return the value at a path only if it is a list."""
        value = self.get(path)
        return value if isinstance(value, list) else None

    def __repr__(self) -> str:
        return f"Payload({self._root!r})"
