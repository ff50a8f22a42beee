"""Mermaid-safe node identifier allocation."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Tuple

from .models import IdCollision

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_]")

# Words the flowchart grammar treats as keywords, plus the two anchors.
RESERVED_IDS = frozenset({
    "end", "graph", "subgraph", "flowchart", "direction", "style",
    "class", "classdef", "click", "linkstyle", "default", "call", "href",
    "start",
})


def sanitize(label: str) -> str:
    """Replace unsafe characters with ``_`` and strip leading underscores."""
    return _UNSAFE.sub("_", label).lstrip("_") or "node"


class IdAllocator:
    """Maps ``(kind, label)`` pairs to unique identifiers.

    The same kind and label always yield the same id. Labels of different
    kinds live in separate namespaces, so a file named ``ext_react`` and the
    external node for ``react`` are distinct nodes. Whenever a new pair
    sanitizes to an id that is already taken, the clash is recorded in
    :attr:`collisions` and the pair gets the next free ``<id>_<n>``.
    """

    def __init__(self) -> None:
        self._by_key: Dict[Tuple[str, str], str] = {}
        self._owner: Dict[str, str] = {}
        self.collisions: List[IdCollision] = []

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._by_key

    def allocate(self, label: str, kind: str = "node") -> str:
        existing = self._by_key.get((kind, label))
        if existing is not None:
            return existing

        base = sanitize(label)
        node_id = base
        if base.lower() in RESERVED_IDS:
            node_id = f"{base}_node"

        if node_id in self._owner:
            owner = self._owner[node_id]
            suffix = 2
            while f"{node_id}_{suffix}" in self._owner:
                suffix += 1
            assigned = f"{node_id}_{suffix}"
            collision = IdCollision(label=label, existing_label=owner, node_id=node_id, assigned_id=assigned)
            self.collisions.append(collision)
            logger.warning(
                "Identifier collision: %r and %r both map to %s; using %s",
                label, owner, node_id, assigned,
            )
            node_id = assigned

        self._by_key[(kind, label)] = node_id
        self._owner[node_id] = label
        return node_id
