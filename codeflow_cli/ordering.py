"""Topological backbone ordering over file nodes."""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Sequence

from . import config
from .models import DependencyGraph


def backbone_order(graph: DependencyGraph) -> List[str]:
    """Order file nodes with Kahn's algorithm.

    Nodes that cannot be ordered because they sit on or behind a cycle are
    appended in collection order, so every file id appears exactly once.
    """
    file_ids = graph.file_ids()
    successors: Dict[str, List[str]] = {fid: [] for fid in file_ids}
    indegree: Dict[str, int] = {fid: 0 for fid in file_ids}
    for edge in graph.file_edges():
        successors[edge.src].append(edge.dst)
        indegree[edge.dst] += 1

    queue = deque(fid for fid in file_ids if indegree[fid] == 0)
    order: List[str] = []
    placed = set()
    while queue:
        current = queue.popleft()
        order.append(current)
        placed.add(current)
        for nxt in successors[current]:
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                queue.append(nxt)

    if len(order) < len(file_ids):
        order.extend(fid for fid in file_ids if fid not in placed)
    return order


def truncate_backbone(order: Sequence[str], limit: int = config.MAX_BACKBONE_NODES) -> List[str]:
    return list(order[:limit])
