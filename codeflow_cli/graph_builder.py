"""Dependency graph construction from collected files."""

from __future__ import annotations

import logging
import os
import posixpath
from typing import Dict, List, Sequence

from . import config
from .identifiers import IdAllocator
from .models import DependencyGraph, Edge, ExtractionResult, FileRecord, GraphNode
from .resolver import resolve_import

logger = logging.getLogger(__name__)


def _unique(names: Sequence[str], limit: int) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
            if len(seen) == limit:
                break
    return seen


def _symbol_nodes(
    ids: IdAllocator,
    record: FileRecord,
    file_id: str,
    extraction: ExtractionResult,
    max_symbols: int,
) -> List[GraphNode]:
    nodes: List[GraphNode] = []
    for fn in _unique(extraction.functions, max_symbols):
        nodes.append(GraphNode(ids.allocate(f"{record.name}_fn_{fn}", "function"), f"fn: {fn}", "function", file_id))
    for cls in _unique(extraction.classes, max_symbols):
        nodes.append(GraphNode(ids.allocate(f"{record.name}_class_{cls}", "class"), f"class: {cls}", "class", file_id))
    if not nodes:
        label = f"{posixpath.basename(record.name)} ({record.line_count} lines)"
        nodes.append(GraphNode(ids.allocate(f"{record.name}_file", "fallback"), label, "fallback", file_id))
    return nodes


def build_graph(
    files: Sequence[FileRecord],
    extractions: Sequence[ExtractionResult],
    max_symbols: int = config.MAX_SYMBOLS_PER_KIND,
    resolve_extensions: Sequence[str] = config.RESOLVE_EXTENSIONS,
) -> DependencyGraph:
    """Assemble file, symbol and external nodes plus import edges.

    Relative imports that do not resolve to a collected file are dropped
    without creating a node.
    """
    if len(files) != len(extractions):
        raise ValueError("files and extractions must have the same length")

    graph = DependencyGraph()
    ids = IdAllocator()
    by_path: Dict[str, str] = {}

    for record in files:
        file_id = ids.allocate(record.name, "file")
        graph.files.append(GraphNode(file_id, record.name, "file"))
        by_path[os.path.normcase(os.path.abspath(record.path))] = file_id

    for record, node, extraction in zip(files, graph.files, extractions):
        graph.symbols[node.node_id] = _symbol_nodes(ids, record, node.node_id, extraction, max_symbols)

    for record, node, extraction in zip(files, graph.files, extractions):
        src = node.node_id
        for imp in extraction.imports:
            resolved = resolve_import(record.path, imp, resolve_extensions)
            if resolved is not None:
                dst = by_path.get(os.path.normcase(resolved))
                if dst is None:
                    logger.debug("%s imports %s outside the scanned set", record.name, resolved)
                    continue
                graph.edges.append(Edge(src, dst, "import"))
                graph.outgoing[src] += 1
                graph.incoming[dst] += 1
            elif not imp.startswith("."):
                ext = graph.externals.get(imp)
                if ext is None:
                    ext = GraphNode(ids.allocate(f"ext_{imp}", "external"), imp, "external")
                    graph.externals[imp] = ext
                graph.edges.append(Edge(src, ext.node_id, "external"))
            else:
                logger.debug("Dropping unresolved relative import %r in %s", imp, record.name)

    graph.collisions = ids.collisions
    return graph
