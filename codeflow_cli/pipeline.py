"""End-to-end flow generation: collect, extract, build, order, render."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from .collector import collect_files
from .extractor import DEFAULT_PATTERNS, PatternSet, extract
from .graph_builder import build_graph
from .mermaid import render_mermaid, wrap_fenced
from .models import DEFAULT_POLICY, DependencyGraph, FlowResult, ScanPolicy
from .ordering import backbone_order

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def generate_flow(
    root: Union[str, Path],
    policy: Optional[ScanPolicy] = None,
    patterns: PatternSet = DEFAULT_PATTERNS,
    progress: Optional[ProgressCallback] = None,
) -> FlowResult:
    """Run the whole pipeline over *root*.

    An empty tree is not an error: the result's ``is_empty`` is set and no
    diagram text is produced.
    """
    root_path = Path(root).resolve()
    notify = progress or (lambda _stage: None)

    notify("Collecting files")
    files = collect_files(root_path, policy or DEFAULT_POLICY)
    if not files:
        logger.info("No eligible files under %s", root_path)
        return FlowResult(root=root_path, files=[], graph=DependencyGraph(), backbone=[], mermaid="")

    notify("Extracting symbols")
    extractions = [extract(record.content, patterns) for record in files]

    notify("Building dependency graph")
    graph = build_graph(files, extractions)

    notify("Ordering backbone")
    backbone = backbone_order(graph)

    notify("Rendering diagram")
    mermaid_text = render_mermaid(graph, backbone)

    logger.info(
        "Scanned %d files: %d import edges, %d external packages",
        len(files), len(graph.file_edges()), len(graph.externals),
    )
    return FlowResult(root=root_path, files=files, graph=graph, backbone=backbone, mermaid=mermaid_text)


def write_flow(result: FlowResult, output_file: Path) -> Path:
    """Write the fenced diagram to *output_file*."""
    output_file.write_text(wrap_fenced(result.mermaid), encoding="utf-8")
    return output_file
