"""Mermaid flowchart rendering for dependency graphs."""

from __future__ import annotations

import re
from typing import List, Sequence

from . import config
from .models import DependencyGraph
from .ordering import truncate_backbone

START_ID = "Start"
END_ID = "End"
INDENT = "    "

_FENCED = re.compile(r"```\s*mermaid\s*\n([\s\S]*?)\n```", re.IGNORECASE)


def _label(text: str) -> str:
    return '"' + text.replace('"', "#quot;") + '"'


def render_mermaid(
    graph: DependencyGraph,
    backbone: Sequence[str],
    max_backbone: int = config.MAX_BACKBONE_NODES,
) -> str:
    """Serialize *graph* and its backbone chain as a ``flowchart TD`` block."""
    lines: List[str] = ["flowchart TD"]
    lines.append(f"{INDENT}{START_ID}([Start])")
    lines.append(f"{INDENT}{END_ID}([End])")

    for node in graph.files:
        lines.append(f"{INDENT}subgraph {node.node_id}[{_label(node.label)}]")
        for sym in graph.symbols.get(node.node_id, []):
            lines.append(f"{INDENT * 2}{sym.node_id}[{_label(sym.label)}]")
        lines.append(f"{INDENT}end")

    for ext in graph.externals.values():
        lines.append(f"{INDENT}{ext.node_id}[{_label(ext.label)}]")

    for edge in graph.edges:
        lines.append(f"{INDENT}{edge.src} --> {edge.dst}")

    chain = truncate_backbone(backbone, max_backbone)
    for prev, nxt in zip(chain, chain[1:]):
        lines.append(f"{INDENT}{prev} -.-> {nxt}")

    if not graph.files:
        lines.append(f"{INDENT}{START_ID} --> {END_ID}")
    for fid in graph.entry_nodes():
        lines.append(f"{INDENT}{START_ID} --> {fid}")
    for fid in graph.leaf_nodes():
        lines.append(f"{INDENT}{fid} --> {END_ID}")

    return "\n".join(lines) + "\n"


def wrap_fenced(mermaid_text: str) -> str:
    """Wrap diagram text in a ```` ```mermaid ```` fence for markdown viewers."""
    return "```mermaid\n" + mermaid_text.rstrip("\n") + "\n```\n"


def unwrap_fenced(text: str) -> str:
    """Return the diagram inside a mermaid fence, or *text* with all fences removed."""
    match = _FENCED.search(text)
    if match:
        return match.group(1)
    return text.replace("```", "").strip()
