"""Core data models shared by collection, graph building, and rendering."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from . import config


@dataclass(frozen=True)
class FileRecord:
    path: str
    name: str
    content: str
    line_count: int


@dataclass
class ExtractionResult:
    imports: List[str] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScanPolicy:
    """Which paths the collector skips and which files it reads."""

    ignore_patterns: Tuple[str, ...] = config.DEFAULT_IGNORES
    extensions: FrozenSet[str] = config.TEXT_EXTENSIONS
    include_extensionless: bool = True
    ignored_names: FrozenSet[str] = config.IGNORED_NAMES
    root_files: FrozenSet[str] = config.OUTPUT_FILES

    def with_extra_ignores(self, patterns: Iterable[str]) -> "ScanPolicy":
        extra = tuple(p for p in patterns if p and p not in self.ignore_patterns)
        if not extra:
            return self
        return replace(self, ignore_patterns=self.ignore_patterns + extra)

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        if rel_path.rsplit("/", 1)[-1] in self.ignored_names:
            return True
        if not is_dir and rel_path in self.root_files:
            return True
        framed = f"/{rel_path}/" if is_dir else f"/{rel_path}"
        return any(pattern in framed for pattern in self.ignore_patterns)

    def is_eligible(self, file_name: str) -> bool:
        suffix = Path(file_name).suffix.lower()
        if not suffix:
            return self.include_extensionless
        return suffix in self.extensions


DEFAULT_POLICY = ScanPolicy()


@dataclass(frozen=True)
class GraphNode:
    node_id: str
    label: str
    kind: str
    parent: Optional[str] = None


@dataclass(frozen=True)
class Edge:
    src: str
    dst: str
    kind: str


@dataclass(frozen=True)
class IdCollision:
    label: str
    existing_label: str
    node_id: str
    assigned_id: str


@dataclass
class DependencyGraph:
    files: List[GraphNode] = field(default_factory=list)
    symbols: Dict[str, List[GraphNode]] = field(default_factory=dict)
    externals: Dict[str, GraphNode] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    incoming: Counter = field(default_factory=Counter)
    outgoing: Counter = field(default_factory=Counter)
    collisions: List[IdCollision] = field(default_factory=list)

    def file_ids(self) -> List[str]:
        return [node.node_id for node in self.files]

    def file_edges(self) -> List[Edge]:
        return [e for e in self.edges if e.kind == "import"]

    def external_edges(self) -> List[Edge]:
        return [e for e in self.edges if e.kind == "external"]

    def entry_nodes(self) -> List[str]:
        """File nodes nothing imports."""
        return [fid for fid in self.file_ids() if self.incoming[fid] == 0]

    def leaf_nodes(self) -> List[str]:
        """File nodes importing no other scanned file."""
        return [fid for fid in self.file_ids() if self.outgoing[fid] == 0]


@dataclass
class FlowResult:
    root: Path
    files: List[FileRecord]
    graph: DependencyGraph
    backbone: List[str]
    mermaid: str

    @property
    def is_empty(self) -> bool:
        return not self.files
