"""Pattern-based import and symbol extraction.

This is surface-syntax matching, not parsing. It misses symbols in nested
scopes, methods, re-exports and dynamic imports, and it reports matches
found inside strings and comments. Callers must tolerate both.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import ExtractionResult


@dataclass(frozen=True)
class PatternSet:
    """Regexes for each signal kind. The first non-empty group of a match is the capture."""

    imports: Sequence[re.Pattern[str]]
    functions: Sequence[re.Pattern[str]]
    classes: Sequence[re.Pattern[str]]


DEFAULT_PATTERNS = PatternSet(
    imports=(
        re.compile(r"""import\s+(?:[^'";]+from\s+)?['"]([^'"]+)['"];?"""),
        re.compile(r"""require\(\s*['"]([^'"]+)['"]\s*\)"""),
    ),
    functions=(
        re.compile(
            r"function\s+([A-Za-z0-9_$]+)\s*\("
            r"|const\s+([A-Za-z0-9_$]+)\s*=\s*(?:async\s*)?\([^()]*\)\s*=>"
        ),
    ),
    classes=(
        re.compile(r"class\s+([A-Za-z0-9_$]+)"),
    ),
)


def _scan(patterns: Sequence[re.Pattern[str]], content: str) -> List[str]:
    hits: List[Tuple[int, str]] = []
    for pattern in patterns:
        for match in pattern.finditer(content):
            name = next((g for g in match.groups() if g), None)
            if name:
                hits.append((match.start(), name))
    hits.sort(key=lambda hit: hit[0])
    return [name for _, name in hits]


def extract(content: str, patterns: PatternSet = DEFAULT_PATTERNS) -> ExtractionResult:
    """Extract import targets, function names and class names from *content*."""
    return ExtractionResult(
        imports=_scan(patterns.imports, content),
        functions=_scan(patterns.functions, content),
        classes=_scan(patterns.classes, content),
    )
