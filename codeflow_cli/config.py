"""Configuration paths and built-in defaults for CodeFlow."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("CODEFLOW_HOME", str(Path.home() / ".codeflow"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Substrings of the root-relative POSIX path ("/" + rel, plus a trailing "/"
# for directories) that exclude an entry from the scan.
DEFAULT_IGNORES = (
    "/.git/",
    "/node_modules/",
    "/.vscode/",
    "/.idea/",
    "/out/",
    "/dist/",
    "/build/",
    "/coverage/",
    "/__pycache__/",
    "/.venv/",
    ".DS_Store",
    "Thumbs.db",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "/.env.",
)

TEXT_EXTENSIONS = frozenset({
    ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".cpp", ".c", ".cs",
    ".go", ".rs", ".php", ".rb", ".swift", ".kt", ".html", ".css", ".json",
    ".xml", ".yaml", ".yml", ".md", ".txt",
})

# Probe order used when resolving relative imports.
RESOLVE_EXTENSIONS = (".ts", ".js", ".tsx", ".jsx")

MAX_SYMBOLS_PER_KIND = 8
MAX_BACKBONE_NODES = 200

FLOW_FILE = "wholeflow.mmd"
RAW_FLOW_FILE = "wholeflow_raw.mmd"
SVG_FILE = "wholeflow.svg"
HTML_FILE = "wholeflow.html"

# Exact names skipped at any depth.
IGNORED_NAMES = frozenset({".env"})

# Generated files, skipped only directly under the scan root.
OUTPUT_FILES = frozenset({FLOW_FILE, RAW_FLOW_FILE, SVG_FILE, HTML_FILE})

DEFAULT_MAX_TEXT_SIZE = 200_000
DEFAULT_EXPORT_TIMEOUT = 120


def ensure_base_dirs() -> None:
    """Create the configuration directory if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
