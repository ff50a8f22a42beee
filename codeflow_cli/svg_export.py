"""SVG export through the Mermaid CLI (``mmdc``).

Invocation strategies are tried in order and the first success wins. When
every strategy fails, :class:`RendererUnavailableError` reports all of the
attempts, not just the last one.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from . import config

logger = logging.getLogger(__name__)


@dataclass
class RenderAttempt:
    strategy: str
    command: List[str]
    reason: str


@dataclass
class ExportResult:
    svg_path: Path
    raw_path: Path
    strategy: str
    attempts: List[RenderAttempt] = field(default_factory=list)


class RendererUnavailableError(RuntimeError):
    """Raised when no strategy could produce the SVG."""

    def __init__(self, attempts: Sequence[RenderAttempt]):
        self.attempts = list(attempts)
        detail = "; ".join(f"{a.strategy}: {a.reason}" for a in self.attempts) or "no strategies configured"
        super().__init__(f"Mermaid CLI rendering failed ({detail})")


class RenderStrategy:
    """One way of locating and invoking ``mmdc``."""

    name = "base"

    def command(self, input_path: Path, output_path: Path, config_path: Path) -> Optional[List[str]]:
        """Return the argv to run, or ``None`` when this strategy is unavailable."""
        raise NotImplementedError

    @staticmethod
    def _args(input_path: Path, output_path: Path, config_path: Path) -> List[str]:
        return ["-i", str(input_path), "-o", str(output_path), "-c", str(config_path)]


class LocalBinaryStrategy(RenderStrategy):
    """``mmdc`` installed under the project's ``node_modules/.bin``."""

    name = "local mmdc"

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def command(self, input_path, output_path, config_path):
        binary = "mmdc.cmd" if os.name == "nt" else "mmdc"
        local = self.project_root / "node_modules" / ".bin" / binary
        if not local.is_file():
            return None
        return [str(local)] + self._args(input_path, output_path, config_path)


class PathBinaryStrategy(RenderStrategy):
    name = "mmdc on PATH"

    def command(self, input_path, output_path, config_path):
        found = shutil.which("mmdc")
        if not found:
            return None
        return [found] + self._args(input_path, output_path, config_path)


class NpmExecStrategy(RenderStrategy):
    """``npm exec -- mmdc``; may download the CLI on first use."""

    name = "npm exec"

    def command(self, input_path, output_path, config_path):
        npm = shutil.which("npm")
        if not npm:
            return None
        return [npm, "exec", "--yes", "--package=@mermaid-js/mermaid-cli", "--", "mmdc"] + self._args(
            input_path, output_path, config_path
        )


def default_strategies(project_root: Path) -> List[RenderStrategy]:
    return [LocalBinaryStrategy(project_root), PathBinaryStrategy(), NpmExecStrategy()]


def _run(strategy: RenderStrategy, argv: List[str], cwd: Path, timeout: int) -> Optional[str]:
    """Run *argv*; return a failure reason, or ``None`` on success."""
    logger.info("Rendering with %s: %s", strategy.name, " ".join(argv))
    try:
        proc = subprocess.run(argv, cwd=str(cwd), capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        return f"timed out after {timeout}s"
    except OSError as exc:
        return str(exc)
    if proc.returncode != 0:
        tail = (proc.stderr or proc.stdout or "").strip().splitlines()
        suffix = f": {tail[-1]}" if tail else ""
        return f"exited with code {proc.returncode}{suffix}"
    return None


def export_svg(
    mermaid_text: str,
    workdir: Path,
    raw_name: str = config.RAW_FLOW_FILE,
    svg_name: str = config.SVG_FILE,
    max_text_size: int = config.DEFAULT_MAX_TEXT_SIZE,
    strategies: Optional[Sequence[RenderStrategy]] = None,
    timeout: int = config.DEFAULT_EXPORT_TIMEOUT,
) -> ExportResult:
    """Write *mermaid_text* to ``raw_name`` and render it to ``svg_name``.

    Args:
        mermaid_text: Unfenced diagram text.
        workdir: Directory receiving the raw and SVG files. The Mermaid
            config goes to a temporary file that is removed afterwards.
        max_text_size: Passed to Mermaid as ``maxTextSize``.
        strategies: Invocation strategies, defaults to :func:`default_strategies`.
        timeout: Per-attempt subprocess timeout in seconds.

    Raises:
        ValueError: If *mermaid_text* is blank.
        RendererUnavailableError: If every strategy fails.
    """
    if not mermaid_text.strip():
        raise ValueError("No mermaid content to render")

    raw_path = workdir / raw_name
    svg_path = workdir / svg_name
    raw_path.write_text(mermaid_text, encoding="utf-8")
    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8") as tmp:
        json.dump({"maxTextSize": max_text_size}, tmp)
        config_path = Path(tmp.name)

    attempts: List[RenderAttempt] = []
    try:
        for strategy in strategies if strategies is not None else default_strategies(workdir):
            argv = strategy.command(raw_path, svg_path, config_path)
            if argv is None:
                attempts.append(RenderAttempt(strategy.name, [], "not available"))
                continue
            reason = _run(strategy, argv, workdir, timeout)
            if reason is None:
                return ExportResult(svg_path=svg_path, raw_path=raw_path, strategy=strategy.name, attempts=attempts)
            logger.warning("%s failed: %s", strategy.name, reason)
            attempts.append(RenderAttempt(strategy.name, argv, reason))
    finally:
        config_path.unlink(missing_ok=True)

    raise RendererUnavailableError(attempts)
