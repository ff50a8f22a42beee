"""Recursive source-tree collection."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from .models import DEFAULT_POLICY, FileRecord, ScanPolicy

logger = logging.getLogger(__name__)


def _log_walk_error(exc: OSError) -> None:
    logger.warning("Cannot list %s: %s", exc.filename, exc.strerror or exc)


def read_file(path: Path, root: Path) -> Optional[FileRecord]:
    """Read one file into a :class:`FileRecord`, or ``None`` if unreadable."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable file %s: %s", path, exc)
        return None
    return FileRecord(
        path=str(path),
        name=path.relative_to(root).as_posix(),
        content=content,
        line_count=len(content.splitlines()),
    )


def collect_files(
    root: Union[str, Path],
    policy: ScanPolicy = DEFAULT_POLICY,
) -> List[FileRecord]:
    """Walk *root* and return every eligible, readable file.

    Ignored directories are pruned and never descended into. Order follows
    directory enumeration, which the filesystem does not guarantee to be
    sorted.

    Raises:
        NotADirectoryError: If *root* is not an existing directory.
    """
    root_path = Path(os.path.abspath(root))
    if not root_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root_path}")

    records: List[FileRecord] = []
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_log_walk_error):
        current = Path(dirpath)
        rel_dir = current.relative_to(root_path).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"

        dirnames[:] = [d for d in dirnames if not policy.is_ignored(prefix + d, is_dir=True)]

        for name in filenames:
            rel = prefix + name
            if policy.is_ignored(rel) or not policy.is_eligible(name):
                continue
            full = current / name
            if not full.is_file():
                continue
            record = read_file(full, root_path)
            if record is not None:
                records.append(record)

    logger.debug("Collected %d files under %s", len(records), root_path)
    return records
