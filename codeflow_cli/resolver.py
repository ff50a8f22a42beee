"""Resolve relative import strings to files on disk."""

from __future__ import annotations

import os
from typing import Iterator, Optional, Sequence

from .config import RESOLVE_EXTENSIONS


def is_relative(import_string: str) -> bool:
    return import_string.startswith((".", "/"))


def candidate_paths(
    from_path: str,
    import_string: str,
    extensions: Sequence[str] = RESOLVE_EXTENSIONS,
) -> Iterator[str]:
    """Yield probe paths in resolution order."""
    base = os.path.abspath(os.path.join(os.path.dirname(from_path), import_string))
    yield base
    for ext in extensions:
        yield base + ext
    for ext in extensions:
        yield os.path.join(base, "index" + ext)


def _is_regular_file(path: str) -> bool:
    try:
        return os.path.isfile(path)
    except (OSError, ValueError):
        return False


def resolve_import(
    from_path: str,
    import_string: str,
    extensions: Sequence[str] = RESOLVE_EXTENSIONS,
) -> Optional[str]:
    """Return the absolute path *import_string* refers to, or ``None``.

    Bare package imports are never resolved. The first existing regular
    file among :func:`candidate_paths` wins.
    """
    if not is_relative(import_string):
        return None
    for candidate in candidate_paths(from_path, import_string, extensions):
        if _is_regular_file(candidate):
            return candidate
    return None
