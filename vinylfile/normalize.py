"""Path normalization shared by every path-valued property."""

from __future__ import annotations

import os


def remove_trailing_sep(path: str) -> str:
    """Strip trailing separators, keeping a bare root intact."""
    end = len(path)
    while end > 1 and path[end - 1] == os.sep:
        end -= 1
    return path[:end]


def normalize(path: str) -> str:
    """Normalize a path string.

    The empty string is returned unchanged (``os.path.normpath`` would turn
    it into ``"."``). Anything else has ``.``/``..`` segments resolved,
    repeated separators collapsed and its trailing separator removed.

    Args:
        path: Path to normalize.

    Returns:
        The normalized path.
    """
    if path == "":
        return path
    return remove_trailing_sep(os.path.normpath(path))
