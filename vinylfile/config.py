"""Configuration for virtual file operations.

Provides the CloneOptions dataclass and the resolve_clone_options factory
that turns the loose forms accepted by ``VirtualFile.clone()`` into one
structure.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .errors import InvalidArgument

# Bytes pulled from a wrapped source stream per read.
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class CloneOptions:
    """Options controlling how a virtual file is cloned.

    Attributes:
        contents: Copy buffer contents into a new buffer. When False the
            clone shares the original buffer object. Streams are always
            duplicated regardless of this flag.
        deep: Deep-copy custom properties. When False the clone references
            the same objects as the original.
    """

    contents: bool = True
    deep: bool = True


def resolve_clone_options(
    opts: CloneOptions | Mapping[str, Any] | bool | None = None,
    **kwargs: Any,
) -> CloneOptions:
    """Build CloneOptions from any of the forms clone() accepts.

    Args:
        opts: ``None`` for defaults, a bare bool as shorthand for ``deep``,
            a mapping with ``contents``/``deep`` keys, or a CloneOptions.
        **kwargs: ``contents``/``deep`` overrides applied on top of ``opts``.

    Returns:
        Resolved CloneOptions.

    Raises:
        InvalidArgument: If unknown option names are supplied, or ``opts``
            has an unsupported type.

    Examples:
        >>> resolve_clone_options()
        CloneOptions(contents=True, deep=True)

        >>> resolve_clone_options(False)
        CloneOptions(contents=True, deep=False)

        >>> resolve_clone_options({"contents": False})
        CloneOptions(contents=False, deep=True)
    """
    if opts is None:
        values: dict[str, Any] = {}
    elif isinstance(opts, bool):
        values = {"deep": opts}
    elif isinstance(opts, CloneOptions):
        values = {"contents": opts.contents, "deep": opts.deep}
    elif isinstance(opts, Mapping):
        values = dict(opts)
    else:
        raise InvalidArgument(
            f"Unsupported clone options: {type(opts).__name__}. "
            "Use a bool, a mapping or CloneOptions."
        )
    values.update(kwargs)

    known = {f.name for f in fields(CloneOptions)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidArgument(f"Unexpected clone options: {unknown}")

    # Anything but an explicit False still copies buffers.
    contents = values.get("contents", True) is not False
    deep = bool(values.get("deep", True))
    return CloneOptions(contents=contents, deep=deep)
