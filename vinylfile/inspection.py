"""Human-readable labels for stream contents."""

from __future__ import annotations

import io
from typing import Any

from .streams import PassThrough, Transform, is_cloneable


def _capable(obj: Any, query: str, method: str) -> bool:
    check = getattr(obj, query, None)
    if callable(check):
        try:
            return bool(check())
        except ValueError:
            # Closed io objects refuse to answer.
            return False
    return callable(getattr(obj, method, None))


def _is_stream(obj: Any) -> bool:
    if isinstance(obj, io.IOBase):
        return True
    return callable(getattr(obj, "read", None)) or callable(getattr(obj, "write", None))


def inspect_stream(obj: Any) -> str | None:
    """Classify a stream-like object for display.

    Args:
        obj: Any value.

    Returns:
        One of ``<CloneableStream>``, ``<PassThroughStream>``,
        ``<TransformStream>``, ``<DuplexStream>``, ``<ReadableStream>``,
        ``<WritableStream>`` or ``<Stream>``, checked in that order.
        None when ``obj`` is not a stream at all.
    """
    if obj is None or isinstance(obj, (str, bytes, bytearray, memoryview)):
        return None
    if is_cloneable(obj):
        return "<CloneableStream>"
    if not _is_stream(obj):
        return None

    readable = _capable(obj, "readable", "read")
    writable = _capable(obj, "writable", "write")

    if readable and writable:
        if isinstance(obj, PassThrough):
            return "<PassThroughStream>"
        if isinstance(obj, Transform):
            return "<TransformStream>"
        return "<DuplexStream>"
    if readable:
        return "<ReadableStream>"
    if writable:
        return "<WritableStream>"
    return "<Stream>"
