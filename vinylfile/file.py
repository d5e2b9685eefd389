"""Virtual file objects passed between pipeline stages.

A VirtualFile stands in for a file, directory or symlink without touching
the disk. It tracks every path it has held, derives path components on
demand, and carries its contents as bytes, a readable stream, or nothing.
"""

from __future__ import annotations

import copy
import io
import logging
import os
import shutil
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from .config import CloneOptions, resolve_clone_options
from .errors import InvalidArgument, InvalidOperation, InvalidState
from .inspection import inspect_stream
from .normalize import normalize
from .stats import StatLike, clone_stat, is_directory_stat, is_symlink_stat
from .streams import CloneableStream, cloneable

logger = logging.getLogger(__name__)

# Backing storage and constructor options. Custom properties may never use
# these names; anything defined on the class is refused as well.
RESERVED_PROPS = frozenset({
    "_contents",
    "_cwd",
    "_base",
    "_history",
    "_symlink",
    "_is_vinyl",
    "contents",
    "cwd",
    "base",
    "path",
    "history",
    "stat",
    "symlink",
})

# Bytes shown by inspect() before the dump is truncated.
INSPECT_MAX_BYTES = 50

Buffer = bytes | bytearray
F = TypeVar("F", bound="VirtualFile")


def _is_readable_stream(value: Any) -> bool:
    if isinstance(value, io.TextIOBase):
        return False
    return callable(getattr(value, "read", None))


def _copy_buffer(buffer: Buffer) -> Buffer:
    if isinstance(buffer, bytearray):
        return bytearray(buffer)
    return bytes(bytearray(buffer))


def _inspect_buffer(buffer: Buffer) -> str:
    shown = bytes(buffer[:INSPECT_MAX_BYTES]).hex(" ")
    remaining = len(buffer) - INSPECT_MAX_BYTES
    if remaining > 0:
        shown += f" ... {remaining} more bytes"
    return f"<Buffer {shown}>"


class VirtualFile:
    """In-memory file, directory or symlink.

    Attributes:
        stat: Metadata record describing the node, or None. Only its
            directory and symlink predicates are ever consulted.
        history: Every path this file has held, oldest first. The last
            entry is the current ``path``.

    Any other keyword given to the constructor is stored as a custom
    property and travels with the file through clone().
    """

    _is_vinyl = True

    def __init__(
        self,
        *,
        cwd: str | None = None,
        base: str | None = None,
        path: str | None = None,
        history: Iterable[str] | None = None,
        stat: StatLike | os.stat_result | None = None,
        contents: Buffer | Any | None = None,
        symlink: str | None = None,
        **custom: Any,
    ):
        """Create a virtual file.

        Args:
            cwd: Working directory. Defaults to the process's current one.
            base: Anchor for ``relative``. Defaults to tracking ``cwd``.
            path: Full path to the file.
            history: Earlier paths, oldest first. Never mutated.
            stat: Metadata record (os.stat_result, FileStat, ...).
            contents: bytes, a readable byte stream, or None.
            symlink: Link target, for symbolic link nodes.
            **custom: Custom properties to attach.

        Raises:
            InvalidArgument: If any option is invalid or a custom property
                uses a reserved name.
        """
        for name in custom:
            if not self.is_custom_prop(name):
                raise InvalidArgument(
                    f"{name!r} is reserved and cannot be set as a custom property."
                )

        self._contents: Buffer | CloneableStream | None = None
        self._base: str | None = None
        self._symlink: str | None = None
        self._history: list[str] = self._initial_history(path, history)

        self.cwd = os.getcwd() if cwd is None else cwd
        self.base = base
        self.stat = stat
        self.contents = contents
        if symlink is not None:
            self.symlink = symlink

        for name, value in custom.items():
            setattr(self, name, value)

    @staticmethod
    def _initial_history(path: str | None, history: Iterable[str] | None) -> list[str]:
        if isinstance(history, str):
            raise InvalidArgument("history should be a list of strings.")
        entries = []
        for entry in list(history or ()):
            if not isinstance(entry, str):
                raise InvalidArgument("path should be a string.")
            entry = normalize(entry)
            if entry:
                entries.append(entry)

        if path is not None:
            if not isinstance(path, str):
                raise InvalidArgument("path should be a string.")
            path = normalize(path)
            if path and (not entries or entries[-1] != path):
                entries.append(path)
        return entries

    @staticmethod
    def is_vinyl_like(obj: Any) -> bool:
        """Return True if ``obj`` carries the virtual file marker.

        The check is on the marker attribute alone, so files built by
        another copy of this package are recognized too.
        """
        return getattr(obj, "_is_vinyl", False) is True

    @classmethod
    def is_custom_prop(cls, name: str) -> bool:
        """Return True if ``name`` may be used for a custom property."""
        return name not in RESERVED_PROPS and not hasattr(cls, name)

    # -- contents -------------------------------------------------------

    @property
    def contents(self) -> Buffer | CloneableStream | None:
        return self._contents

    @contents.setter
    def contents(self, value: Buffer | Any | None) -> None:
        if value is None or isinstance(value, (bytes, bytearray)):
            self._contents = value
        elif _is_readable_stream(value):
            self._contents = cloneable(value)
        else:
            raise InvalidArgument(
                "contents can only be bytes, a readable stream, or None."
            )

    def is_buffer(self) -> bool:
        return isinstance(self._contents, (bytes, bytearray))

    def is_stream(self) -> bool:
        return isinstance(self._contents, CloneableStream)

    def is_null(self) -> bool:
        return self._contents is None

    def is_directory(self) -> bool:
        """Return True for a content-less node whose stat is a directory."""
        return self.is_null() and is_directory_stat(self.stat)

    def is_symbolic(self) -> bool:
        """Return True for a content-less node whose stat is a symlink."""
        return self.is_null() and is_symlink_stat(self.stat)

    # -- paths ----------------------------------------------------------

    @property
    def cwd(self) -> str:
        return self._cwd

    @cwd.setter
    def cwd(self, value: str) -> None:
        if not isinstance(value, str) or not value:
            raise InvalidArgument("cwd must be a non-empty string.")
        self._cwd = normalize(value)

    @property
    def base(self) -> str:
        return self._cwd if self._base is None else self._base

    @base.setter
    def base(self, value: str | None) -> None:
        if value is None:
            self._base = None
            return
        if not isinstance(value, str) or not value:
            raise InvalidArgument("base must be a non-empty string, or null/undefined.")
        value = normalize(value)
        # Equal to cwd means keep following cwd.
        self._base = None if value == self._cwd else value

    @property
    def history(self) -> list[str]:
        return self._history

    @property
    def path(self) -> str | None:
        return self._history[-1] if self._history else None

    @path.setter
    def path(self, value: str) -> None:
        if not isinstance(value, str):
            raise InvalidArgument("path should be a string.")
        value = normalize(value)
        if value and value != self.path:
            logger.debug("Path %s -> %s", self.path, value)
            self._history.append(value)

    @property
    def relative(self) -> str:
        self._require_path("get", "relative")
        # path is stored without a trailing separator, so nothing needs
        # adding back here, directory or not.
        relative = os.path.relpath(self.path, self.base)
        return "" if relative == os.curdir else relative

    @relative.setter
    def relative(self, value: Any) -> None:
        raise InvalidOperation(
            "File.relative is generated from the base and path attributes. "
            "Do not modify it."
        )

    @property
    def dirname(self) -> str:
        self._require_path("get", "dirname")
        return os.path.dirname(self.path)

    @dirname.setter
    def dirname(self, value: str) -> None:
        self._require_path("set", "dirname")
        self._check_component("dirname", value)
        self.path = os.path.join(value, self.basename)

    @property
    def basename(self) -> str:
        self._require_path("get", "basename")
        return os.path.basename(self.path)

    @basename.setter
    def basename(self, value: str) -> None:
        self._require_path("set", "basename")
        self._check_component("basename", value)
        self.path = os.path.join(self.dirname, value)

    @property
    def stem(self) -> str:
        self._require_path("get", "stem")
        return os.path.splitext(os.path.basename(self.path))[0]

    @stem.setter
    def stem(self, value: str) -> None:
        self._require_path("set", "stem")
        self._check_component("stem", value)
        self.path = os.path.join(self.dirname, value + self.extname)

    @property
    def extname(self) -> str:
        self._require_path("get", "extname")
        return os.path.splitext(os.path.basename(self.path))[1]

    @extname.setter
    def extname(self, value: str) -> None:
        self._require_path("set", "extname")
        self._check_component("extname", value)
        self.path = os.path.join(self.dirname, self.stem + value)

    @property
    def symlink(self) -> str | None:
        return self._symlink

    @symlink.setter
    def symlink(self, value: str) -> None:
        if not isinstance(value, str):
            raise InvalidArgument("symlink should be a string")
        self._symlink = normalize(value)

    def _require_path(self, action: str, prop: str) -> None:
        if not self.path:
            raise InvalidState(f"No path specified! Can not {action} {prop}.")

    @staticmethod
    def _check_component(prop: str, value: Any) -> None:
        if not isinstance(value, str):
            raise InvalidArgument(f"{prop} should be a string.")

    # -- copying and display -------------------------------------------

    def clone(
        self: F,
        opts: CloneOptions | Mapping[str, Any] | bool | None = None,
        *,
        _memo: dict[int, Any] | None = None,
        **kwargs: Any,
    ) -> F:
        """Return an independent copy of this file.

        Args:
            opts: Clone options; a bare bool is shorthand for ``deep``.
                See resolve_clone_options().
            **kwargs: ``contents`` and ``deep`` overrides.

        Returns:
            A new instance of the same class. Buffers are copied unless
            ``contents=False``. Stream contents are split so both files can
            read every byte. Custom properties are deep-copied unless
            ``deep=False``. References back to this file inside custom
            properties point at the clone.

        Raises:
            InvalidArgument: If the options are invalid.
            InvalidState: If the stream contents were already closed.
        """
        options = resolve_clone_options(opts, **kwargs)
        memo: dict[int, Any] = {} if _memo is None else _memo

        contents: Buffer | CloneableStream | None = None
        if self.is_stream():
            contents = self._contents.clone()
        elif self.is_buffer():
            contents = _copy_buffer(self._contents) if options.contents else self._contents

        file = type(self)(
            cwd=self.cwd,
            base=self.base,
            stat=clone_stat(self.stat),
            history=self._history,
            contents=contents,
        )
        if self._symlink is not None:
            file.symlink = self._symlink

        memo[id(self)] = file
        for name, value in vars(self).items():
            if self.is_custom_prop(name):
                setattr(file, name, copy.deepcopy(value, memo) if options.deep else value)

        logger.debug(
            "Cloned %s (contents=%s, deep=%s)", self.path, options.contents, options.deep
        )
        return file

    def __copy__(self: F) -> F:
        return self.clone(contents=False, deep=False)

    def __deepcopy__(self: F, memo: dict[int, Any]) -> F:
        return self.clone(_memo=memo)

    def pipe(self, dest: Any, end: bool = True) -> Any:
        """Write this file's contents to a writable stream.

        Buffers are written in one call and streams are copied chunk by
        chunk, consuming this file's stream. Null contents write nothing.

        Args:
            dest: Object with a ``write`` method.
            end: Close ``dest`` once the contents are written.

        Returns:
            ``dest``, for chaining.
        """
        if self.is_stream():
            shutil.copyfileobj(self._contents, dest)
        elif self.is_buffer():
            dest.write(self._contents)
        if end:
            dest.close()
        return dest

    def inspect(self) -> str:
        """Return a one-line summary such as ``<File "a.txt" <Buffer 68 69>>``."""
        parts = []
        if self.path:
            try:
                parts.append(f'"{self.relative}"')
            except ValueError:
                # No relative path exists, e.g. across Windows drives.
                parts.append(f'"{self.path}"')

        if self.is_buffer():
            parts.append(_inspect_buffer(self._contents))
        elif self.is_stream():
            parts.append(inspect_stream(self._contents))

        return "<File " + " ".join(parts) + ">"

    def __repr__(self) -> str:
        return self.inspect()
