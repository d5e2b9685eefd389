"""Stat collaborators for virtual files.

A virtual file never stats the disk itself. It only asks whatever metadata
object it was given whether the node is a directory or a symbolic link.
"""

from __future__ import annotations

import copy
import os
import stat as stat_mod
import time
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StatLike(Protocol):
    """Minimal interface a ``stat`` value is queried through.

    ``os.stat_result`` does not implement it, but is still understood
    through its ``st_mode`` field. See is_directory_stat().
    """

    def is_dir(self) -> bool:
        """Return True if the node is a directory."""
        ...

    def is_symlink(self) -> bool:
        """Return True if the node is a symbolic link."""
        ...


@dataclass
class FileStat:
    """Metadata for a single file, directory or symlink.

    Attributes:
        st_mode: File type and permission bits, as in ``os.stat_result``.
        st_size: Size in bytes (0 for directories).
        st_mtime: Last modification time (seconds since the epoch).
        st_ctime: Creation/metadata change time.
        st_atime: Last access time.
        target_mode: For a symlink, the type bits of what it points at. When
            set, is_dir() and is_file() follow the link the way
            ``os.DirEntry`` does; is_symlink() never does.
    """

    st_mode: int = stat_mod.S_IFREG | 0o644
    st_size: int = 0
    st_mtime: float = 0.0
    st_ctime: float = 0.0
    st_atime: float = 0.0
    target_mode: int | None = None

    @classmethod
    def from_stat_result(cls, result: os.stat_result) -> "FileStat":
        """Build a FileStat from the result of ``os.stat``/``os.lstat``."""
        return cls(
            st_mode=result.st_mode,
            st_size=result.st_size,
            st_mtime=result.st_mtime,
            st_ctime=result.st_ctime,
            st_atime=result.st_atime,
        )

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry) -> "FileStat":
        """Build a FileStat that answers like an ``os.scandir`` entry."""
        meta = cls.from_stat_result(entry.stat(follow_symlinks=False))
        if entry.is_symlink() and entry.is_dir():
            meta.target_mode = stat_mod.S_IFDIR | 0o755
        return meta

    @classmethod
    def snapshot(cls, stat: Any) -> "FileStat":
        """Record the classification and times of an arbitrary stat object."""
        is_dir = is_directory_stat(stat)
        is_link = is_symlink_stat(stat)
        mode = getattr(stat, "st_mode", None)
        target_mode = None
        if is_link:
            mode = stat_mod.S_IFLNK | 0o777
            if is_dir:
                target_mode = stat_mod.S_IFDIR | 0o755
        elif is_dir:
            mode = stat_mod.S_IFDIR | 0o755
        elif not isinstance(mode, int) or stat_mod.S_ISDIR(mode) or stat_mod.S_ISLNK(mode):
            mode = stat_mod.S_IFREG | 0o644
        return cls(
            st_mode=mode,
            st_size=getattr(stat, "st_size", 0),
            st_mtime=getattr(stat, "st_mtime", 0.0),
            st_ctime=getattr(stat, "st_ctime", 0.0),
            st_atime=getattr(stat, "st_atime", 0.0),
            target_mode=target_mode,
        )

    @classmethod
    def regular(cls, size: int = 0) -> "FileStat":
        now = time.time()
        return cls(stat_mod.S_IFREG | 0o644, size, now, now, now)

    @classmethod
    def directory(cls) -> "FileStat":
        now = time.time()
        return cls(stat_mod.S_IFDIR | 0o755, 0, now, now, now)

    @classmethod
    def symlink(cls) -> "FileStat":
        now = time.time()
        return cls(stat_mod.S_IFLNK | 0o777, 0, now, now, now)

    def _followed_mode(self) -> int:
        return self.st_mode if self.target_mode is None else self.target_mode

    def is_file(self) -> bool:
        return stat_mod.S_ISREG(self._followed_mode())

    def is_dir(self) -> bool:
        return stat_mod.S_ISDIR(self._followed_mode())

    def is_symlink(self) -> bool:
        return stat_mod.S_ISLNK(self.st_mode)


def _query(stat: Any, predicates: tuple[str, ...], mode_check: Any) -> bool:
    if stat is None:
        return False
    for name in predicates:
        predicate = getattr(stat, name, None)
        if callable(predicate):
            return bool(predicate())
    mode = getattr(stat, "st_mode", None)
    if isinstance(mode, int):
        return bool(mode_check(mode))
    return False


def is_directory_stat(stat: Any) -> bool:
    """Return True if ``stat`` classifies its node as a directory.

    Understands ``is_dir()`` (pathlib/DirEntry style), ``isDirectory()``
    and a bare ``st_mode``. Anything else is not a directory.
    """
    return _query(stat, ("is_dir", "isDirectory"), stat_mod.S_ISDIR)


def is_symlink_stat(stat: Any) -> bool:
    """Return True if ``stat`` classifies its node as a symbolic link."""
    return _query(stat, ("is_symlink", "isSymbolicLink"), stat_mod.S_ISLNK)


def clone_stat(stat: StatLike | os.stat_result | None) -> Any:
    """Return an equivalent stat object that is not the same reference.

    Scandir entries and other objects that cannot be copied are replaced
    by a FileStat giving the same directory and symlink answers.
    """
    if stat is None:
        return None
    if isinstance(stat, os.DirEntry):
        return FileStat.from_dir_entry(stat)
    try:
        return copy.copy(stat)
    except TypeError:
        return FileStat.snapshot(stat)
