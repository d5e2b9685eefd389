"""vinylfile: In-memory virtual files for build pipelines."""

from .config import CloneOptions, resolve_clone_options
from .errors import InvalidArgument, InvalidOperation, InvalidState, VinylError
from .file import VirtualFile
from .inspection import inspect_stream
from .normalize import normalize
from .stats import FileStat, StatLike, is_directory_stat, is_symlink_stat
from .streams import CloneableStream, PassThrough, Transform, cloneable, is_cloneable

__all__ = [
    "cloneable",
    "CloneableStream",
    "CloneOptions",
    "FileStat",
    "inspect_stream",
    "InvalidArgument",
    "InvalidOperation",
    "InvalidState",
    "is_cloneable",
    "is_directory_stat",
    "is_symlink_stat",
    "normalize",
    "PassThrough",
    "resolve_clone_options",
    "StatLike",
    "Transform",
    "VinylError",
    "VirtualFile",
]
