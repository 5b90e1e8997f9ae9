"""Directory lookups and absolute pathname resolution."""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

from .diskimg import SECTOR_SIZE
from .filesystem import ROOT_INUMBER, FilesystemError, UnixFilesystem
from .layout import DIRENT_SIZE, DirEntry, parse_dir_entries

MAX_PATH = 1024
DEFAULT_MAX_ENTRIES = 10000
_SELF_AND_PARENT = frozenset({".", ".."})


def _iter_entries(fs: UnixFilesystem, inumber: int) -> Iterator[DirEntry]:
    inode = fs.iget(inumber)
    if not inode.is_allocated or not inode.is_directory:
        raise FilesystemError(f"Inode {inumber} is not an allocated directory")
    size = inode.size
    if size % DIRENT_SIZE:
        raise FilesystemError(
            f"Directory inode {inumber} has size {size}, not a multiple of {DIRENT_SIZE}"
        )
    num_blocks = -(-size // SECTOR_SIZE)
    for block_num in range(num_blocks):
        yield from parse_dir_entries(fs.get_block(inumber, block_num))


def find_name(fs, name, dir_inumber):
    """Return the entry called name in the directory, never matching "." or ".."."""
    for entry in _iter_entries(fs, dir_inumber):
        if entry.name not in _SELF_AND_PARENT and entry.name == name:
            return entry
    raise FilesystemError(f"{name!r} not found in directory inode {dir_inumber}")


def dir_entries(fs, inumber, max_entries=DEFAULT_MAX_ENTRIES):
    """Return up to max_entries entries of a directory, in on-disk order."""
    if max_entries < 1:
        raise FilesystemError(f"Invalid maximum number of entries {max_entries}")
    return list(islice(_iter_entries(fs, inumber), max_entries))


def lookup_path(fs, pathname):
    """Return the inode number of an absolute pathname."""
    if not pathname or not pathname.startswith("/"):
        raise FilesystemError(f"Not an absolute pathname: {pathname!r}")
    if pathname == "/":
        return ROOT_INUMBER
    inumber = ROOT_INUMBER
    for component in filter(None, pathname[:MAX_PATH - 1].split("/")):
        inumber = find_name(fs, component, inumber).inumber
    return inumber