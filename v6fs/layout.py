"""On-disk structures of the Unix Version 6 file system."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

SUPERBLOCK_SIZE = 512
INODE_SIZE = 32
DIRENT_SIZE = 16
DIRENT_NAME_SIZE = 14

_SUPERBLOCK = struct.Struct("<3H100HH100H4B2H48H")
_INODE = struct.Struct("<H4BH8H2H2H")
_DIRENT = struct.Struct("<H14s")


class Mode(enum.IntFlag):
    """Bits of an inode's mode word."""

    ALLOC = 0o100000
    FMT = 0o060000
    DIR = 0o040000
    CHR = 0o020000
    BLK = 0o060000
    LARG = 0o010000
    SUID = 0o004000
    SGID = 0o002000
    SVTX = 0o001000
    READ = 0o000400
    WRITE = 0o000200
    EXEC = 0o000100


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")


@dataclass(frozen=True)
class Superblock:
    """The file system superblock."""

    isize: int
    fsize: int
    nfree: int
    free: tuple[int, ...]
    ninode: int
    inode: tuple[int, ...]
    flock: int
    ilock: int
    fmod: int
    ronly: int
    time: tuple[int, int]

    @classmethod
    def from_bytes(cls, data):
        """Decode a superblock from the first 512 bytes of data."""
        _require(data, SUPERBLOCK_SIZE, "superblock")
        values = _SUPERBLOCK.unpack_from(data)
        isize, fsize, nfree = values[0:3]
        free = tuple(values[3:103])
        ninode = values[103]
        inode = tuple(values[104:204])
        flock, ilock, fmod, ronly = values[204:208]
        time = (values[208], values[209])
        return cls(isize, fsize, nfree, free, ninode, inode, flock, ilock, fmod, ronly, time)


@dataclass(frozen=True)
class Inode:
    """An on-disk inode."""

    mode: int
    nlink: int
    uid: int
    gid: int
    size0: int
    size1: int
    addr: tuple[int, ...]
    atime: tuple[int, int]
    mtime: tuple[int, int]

    @classmethod
    def from_bytes(cls, data):
        """Decode an inode from the first 32 bytes of data."""
        _require(data, INODE_SIZE, "inode")
        values = _INODE.unpack_from(data)
        mode, nlink, uid, gid, size0, size1 = values[0:6]
        addr = tuple(values[6:14])
        return cls(mode, nlink, uid, gid, size0, size1, addr,
                   (values[14], values[15]), (values[16], values[17]))

    @property
    def size(self) -> int:
        """File size in bytes, from the three-byte size fields."""
        return (self.size0 << 16) | self.size1

    @property
    def is_allocated(self) -> bool:
        return bool(self.mode & Mode.ALLOC)

    @property
    def is_directory(self) -> bool:
        return (self.mode & Mode.FMT) == Mode.DIR


@dataclass(frozen=True)
class DirEntry:
    """A directory entry: an inode number and a name of up to 14 bytes."""

    inumber: int
    name: str

    @classmethod
    def from_bytes(cls, data):
        """Decode a directory entry from the first 16 bytes of data."""
        _require(data, DIRENT_SIZE, "directory entry")
        inumber, raw_name = _DIRENT.unpack_from(data)
        name = raw_name.split(b"\0", 1)[0].decode("latin-1")
        return cls(inumber, name)


def parse_dir_entries(data):
    """Decode every whole directory entry in data, ignoring a trailing fragment."""
    whole = len(data) - len(data) % DIRENT_SIZE
    return [DirEntry.from_bytes(data[start:start + DIRENT_SIZE])
            for start in range(0, whole, DIRENT_SIZE)]