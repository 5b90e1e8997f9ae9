"""SHA-1 checksums of file contents."""

from __future__ import annotations

import hashlib

from .diskimg import SECTOR_SIZE
from .directory import lookup_path
from .filesystem import FilesystemError

CHECKSUM_SIZE = 20


def checksum_inumber(fs, inumber):
    """Return the SHA-1 digest of the contents of an allocated inode."""
    inode = fs.iget(inumber)
    if not inode.is_allocated:
        raise FilesystemError(f"Inode {inumber} is not allocated")
    digest = hashlib.sha1()
    for offset in range(0, inode.size, SECTOR_SIZE):
        digest.update(fs.get_block(inumber, offset // SECTOR_SIZE))
    return digest.digest()


def checksum_path(fs, pathname):
    """Return the SHA-1 digest of the file at an absolute pathname."""
    return checksum_inumber(fs, lookup_path(fs, pathname))


def _digest_bytes(checksum) -> bytes:
    data = bytes(checksum)
    if len(data) < CHECKSUM_SIZE:
        raise ValueError(f"checksum needs {CHECKSUM_SIZE} bytes, got {len(data)}")
    return data[:CHECKSUM_SIZE]


def checksum_to_hex(checksum):
    """Return the checksum as 40 lower-case hexadecimal digits."""
    return _digest_bytes(checksum).hex()


def checksums_equal(first, second):
    """Return whether the two checksums agree in their first 20 bytes."""
    return _digest_bytes(first) == _digest_bytes(second)