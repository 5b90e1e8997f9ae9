"""Reading inodes and file blocks from a Unix Version 6 disk image."""

from __future__ import annotations

import struct

from .diskimg import SECTOR_SIZE, DiskImage
from .layout import INODE_SIZE, Inode, Superblock

BOOTBLOCK_SECTOR = 0
SUPERBLOCK_SECTOR = 1
INODE_START_SECTOR = 2
ROOT_INUMBER = 1
BOOTBLOCK_MAGIC_NUM = 0o407

INODES_PER_SECTOR = SECTOR_SIZE // INODE_SIZE
DIRECT_BLOCKS = 8
MAX_FILE_SIZE = SECTOR_SIZE * DIRECT_BLOCKS


class FilesystemError(Exception):
    """Raised when the file system on a disk image cannot be read."""


class UnixFilesystem:
    """A Version 6 file system on an open disk image."""

    def __init__(self, disk: DiskImage):
        bootblock = disk.read_sector(BOOTBLOCK_SECTOR)
        if len(bootblock) != SECTOR_SIZE:
            raise FilesystemError("Error reading bootblock")
        (magic,) = struct.unpack_from("<H", bootblock)
        if magic != BOOTBLOCK_MAGIC_NUM:
            raise FilesystemError(f"Bad magic number on disk(0x{magic:x})")

        raw_super = disk.read_sector(SUPERBLOCK_SECTOR)
        if len(raw_super) != SECTOR_SIZE:
            raise FilesystemError("Error reading superblock")

        self.disk = disk
        self.superblock = Superblock.from_bytes(raw_super)
        self.num_inodes = self.superblock.isize * INODES_PER_SECTOR
        self._inode_table: list[Inode] | None = None

    def _load_inode_table(self) -> list[Inode]:
        table: list[Inode] = []
        for sector in range(INODE_START_SECTOR, INODE_START_SECTOR + self.superblock.isize):
            data = self.disk.read_sector(sector)
            if len(data) != SECTOR_SIZE:
                raise FilesystemError(f"Error reading inode block {sector}")
            table.extend(Inode.from_bytes(data[start:start + INODE_SIZE])
                         for start in range(0, SECTOR_SIZE, INODE_SIZE))
        return table

    def iget(self, inumber: int) -> Inode:
        """Return the inode with the given number, counting from 1."""
        if inumber < 1 or inumber > self.num_inodes:
            raise FilesystemError(f"Invalid inode number {inumber}")
        if self._inode_table is None:
            self._inode_table = self._load_inode_table()
        return self._inode_table[inumber - 1]

    def index_lookup(self, inode: Inode, block_num: int) -> int:
        """Return the disk sector holding the given block of a file."""
        if not 0 <= block_num < DIRECT_BLOCKS:
            raise FilesystemError(f"Invalid block number {block_num}")
        disk_block = inode.addr[block_num]
        if disk_block == 0:
            raise FilesystemError("Block not allocated")
        return disk_block

    def get_block(self, inumber: int, block_num: int) -> bytes:
        """Return the valid bytes of one block of a file."""
        inode = self.iget(inumber)
        filesize = inode.size
        if filesize > MAX_FILE_SIZE:
            raise FilesystemError(f"Inode {inumber} : Invalid file size")
        disk_block = self.index_lookup(inode, block_num)
        data = self.disk.read_sector(disk_block)
        valid = min(filesize - block_num * SECTOR_SIZE, SECTOR_SIZE)
        if valid < 0:
            raise FilesystemError(f"Inode {inumber} : block {block_num} is past end of file")
        return data[:valid]