"""Sector-level access to a disk image file."""

from __future__ import annotations

import os
from typing import BinaryIO

SECTOR_SIZE = 512


class DiskImageError(OSError):
    """Raised when a disk image cannot be opened, read or written."""


class DiskImage:
    """A disk image file read and written in whole sectors."""

    def __init__(self, path, read_only=True):
        self.path = os.fspath(path)
        self.read_only = read_only
        try:
            self._file: BinaryIO | None = open(self.path, "rb" if read_only else "r+b")
        except OSError as exc:
            raise DiskImageError(f"Can't open disk image {self.path}: {exc}") from exc

    def _handle(self) -> BinaryIO:
        if self._file is None:
            raise DiskImageError(f"Disk image {self.path} is closed")
        return self._file

    @staticmethod
    def _check_sector(sector_num: int) -> None:
        if sector_num < 0:
            raise DiskImageError(f"Invalid sector number {sector_num}")

    def size(self) -> int:
        """Return the size of the image in bytes."""
        try:
            return self._handle().seek(0, os.SEEK_END)
        except OSError as exc:
            raise DiskImageError(f"Error getting the size of {self.path}: {exc}") from exc

    def read_sector(self, sector_num: int) -> bytes:
        """Read one sector; the result is shorter than a sector near the end of the image."""
        self._check_sector(sector_num)
        handle = self._handle()
        try:
            handle.seek(sector_num * SECTOR_SIZE)
            return handle.read(SECTOR_SIZE)
        except OSError as exc:
            raise DiskImageError(f"Error reading sector {sector_num}: {exc}") from exc

    def write_sector(self, sector_num: int, data: bytes) -> int:
        """Write one full sector and return the number of bytes written."""
        self._check_sector(sector_num)
        if len(data) != SECTOR_SIZE:
            raise ValueError(f"sector data must be {SECTOR_SIZE} bytes, got {len(data)}")
        if self.read_only:
            raise DiskImageError(f"Disk image {self.path} is open read-only")
        handle = self._handle()
        try:
            handle.seek(sector_num * SECTOR_SIZE)
            written = handle.write(bytes(data))
            handle.flush()
        except OSError as exc:
            raise DiskImageError(f"Error writing sector {sector_num}: {exc}") from exc
        return written

    def close(self) -> None:
        """Close the image; further access raises DiskImageError."""
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as exc:
            raise DiskImageError(f"Error closing {self.path}: {exc}") from exc
        finally:
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False