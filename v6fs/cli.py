"""Command-line inspection of a Version 6 disk image."""

from __future__ import annotations

import getopt
import sys

from .checksum import checksum_inumber, checksum_path, checksum_to_hex, checksums_equal
from .directory import DEFAULT_MAX_ENTRIES, MAX_PATH, dir_entries, lookup_path
from .diskimg import DiskImage, DiskImageError
from .filesystem import ROOT_INUMBER, FilesystemError, UnixFilesystem
from .layout import INODE_SIZE
from .diskimg import SECTOR_SIZE

_ERRORS = (FilesystemError, DiskImageError)
_INODES_PER_SECTOR = SECTOR_SIZE // INODE_SIZE


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def dump_inode_checksums(fs, out):
    """Write the checksum of every allocated inode."""
    for inumber in range(1, fs.superblock.isize * _INODES_PER_SECTOR):
        try:
            inode = fs.iget(inumber)
        except _ERRORS:
            _err(f"Can't read inode {inumber} ")
            return
        if not inode.is_allocated:
            continue
        try:
            checksum = checksum_inumber(fs, inumber)
        except _ERRORS:
            _err(f"Inode {inumber} can't compute chksum")
            continue
        out.write(f"Inode {inumber} mode 0x{inode.mode:x} size {inode.size} "
                  f"checksum {checksum_to_hex(checksum)}\n")


def _dump_path_and_children(fs, pathname: str, inumber: int, out) -> None:
    try:
        inode = fs.iget(inumber)
    except _ERRORS:
        _err(f"Can't read inode {inumber} ")
        return
    try:
        by_inumber = checksum_inumber(fs, inumber)
        by_path = checksum_path(fs, pathname)
    except _ERRORS:
        _err(f"Can't checksum inode {inumber} path {pathname}")
        return
    if not checksums_equal(by_inumber, by_path):
        _err(f"Pathname checksum of {pathname} differs from inode {inumber}")
        return
    out.write(f"Path {pathname} {inumber} mode 0x{inode.mode:x} size {inode.size} "
              f"checksum {checksum_to_hex(by_path)}\n")

    if not inode.is_directory:
        return
    prefix = "" if pathname == "/" else pathname
    if len(prefix) > MAX_PATH - 16:
        _err(f"Too deep of directories {prefix}")
    try:
        entries = dir_entries(fs, inumber, DEFAULT_MAX_ENTRIES)
    except _ERRORS:
        entries = []
    for entry in entries:
        if entry.name in (".", ".."):
            continue
        _dump_path_and_children(fs, f"{prefix}/{entry.name}", entry.inumber, out)


def dump_pathname_checksums(fs, out):
    """Write the checksum of every file reachable from the root directory."""
    _dump_path_and_children(fs, "/", ROOT_INUMBER, out)


def print_directory(fs, pathname, out):
    """Write every entry of the directory at pathname."""
    try:
        inumber = lookup_path(fs, pathname)
    except _ERRORS:
        _err(f"Can't find {pathname}")
        return
    try:
        entries = dir_entries(fs, inumber, DEFAULT_MAX_ENTRIES)
    except _ERRORS:
        _err(f"Can't read entries from {pathname}")
        return
    for entry in entries:
        out.write(f"Direntry {pathname} Name {entry.name} Inumber {entry.inumber}\n")


def _usage(prog: str) -> int:
    _err(f"Usage: {prog} <options> diskimagePath")
    _err("where <options> can be:")
    _err("-q     don't print extra info")
    _err("-i     print all inode checksums")
    _err("-p     print all pathname checksums")
    return 1


def _run(disk: DiskImage, diskpath: str, quiet: bool, idump: bool, pdump: bool) -> int:
    try:
        fs = UnixFilesystem(disk)
    except _ERRORS:
        _err("Failed to initialize unix filesystem")
        return 1
    out = sys.stdout
    if not quiet:
        try:
            disksize = disk.size()
        except DiskImageError:
            _err(f"Error getting the size of {diskpath}")
            return 1
        out.write(f"Disk {diskpath} is {disksize} bytes ({disksize // 1024} KB)\n")
        sb = fs.superblock
        out.write(f"Superblock s_isize {sb.isize}\n")
        out.write(f"Superblock s_fsize {sb.fsize}\n")
        out.write(f"Superblock s_nfree {sb.nfree}\n")
        out.write(f"Superblock s_ninode {sb.ninode}\n")
    if idump:
        dump_inode_checksums(fs, out)
    if pdump:
        dump_pathname_checksums(fs, out)
    return 0


def main(argv=None):
    """Run the command and return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    prog = "v6fs"
    try:
        opts, operands = getopt.gnu_getopt(args, "iqp")
    except getopt.GetoptError:
        return _usage(prog)
    if len(operands) != 1:
        return _usage(prog)
    flags = {flag for flag, _ in opts}
    diskpath = operands[0]

    try:
        disk = DiskImage(diskpath, read_only=True)
    except DiskImageError:
        _err(f"Can't open diskimagePath {diskpath}")
        return 1
    try:
        status = _run(disk, diskpath, "-q" in flags, "-i" in flags, "-p" in flags)
    finally:
        try:
            disk.close()
        except DiskImageError:
            _err(f"Error closing {diskpath}")
    return status


if __name__ == "__main__":
    sys.exit(main())