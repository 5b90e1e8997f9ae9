# v6fs

Read inodes, file blocks and directories from Unix Version 6 filesystem
disk images, and compute SHA-1 checksums of file contents.

A V6 disk image is laid out in 512-byte sectors: a boot block whose first
16-bit word is the magic number `0407`, a superblock, the inode table
(`s_isize` sectors of 32-byte inodes), and then data blocks.

## Installation

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Command line

    v6fs [-q] [-i] [-p] DISKIMAGE

The same command is available as `python -m v6fs.cli`.

- `-q` — do not print the disk size and superblock summary
- `-i` — print the checksum of every allocated inode
- `-p` — walk the directory tree from `/` and print the checksum of every path

Without `-q` the command prints:

    Disk DISKIMAGE is <bytes> bytes (<kilobytes> KB)
    Superblock s_isize <n>
    Superblock s_fsize <n>
    Superblock s_nfree <n>
    Superblock s_ninode <n>

Lines printed with `-i` have the form:

    Inode <inumber> mode 0x<mode> size <bytes> checksum <40 hex digits>

and with `-p`:

    Path <pathname> <inumber> mode 0x<mode> size <bytes> checksum <40 hex digits>

Problems with single inodes or paths are reported on standard error and the
walk goes on. Bad options or a missing image path print a usage message; the
command exits with status 1 when the image cannot be opened or is not a V6
filesystem.

## Library use

```python
from v6fs.diskimg import DiskImage
from v6fs.filesystem import UnixFilesystem
from v6fs.directory import lookup_path, dir_entries, find_name
from v6fs.checksum import checksum_path, checksum_to_hex

with DiskImage("disk.img", read_only=True) as disk:
    fs = UnixFilesystem(disk)
    print(fs.superblock.isize, fs.num_inodes)

    inumber = lookup_path(fs, "/etc/passwd")
    inode = fs.iget(inumber)
    print(inode.size, inode.is_allocated, inode.is_directory)

    first_block = fs.get_block(inumber, 0)   # only the valid bytes

    for entry in dir_entries(fs, 1):          # up to 10000 entries by default
        print(entry.name, entry.inumber)

    print(checksum_to_hex(checksum_path(fs, "/etc/passwd")))
```

Modules:

- `v6fs.diskimg` — `DiskImage`: `size()`, `read_sector()`, `write_sector()`,
  `close()`, usable as a context manager.
- `v6fs.layout` — `Superblock`, `Inode`, `DirEntry` decoded with
  `from_bytes()`, the `Mode` flags and `parse_dir_entries()`.
- `v6fs.filesystem` — `UnixFilesystem` with `iget()`, `index_lookup()` and
  `get_block()`.
- `v6fs.directory` — `find_name()`, `dir_entries()` and `lookup_path()` for
  absolute paths.
- `v6fs.checksum` — `checksum_inumber()`, `checksum_path()`,
  `checksum_to_hex()` and `checksums_equal()`.
- `v6fs.cli` — `main()`, `dump_inode_checksums()`,
  `dump_pathname_checksums()` and `print_directory()`.

Failures raise `DiskImageError` (from `v6fs.diskimg`) or `FilesystemError`
(from `v6fs.filesystem`).

## Limitations

- Only the small addressing scheme is read: a file may use at most eight
  direct blocks (4096 bytes). Larger files raise `FilesystemError`.
- The filesystem is read only. `DiskImage.write_sector()` writes raw sectors,
  but nothing creates, changes or removes files or directories.
- `print_directory()` is a library function; the command has no option for
  listing a directory.