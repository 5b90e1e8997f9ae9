import hashlib
import io
import struct

import pytest

from v6fs.cli import dump_inode_checksums, dump_pathname_checksums, main, print_directory
from v6fs.diskimg import DiskImage
from v6fs.filesystem import UnixFilesystem

ALLOC = 0o100000
DIR = 0o040000
DIR_MODE = ALLOC | DIR | 0o755
FILE_MODE = ALLOC | 0o644
HELLO = b"hello world\n"
BIG = bytes(range(256)) * 2 + b"x" * 88


def dirent(inumber, name):
    return struct.pack("<H14s", inumber, name.encode())


def write_image(path, inodes, blocks, isize=1):
    sectors = max([2 + isize] + [sector + 1 for sector in blocks])
    image = bytearray(sectors * 512)
    struct.pack_into("<H", image, 0, 0o407)
    struct.pack_into("<3H", image, 512, isize, sectors, 0)
    for inumber, (mode, size, addrs) in inodes.items():
        addr = list(addrs) + [0] * (8 - len(addrs))
        struct.pack_into("<H4BH8H4H", image, 1024 + (inumber - 1) * 32,
                         mode, 1, 0, 0, size >> 16, size & 0xFFFF, *addr, 0, 0, 0, 0)
    for sector, data in blocks.items():
        image[sector * 512:sector * 512 + len(data)] = data
    path.write_bytes(bytes(image))


def sample_layout():
    root = dirent(1, ".") + dirent(1, "..") + dirent(2, "hello.txt") + dirent(3, "sub")
    sub = dirent(3, ".") + dirent(1, "..") + dirent(4, "big") + dirent(6, "empty")
    inodes = {
        1: (DIR_MODE, len(root), [3]),
        2: (FILE_MODE, len(HELLO), [4]),
        3: (DIR_MODE, len(sub), [5]),
        4: (FILE_MODE, len(BIG), [6, 7]),
        6: (FILE_MODE, 0, []),
    }
    blocks = {3: root, 4: HELLO, 5: sub, 6: BIG[:512], 7: BIG[512:]}
    return inodes, blocks


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "disk.img"
    write_image(path, *sample_layout())
    return path


@pytest.fixture
def fs(image_path):
    with DiskImage(image_path) as disk:
        yield UnixFilesystem(disk)


def test_dump_inode_checksums_lists_allocated_inodes(fs):
    out = io.StringIO()
    dump_inode_checksums(fs, out)
    lines = out.getvalue().splitlines()
    assert [int(line.split()[1]) for line in lines] == [1, 2, 3, 4, 6]
    expected = (f"Inode 2 mode 0x{FILE_MODE:x} size {len(HELLO)} "
                f"checksum {hashlib.sha1(HELLO).hexdigest()}")
    assert lines[1] == expected


def test_dump_inode_checksums_skips_last_inode(tmp_path):
    path = tmp_path / "last.img"
    root = dirent(1, ".") + dirent(1, "..") + dirent(16, "last")
    write_image(path, {1: (DIR_MODE, len(root), [3]), 16: (FILE_MODE, len(HELLO), [4])},
                {3: root, 4: HELLO})
    with DiskImage(path) as disk:
        fs = UnixFilesystem(disk)
        inode_out = io.StringIO()
        dump_inode_checksums(fs, inode_out)
        path_out = io.StringIO()
        dump_pathname_checksums(fs, path_out)
    assert [line.split()[1] for line in inode_out.getvalue().splitlines()] == ["1"]
    assert [line.split()[1] for line in path_out.getvalue().splitlines()] == ["/", "/last"]


def test_dump_pathname_checksums_walks_tree(fs):
    out = io.StringIO()
    dump_pathname_checksums(fs, out)
    lines = out.getvalue().splitlines()
    assert [line.split()[1] for line in lines] == [
        "/", "/hello.txt", "/sub", "/sub/big", "/sub/empty"]
    assert lines[3] == (f"Path /sub/big 4 mode 0x{FILE_MODE:x} size {len(BIG)} "
                        f"checksum {hashlib.sha1(BIG).hexdigest()}")


def test_print_directory(fs):
    out = io.StringIO()
    print_directory(fs, "/sub", out)
    assert out.getvalue().splitlines() == [
        "Direntry /sub Name . Inumber 3",
        "Direntry /sub Name .. Inumber 1",
        "Direntry /sub Name big Inumber 4",
        "Direntry /sub Name empty Inumber 6",
    ]


def test_print_directory_missing_path(fs, capsys):
    out = io.StringIO()
    print_directory(fs, "/nothing", out)
    assert out.getvalue() == ""
    assert "Can't find /nothing" in capsys.readouterr().err


def test_print_directory_of_file(fs, capsys):
    out = io.StringIO()
    print_directory(fs, "/hello.txt", out)
    assert out.getvalue() == ""
    assert "Can't read entries from /hello.txt" in capsys.readouterr().err


def test_main_prints_summary(image_path, capsys):
    assert main([str(image_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    size = image_path.stat().st_size
    assert lines[0] == f"Disk {image_path} is {size} bytes ({size // 1024} KB)"
    assert lines[1:] == [
        "Superblock s_isize 1",
        "Superblock s_fsize 8",
        "Superblock s_nfree 0",
        "Superblock s_ninode 0",
    ]


def test_main_quiet_inode_dump(image_path, capsys):
    assert main(["-q", "-i", str(image_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 5
    assert all(line.startswith("Inode ") for line in lines)


def test_main_combined_flags(image_path, capsys):
    assert main(["-qp", str(image_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[1] for line in lines] == [
        "/", "/hello.txt", "/sub", "/sub/big", "/sub/empty"]


@pytest.mark.parametrize("argv", [[], ["-x", "disk.img"], ["a.img", "b.img"]])
def test_main_usage_errors(argv, capsys):
    assert main(argv) == 1
    assert "Usage:" in capsys.readouterr().err


def test_main_missing_image(tmp_path, capsys):
    missing = tmp_path / "missing.img"
    assert main([str(missing)]) == 1
    assert f"Can't open diskimagePath {missing}" in capsys.readouterr().err


def test_main_bad_magic(tmp_path, capsys):
    path = tmp_path / "bad.img"
    path.write_bytes(bytes(2048))
    assert main([str(path)]) == 1
    assert "Failed to initialize unix filesystem" in capsys.readouterr().err