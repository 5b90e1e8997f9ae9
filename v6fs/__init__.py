"""Read Unix Version 6 filesystem disk images and checksum their contents."""

__version__ = "0.1.0"
__all__ = ["diskimg", "layout", "filesystem", "directory", "checksum", "cli"]