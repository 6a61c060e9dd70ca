"""
Module to access a MINIX filesystem image as a read-only FUSE filesystem.

Based on https://github.com/libfuse/python-fuse/blob/master/example/hello.py
"""

import errno
import itertools
import os
import stat
from collections.abc import Generator
from typing import ClassVar

import fuse
from fuse import Fuse

from minixfs.exceptions import MinixError
from minixfs.filesystem import Filesystem
from minixfs.models import Inode

if not hasattr(fuse, "__version__"):
    raise RuntimeError("fuse.__version__ is undefined")

fuse.fuse_python_api = (0, 2)


class MinixFuse(Fuse):
    """Class to handle Filesystem as FUSE filesystem."""

    _WRITE_BITS: ClassVar[int] = 0o222  # cleared, image is read-only
    partition: str | None = None
    subpartition: str | None = None

    def _resolve(self, path: str) -> Inode | None:
        """Return inode for path, or None if it cannot be resolved."""
        try:
            return self.filesystem.resolve(path)
        except MinixError:
            return None

    def _get_data(self, path: str) -> bytes:
        """Return content of regular file at path."""
        return self.filesystem.read_file(path)

    def getattr(self, path: str) -> fuse.Stat | int:
        """Get attributes for path."""
        if (inode := self._resolve(path)) is None:
            return -errno.ENOENT
        st = fuse.Stat()
        st.st_mode = inode.mode & ~self._WRITE_BITS
        st.st_nlink = inode.links
        st.st_uid = inode.uid
        st.st_gid = inode.gid
        st.st_size = inode.size
        st.st_atime = inode.atime
        st.st_mtime = inode.mtime
        st.st_ctime = inode.ctime
        return st

    def readdir(self, path: str, offset: int) -> Generator[fuse.Direntry]:
        """List directory entries."""
        names = [entry.filename for entry, _ in self.filesystem.list_directory(path)]
        for name in itertools.chain(
            (name for name in (".", "..") if name not in names), names
        ):
            yield fuse.Direntry(name)

    def open(self, path: str, flags: int) -> int:
        """Open path and return flags."""
        if (inode := self._resolve(path)) is None:
            return -errno.ENOENT
        if not stat.S_ISREG(inode.mode):
            return -errno.EISDIR if inode.is_directory else -errno.EACCES
        accmode = os.O_RDONLY | os.O_WRONLY | os.O_RDWR
        if (flags & accmode) != os.O_RDONLY:
            return -errno.EACCES
        return 0

    def read(self, path: str, size: int, offset: int) -> bytes | int:
        """Read path and return bytes."""
        try:
            data = self._get_data(path)
        except MinixError:
            return -errno.ENOENT
        if offset >= len(data):
            # Offset is greater than size, return empty bytes
            return b""
        return data[offset : offset + size]

    def get_filesystem(self) -> Filesystem:
        """Return Filesystem for image path and partition mount options."""
        try:
            path = self.cmdline[1][0]
        except IndexError:
            raise ValueError("Missing underlying filesystem path parameter") from None
        return Filesystem(
            path,
            self._get_index(self.partition, "partition"),
            self._get_index(self.subpartition, "subpartition"),
        )

    @staticmethod
    def _get_index(value: str | None, name: str) -> int | None:
        """Return table index from mount option value."""
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Invalid {name} '{value}'") from None

    def main(self, *args, **kwargs) -> None:
        """Open filesystem from parsed arguments and call main Fuse method."""
        self.filesystem = self.get_filesystem()
        return Fuse.main(self, *args, **kwargs)


def main():
    """Create Fuse server, parse arguments and invoke main method."""
    server = MinixFuse(
        version=f"%prog {fuse.__version__}", usage=Fuse.fusage, dash_s_do="setsingle"
    )
    server.parser.add_option(
        mountopt="partition", metavar="NUM", help="select partition of image"
    )
    server.parser.add_option(
        mountopt="subpartition", metavar="NUM", help="select subpartition of image"
    )
    server.parse(values=server, errex=1)
    server.main()


if __name__ == "__main__":
    main()
