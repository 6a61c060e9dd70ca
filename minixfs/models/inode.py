"""Data models for inodes and the inode table."""

from dataclasses import dataclass, field

from minixfs.constants import DIRECT_ZONES, ROOT_INODE, FileType, Permission
from minixfs.models.base import BaseDataModel, DataModelMetadata
from minixfs.models.collections import DataModelCollection


@dataclass
class Inode(BaseDataModel):
    """Dataclass to handle inode data."""

    mode: int = field(metadata=DataModelMetadata(size=2))  # file type and permissions
    links: int = field(metadata=DataModelMetadata(size=2))  # number of links
    uid: int = field(metadata=DataModelMetadata(size=2))
    gid: int = field(metadata=DataModelMetadata(size=2))
    size: int = field(metadata=DataModelMetadata(size=4))  # size in bytes
    atime: int = field(metadata=DataModelMetadata(size=4))
    mtime: int = field(metadata=DataModelMetadata(size=4))
    ctime: int = field(metadata=DataModelMetadata(size=4))
    zone: tuple[int, ...] = field(  # direct zone numbers
        metadata=DataModelMetadata(size=DIRECT_ZONES * 4, count=DIRECT_ZONES)
    )
    indirect: int = field(metadata=DataModelMetadata(size=4))
    two_indirect: int = field(metadata=DataModelMetadata(size=4))
    unused: int = field(metadata=DataModelMetadata(size=4))  # triple indirect, unused

    @property
    def file_type(self) -> FileType | None:
        """Return FileType of inode, or None if unknown."""
        try:
            return FileType(self.mode & FileType.MASK)
        except ValueError:
            return None

    @property
    def permissions(self) -> Permission:
        """Return permission bits of inode."""
        return Permission(self.mode & 0o777)

    @property
    def is_directory(self) -> bool:
        """Return whether inode is a directory."""
        return self.file_type == FileType.DIRECTORY

    @property
    def is_regular_file(self) -> bool:
        """Return whether inode is a regular file."""
        return self.file_type == FileType.REGULAR

    @property
    def is_symlink(self) -> bool:
        """Return whether inode is a symbolic link."""
        return self.file_type == FileType.SYMLINK


class InodeTable(DataModelCollection):
    """
    Collection of inodes, indexed by 1-based inode number.

    Inode number 1 is the root directory and is stored first.
    """

    @classmethod
    def from_bytes(cls: type["InodeTable"], data: bytes, count: int) -> "InodeTable":
        """Return inode table of count inodes from bytes."""
        size = Inode.get_model_size()
        return cls(
            Inode.from_bytes(data[i * size : (i + 1) * size]) for i in range(count)
        )

    @property
    def root(self) -> Inode:
        """Return inode of root directory."""
        return self[ROOT_INODE - 1]

    def get(self, number: int) -> Inode | None:
        """Return inode for inode number, or None if there is no such inode."""
        if number < 1 or number > len(self):
            return None
        return self[number - 1]
