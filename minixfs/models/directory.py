"""Data models for directory contents."""

from dataclasses import dataclass, field
from typing import Iterator

from minixfs.constants import DIRECTORY_ENTRY_SIZE, DIRECTORY_NAME_SIZE
from minixfs.exceptions import MalformedImageError
from minixfs.models.base import BaseDataGroup, BaseDataModel, DataModelMetadata
from minixfs.models.collections import DataModelCollection


@dataclass
class DirectoryEntry(BaseDataModel):
    """Dataclass to handle a directory entry."""

    inode: int = field(metadata=DataModelMetadata(size=4))  # 0 = deleted/empty
    name: bytes = field(  # NUL-padded, not terminated when all 60 bytes used
        metadata=DataModelMetadata(size=DIRECTORY_NAME_SIZE)
    )

    @property
    def filename(self) -> str:
        """Return name of entry without padding."""
        return self.name.split(b"\x00", 1)[0].decode(errors="surrogateescape")

    @property
    def deleted(self) -> bool:
        """Return whether entry is an empty slot."""
        return self.inode == 0


@dataclass
class Directory(BaseDataGroup):
    """
    Dataclass to handle the contents of a directory inode.

    Directory content is not a fixed size so cannot use a model size.
    """

    entries: DataModelCollection[DirectoryEntry]

    def __iter__(self) -> Iterator[DirectoryEntry]:
        """Iterate over entries which are in use."""
        return (entry for entry in self.entries if not entry.deleted)

    @classmethod
    def from_bytes(
        cls: type["Directory"], data: bytes, size: int | None = None
    ) -> "Directory":
        """
        Return directory from bytes.

        Only the first size bytes are decoded. Raises MalformedImageError if size
        is not a whole number of entries.
        """
        if size is None:
            size = len(data)
        if size % DIRECTORY_ENTRY_SIZE:
            raise MalformedImageError(
                f"Directory size '{size}' is not a multiple "
                f"of entry size '{DIRECTORY_ENTRY_SIZE}'"
            )
        if len(data) < size:
            raise MalformedImageError(
                f"Directory data '{len(data)}' is shorter than size '{size}'"
            )
        entries = DataModelCollection()
        for _ in range(size // DIRECTORY_ENTRY_SIZE):
            entry, data = DirectoryEntry.from_bytes_with_remaining(data)
            entries.append(entry)
        return cls(entries=entries)

    def find(self, name: str) -> DirectoryEntry | None:
        """Return first entry in use with matching name, in stored order."""
        for entry in self:
            if entry.filename == name:
                return entry
        return None
