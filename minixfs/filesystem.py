"""Python implementation to read MINIX filesystem images."""

import contextlib
import logging
import os
from functools import cached_property
from pathlib import Path
from types import TracebackType
from typing import Any, Iterator

from minixfs.constants import SUPERBLOCK_OFFSET
from minixfs.exceptions import (
    FileNotFoundInImageError,
    MalformedImageError,
    NotADirectoryInImageError,
    NotAFileError,
)
from minixfs.image import Image, resolve_window
from minixfs.models import Directory, DirectoryEntry, Inode, InodeTable, Superblock
from minixfs.utils import split_path
from minixfs.zones import ZoneChainReader

logger = logging.getLogger(__name__)


class Filesystem(contextlib.AbstractContextManager):
    """MINIX filesystem class to handle properties and methods."""

    def __init__(
        self,
        path: str | os.PathLike,
        partition: int | None = None,
        subpartition: int | None = None,
    ) -> None:
        """Open image and select partition and subpartition, if specified."""
        self.path = Path(path).resolve()
        self.image = Image(self.path)
        self.image.open()
        try:
            resolve_window(self.image, partition, subpartition)
        except Exception:
            self.image.close()
            raise

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close image and exit runtime context."""
        self.close()

    def close(self) -> None:
        """Close underlying image."""
        self.image.close()

    @cached_property
    def superblock(self) -> Superblock:
        """Return Superblock for filesystem."""
        data = self.image.read(SUPERBLOCK_OFFSET, Superblock.get_model_size())
        superblock = Superblock.from_bytes(data)
        logger.debug(
            "Superblock: %d inodes, %d zones, block size %d, zone size %d",
            superblock.ninodes,
            superblock.zones,
            superblock.blocksize,
            superblock.zone_size,
        )
        return superblock

    @cached_property
    def inode_table(self) -> InodeTable:
        """Return InodeTable for filesystem."""
        offset = self.superblock.inode_table_offset
        count = self.superblock.ninodes
        logger.debug("Reading %d inodes at offset %d", count, offset)
        data = self.image.read(offset, count * Inode.get_model_size())
        return InodeTable.from_bytes(data, count)

    @cached_property
    def zone_reader(self) -> ZoneChainReader:
        """Return ZoneChainReader for filesystem."""
        return ZoneChainReader(self.image, self.superblock.zone_size)

    @property
    def root(self) -> Inode:
        """Return inode of root directory."""
        return self.inode_table.root

    def get_inode(self, number: int) -> Inode | None:
        """Return inode for inode number, or None if there is no such inode."""
        return self.inode_table.get(number)

    def get_entry_inode(self, entry: DirectoryEntry) -> Inode:
        """Return inode of directory entry, which must exist."""
        inode = self.get_inode(entry.inode)
        if inode is None:
            raise MalformedImageError(
                f"Directory entry '{entry.filename}' refers to "
                f"invalid inode {entry.inode}"
            )
        return inode

    def read_inode(self, inode: Inode) -> bytes:
        """Return content of inode."""
        return self.zone_reader.read(inode)

    def get_directory(self, inode: Inode, path: str = "") -> Directory:
        """Return Directory for directory inode."""
        if not inode.is_directory:
            raise NotADirectoryInImageError(path)
        return Directory.from_bytes(self.read_inode(inode), inode.size)

    def resolve(self, path: str) -> Inode:
        """
        Return inode for absolute path, starting at the root directory.

        Empty components are ignored, so '/' and '' resolve to the root.
        """
        inode = self.root
        walked = ""
        for component in split_path(path):
            directory = self.get_directory(inode, walked or "/")
            entry = directory.find(component)
            if entry is None:
                raise FileNotFoundInImageError(path)
            logger.debug("Resolved '%s' to inode %d", component, entry.inode)
            inode = self.get_entry_inode(entry)
            walked = f"{walked}/{component}"
        return inode

    def get_entries(
        self, inode: Inode, path: str = ""
    ) -> list[tuple[DirectoryEntry, Inode]]:
        """
        Return list of entries in use and their inodes for directory inode.

        Entries referring to invalid inodes are skipped.
        """
        entries = []
        for entry in self.get_directory(inode, path):
            child = self.get_inode(entry.inode)
            if child is None:
                logger.warning(
                    "Skipping '%s' with invalid inode %d", entry.filename, entry.inode
                )
                continue
            entries.append((entry, child))
        return entries

    def list_directory(self, path: str = "/") -> list[tuple[DirectoryEntry, Inode]]:
        """Return list of entries in use and their inodes for directory at path."""
        return self.get_entries(self.resolve(path), path)

    def read_file(self, path: str) -> bytes:
        """Return content of regular file at path."""
        inode = self.resolve(path)
        if not inode.is_regular_file:
            raise NotAFileError(path)
        return self.read_inode(inode)

    def walk(self, path: str = "/") -> Iterator[tuple[str, DirectoryEntry, Inode]]:
        """
        Return generator of paths, entries and inodes below directory at path.

        Directories are yielded before their contents; '.' and '..' are skipped.
        Names which are not a single path component are skipped, and directories
        already visited are not descended into again.
        """
        yield from self._walk(path.rstrip("/"), self.resolve(path), set())

    def _walk(
        self, path: str, inode: Inode, visited: set[int]
    ) -> Iterator[tuple[str, DirectoryEntry, Inode]]:
        """Return generator for walk of directory inode, tracking visited inodes."""
        entries = self.get_entries(inode, path or "/")
        visited.update(entry.inode for entry, _ in entries if entry.filename == ".")
        for entry, child in entries:
            name = entry.filename
            if name in (".", ".."):
                continue
            if not name or "/" in name:
                logger.warning("Skipping '%s/%s' with invalid name", path, name)
                continue
            child_path = f"{path}/{name}"
            yield (child_path, entry, child)
            if not child.is_directory:
                continue
            if entry.inode in visited:
                logger.warning(
                    "Skipping '%s', directory inode %d already visited",
                    child_path,
                    entry.inode,
                )
                continue
            visited.add(entry.inode)
            yield from self._walk(child_path, child, visited)

    def extract_to(self, directory: str | os.PathLike, path: str = "/") -> Path:
        """
        Extract regular files and directories below path to directory.

        Raises MalformedImageError if a destination would lie outside directory.
        """
        directory = Path(directory).absolute()
        directory.mkdir(parents=True, exist_ok=True)
        root = directory.resolve()
        prefix = path.rstrip("/")
        for child, _, inode in self.walk(path):
            destination = directory / child.removeprefix(prefix).lstrip("/")
            if not destination.resolve().is_relative_to(root):
                raise MalformedImageError(
                    f"Refusing to extract '{child}' outside of '{directory}'"
                )
            if inode.is_directory:
                destination.mkdir(exist_ok=True)
            elif inode.is_regular_file:
                logger.info("Extracting '%s' to '%s'", child, destination)
                with open(destination, "wb") as fd:
                    fd.write(self.read_inode(inode))
            else:
                logger.info("Skipping '%s' of type %s", child, inode.file_type)
        return directory

    def get_info(self) -> dict[str, Any]:
        """Return information about filesystem."""
        superblock = self.superblock
        return {
            "path": self.path.as_posix(),
            "partition_offset": self.image.window.base_offset,
            "partition_size": self.image.window.size,
            "ninodes": superblock.ninodes,
            "zones": superblock.zones,
            "blocksize": superblock.blocksize,
            "zone_size": superblock.zone_size,
            "max_file": superblock.max_file,
            "subversion": superblock.subversion,
        }
