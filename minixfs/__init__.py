"""
Python interface for reading MINIX filesystem images.

A disk image may hold the filesystem directly or inside an MBR-style
partition table, and optionally a subpartition table within that partition.

The MINIX filesystem has the following layout, in blocks:
- Boot block
- Superblock
- Inode bitmap
- Zone bitmap
- Inode table
- Data zones
"""

from minixfs.filesystem import Filesystem
from minixfs.image import Image, PartitionWindow, resolve_window
from minixfs.models import (
    Directory,
    DirectoryEntry,
    Inode,
    InodeTable,
    PartitionEntry,
    PartitionTable,
    Superblock,
)
from minixfs.zones import ZoneChainReader

__all__ = [
    "Directory",
    "DirectoryEntry",
    "Filesystem",
    "Image",
    "Inode",
    "InodeTable",
    "PartitionEntry",
    "PartitionTable",
    "PartitionWindow",
    "Superblock",
    "ZoneChainReader",
    "resolve_window",
]
