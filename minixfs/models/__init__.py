"""Data models for various MINIX filesystem structures."""

from minixfs.models.collections import DataModelCollection
from minixfs.models.directory import Directory, DirectoryEntry
from minixfs.models.inode import Inode, InodeTable
from minixfs.models.partition import PartitionEntry, PartitionTable
from minixfs.models.superblock import Superblock

__all__ = [
    "DataModelCollection",
    "Directory",
    "DirectoryEntry",
    "Inode",
    "InodeTable",
    "PartitionEntry",
    "PartitionTable",
    "Superblock",
]
