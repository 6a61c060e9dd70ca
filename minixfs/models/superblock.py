"""Data model for the MINIX superblock."""

from dataclasses import dataclass, field

from minixfs.constants import MINIX_MAGIC
from minixfs.exceptions import BadMagicError, MalformedImageError
from minixfs.models.base import BaseDataModel, DataModelMetadata


@dataclass
class Superblock(BaseDataModel):
    """
    Dataclass to handle superblock data.

    The superblock resides 1024 bytes into the filesystem, after the boot block.
    """

    ninodes: int = field(metadata=DataModelMetadata(size=4))  # usable inodes
    pad1: int = field(metadata=DataModelMetadata(size=2))
    i_blocks: int = field(metadata=DataModelMetadata(size=2))  # inode bitmap blocks
    z_blocks: int = field(metadata=DataModelMetadata(size=2))  # zone bitmap blocks
    firstdata: int = field(metadata=DataModelMetadata(size=2))  # first data zone
    log_zone_size: int = field(  # log2 of blocks per zone
        metadata=DataModelMetadata(size=2, signed=True)
    )
    pad2: int = field(metadata=DataModelMetadata(size=2, signed=True))
    max_file: int = field(metadata=DataModelMetadata(size=4))  # maximum file size
    zones: int = field(metadata=DataModelMetadata(size=4))  # number of zones
    magic: int = field(metadata=DataModelMetadata(size=2, default=MINIX_MAGIC))
    pad3: int = field(metadata=DataModelMetadata(size=2))
    blocksize: int = field(  # block size in bytes
        metadata=DataModelMetadata(size=2, default=1024)
    )
    subversion: int = field(metadata=DataModelMetadata(size=1))

    def __post_init__(self) -> None:
        """Verify magic number and zone geometry on initialisation."""
        if self.magic != MINIX_MAGIC:
            raise BadMagicError(self.magic)
        if self.blocksize <= 0 or self.blocksize & (self.blocksize - 1):
            raise MalformedImageError(
                f"Block size '{self.blocksize}' is not a power of two"
            )
        if self.log_zone_size < 0:
            raise MalformedImageError(
                f"Log zone size '{self.log_zone_size}' is negative"
            )

    @property
    def zone_size(self) -> int:
        """Return size of a zone in bytes."""
        return self.blocksize << self.log_zone_size

    @property
    def inode_table_offset(self) -> int:
        """Return offset of inode table, after boot, super and bitmap blocks."""
        return (2 + self.i_blocks + self.z_blocks) * self.blocksize
