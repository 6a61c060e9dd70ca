"""Data models for an MBR-style partition table."""

from dataclasses import dataclass, field

from minixfs.constants import (
    MINIX_PARTITION_TYPE,
    PARTITION_TABLE_ENTRIES,
    PARTITION_TABLE_SIGNATURE,
    SECTOR_SIZE,
)
from minixfs.exceptions import InvalidPartitionTableError
from minixfs.models.base import BaseDataModel, DataModelMetadata
from minixfs.models.collections import DataModelCollection


@dataclass
class PartitionEntry(BaseDataModel):
    """
    Dataclass to handle a partition table entry.

    The CHS addresses are legacy and only kept to preserve the layout;
    lowsec and size locate the partition in sectors.
    """

    bootind: int = field(metadata=DataModelMetadata(size=1))  # boot indicator 0/0x80
    start_head: int = field(metadata=DataModelMetadata(size=1))
    start_sec: int = field(metadata=DataModelMetadata(size=1))  # sector + cyl bits
    start_cyl: int = field(metadata=DataModelMetadata(size=1))
    sysind: int = field(metadata=DataModelMetadata(size=1))  # system indicator
    last_head: int = field(metadata=DataModelMetadata(size=1))
    last_sec: int = field(metadata=DataModelMetadata(size=1))
    last_cyl: int = field(metadata=DataModelMetadata(size=1))
    lowsec: int = field(metadata=DataModelMetadata(size=4))  # logical first sector
    size: int = field(metadata=DataModelMetadata(size=4))  # size in sectors

    @property
    def is_minix(self) -> bool:
        """Return whether entry is marked as a MINIX partition."""
        return self.sysind == MINIX_PARTITION_TYPE

    @property
    def offset(self) -> int:
        """Return offset of partition in bytes."""
        return self.lowsec * SECTOR_SIZE

    @property
    def length(self) -> int:
        """Return length of partition in bytes."""
        return self.size * SECTOR_SIZE


@dataclass
class PartitionTable(BaseDataModel):
    """
    Dataclass to handle partition table data.

    The table resides at offset 0x1BE of the boot sector, followed by the
    0xAA55 signature.
    """

    entries: DataModelCollection[PartitionEntry] = field(
        metadata=DataModelMetadata(
            size=PARTITION_TABLE_ENTRIES * PartitionEntry.get_model_size()
        )
    )
    signature: int = field(
        metadata=DataModelMetadata(size=2, default=PARTITION_TABLE_SIGNATURE)
    )

    def __post_init__(self) -> None:
        """Verify signature on initialisation."""
        if self.signature != PARTITION_TABLE_SIGNATURE:
            raise InvalidPartitionTableError(
                f"Not a valid partition table (0x{self.signature:04X})"
            )

    def get_entry(self, index: int) -> PartitionEntry:
        """Return PartitionEntry for index, which must be 0..3."""
        if not 0 <= index < PARTITION_TABLE_ENTRIES:
            raise ValueError(
                f"Partition {index} out of range.  "
                f"Must be 0..{PARTITION_TABLE_ENTRIES - 1}."
            )
        return self.entries[index]
