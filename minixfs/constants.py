"""Constants for the MINIX filesystem and MBR partition tables."""

from enum import IntEnum, IntFlag

# Partition table
SECTOR_SIZE = 512
PARTITION_TABLE_OFFSET = 0x1BE
PARTITION_TABLE_ENTRIES = 4
PARTITION_TABLE_SIGNATURE = 0xAA55
MINIX_PARTITION_TYPE = 0x81

# Superblock
SUPERBLOCK_OFFSET = 1024
MINIX_MAGIC = 0x4D5A

# Inodes
ROOT_INODE = 1
INODE_SIZE = 64
DIRECT_ZONES = 7
ZONE_NUMBER_SIZE = 4

# Directories
DIRECTORY_ENTRY_SIZE = 64
DIRECTORY_NAME_SIZE = 60


class FileType(IntEnum):
    """Enumeration of file types stored in the top bits of an inode mode."""

    FIFO = 0o010000
    CHARACTER_DEVICE = 0o020000
    DIRECTORY = 0o040000
    BLOCK_DEVICE = 0o060000
    REGULAR = 0o100000
    SYMLINK = 0o120000
    SOCKET = 0o140000

    MASK = 0o170000


class Permission(IntFlag):
    """Enumeration of permission bits stored in an inode mode."""

    OWNER_READ = 0o400
    OWNER_WRITE = 0o200
    OWNER_EXECUTE = 0o100
    GROUP_READ = 0o040
    GROUP_WRITE = 0o020
    GROUP_EXECUTE = 0o010
    OTHER_READ = 0o004
    OTHER_WRITE = 0o002
    OTHER_EXECUTE = 0o001
