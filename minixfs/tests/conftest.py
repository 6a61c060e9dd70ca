"""Testing configuration."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from minixfs.constants import (
    DIRECT_ZONES,
    INODE_SIZE,
    MINIX_PARTITION_TYPE,
    PARTITION_TABLE_ENTRIES,
    PARTITION_TABLE_OFFSET,
    SECTOR_SIZE,
    SUPERBLOCK_OFFSET,
    ZONE_NUMBER_SIZE,
    FileType,
)
from minixfs.filesystem import Filesystem
from minixfs.models import (
    DataModelCollection,
    DirectoryEntry,
    Inode,
    PartitionEntry,
    PartitionTable,
    Superblock,
)
from minixfs.utils import replace_bytes

BLOCK_SIZE = 1024
NINODES = 16
DIRECTORY_MODE = FileType.DIRECTORY | 0o755
FILE_MODE = FileType.REGULAR | 0o644


@dataclass
class ImageBuilder:
    """
    Build a MINIX filesystem image in memory.

    Zones are allocated sequentially after the inode table. Indirect zones
    whose pointers are all holes are left as holes themselves.
    """

    log_zone_size: int = 0
    inodes: dict[int, Inode] = field(default_factory=dict)
    zones: dict[int, bytes] = field(default_factory=dict)
    boot_block: bytes = bytes(BLOCK_SIZE)

    def __post_init__(self) -> None:
        """Place first data zone after the inode table."""
        self.next_zone = -(-self.inode_table_end // self.zone_size)
        self.first_data_zone = self.next_zone

    @property
    def zone_size(self) -> int:
        """Return size of a zone in bytes."""
        return BLOCK_SIZE << self.log_zone_size

    @property
    def inode_table_offset(self) -> int:
        """Return offset of inode table: boot, super and one block per bitmap."""
        return 4 * BLOCK_SIZE

    @property
    def inode_table_end(self) -> int:
        """Return offset of the end of the inode table."""
        return self.inode_table_offset + NINODES * INODE_SIZE

    def allocate(self, data: bytes) -> int:
        """Store data in a new zone and return its number."""
        zone = self.next_zone
        self.next_zone += 1
        self.zones[zone] = data.ljust(self.zone_size, b"\x00")
        return zone

    def allocate_pointers(self, pointers: list[int]) -> int:
        """Store pointers in a new indirect zone, or return 0 if all are holes."""
        if not any(pointers):
            return 0
        return self.allocate(
            b"".join(
                pointer.to_bytes(ZONE_NUMBER_SIZE, "little") for pointer in pointers
            )
        )

    def add_file(
        self,
        number: int,
        data: bytes,
        mode: int = FILE_MODE,
        holes: tuple[int, ...] = (),
    ) -> Inode:
        """
        Add inode with data, leaving zone indices in holes unallocated.

        Zones left as holes must only contain zeros in data.
        """
        pointers = []
        for index, offset in enumerate(range(0, len(data), self.zone_size)):
            chunk = data[offset : offset + self.zone_size]
            if index in holes:
                assert not any(chunk), "hole zones must be empty"
                pointers.append(0)
            else:
                pointers.append(self.allocate(chunk))
        per_indirect = self.zone_size // ZONE_NUMBER_SIZE
        direct, pointers = pointers[:DIRECT_ZONES], pointers[DIRECT_ZONES:]
        indirect, pointers = pointers[:per_indirect], pointers[per_indirect:]
        two_indirect = [
            self.allocate_pointers(pointers[i : i + per_indirect])
            for i in range(0, len(pointers), per_indirect)
        ]
        inode = Inode.new(
            mode=mode,
            links=1,
            size=len(data),
            atime=1700000000,
            mtime=1700000000,
            ctime=1700000000,
            zone=tuple(direct + [0] * (DIRECT_ZONES - len(direct))),
            indirect=self.allocate_pointers(indirect),
            two_indirect=self.allocate_pointers(two_indirect),
        )
        self.inodes[number] = inode
        return inode

    def add_directory(self, number: int, entries: list[tuple[int, str]]) -> Inode:
        """Add directory inode with entries of inode numbers and names."""
        data = DataModelCollection(
            DirectoryEntry(inode=inode, name=name.encode()) for inode, name in entries
        ).to_bytes()
        return self.add_file(number, data, mode=DIRECTORY_MODE)

    def get_superblock(self) -> Superblock:
        """Return superblock describing the image."""
        return Superblock.new(
            ninodes=NINODES,
            i_blocks=1,
            z_blocks=1,
            firstdata=self.first_data_zone,
            log_zone_size=self.log_zone_size,
            max_file=0x7FFFFFFF,
            zones=self.next_zone,
            blocksize=BLOCK_SIZE,
        )

    def to_bytes(self) -> bytes:
        """Return bytes of the complete image."""
        data = bytearray(self.next_zone * self.zone_size)
        data[:BLOCK_SIZE] = self.boot_block
        superblock = self.get_superblock().to_bytes()
        data[SUPERBLOCK_OFFSET : SUPERBLOCK_OFFSET + len(superblock)] = superblock
        for number in range(1, NINODES + 1):
            inode = self.inodes.get(number) or Inode.new()
            offset = self.inode_table_offset + (number - 1) * INODE_SIZE
            data[offset : offset + INODE_SIZE] = inode.to_bytes()
        for zone, content in self.zones.items():
            offset = zone * self.zone_size
            data[offset : offset + self.zone_size] = content
        return bytes(data)


@dataclass
class SampleImage:
    """Dataclass to store a built image and the expected file contents."""

    path: Path
    files: dict[str, bytes]


def get_zone_pattern(
    count: int, size: int, holes: tuple[int, ...], zone_size: int
) -> bytes:
    """Return data of count zones, each filled with a distinct byte, holes zeroed."""
    data = b"".join(
        bytes(zone_size) if index in holes else bytes([0x41 + index % 26]) * zone_size
        for index in range(count)
    )
    return data[:size]


def build_filesystem(
    notes: bytes = b"hello, minix\n", log_zone_size: int = 0
) -> tuple[ImageBuilder, dict[str, bytes]]:
    """
    Return builder for sample tree and the expected contents of its files.

    /
      notes.txt   one zone, preceded by a deleted entry of the same name
      big.bin     double indirect, all earlier zones are holes
      seven.bin   exactly seven direct zones
      ghost       entry referring to an invalid inode
      dir/
        file.txt  direct and indirect zones with holes
        sub/
    """
    builder = ImageBuilder(log_zone_size=log_zone_size)
    zone_size = builder.zone_size
    per_indirect = zone_size // ZONE_NUMBER_SIZE

    file_holes = (2, DIRECT_ZONES)
    file_txt = get_zone_pattern(9, 8 * zone_size + 100, file_holes, zone_size)
    big_count = DIRECT_ZONES + per_indirect + 3
    big_holes = tuple(range(DIRECT_ZONES + per_indirect)) + (
        DIRECT_ZONES + per_indirect + 1,
    )
    big_bin = get_zone_pattern(
        big_count, (big_count - 1) * zone_size + 10, big_holes, zone_size
    )
    seven_bin = get_zone_pattern(DIRECT_ZONES, DIRECT_ZONES * zone_size, (), zone_size)

    builder.add_directory(
        1,
        [
            (1, "."),
            (1, ".."),
            (2, "dir"),
            (0, "notes.txt"),
            (4, "notes.txt"),
            (5, "big.bin"),
            (6, "seven.bin"),
            (99, "ghost"),
        ],
    )
    builder.add_directory(2, [(2, "."), (1, ".."), (3, "file.txt"), (7, "sub")])
    builder.add_file(3, file_txt, holes=file_holes)
    builder.add_file(4, notes)
    builder.add_file(5, big_bin, mode=FileType.REGULAR | 0o600, holes=big_holes)
    builder.add_file(6, seven_bin, mode=FileType.REGULAR | 0o755)
    builder.add_directory(7, [(7, "."), (2, "..")])
    files = {
        "/dir/file.txt": file_txt,
        "/notes.txt": notes,
        "/big.bin": big_bin,
        "/seven.bin": seven_bin,
    }
    return builder, files


def get_partition_table(entries: list[tuple[int, int, int]]) -> bytes:
    """Return boot sector bytes holding a table of (type, first sector, sectors)."""
    entries = entries + [(0, 0, 0)] * (PARTITION_TABLE_ENTRIES - len(entries))
    table = PartitionTable.new(
        entries=DataModelCollection(
            PartitionEntry.new(sysind=sysind, lowsec=lowsec, size=size)
            for sysind, lowsec, size in entries
        )
    )
    return replace_bytes(bytes(SECTOR_SIZE), table.to_bytes(), PARTITION_TABLE_OFFSET)


def pytest_addoption(parser):
    """Parse command-line arguments."""
    parser.addoption("--image", action="store", help="path to a real MINIX image")
    parser.addoption("--partition", action="store", type=int, help="partition of image")
    parser.addoption(
        "--subpartition", action="store", type=int, help="subpartition of image"
    )


def pytest_configure(config):
    """Register markers."""
    config.addinivalue_line("markers", "image: test requires a real MINIX image")


def pytest_collection_modifyitems(config, items):
    """Configure tests based on parsed arguments."""
    if config.getoption("image"):
        return
    skip_image = pytest.mark.skip(reason="MINIX image not provided")
    for item in items:
        if "image" in item.keywords:
            item.add_marker(skip_image)


@pytest.fixture(scope="session")
def sample(tmp_path_factory) -> SampleImage:
    """Return unpartitioned sample image."""
    builder, files = build_filesystem()
    path = tmp_path_factory.mktemp("images") / "minix.img"
    path.write_bytes(builder.to_bytes())
    return SampleImage(path=path, files=files)


@pytest.fixture(scope="session")
def large_zone_sample(tmp_path_factory) -> SampleImage:
    """Return sample image with zones of two blocks."""
    builder, files = build_filesystem(log_zone_size=1)
    path = tmp_path_factory.mktemp("images") / "minix-2k.img"
    path.write_bytes(builder.to_bytes())
    return SampleImage(path=path, files=files)


@pytest.fixture(scope="session")
def partitioned(tmp_path_factory) -> SampleImage:
    """
    Return image whose partition 2 holds a filesystem and subpartition 1 another.

    Partitions 0, 1 and 3 are not MINIX partitions, nor is subpartition 0.
    """
    partition_start = 8
    outer, _ = build_filesystem(notes=b"partition\n")
    outer_sectors = len(outer.to_bytes()) // SECTOR_SIZE
    inner, files = build_filesystem(notes=b"subpartition\n")
    inner_data = inner.to_bytes()
    inner_start = partition_start + outer_sectors
    inner_sectors = len(inner_data) // SECTOR_SIZE
    outer.boot_block = get_partition_table(
        [(0x82, partition_start, 1), (MINIX_PARTITION_TYPE, inner_start, inner_sectors)]
    ).ljust(BLOCK_SIZE, b"\x00")
    mbr = get_partition_table(
        [
            (0x83, 1, 1),
            (0x0B, 2, 1),
            (MINIX_PARTITION_TYPE, partition_start, outer_sectors + inner_sectors),
            (0x05, 3, 1),
        ]
    )
    data = (
        mbr.ljust(partition_start * SECTOR_SIZE, b"\x00")
        + outer.to_bytes()
        + inner_data
    )
    path = tmp_path_factory.mktemp("images") / "partitioned.img"
    path.write_bytes(data)
    return SampleImage(path=path, files=files)


@pytest.fixture(scope="session")
def hostile(tmp_path_factory) -> SampleImage:
    """
    Return image with names which are not path components and a directory loop.

    /
      ../../escaped.txt   name containing slashes
      (empty name)
      d/
        loop/             refers back to the root directory
        kept.txt
    """
    builder = ImageBuilder()
    builder.add_directory(
        1, [(1, "."), (1, ".."), (2, "../../escaped.txt"), (3, "d"), (2, "")]
    )
    builder.add_file(2, b"escaped\n")
    builder.add_directory(3, [(3, "."), (1, ".."), (1, "loop"), (2, "kept.txt")])
    path = tmp_path_factory.mktemp("images") / "hostile.img"
    path.write_bytes(builder.to_bytes())
    return SampleImage(path=path, files={"/d/kept.txt": b"escaped\n"})


@pytest.fixture()
def filesystem(sample: SampleImage) -> Filesystem:
    """Return Filesystem instance for sample image."""
    with Filesystem(sample.path) as filesystem:
        yield filesystem


@pytest.fixture(scope="session")
def real_filesystem(pytestconfig) -> Filesystem:
    """Return Filesystem instance for image given on the command line."""
    with Filesystem(
        pytestconfig.getoption("image"),
        pytestconfig.getoption("partition"),
        pytestconfig.getoption("subpartition"),
    ) as filesystem:
        yield filesystem
