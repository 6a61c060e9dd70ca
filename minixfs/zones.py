"""Reconstruct file content from the zone pointers of an inode."""

import io
import logging
from typing import Iterator

from minixfs.constants import DIRECT_ZONES, ZONE_NUMBER_SIZE
from minixfs.exceptions import MalformedImageError
from minixfs.image import Image
from minixfs.models import Inode

logger = logging.getLogger(__name__)


class ZoneChainReader:
    """
    Class to read the zones of an inode in file order.

    A zone number of 0 at any level is a hole and reads as zeros; the end of
    the file is determined only by the inode size.
    """

    def __init__(self, image: Image, zone_size: int) -> None:
        """Initialise instance for image with zone size in bytes."""
        self.image = image
        self.zone_size = zone_size

    @property
    def zones_per_indirect(self) -> int:
        """Return number of zone numbers held by an indirect zone."""
        return self.zone_size // ZONE_NUMBER_SIZE

    @property
    def max_zones(self) -> int:
        """Return number of zones addressable through direct and indirect zones."""
        return DIRECT_ZONES + self.zones_per_indirect + self.zones_per_indirect**2

    def get_zone_count(self, size: int) -> int:
        """Return number of whole zones needed to hold size bytes."""
        return -(-size // self.zone_size)

    def read_zone(self, zone: int) -> bytes:
        """Return data of zone, or zeros if zone is a hole."""
        if not zone:
            logger.debug("Zone hole, filling %d bytes with zeros", self.zone_size)
            return bytes(self.zone_size)
        logger.debug("Reading zone %d", zone)
        return self.image.read(zone * self.zone_size, self.zone_size)

    def read_indirect(self, zone: int) -> tuple[int, ...]:
        """Return zone numbers held by an indirect zone."""
        data = self.read_zone(zone)
        return tuple(
            int.from_bytes(data[i : i + ZONE_NUMBER_SIZE], byteorder="little")
            for i in range(0, len(data), ZONE_NUMBER_SIZE)
        )

    def get_zones(self, inode: Inode) -> Iterator[int]:
        """
        Return generator of zone numbers for inode, in file order.

        Indirect zones are only read once the direct zones are exhausted.
        """
        count = self.get_zone_count(inode.size)
        yield from inode.zone[:count]
        count -= len(inode.zone)
        if count <= 0:
            return
        zones = self.read_indirect(inode.indirect)
        yield from zones[:count]
        count -= len(zones)
        if count <= 0:
            return
        for indirect in self.read_indirect(inode.two_indirect):
            zones = self.read_indirect(indirect)
            yield from zones[:count]
            count -= len(zones)
            if count <= 0:
                return

    def iter_zones(self, inode: Inode) -> Iterator[bytes]:
        """Return generator of zone data for inode, in file order."""
        for zone in self.get_zones(inode):
            yield self.read_zone(zone)

    def read(self, inode: Inode) -> bytes:
        """
        Return exactly inode.size bytes of content for inode.

        Raises MalformedImageError if the size cannot be addressed by an inode.
        """
        if self.get_zone_count(inode.size) > self.max_zones:
            raise MalformedImageError(
                f"Inode size '{inode.size}' exceeds addressable size "
                f"'{self.max_zones * self.zone_size}'"
            )
        with io.BytesIO() as fd:
            for data in self.iter_zones(inode):
                fd.write(data)
            return fd.getvalue()[: inode.size]
