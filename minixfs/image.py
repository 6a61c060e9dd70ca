"""Read-only access to an image file, bounded by a partition window."""

import contextlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from minixfs.constants import PARTITION_TABLE_OFFSET
from minixfs.exceptions import (
    ImageIOError,
    ImageOpenError,
    NotAPartitionError,
    NotASubpartitionError,
)
from minixfs.models import PartitionTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionWindow:
    """
    Byte range of the image which all reads are relative to.

    A size of None means the window extends to the end of the image.
    """

    base_offset: int = 0
    size: int | None = None

    def contains(self, offset: int, size: int) -> bool:
        """Return whether the range offset..offset+size lies within the window."""
        if offset < 0 or size < 0:
            return False
        if self.size is None:
            return True
        return offset + size <= self.size


class Image(contextlib.AbstractContextManager):
    """Class to own an open image handle and its partition window."""

    def __init__(
        self, path: str | os.PathLike, window: PartitionWindow | None = None
    ) -> None:
        """Initialise instance for path; the image is opened on entry."""
        self.path = Path(path)
        self.window = window or PartitionWindow()
        self._fd: BinaryIO | None = None

    def __enter__(self) -> "Image":
        """Open image and enter runtime context."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close image and exit runtime context."""
        self.close()

    def open(self) -> None:
        """Open image file for reading."""
        if self._fd:
            return
        try:
            self._fd = open(self.path, "rb")
        except OSError as error:
            raise ImageOpenError(
                f"Unable to open image '{self.path}': {error}"
            ) from error

    def close(self) -> None:
        """Close image file."""
        if self._fd:
            self._fd.close()
            self._fd = None

    @property
    def closed(self) -> bool:
        """Return whether image file is closed."""
        return self._fd is None

    def narrow(self, window: PartitionWindow) -> None:
        """Replace the partition window."""
        logger.debug(
            "Partition window set to base %d, size %s", window.base_offset, window.size
        )
        self.window = window

    def read(self, offset: int, size: int) -> bytes:
        """
        Return size bytes at offset relative to the partition window.

        Raises ImageIOError if the range falls outside the window, or if fewer
        than size bytes could be read.
        """
        if not self.window.contains(offset, size):
            raise ImageIOError(
                f"Attempting to read outside of partition "
                f"(offset {offset}, size {size}, partition size {self.window.size})"
            )
        if self._fd is None:
            raise ImageIOError(f"Image '{self.path}' is not open")
        try:
            self._fd.seek(self.window.base_offset + offset, os.SEEK_SET)
            data = self._fd.read(size)
        except OSError as error:
            raise ImageIOError(
                f"Unable to read image '{self.path}': {error}"
            ) from error
        if len(data) != size:
            raise ImageIOError(
                f"Short read at offset {offset}: expected {size} bytes, got {len(data)}"
            )
        return data

    def get_partition_table(self) -> PartitionTable:
        """Return PartitionTable at the start of the current window."""
        data = self.read(PARTITION_TABLE_OFFSET, PartitionTable.get_model_size())
        return PartitionTable.from_bytes(data)


def select_partition(
    image: Image, index: int, subpartition: bool = False
) -> PartitionWindow:
    """
    Return window for MINIX partition at index of the table in the current window.

    MINIX subpartition tables hold sector numbers relative to the whole disk,
    so the returned window is always based from the start of the image.
    """
    entry = image.get_partition_table().get_entry(index)
    if not entry.is_minix:
        if subpartition:
            raise NotASubpartitionError(
                f"Not a Minix subpartition (type 0x{entry.sysind:02X})."
            )
        raise NotAPartitionError(f"Not a Minix partition (type 0x{entry.sysind:02X}).")
    logger.info(
        "Selected %s %d: first sector %d, %d sectors",
        "subpartition" if subpartition else "partition",
        index,
        entry.lowsec,
        entry.size,
    )
    return PartitionWindow(base_offset=entry.offset, size=entry.length)


def resolve_window(
    image: Image, partition: int | None = None, subpartition: int | None = None
) -> PartitionWindow:
    """
    Narrow window of image to the selected partition and subpartition.

    Without a partition, the window is the whole image.
    """
    if partition is None:
        if subpartition is not None:
            raise ValueError("Subpartition requires a partition to be selected")
        return image.window
    image.narrow(select_partition(image, partition))
    if subpartition is not None:
        image.narrow(select_partition(image, subpartition, subpartition=True))
    return image.window
