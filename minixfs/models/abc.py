"""Abstract base classes for various data models."""

import io
from abc import ABC, abstractmethod
from typing import Any

from minixfs.models.collections import DataModelCollection


class BaseBytesModel(ABC):
    """Abstract base class for models which can be converted to and from bytes."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Return bytes of all data."""
        ...

    @classmethod
    @abstractmethod
    def from_bytes(cls: type["BaseBytesModel"], data: bytes) -> "BaseBytesModel":
        """Return model instance from bytes."""
        ...

    def get_actual_size(self) -> int:
        """Return actual size of all data."""
        return len(self.to_bytes())

    @staticmethod
    def convert_to_bytes(
        data: Any, size: int = 1, signed: bool = False, count: int = 1
    ) -> bytes:
        """
        Convert data to little-endian bytes of specified size.

        Tuples of integers are packed as count items of equal width.
        Raises TypeError if data cannot be converted.
        """
        match data:
            case BaseBytesModel() | DataModelCollection():
                return data.to_bytes()
            case bytes():
                return data.ljust(size, b"\x00")
            case str():
                return data.encode().ljust(size, b"\x00")
            case bool():
                raise TypeError("Unable to convert boolean to bytes")
            case int():
                return data.to_bytes(size, byteorder="little", signed=signed)
            case tuple():
                with io.BytesIO() as fd:
                    for item in data:
                        fd.write(item.to_bytes(size // count, byteorder="little"))
                    return fd.getvalue().ljust(size, b"\x00")
            case _:
                raise TypeError(f"Unable to convert '{type(data).__name__}' to bytes")
