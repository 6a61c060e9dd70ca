"""Exceptions raised while decoding a MINIX filesystem image."""


class MinixError(Exception):
    """Base class for all errors raised by minixfs."""


class ImageOpenError(MinixError, OSError):
    """Image file could not be opened."""


class ImageIOError(MinixError, OSError):
    """Read or seek failed, or fell outside the partition window."""


class InvalidPartitionTableError(MinixError, ValueError):
    """Partition table signature did not match."""


class NotAPartitionError(MinixError, ValueError):
    """Selected partition is not a MINIX partition."""


class NotASubpartitionError(NotAPartitionError):
    """Selected subpartition is not a MINIX subpartition."""


class BadMagicError(MinixError, ValueError):
    """Superblock magic number did not match."""

    def __init__(self, magic: int) -> None:
        """Initialise exception with the magic number that was read."""
        self.magic = magic
        super().__init__(
            f"Bad magic number. (0x{magic:04x}) "
            "This doesn't look like a MINIX filesystem."
        )


class MalformedImageError(MinixError, ValueError):
    """On-disk structures are inconsistent."""


class FileNotFoundInImageError(MinixError, FileNotFoundError):
    """Path component was not found in its directory."""

    def __init__(self, path: str) -> None:
        """Initialise exception with the full path being resolved."""
        self.path = path
        super().__init__(f"{path}: File not found.")


class NotADirectoryInImageError(MinixError, NotADirectoryError):
    """Path component was expected to be a directory."""

    def __init__(self, path: str) -> None:
        """Initialise exception with the offending path."""
        self.path = path
        super().__init__(f"{path}: Not a directory.")


class NotAFileError(MinixError, ValueError):
    """Inode was expected to be a regular file."""

    def __init__(self, path: str) -> None:
        """Initialise exception with the offending path."""
        self.path = path
        super().__init__(f"{path}: Not a regular file.")


class TruncatedRecordError(MalformedImageError):
    """Not enough bytes were available to decode a record."""
