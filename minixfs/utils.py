"""Collection of functions to assist other modules."""

from minixfs.constants import FileType, Permission

PERMISSION_CHARACTERS = (
    (Permission.OWNER_READ, "r"),
    (Permission.OWNER_WRITE, "w"),
    (Permission.OWNER_EXECUTE, "x"),
    (Permission.GROUP_READ, "r"),
    (Permission.GROUP_WRITE, "w"),
    (Permission.GROUP_EXECUTE, "x"),
    (Permission.OTHER_READ, "r"),
    (Permission.OTHER_WRITE, "w"),
    (Permission.OTHER_EXECUTE, "x"),
)


def replace_bytes(data: bytes, replacement: bytes, offset: int) -> bytes:
    """Replace bytes of data at offset with replacement."""
    return data[:offset] + replacement + data[offset + len(replacement) :]


def split_path(path: str) -> list[str]:
    """Return non-empty components of a slash-separated path."""
    return [component for component in path.split("/") if component]


def normalise_path(path: str) -> str:
    """Return path with a leading slash, as expected for absolute paths."""
    if not path.startswith("/"):
        return f"/{path}"
    return path


def get_mode_string(mode: int) -> str:
    """Return ls-style string for mode, e.g. drwxr-xr-x."""
    type_ = "d" if mode & FileType.MASK == FileType.DIRECTORY else "-"
    return type_ + "".join(
        character if mode & bit else "-" for bit, character in PERMISSION_CHARACTERS
    )
