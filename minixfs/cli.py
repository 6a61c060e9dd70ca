"""Command-line interface to list and extract files from MINIX images."""

import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import asdict
from pprint import pformat

from minixfs.constants import PARTITION_TABLE_ENTRIES
from minixfs.exceptions import MinixError
from minixfs.filesystem import Filesystem
from minixfs.models import Inode
from minixfs.utils import get_mode_string, normalise_path

logger = logging.getLogger(__name__)


def get_parser(prog: str, description: str) -> ArgumentParser:
    """Return argument parser instance with options common to all commands."""
    parser = ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase verbosity level",
    )
    parser.add_argument(
        "-p",
        "--partition",
        type=int,
        choices=range(PARTITION_TABLE_ENTRIES),
        metavar="num",
        help="select partition for filesystem (default: none)",
    )
    parser.add_argument(
        "-s",
        "--subpartition",
        type=int,
        choices=range(PARTITION_TABLE_ENTRIES),
        metavar="num",
        help="select subpartition for filesystem (default: none)",
    )
    parser.add_argument("imagefile", help="path to the MINIX filesystem image")
    return parser


def get_minls_parser() -> ArgumentParser:
    """Return argument parser for minls."""
    parser = get_parser("minls", "List a file or directory in a MINIX image")
    parser.add_argument(
        "path", nargs="?", default="/", help="path to list (default: /)"
    )
    return parser


def get_minget_parser() -> ArgumentParser:
    """Return argument parser for minget."""
    parser = get_parser("minget", "Copy a regular file out of a MINIX image")
    parser.add_argument("srcpath", help="path of file in image")
    parser.add_argument(
        "dstpath", nargs="?", help="destination path (default: standard output)"
    )
    return parser


def check_args(parser: ArgumentParser, args: Namespace) -> None:
    """Check sanity of parsed arguments."""
    if args.subpartition is not None and args.partition is None:
        parser.error("-s requires -p")


def configure_logging(verbose: int) -> None:
    """Configure logging to standard error according to verbosity level."""
    match verbose:
        case 0:
            level = logging.WARNING
        case 1:
            level = logging.INFO
        case _:
            level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(name)s: %(levelname)s: %(message)s", stream=sys.stderr
    )


def format_inode(inode: Inode, name: str) -> str:
    """Return ls-style line for inode with name."""
    return f"{get_mode_string(inode.mode)}{inode.size:>10} {name}"


def print_verbose(filesystem: Filesystem, inode: Inode) -> None:
    """Print superblock and inode details to standard error."""
    print("Superblock:", file=sys.stderr)
    print(pformat(asdict(filesystem.superblock)), file=sys.stderr)
    print(f"  zone_size: {filesystem.superblock.zone_size}", file=sys.stderr)
    print("Inode:", file=sys.stderr)
    print(pformat(asdict(inode)), file=sys.stderr)


def minls(args: Namespace) -> None:
    """List file or directory at path."""
    path = normalise_path(args.path)
    with Filesystem(args.imagefile, args.partition, args.subpartition) as filesystem:
        inode = filesystem.resolve(path)
        if args.verbose:
            print_verbose(filesystem, inode)
        if inode.is_directory:
            print(f"{path}:")
            for entry, child in filesystem.list_directory(path):
                print(format_inode(child, entry.filename))
        elif inode.is_regular_file:
            print(format_inode(inode, args.path))


def minget(args: Namespace) -> None:
    """Copy regular file at srcpath to dstpath or standard output."""
    path = normalise_path(args.srcpath)
    with Filesystem(args.imagefile, args.partition, args.subpartition) as filesystem:
        if args.verbose:
            print_verbose(filesystem, filesystem.resolve(path))
        data = filesystem.read_file(path)
    if args.dstpath:
        with open(args.dstpath, "wb") as fd:
            fd.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def run(parser: ArgumentParser, command, argv: list[str] | None = None) -> int:
    """Parse arguments, run command and return exit status."""
    args = parser.parse_args(argv)
    check_args(parser, args)
    configure_logging(args.verbose)
    try:
        command(args)
    except (MinixError, OSError) as error:
        logger.debug("Command failed", exc_info=True)
        print(f"{parser.prog}: {error}", file=sys.stderr)
        return 1
    return 0


def main_minls(argv: list[str] | None = None) -> int:
    """Parse arguments and list file or directory."""
    return run(get_minls_parser(), minls, argv)


def main_minget(argv: list[str] | None = None) -> int:
    """Parse arguments and extract file."""
    return run(get_minget_parser(), minget, argv)


def main() -> None:
    """Entry point for minls."""
    sys.exit(main_minls())


if __name__ == "__main__":
    main()
