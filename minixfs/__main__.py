"""Allow running minls as a module."""

from minixfs.cli import main

main()
