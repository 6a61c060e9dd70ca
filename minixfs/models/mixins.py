"""Mixin classes to extend functionality for various data models."""

from dataclasses import Field, fields
from typing import Iterator


class DataclassMixin:
    """Provide methods to inspect the fields of a dataclass."""

    @classmethod
    def get_fields(cls, init_only: bool = True) -> Iterator[Field]:
        """
        Return iterator of fields for dataclass.

        If init_only, only include fields with parameters in __init__ method.
        """
        for field in fields(cls):
            if init_only and not field.init:
                continue
            yield field
