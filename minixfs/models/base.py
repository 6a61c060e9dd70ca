"""Concrete base classes for various data models."""

import io
from dataclasses import Field, dataclass, replace
from typing import Any, TypedDict, get_args, get_origin

from minixfs.exceptions import TruncatedRecordError
from minixfs.models.abc import BaseBytesModel
from minixfs.models.collections import DataModelCollection
from minixfs.models.mixins import DataclassMixin
from minixfs.utils import replace_bytes


class DataModelMetadata(TypedDict, total=False):
    """
    Metadata for a field of a data model.

    size is the number of bytes occupied on disk, signed marks two's complement
    integers and count is the number of items packed into a tuple field.
    """

    size: int
    default: Any
    signed: bool
    count: int


@dataclass
class BaseDataModel(BaseBytesModel, DataclassMixin):
    """
    Concrete base class for data model.

    All integers are stored little-endian, as written by MINIX on x86.
    """

    def __len__(self) -> int:
        """Implement __len__ data model method."""
        return self.get_actual_size()

    def to_bytes(self) -> bytes:
        """Return bytes of all data."""
        with io.BytesIO() as fd:
            for field in self.get_fields(init_only=False):
                data = getattr(self, field.name)
                metadata = self.get_attribute_metadata(field.name)
                try:
                    fd.write(
                        self.convert_to_bytes(
                            data,
                            size=metadata.get("size", 1),
                            signed=metadata.get("signed", False),
                            count=metadata.get("count", 1),
                        )
                    )
                except TypeError:
                    continue
            fd.seek(0)
            return fd.read()

    @classmethod
    def get_attribute_metadata(
        cls: type["BaseDataModel"], name: str
    ) -> DataModelMetadata:
        """Return metadata for attribute."""
        for field in cls.get_fields(init_only=False):
            if field.name == name:
                return field.metadata
        raise KeyError(f"Attribute '{name}' not found")

    @classmethod
    def get_model_size(cls: type["BaseDataModel"]) -> int:
        """Return expected total size of data for model."""
        return sum(field.metadata.get("size", 0) for field in cls.get_fields())

    @classmethod
    def get_attribute_size(cls: type["BaseDataModel"], name: str) -> int:
        """Return size of data for attribute."""
        return cls.get_attribute_metadata(name)["size"]

    @classmethod
    def get_attribute_offset(cls: type["BaseDataModel"], name: str) -> int:
        """Return offset of bytes for attribute."""
        offset = 0
        for field in cls.get_fields():
            if field.name == name:
                return offset
            offset += field.metadata["size"]
        else:
            raise KeyError(f"Attribute '{name}' not found")

    def verify(self) -> bool:
        """Verify data model integrity."""
        return self.get_actual_size() == self.get_model_size()

    @classmethod
    def from_bytes_to_dict(cls: type["BaseDataModel"], data: bytes) -> dict[str, bytes]:
        """
        Return dictionary from bytes.

        Raises TruncatedRecordError if data is too short to create model.
        """
        if len(data) < cls.get_model_size():
            raise TruncatedRecordError(
                f"Length of data '{len(data)}' is shorter than "
                f"model size '{cls.get_model_size()}' for '{cls.__name__}'"
            )
        model = {}
        with io.BytesIO(data) as fd:
            for field in cls.get_fields(init_only=True):
                model[field.name] = fd.read(cls.get_attribute_size(field.name))
        return model

    @staticmethod
    def from_field(data: bytes, field: Field) -> Any:
        """Return instance of field type from data."""
        if get_origin(field.type) == DataModelCollection:
            inner = get_args(field.type)[0]
            return DataModelCollection(
                inner.from_bytes(chunk)
                for chunk in [
                    data[i : i + inner.get_model_size()]
                    for i in range(0, len(data), inner.get_model_size())
                ]
            )
        elif get_origin(field.type) == tuple:
            width = len(data) // field.metadata.get("count", 1)
            return tuple(
                int.from_bytes(data[i : i + width], byteorder="little")
                for i in range(0, len(data), width)
            )
        elif issubclass(field.type, BaseDataModel):
            return field.type.from_bytes(data)
        elif field.type == str:
            return data.rstrip(b"\x00").decode()
        elif field.type == int:
            return int.from_bytes(
                data, byteorder="little", signed=field.metadata.get("signed", False)
            )
        else:
            return field.type(data)

    @classmethod
    def from_bytes(cls: type["BaseDataModel"], data: bytes) -> "BaseDataModel":
        """Return data model instance from bytes."""
        model = cls.from_bytes_to_dict(data)
        for field in cls.get_fields(init_only=True):
            model[field.name] = cls.from_field(model[field.name], field)
        return cls(**model)

    @classmethod
    def from_bytes_with_remaining(
        cls: type["BaseDataModel"], data: bytes
    ) -> tuple["BaseDataModel", bytes]:
        """Return data model instance and remaining data from bytes."""
        return (cls.from_bytes(data), data[cls.get_model_size() :])

    @classmethod
    def _get_default_bytes(cls: type["BaseDataModel"]) -> bytes:
        """Return default bytes for new data model."""
        data = bytes(cls.get_model_size())
        for field in cls.get_fields():
            if "default" not in field.metadata:
                continue
            value = field.metadata["default"]
            if callable(value):
                value = value()
            data = replace_bytes(
                data,
                cls.convert_to_bytes(
                    value,
                    size=field.metadata["size"],
                    signed=field.metadata.get("signed", False),
                    count=field.metadata.get("count", 1),
                ),
                cls.get_attribute_offset(field.name),
            )
        return data

    @classmethod
    def new(cls: type["BaseDataModel"], **kwargs) -> "BaseDataModel":
        """Return new data model instance with default data, updated by kwargs."""
        return replace(cls.from_bytes(cls._get_default_bytes()), **kwargs)


class BaseDataGroup(BaseBytesModel, DataclassMixin):
    """Concrete base class for a dataclass of data models."""

    def to_bytes(self) -> bytes:
        """Return bytes of all data."""
        with io.BytesIO() as fd:
            for field in self.get_fields(init_only=False):
                data = getattr(self, field.name)
                try:
                    fd.write(self.convert_to_bytes(data))
                except TypeError:
                    continue
            fd.seek(0)
            return fd.read()
