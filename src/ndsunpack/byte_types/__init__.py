"""
Byte-level primitives for reading cartridge images in place.
"""

from .int_types import (
    ByteOrder,
    LittleEndian,
    BigEndian,
    FixedWidthInt,
    int_type,
    U8,
    U16LE,
    U32LE,
    U64LE,
    I16LE,
    I32LE,
    I64LE,
    U16BE,
    U32BE,
    U64BE,
    I16BE,
    I32BE,
    I64BE,
)
from .embedded_string import EmbeddedString, DynamicEmbeddedString
from .view import (
    StructView,
    IntField,
    StringField,
    BytesField,
    StructField,
    get_range,
)

__all__ = [
    "ByteOrder",
    "LittleEndian",
    "BigEndian",
    "FixedWidthInt",
    "int_type",
    "U8",
    "U16LE",
    "U32LE",
    "U64LE",
    "I16LE",
    "I32LE",
    "I64LE",
    "U16BE",
    "U32BE",
    "U64BE",
    "I16BE",
    "I32BE",
    "I64BE",
    "EmbeddedString",
    "DynamicEmbeddedString",
    "StructView",
    "IntField",
    "StringField",
    "BytesField",
    "StructField",
    "get_range",
]
