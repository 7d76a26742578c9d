"""Fixed-width integers over raw bytes.

Each integer type wraps exactly ``WIDTH`` bytes and converts them to and from
a Python int with its ``ORDER`` strategy. The bytes are usually a
``memoryview`` slice of a larger ROM buffer, so reading a field never copies
the image and never depends on alignment.
"""

from typing import Optional, Type, Union

Buffer = Union[bytes, bytearray, memoryview]


class ByteOrder:
    """Byte order strategy used by the integer types."""

    name = ""

    @classmethod
    def decode(cls, raw: Buffer, signed: bool) -> int:
        return int.from_bytes(raw, cls.name, signed=signed)

    @classmethod
    def encode(cls, value: int, width: int, signed: bool) -> bytes:
        return value.to_bytes(width, cls.name, signed=signed)


class LittleEndian(ByteOrder):
    name = "little"


class BigEndian(ByteOrder):
    name = "big"


class FixedWidthInt:
    """Integer view over ``WIDTH`` raw bytes.

    Subclasses only set the class attributes; see :func:`int_type`.
    """

    WIDTH = 0
    SIGNED = False
    ORDER: Type[ByteOrder] = LittleEndian

    __slots__ = ("_raw",)

    def __init__(self, raw: Buffer):
        raw = memoryview(raw)
        if len(raw) != self.WIDTH:
            raise ValueError(
                f"{type(self).__name__} needs exactly {self.WIDTH} bytes, got {len(raw)}"
            )
        self._raw = raw

    @classmethod
    def from_prefix(cls, data: Buffer, offset: int = 0) -> Optional["FixedWidthInt"]:
        """View the ``WIDTH`` bytes at ``offset``, or None if they are not all there."""
        view = memoryview(data)
        if offset < 0 or offset + cls.WIDTH > len(view):
            return None
        return cls(view[offset:offset + cls.WIDTH])

    @classmethod
    def from_value(cls, value: int) -> "FixedWidthInt":
        """Encode ``value`` into a fresh buffer."""
        result = cls(bytearray(cls.WIDTH))
        result.set(value)
        return result

    @property
    def raw(self) -> bytes:
        return self._raw.tobytes()

    def get(self) -> int:
        return self.ORDER.decode(self._raw, self.SIGNED)

    def set(self, value: int) -> None:
        """Encode ``value`` into the underlying bytes, wrapping to the width."""
        bits = self.WIDTH * 8
        value &= (1 << bits) - 1
        if self.SIGNED and value >= 1 << (bits - 1):
            value -= 1 << bits
        self._raw[:] = self.ORDER.encode(value, self.WIDTH, self.SIGNED)

    def __int__(self) -> int:
        return self.get()

    __index__ = __int__

    def __eq__(self, other):
        if isinstance(other, FixedWidthInt):
            return self.get() == other.get()
        if isinstance(other, int):
            return self.get() == other
        return NotImplemented

    def __hash__(self):
        return hash(self.get())

    def __repr__(self):
        return f"{type(self).__name__}({self.get()})"

    def __str__(self):
        return str(self.get())


def int_type(width: int, signed: bool, order: Type[ByteOrder]) -> Type[FixedWidthInt]:
    """Build the integer type for a byte width, signedness and byte order."""
    name = f"{'I' if signed else 'U'}{width * 8}"
    if width > 1:
        name += "LE" if order is LittleEndian else "BE"
    return type(
        name,
        (FixedWidthInt,),
        {"WIDTH": width, "SIGNED": signed, "ORDER": order, "__slots__": ()},
    )


U8 = int_type(1, False, LittleEndian)

U16LE = int_type(2, False, LittleEndian)
U32LE = int_type(4, False, LittleEndian)
U64LE = int_type(8, False, LittleEndian)
I16LE = int_type(2, True, LittleEndian)
I32LE = int_type(4, True, LittleEndian)
I64LE = int_type(8, True, LittleEndian)

U16BE = int_type(2, False, BigEndian)
U32BE = int_type(4, False, BigEndian)
U64BE = int_type(8, False, BigEndian)
I16BE = int_type(2, True, BigEndian)
I32BE = int_type(4, True, BigEndian)
I64BE = int_type(8, True, BigEndian)
