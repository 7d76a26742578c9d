"""Bounds-checked overlays of fixed-size records on a byte buffer.

A ``StructView`` subclass declares ``SIZE`` and its fields as descriptors
with byte offsets. Constructing a view checks the length once; after that
every field read is a slice of a ``memoryview`` of exactly the right size,
so nothing is copied and nothing depends on alignment.
"""

from typing import Iterator, List, Optional, Tuple, Type

from .embedded_string import EmbeddedString
from .int_types import Buffer, FixedWidthInt


def get_range(data: Buffer, start: int, end: int) -> Optional[memoryview]:
    """Zero-copy ``data[start:end]``, or None if the range is not inside ``data``."""
    view = memoryview(data)
    if start < 0 or start > end or end > len(view):
        return None
    return view[start:end]


class _Field:
    size = 0

    def __init__(self, offset: int, hidden: bool = False):
        self.offset = offset
        self.hidden = hidden
        self.name = ""

    def __set_name__(self, owner, name):
        self.name = name

    def _slice(self, obj) -> memoryview:
        return obj._raw[self.offset:self.offset + self.size]


class IntField(_Field):
    """Integer field, read as a plain int."""

    def __init__(self, offset: int, kind: Type[FixedWidthInt], hidden: bool = False):
        super().__init__(offset, hidden)
        self.kind = kind
        self.size = kind.WIDTH

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        return self.kind(self._slice(obj)).get()


class StringField(_Field):
    """Null-padded string field of a fixed capacity."""

    def __init__(self, offset: int, capacity: int, hidden: bool = False):
        super().__init__(offset, hidden)
        self.size = capacity

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        return EmbeddedString(self._slice(obj))


class BytesField(_Field):
    """Opaque byte run, returned as a memoryview."""

    def __init__(self, offset: int, size: int, hidden: bool = False):
        super().__init__(offset, hidden)
        self.size = size

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        return self._slice(obj)


class StructField(_Field):
    """Nested record."""

    def __init__(self, offset: int, kind: Type["StructView"], hidden: bool = False):
        super().__init__(offset, hidden)
        self.kind = kind
        self.size = kind.SIZE

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        return self.kind(self._slice(obj))


class StructView:
    """Read-only overlay of a ``SIZE``-byte record."""

    SIZE = 0

    __slots__ = ("_raw",)

    def __init__(self, raw: Buffer):
        raw = memoryview(raw)
        if len(raw) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} needs exactly {self.SIZE} bytes, got {len(raw)}"
            )
        self._raw = raw

    @classmethod
    def from_prefix(cls, data: Buffer, offset: int = 0):
        """View the record at ``offset``, or None if the buffer is too short."""
        raw = get_range(data, offset, offset + cls.SIZE)
        if raw is None:
            return None
        return cls(raw)

    @classmethod
    def array_from_prefix(cls, data: Buffer, count: int, offset: int = 0) -> Optional[List]:
        """View ``count`` consecutive records starting at ``offset``."""
        raw = get_range(data, offset, offset + count * cls.SIZE)
        if raw is None:
            return None
        return [cls(raw[i * cls.SIZE:(i + 1) * cls.SIZE]) for i in range(count)]

    @classmethod
    def fields(cls) -> Iterator[Tuple[str, _Field]]:
        """Public fields in offset order."""
        found = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, _Field):
                    found[name] = value
        for name, value in sorted(found.items(), key=lambda item: item[1].offset):
            if not value.hidden and not name.startswith("_"):
                yield name, value

    @property
    def raw(self) -> memoryview:
        return self._raw

    def to_bytes(self) -> bytes:
        return self._raw.tobytes()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        parts = ", ".join(f"{name}={getattr(self, name)!r}" for name, _ in self.fields())
        return f"{type(self).__name__}({parts})"
