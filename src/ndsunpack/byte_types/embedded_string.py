"""Strings embedded in fixed-size byte fields.

Two flavours:
  - EmbeddedString: null-padded, the content ends at the first zero byte
    (or fills the whole capacity when there is none).
  - DynamicEmbeddedString: explicit length, binary safe, used for FNT names.

Neither assumes an encoding. ``as_str()`` only succeeds for valid UTF-8,
``as_str_lossy()`` always does, and ``str()`` falls back to lowercase hex of
the raw content, since header fields like the title are ASCII-like but not
guaranteed to be valid text.
"""

from typing import Optional

from .int_types import Buffer


class _EmbeddedStringCommon:
    __slots__ = ()

    def __len__(self) -> int:
        raise NotImplementedError

    def raw_data(self) -> Buffer:
        raise NotImplementedError

    @property
    def capacity(self) -> int:
        return len(self.raw_data())

    def data(self) -> bytes:
        """Content bytes, never the padding."""
        return bytes(self.raw_data()[: len(self)])

    def as_str(self) -> Optional[str]:
        try:
            return self.data().decode("utf-8")
        except UnicodeDecodeError:
            return None

    def as_str_lossy(self) -> str:
        return self.data().decode("utf-8", errors="replace")

    def __str__(self):
        text = self.as_str()
        if text is not None:
            return text
        return self.data().hex()

    def __repr__(self):
        return repr(str(self))

    def __eq__(self, other):
        if isinstance(other, _EmbeddedStringCommon):
            return self.data() == other.data()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.data() == bytes(other)
        return NotImplemented

    def __hash__(self):
        return hash(self.data())


class EmbeddedString(_EmbeddedStringCommon):
    """Null-padded string; the capacity is the size of the wrapped field."""

    __slots__ = ("_raw",)

    def __init__(self, raw: Buffer):
        self._raw = memoryview(raw)

    @classmethod
    def from_slice(cls, data: Buffer, capacity: int) -> Optional["EmbeddedString"]:
        """Copy ``data`` into a zeroed buffer of ``capacity`` bytes.

        Returns None when ``data`` does not fit.
        """
        length = len(data)
        if length > capacity:
            return None
        buffer = bytearray(capacity)
        buffer[:length] = data
        return cls(buffer)

    def raw_data(self) -> memoryview:
        return self._raw

    def __len__(self) -> int:
        index = self._raw.tobytes().find(b"\x00")
        return len(self._raw) if index < 0 else index


class DynamicEmbeddedString(_EmbeddedStringCommon):
    """Fixed-capacity buffer plus an explicit content length."""

    __slots__ = ("_buffer", "_length")

    def __init__(self, buffer: Buffer, length: int):
        if not 0 <= length <= len(buffer):
            raise ValueError(f"length {length} outside capacity {len(buffer)}")
        self._buffer = bytes(buffer)
        self._length = length

    @classmethod
    def from_slice(cls, data: Buffer, capacity: int) -> Optional["DynamicEmbeddedString"]:
        length = len(data)
        if length > capacity:
            return None
        buffer = bytearray(capacity)
        buffer[:length] = data
        return cls(buffer, length)

    def raw_data(self) -> bytes:
        return self._buffer

    def __len__(self) -> int:
        return self._length
