"""Packet header layout and the base class shared by all packets."""

from __future__ import annotations

import abc
import enum
import struct
import time
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .errors import PacketException

HEADER_FORMAT = "<IBQH"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


class PacketType(enum.IntEnum):
    """Identifier carried in the type byte of every packet."""

    NONE = -1
    HELLOSERVER = 0
    HELLOCLIENT = 1
    BYESERVER = 2
    PING = 3
    ENTITYSHOW = 4
    ENTITYHIDE = 5
    ENTITYCREATE = 6
    ENTITYDESTROY = 7
    ENTITYMOVE = 8
    CONTROLLABLEMOVE = 9
    ENTITYUPDATE = 10
    CLIENTINPUT = 11
    ACK = 12
    KICKCLIENT = 13
    ALL = 14


@dataclass(frozen=True)
class PacketHeader:
    """Decoded fixed-size header: total size, type, timestamp and payload size."""

    size: int
    type: int
    timestamp: int
    data_size: int


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def parse_header(buffer) -> PacketHeader:
    """Decode the header at the start of ``buffer``."""
    if len(buffer) < HEADER_SIZE:
        raise PacketException("Packet is too small to be read")
    return PacketHeader(*struct.unpack_from(HEADER_FORMAT, buffer))


def packet_size_from_buffer(buffer) -> int:
    """Return the total packet length stored in the header."""
    if len(buffer) < 4:
        raise PacketException("Packet is too small to be read")
    (size,) = struct.unpack_from("<i", buffer)
    if size < 0:
        raise PacketException("Packet size is negative")
    return size


def packet_type_from_buffer(buffer) -> int:
    """Return the packet type byte stored in the header."""
    if len(buffer) < 5:
        raise PacketException("Packet is too small to be read")
    return buffer[4] if not isinstance(buffer, memoryview) else buffer.tobytes()[4]


@dataclass
class Packet(abc.ABC):
    """A network packet: a fixed header followed by a type-specific payload."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.NONE

    timestamp: int = field(default_factory=_now_ms, kw_only=True)
    size: int = field(default=0, kw_only=True, compare=False)

    @property
    def type(self) -> PacketType:
        return self.PACKET_TYPE

    @property
    def data_size(self) -> int:
        return len(self.serialize_data())

    def serialize(self) -> bytes:
        """Encode header and payload."""
        data = self.serialize_data()
        return self._encode_header(len(data)) + data

    def serialize_header(self) -> bytes:
        """Encode the header alone."""
        return self._encode_header(self.data_size)

    @abc.abstractmethod
    def serialize_data(self) -> bytes:
        """Encode the payload that follows the header."""

    @classmethod
    def from_buffer(cls, buffer, size: int) -> Packet:
        """Decode a packet of total length ``size`` from raw bytes."""
        header = parse_header(buffer)
        data = bytes(buffer[HEADER_SIZE:])
        fields = cls._parse_data(data, size - HEADER_SIZE)
        return cls(**fields, timestamp=header.timestamp, size=size)

    @classmethod
    def _parse_data(cls, data: bytes, length: int) -> dict[str, Any]:
        return {}

    def _encode_header(self, data_size: int) -> bytes:
        return self._pack(
            HEADER_FORMAT, HEADER_SIZE + data_size, int(self.type), self.timestamp, data_size
        )

    @staticmethod
    def _pack(fmt: str, *values) -> bytes:
        try:
            return struct.pack(fmt, *values)
        except (struct.error, OverflowError) as exc:
            raise PacketException(f"Cannot encode packet field: {exc}") from exc

    @staticmethod
    def _unpack(fmt: str, data: bytes, offset: int = 0) -> tuple:
        try:
            return struct.unpack_from(fmt, data, offset)
        except struct.error as exc:
            raise PacketException("Packet is too small to be read") from exc

    @staticmethod
    def _slice(data: bytes, length: int, offset: int = 0) -> bytes:
        if length < 0 or offset + length > len(data):
            raise PacketException("Packet payload is truncated")
        return data[offset:offset + length]

    @staticmethod
    def _decode_text(raw: bytes) -> str:
        return raw.decode("utf-8", errors="replace")