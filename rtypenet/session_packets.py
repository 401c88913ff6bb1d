"""Packets for connection handshake, keep-alive, acknowledgement and input."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .packet import Packet, PacketType


@dataclass
class PacketHelloServer(Packet):
    """Sent by a client to join: runtime version and project name."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.HELLOSERVER

    version: float
    project_name: str

    def serialize_data(self) -> bytes:
        return self._pack("<f", self.version) + self.project_name.encode("utf-8")

    @classmethod
    def _parse_data(cls, data, length):
        (version,) = cls._unpack("<f", data)
        name = data[4:].split(b"\0", 1)[0]
        return {"version": version, "project_name": cls._decode_text(name)}


@dataclass
class PacketHelloClient(Packet):
    """Server answer to a hello: the entity assigned to the client."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.HELLOCLIENT

    entity_id: int

    def serialize_data(self) -> bytes:
        return self._pack("<I", self.entity_id)

    @classmethod
    def _parse_data(cls, data, length):
        (entity_id,) = cls._unpack("<I", data)
        return {"entity_id": entity_id}


@dataclass
class PacketByeServer(Packet):
    """Sent by a client that leaves."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.BYESERVER

    def serialize_data(self) -> bytes:
        return b""


@dataclass
class PacketPing(Packet):
    """Keep-alive exchanged between client and server."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.PING

    def serialize_data(self) -> bytes:
        return b""


@dataclass
class PacketACK(Packet):
    """Acknowledges a packet identified by its type and timestamp."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ACK

    packet_type: int
    packet_timestamp: int

    def serialize_data(self) -> bytes:
        return self._pack("<QB", self.packet_timestamp, self.packet_type)

    @classmethod
    def _parse_data(cls, data, length):
        packet_timestamp, packet_type = cls._unpack("<QB", data)
        return {"packet_type": packet_type, "packet_timestamp": packet_timestamp}


@dataclass
class PacketKickClient(Packet):
    """Tells a client it is disconnected, with the reason."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.KICKCLIENT

    reason: str

    def serialize_data(self) -> bytes:
        return self.reason.encode("utf-8")

    @classmethod
    def _parse_data(cls, data, length):
        return {"reason": cls._decode_text(cls._slice(data, length))}


@dataclass
class PacketClientInput(Packet):
    """A named input sent by a client to the server."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.CLIENTINPUT

    input: str

    def serialize_data(self) -> bytes:
        return self.input.encode("utf-8")

    @classmethod
    def _parse_data(cls, data, length):
        return {"input": cls._decode_text(cls._slice(data, length))}