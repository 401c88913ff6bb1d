"""Packets that create, show, hide, move, update and destroy entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .errors import PacketException
from .packet import Packet, PacketType

UUID_SIZE = 36
_FLOAT2 = "<ff"
_FLOAT2_SIZE = 8


def _encode_uuid(uuid: str) -> bytes:
    raw = uuid.encode("utf-8")
    if len(raw) > UUID_SIZE:
        raise PacketException(f"UUID is longer than {UUID_SIZE} bytes")
    return raw.ljust(UUID_SIZE, b"\0")


def _decode_uuid(data: bytes) -> str:
    return Packet._decode_text(Packet._slice(data, UUID_SIZE).rstrip(b"\0"))


@dataclass
class PacketEntityShow(Packet):
    """Makes a player entity visible at the given position."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ENTITYSHOW

    entity_id: int
    x: float
    y: float

    def serialize_data(self) -> bytes:
        return self._pack("<Iff", self.entity_id, self.x, self.y)

    @classmethod
    def _parse_data(cls, data, length):
        entity_id, x, y = cls._unpack("<Iff", data)
        return {"entity_id": entity_id, "x": x, "y": y}


@dataclass
class PacketEntityHide(Packet):
    """Hides a player entity."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ENTITYHIDE

    entity_id: int

    def serialize_data(self) -> bytes:
        return self._pack("<I", self.entity_id)

    @classmethod
    def _parse_data(cls, data, length):
        (entity_id,) = cls._unpack("<I", data)
        return {"entity_id": entity_id}


@dataclass
class PacketEntityCreate(Packet):
    """Creates an entity from a prefab path at the given position."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ENTITYCREATE

    entity_uuid: str
    path: str
    x: float = 0.0
    y: float = 0.0

    def serialize_data(self) -> bytes:
        return (
            _encode_uuid(self.entity_uuid)
            + self._pack(_FLOAT2, self.x, self.y)
            + self.path.encode("utf-8")
        )

    @classmethod
    def _parse_data(cls, data, length):
        entity_uuid = _decode_uuid(data)
        x, y = cls._unpack(_FLOAT2, data, UUID_SIZE)
        offset = UUID_SIZE + _FLOAT2_SIZE
        path = cls._slice(data, length - offset, offset)
        return {"entity_uuid": entity_uuid, "path": cls._decode_text(path), "x": x, "y": y}


@dataclass
class PacketEntityDestroy(Packet):
    """Destroys the entity with the given UUID."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ENTITYDESTROY

    entity_uuid: str

    def serialize_data(self) -> bytes:
        return _encode_uuid(self.entity_uuid)

    @classmethod
    def _parse_data(cls, data, length):
        return {"entity_uuid": _decode_uuid(data)}


@dataclass
class PacketEntityMove(Packet):
    """Moves the entity with the given UUID to a position and direction."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ENTITYMOVE

    entity_uuid: str
    x: float
    y: float
    x_dir: float
    y_dir: float

    def serialize_data(self) -> bytes:
        return _encode_uuid(self.entity_uuid) + self._pack(
            "<ffff", self.x, self.y, self.x_dir, self.y_dir
        )

    @classmethod
    def _parse_data(cls, data, length):
        entity_uuid = _decode_uuid(data)
        x, y, x_dir, y_dir = cls._unpack("<ffff", data, UUID_SIZE)
        return {"entity_uuid": entity_uuid, "x": x, "y": y, "x_dir": x_dir, "y_dir": y_dir}


@dataclass
class PacketControllableMove(Packet):
    """Moves a player entity, identified by its id, to a position and direction."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.CONTROLLABLEMOVE

    entity_id: int
    x: float
    y: float
    x_dir: float
    y_dir: float

    def serialize_data(self) -> bytes:
        return self._pack("<Iffff", self.entity_id, self.x, self.y, self.x_dir, self.y_dir)

    @classmethod
    def _parse_data(cls, data, length):
        entity_id, x, y, x_dir, y_dir = cls._unpack("<Iffff", data)
        return {"entity_id": entity_id, "x": x, "y": y, "x_dir": x_dir, "y_dir": y_dir}


@dataclass
class PacketEntityUpdate(Packet):
    """Replaces the components of an entity with a serialized description."""

    PACKET_TYPE: ClassVar[PacketType] = PacketType.ENTITYUPDATE

    entity_uuid: str
    components: str

    def serialize_data(self) -> bytes:
        return _encode_uuid(self.entity_uuid) + self.components.encode("utf-8")

    @classmethod
    def _parse_data(cls, data, length):
        entity_uuid = _decode_uuid(data)
        components = cls._slice(data, length - UUID_SIZE, UUID_SIZE)
        return {"entity_uuid": entity_uuid, "components": cls._decode_text(components)}