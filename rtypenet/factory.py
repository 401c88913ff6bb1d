"""Decoding raw datagrams into typed packets."""

from __future__ import annotations

import logging

from .entity_packets import (
    PacketControllableMove,
    PacketEntityCreate,
    PacketEntityDestroy,
    PacketEntityHide,
    PacketEntityMove,
    PacketEntityShow,
    PacketEntityUpdate,
)
from .packet import Packet, packet_size_from_buffer, packet_type_from_buffer
from .session_packets import (
    PacketACK,
    PacketByeServer,
    PacketClientInput,
    PacketHelloClient,
    PacketHelloServer,
    PacketKickClient,
    PacketPing,
)

logger = logging.getLogger(__name__)

_PACKET_CLASSES: dict[int, type[Packet]] = {
    int(cls.PACKET_TYPE): cls
    for cls in (
        PacketHelloServer,
        PacketHelloClient,
        PacketByeServer,
        PacketPing,
        PacketEntityShow,
        PacketEntityHide,
        PacketEntityMove,
        PacketACK,
        PacketKickClient,
        PacketEntityCreate,
        PacketEntityDestroy,
        PacketControllableMove,
        PacketClientInput,
        PacketEntityUpdate,
    )
}


def create_packet(buffer, bytes_received: int) -> Packet | None:
    """Decode a packet from ``buffer``.

    Returns None when fewer bytes were received than the header announces,
    or when the packet type is unknown. Raises PacketException when the
    buffer cannot be read.
    """
    size = packet_size_from_buffer(buffer)
    if size > bytes_received:
        return None
    packet_type = packet_type_from_buffer(buffer)
    cls = _PACKET_CLASSES.get(packet_type)
    if cls is None:
        logger.info("Unknown packet type: %s", packet_type)
        return None
    return cls.from_buffer(buffer, size)