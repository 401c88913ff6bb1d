import struct

import pytest

from rtypenet.errors import PacketException
from rtypenet.packet import HEADER_SIZE, PacketType, parse_header
from rtypenet.session_packets import (
    PacketACK,
    PacketByeServer,
    PacketClientInput,
    PacketHelloClient,
    PacketHelloServer,
    PacketKickClient,
    PacketPing,
)


def _round_trip(packet):
    buf = packet.serialize()
    return type(packet).from_buffer(buf, len(buf))


@pytest.mark.parametrize(
    "packet",
    [
        PacketHelloServer(1.0, "rtype", timestamp=10),
        PacketHelloClient(42, timestamp=11),
        PacketByeServer(timestamp=12),
        PacketPing(timestamp=13),
        PacketACK(PacketType.ENTITYSHOW, 987654321, timestamp=14),
        PacketKickClient("Server is full", timestamp=15),
        PacketClientInput("shoot", timestamp=16),
    ],
)
def test_round_trip(packet):
    decoded = _round_trip(packet)
    assert decoded == packet
    assert decoded.type == packet.type
    assert parse_header(packet.serialize()).type == packet.PACKET_TYPE


def test_hello_client_wire_bytes():
    buf = PacketHelloClient(42, timestamp=0).serialize()
    assert buf == (
        b"\x13\x00\x00\x00" b"\x01" + b"\x00" * 8 + b"\x04\x00" b"\x2a\x00\x00\x00"
    )


def test_ack_payload_layout():
    data = PacketACK(PacketType.HELLOCLIENT, 99).serialize_data()
    assert data == (99).to_bytes(8, "little") + bytes([PacketType.HELLOCLIENT])


def test_empty_payloads():
    assert PacketPing().serialize_data() == b""
    assert PacketByeServer().serialize_data() == b""
    assert len(PacketPing().serialize()) == HEADER_SIZE


def test_types():
    assert PacketPing().type is PacketType.PING
    assert PacketByeServer().type is PacketType.BYESERVER
    assert PacketKickClient("x").type is PacketType.KICKCLIENT


def test_hello_server_name_stops_at_nul():
    payload = struct.pack("<f", 1.0) + b"game\x00junk"
    header = struct.pack("<IBQH", HEADER_SIZE + len(payload), PacketType.HELLOSERVER, 5, len(payload))
    buf = header + payload
    decoded = PacketHelloServer.from_buffer(buf, len(buf))
    assert decoded.version == 1.0
    assert decoded.project_name == "game"
    assert decoded.timestamp == 5


def test_hello_server_data_size():
    packet = PacketHelloServer(0.5, "abc")
    assert packet.data_size == 4 + len("abc")


def test_unicode_reason_round_trip():
    packet = PacketKickClient("Version invalide é")
    assert _round_trip(packet).reason == "Version invalide é"


def test_client_input_truncated():
    buf = PacketClientInput("up").serialize()
    with pytest.raises(PacketException):
        PacketClientInput.from_buffer(buf, len(buf) + 5)


def test_hello_client_missing_payload():
    buf = PacketHelloClient(7).serialize()[:HEADER_SIZE]
    with pytest.raises(PacketException):
        PacketHelloClient.from_buffer(buf, len(buf))


def test_entity_id_out_of_range():
    with pytest.raises(PacketException):
        PacketHelloClient(-1).serialize()


def test_ack_fields_survive_round_trip():
    decoded = _round_trip(PacketACK(PacketType.ENTITYDESTROY, 123456789012))
    assert decoded.packet_type == PacketType.ENTITYDESTROY
    assert decoded.packet_timestamp == 123456789012