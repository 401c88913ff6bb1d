import queue
import socket

import pytest

from rtypenet.entity_packets import PacketEntityShow
from rtypenet.errors import ConnectionException
from rtypenet.session_packets import PacketClientInput, PacketHelloClient, PacketKickClient
from rtypenet.udp import UDP, UDPClient, UDPServer


@pytest.fixture
def server():
    srv = UDPServer(0, host="127.0.0.1")
    yield srv
    srv.close()


@pytest.fixture
def client(server):
    cli = UDPClient("127.0.0.1", server.local_endpoint[1])
    yield cli
    cli.close()


def test_client_to_server_round_trip(server, client):
    received = queue.Queue()
    server.start_receive(lambda packet, endpoint: received.put((packet, endpoint)))
    sent = PacketEntityShow(entity_id=7, x=1.5, y=-2.25)
    client.send_to_server(sent)
    packet, endpoint = received.get(timeout=2)
    assert packet == sent
    assert endpoint[1] == client.local_endpoint[1]


def test_server_replies_to_sender(server, client):
    server.start_receive(lambda packet, endpoint: server.send_data(packet, endpoint))
    replies = queue.Queue()
    client.start_receive_from_server(lambda packet, endpoint: replies.put(packet))
    sent = PacketKickClient("Server is full")
    client.send_to_server(sent)
    reply = replies.get(timeout=2)
    assert reply == sent
    assert reply.reason == "Server is full"


def test_send_handler_gets_byte_count(server):
    results = []
    sent = PacketClientInput("fire")
    with UDP(0, "127.0.0.1") as sender:
        sender.send_data(sent, server.local_endpoint, lambda err, n: results.append((err, n)))
    assert results == [(None, len(sent.serialize()))]


def test_undecodable_datagrams_are_skipped(server):
    received = queue.Queue()
    server.start_receive(lambda packet, endpoint: received.put(packet))
    good = PacketClientInput("up")
    unknown = bytearray(good.serialize())
    unknown[4] = 200
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as raw:
        raw.sendto(b"\x01\x02", server.local_endpoint)
        raw.sendto(bytes(unknown), server.local_endpoint)
        raw.sendto(good.serialize(), server.local_endpoint)
    assert received.get(timeout=2) == good
    with pytest.raises(queue.Empty):
        received.get(timeout=0.3)


def test_unserializable_packet_is_not_sent(server, client):
    received = queue.Queue()
    server.start_receive(lambda packet, endpoint: received.put(packet))
    results = []
    client.send_data(PacketHelloClient(entity_id=-1), client.server_endpoint,
                     lambda err, n: results.append(n))
    assert results == []
    with pytest.raises(queue.Empty):
        received.get(timeout=0.3)


def test_bind_conflict_raises():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as taken:
        taken.bind(("127.0.0.1", 0))
        port = taken.getsockname()[1]
        with pytest.raises(ConnectionException):
            UDPServer(port, host="127.0.0.1")


def test_unresolvable_server_raises():
    with pytest.raises(ConnectionException):
        UDPClient("host.invalid", 4242)