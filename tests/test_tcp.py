import queue
import socket
import time

import pytest

from rtypenet.entity_packets import PacketEntityUpdate
from rtypenet.errors import ConnectionException
from rtypenet.session_packets import PacketClientInput, PacketKickClient
from rtypenet.tcp import TCPClient, TCPServer


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def server():
    srv = TCPServer(0, host="127.0.0.1")
    yield srv
    srv.close()


def test_server_broadcasts_to_kept_clients(server):
    with TCPClient("127.0.0.1", server.port) as client:
        assert _wait_for(lambda: len(server.clients) == 1)
        received = queue.Queue()
        client.receive_from_server(received.put)
        sent = PacketKickClient("Timeout")
        server.send_to_all(sent)
        packet = received.get(timeout=2)
        assert packet == sent
        assert packet.reason == "Timeout"


def test_accept_callback_takes_connection(server):
    received = queue.Queue()
    server.set_accept_callback(lambda sock: server.receive_data(sock, received.put))
    with TCPClient("127.0.0.1", server.port) as client:
        sent = PacketEntityUpdate(entity_uuid="entity-1", components='{"components": []}')
        client.send_to_server(sent)
        packet = received.get(timeout=2)
        assert packet == sent
        assert server.clients == []


def test_client_reports_server_endpoint(server):
    with TCPClient("127.0.0.1", server.port) as client:
        assert client.server_endpoint == ("127.0.0.1", server.port)


def test_close_drops_clients():
    srv = TCPServer(0, host="127.0.0.1")
    with TCPClient("127.0.0.1", srv.port) as client:
        assert _wait_for(lambda: len(srv.clients) == 1)
        srv.close()
        assert srv.clients == []
        client.send_to_server(PacketClientInput("down"))


def test_connection_refused_raises():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
    with pytest.raises(ConnectionException):
        TCPClient("127.0.0.1", port)