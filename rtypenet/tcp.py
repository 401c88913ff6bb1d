"""Stream transport: client, server and the shared send/receive logic."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable, List, Optional, Tuple

from .errors import ConnectionException, PacketException
from .factory import create_packet
from .packet import Packet

logger = logging.getLogger(__name__)

PacketCallback = Callable[[Packet], None]
SocketCallback = Callable[[socket.socket], None]

RECV_BUFFER_SIZE = 4096
_POLL_INTERVAL = 0.1


def _shutdown(sock: socket.socket) -> None:
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass
    sock.close()


class TCP:
    """Sends packets over connected sockets and reads them back."""

    def __init__(self) -> None:
        self._receivers: List[threading.Thread] = []

    def send_data(self, sock: socket.socket, packet: Packet) -> None:
        """Send ``packet`` over ``sock``; failures are logged."""
        try:
            data = packet.serialize()
        except PacketException as exc:
            logger.error("Failed to serialize packet: %s", exc)
            return
        try:
            sock.sendall(data)
        except OSError as exc:
            logger.error("Error when send: %s", exc)

    def receive_data(self, sock: socket.socket, callback: PacketCallback) -> None:
        """Deliver every packet read from ``sock`` to ``callback`` until it closes."""
        thread = threading.Thread(target=self._receive_loop, args=(sock, callback), daemon=True)
        self._receivers.append(thread)
        thread.start()

    @staticmethod
    def _receive_loop(sock: socket.socket, callback: PacketCallback) -> None:
        while True:
            try:
                data = sock.recv(RECV_BUFFER_SIZE)
            except OSError as exc:
                logger.error("Error when receive: %s", exc)
                return
            if not data:
                logger.error("Error when receive: connection closed")
                return
            try:
                packet = create_packet(data, len(data))
            except PacketException as exc:
                logger.warning("Failed to get packet from buffer: %s", exc)
                continue
            if packet is None:
                continue
            try:
                callback(packet)
            except Exception:
                logger.exception("Packet callback failed")

    def _join_receivers(self) -> None:
        current = threading.current_thread()
        for thread in self._receivers:
            if thread is not current:
                thread.join(timeout=1.0)
        self._receivers.clear()


class TCPClient(TCP):
    """A connection to a stream server."""

    def __init__(self, address: str, port: int) -> None:
        super().__init__()
        try:
            self._socket = socket.create_connection((address, port))
        except OSError as exc:
            raise ConnectionException(f"Failed to connect to server: {exc}") from exc
        self.server_endpoint: Tuple[str, int] = self._socket.getpeername()
        logger.info("Connected to server")

    def send_to_server(self, packet: Packet) -> None:
        """Send ``packet`` to the server."""
        self.send_data(self._socket, packet)

    def receive_from_server(self, callback: PacketCallback) -> None:
        """Deliver packets from the server to ``callback``."""
        self.receive_data(self._socket, callback)

    def close(self) -> None:
        """Close the connection."""
        _shutdown(self._socket)
        self._join_receivers()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class TCPServer(TCP):
    """Accepts connections and keeps them unless an accept callback takes them."""

    def __init__(self, port: int, host: str = "0.0.0.0") -> None:
        super().__init__()
        self._clients: List[socket.socket] = []
        self._accept_callback: Optional[SocketCallback] = None
        self._disconnect_callback: Optional[SocketCallback] = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._acceptor = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._acceptor.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            self._acceptor.bind((host, port))
            self._acceptor.listen()
        except OSError as exc:
            self._acceptor.close()
            raise ConnectionException(f"Cannot listen on {host}:{port}: {exc}") from exc
        self._acceptor.settimeout(_POLL_INTERVAL)
        logger.info("TCPServer listening on port %s", self.port)
        self._accept_thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._accept_thread.start()

    @property
    def port(self) -> int:
        """Port the server listens on."""
        return self._acceptor.getsockname()[1]

    @property
    def clients(self) -> List[socket.socket]:
        """Connections kept by the server."""
        with self._lock:
            return list(self._clients)

    def set_accept_callback(self, callback: SocketCallback) -> None:
        """Hand every new connection to ``callback`` instead of keeping it."""
        self._accept_callback = callback

    def set_disconnect_callback(self, callback: SocketCallback) -> None:
        """Call ``callback`` with each connection the server drops."""
        self._disconnect_callback = callback

    def send_to_all(self, packet: Packet) -> None:
        """Send ``packet`` to every kept connection."""
        for sock in self.clients:
            self.send_data(sock, packet)

    def _accept_loop(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._acceptor.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if not self._stop.is_set():
                    logger.error("Failed to accept connection: %s", exc)
                return
            conn.settimeout(None)
            callback = self._accept_callback
            if callback is not None:
                try:
                    callback(conn)
                except Exception:
                    logger.exception("Accept callback failed")
            else:
                with self._lock:
                    self._clients.append(conn)

    def _kill_socket(self, sock: socket.socket) -> None:
        _shutdown(sock)
        if self._disconnect_callback is not None:
            self._disconnect_callback(sock)
        with self._lock:
            if sock in self._clients:
                self._clients.remove(sock)

    def close(self) -> None:
        """Stop accepting and close every kept connection."""
        self._stop.set()
        self._accept_thread.join()
        self._acceptor.close()
        with self._lock:
            clients, self._clients = self._clients, []
        for sock in clients:
            _shutdown(sock)
        self._join_receivers()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()