"""Datagram transport: a bound socket with a background receive loop."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable, Optional, Tuple

from .errors import ConnectionException, PacketException
from .factory import create_packet
from .packet import Packet

logger = logging.getLogger(__name__)

Endpoint = Tuple[str, int]
ReceiveHandler = Callable[[Packet, Endpoint], None]
SendHandler = Callable[[Optional[OSError], int], None]

RECV_BUFFER_SIZE = 4096
_POLL_INTERVAL = 0.1


class UDP:
    """A UDP socket bound to ``host``:``port`` (0 lets the system pick one)."""

    def __init__(self, port: int = 0, host: str = "0.0.0.0") -> None:
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._socket.bind((host, port))
        except OSError as exc:
            self._socket.close()
            raise ConnectionException(f"Cannot bind UDP socket on {host}:{port}: {exc}") from exc
        self._socket.settimeout(_POLL_INTERVAL)
        self._handler: Optional[ReceiveHandler] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._lock = threading.Lock()

    @property
    def local_endpoint(self) -> Endpoint:
        """Address and port the socket is bound to."""
        return self._socket.getsockname()

    def send_data(self, packet: Packet, endpoint: Endpoint, handler: Optional[SendHandler] = None) -> None:
        """Send ``packet`` to ``endpoint``.

        ``handler`` is called with ``(error, bytes_sent)``; without one, send
        errors are logged.
        """
        try:
            data = packet.serialize()
        except PacketException as exc:
            logger.error("Failed to serialize packet: %s", exc)
            return
        try:
            sent = self._socket.sendto(data, endpoint)
        except OSError as exc:
            if handler is None:
                logger.error("Failed to send data: %s", exc)
            else:
                handler(exc, 0)
            return
        if handler is not None:
            handler(None, sent)

    def receive_data(self, handler: ReceiveHandler) -> None:
        """Deliver every incoming packet to ``handler(packet, sender)``."""
        with self._lock:
            self._handler = handler
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop.clear()
            self._thread = threading.Thread(target=self._receive_loop, daemon=True)
            self._thread.start()

    def _receive_loop(self) -> None:
        while not self._stop.is_set():
            try:
                data, sender = self._socket.recvfrom(RECV_BUFFER_SIZE)
            except TimeoutError:
                continue
            except OSError as exc:
                if not self._stop.is_set():
                    logger.error("Failed to receive data: %s", exc)
                return
            try:
                packet = create_packet(data, len(data))
            except PacketException as exc:
                logger.warning("Failed to get packet from buffer: %s", exc)
                continue
            if packet is None:
                continue
            handler = self._handler
            if handler is None:
                continue
            try:
                handler(packet, sender)
            except Exception:
                logger.exception("Packet handler failed")

    def close(self) -> None:
        """Stop receiving and release the socket."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class UDPClient(UDP):
    """A UDP socket that talks to one server."""

    def __init__(self, address: str, port: int, local_port: int = 0) -> None:
        super().__init__(local_port)
        try:
            infos = socket.getaddrinfo(address, port, socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            self.close()
            raise ConnectionException(f"Cannot resolve {address}:{port}: {exc}") from exc
        self.server_endpoint: Endpoint = infos[0][4]
        logger.info("UDPClient created with local port %s", self.local_endpoint[1])

    def send_to_server(self, packet: Packet) -> None:
        """Send ``packet`` to the server."""
        self.send_data(packet, self.server_endpoint)

    def start_receive_from_server(self, handler: ReceiveHandler) -> None:
        """Start delivering packets from the server to ``handler``."""
        self.receive_data(handler)


class UDPServer(UDP):
    """A UDP socket listening on a fixed port."""

    def __init__(self, port: int, host: str = "0.0.0.0") -> None:
        super().__init__(port, host)
        logger.info("Start UDPServer on port %s", self.local_endpoint[1])

    def start_receive(self, handler: ReceiveHandler) -> None:
        """Start delivering incoming packets to ``handler``."""
        self.receive_data(handler)