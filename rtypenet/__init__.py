"""Game packet protocol, UDP/TCP transports, and physics and animation systems."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "packet",
    "session_packets",
    "entity_packets",
    "factory",
    "udp",
    "tcp",
    "systems",
]