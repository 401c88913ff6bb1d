"""Exceptions raised by the networking layer."""


class NetworkException(Exception):
    """Base class for every networking error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class PacketException(NetworkException):
    """A packet could not be encoded or decoded."""


class ConnectionException(NetworkException):
    """A connection could not be established or was lost."""