"""Transport interface.

This is the (small) contract that transport implementations follow. It lives
outside :mod:`udpcmd.protocol` so the protocol remains transport-agnostic.
A transport only moves discrete payloads; it makes no promise about order,
duplication, or delivery.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportPortError(TransportError):
    """The requested port could not be bound."""


class TransportReceiveError(TransportError):
    """The receive primitive failed; the transport is no longer usable."""


class Receiver(ABC):
    """Minimal contract for the receiving end of a transport."""

    maximum = 1024

    @abstractmethod
    def open(self) -> None:
        """Bind the underlying socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying socket."""

    @abstractmethod
    def recv(self) -> bytes:
        """Block until the next payload arrives and return it, truncated to
        :attr:`maximum` bytes."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently bound."""
        return False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
