"""Transport layer implementations."""

from .base import (
    TransportError,
    TransportPortError,
    TransportReceiveError,
)

from . import udp

backends = ('udp', 'zmq')


def backend(name):
    """ Return the transport module for *name*. The ZeroMQ backend is only
        imported when asked for.
    """

    if name == 'udp':
        return udp

    if name == 'zmq':
        from . import zmq
        return zmq

    raise ValueError(f"unknown transport backend: {name!r}")


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
