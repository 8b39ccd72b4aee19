""" Datagram transport. A :class:`Receiver` binds a UDP port and hands back
    one datagram at a time; :func:`send` fires a single datagram at a
    listening receiver.
"""

import socket

from . import base

default_port = 7755


class Receiver(base.Receiver):
    """ Listen for datagrams on *port*, on every interface unless an
        *address* is given. Datagrams longer than *maximum* bytes are
        truncated by the operating system; there is no reassembly.
    """

    def __init__(self, port=default_port, address='', maximum=base.Receiver.maximum):
        self.port = int(port)
        self.address = address
        self.maximum = int(maximum)
        self.socket = None


    @property
    def is_open(self):
        return self.socket is not None


    def open(self):

        if self.socket is not None:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        try:
            sock.bind((self.address, self.port))
        except OSError as e:
            sock.close()
            raise base.TransportPortError('cannot bind UDP port %d: %s' % (self.port, e))

        # A port of zero asks the operating system to pick one; remember
        # what we actually got.

        self.port = sock.getsockname()[1]
        self.socket = sock


    def close(self):
        try:
            self.socket.close()
        except AttributeError:
            pass

        self.socket = None


    def recv(self):

        if self.socket is None:
            raise base.TransportReceiveError('receiver is not open')

        try:
            data, address = self.socket.recvfrom(self.maximum)
        except OSError as e:
            raise base.TransportReceiveError('recvfrom failed: ' + str(e))

        return data


# end of class Receiver



def send(payload, address='127.0.0.1', port=default_port):
    """ Send *payload* as a single datagram to *address* and *port*.
    """

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    try:
        sock.sendto(payload, (address, int(port)))
    finally:
        sock.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
