""" ZeroMQ transport. A PULL socket stands in for the datagram socket: each
    ZeroMQ message is one discrete payload, with the same size cap applied.
    ZeroMQ does reconnect and queue on the sending side, but nothing
    downstream relies on that; the sequence gate still does all the ordering.
"""

import zmq

from . import base

zmq_context = zmq.Context()


class Receiver(base.Receiver):
    """ Receive messages on a PULL socket bound to *port* on every interface,
        or on *address* if one is given.
    """

    def __init__(self, port, address='*', maximum=base.Receiver.maximum):
        self.port = int(port)
        self.address = address or '*'
        self.maximum = int(maximum)
        self.socket = None


    @property
    def is_open(self):
        return self.socket is not None


    def open(self):

        if self.socket is not None:
            return

        sock = zmq_context.socket(zmq.PULL)
        sock.setsockopt(zmq.LINGER, 0)

        # Anything larger than this would be truncated anyway. Have ZeroMQ
        # drop the connection of a peer that sends it rather than buffer it.

        sock.setsockopt(zmq.MAXMSGSIZE, 1024 * 1024)

        listen_address = 'tcp://%s:%d' % (self.address, self.port)

        try:
            if self.port == 0:
                bound = sock.bind_to_random_port('tcp://' + self.address)
            else:
                sock.bind(listen_address)
                bound = self.port
        except zmq.error.ZMQError as e:
            sock.close()
            raise base.TransportPortError('cannot bind %s: %s' % (listen_address, e))

        self.port = bound
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
            data = self.socket.recv()
        except zmq.error.ZMQError as e:
            raise base.TransportReceiveError('recv failed: ' + str(e))

        return data[:self.maximum]


# end of class Receiver



def send(payload, address='127.0.0.1', port=None, timeout=1.0):
    """ Send *payload* as a single message to the PULL socket at *address*
        and *port*. Waits up to *timeout* seconds for the message to leave.
    """

    sock = zmq_context.socket(zmq.PUSH)
    sock.setsockopt(zmq.LINGER, int(timeout * 1000))
    sock.connect('tcp://%s:%d' % (address, int(port)))

    try:
        sock.send(payload)
    finally:
        sock.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
