""" Command-line tool to send a single framed command to a udpcmd daemon.
"""

import argparse
import logging
import sys
import time

from . import config
from . import transport
from .protocol import frame

logger = logging.getLogger(__name__)


def send(command, sequence=None, address='127.0.0.1', port=None, configuration=None):
    """ Encode *command* with *sequence* and send it to the daemon at
        *address*. Framing literals, the port (unless one is given), and the
        transport backend come from *configuration*. If no *sequence* is
        given the current time in milliseconds is used; the daemon only cares
        that each value is larger than the last. Returns the sequence sent.
    """

    if configuration is None:
        configuration = config.Configuration()

    if sequence is None:
        sequence = int(time.time() * 1000)

    if port is None:
        port = configuration.port

    payload = frame.encode(sequence, command,
                           configuration.delimiter, configuration.end_marker)

    if len(payload) > configuration.maximum:
        logger.warning("payload is %d bytes, the daemon will truncate it to %d",
                       len(payload), configuration.maximum)

    backend = transport.backend(configuration.transport)
    backend.send(payload, address, port)

    return sequence



def main(argv=None):
    """ Entry point for ``udpcmd-send``. Returns the process exit status.
    """

    parser = argparse.ArgumentParser(
        description='Send one command to a udpcmd daemon.')

    parser.add_argument('command', nargs='+',
                        help='command to run; multiple words are joined with spaces')
    parser.add_argument('-H', '--host', default='127.0.0.1',
                        help='daemon address (default: 127.0.0.1)')
    parser.add_argument('-p', '--port', type=int, default=None,
                        help='daemon port (default: from the configuration)')
    parser.add_argument('-s', '--sequence', type=int, default=None,
                        help='sequence value (default: milliseconds since the epoch)')
    parser.add_argument('--config', dest='filename', default=None,
                        help='JSON configuration file')

    parsed = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, stream=sys.stderr,
                        format='%(name)s %(levelname)s: %(message)s')

    command = ' '.join(parsed.command)

    try:
        configuration = config.load(parsed.filename)
        sequence = send(command, parsed.sequence, parsed.host, parsed.port, configuration)
    except (OSError, ValueError, TypeError) as e:
        logger.error("Error: %s", e)
        return 1

    print(sequence)
    return 0


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
