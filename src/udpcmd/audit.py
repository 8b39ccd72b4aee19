""" The audit trail. Every executed command produces one :class:`Record`,
    which is handed to a :class:`Sink`; the :class:`Log` sink appends a
    human readable rendition of each record to a file.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod

from .protocol import frame

logger = logging.getLogger(__name__)

default_path = '/tmp/command_executor.log'
separator = '====='


class Record:
    """ The outcome of one executed command: the *sequence* it was admitted
        under, the *command* text as decoded, and the captured *output*.
        Instances are immutable.
    """

    __slots__ = ('sequence', 'command', 'output')

    def __init__(self, sequence, command, output):
        object.__setattr__(self, 'sequence', sequence)
        object.__setattr__(self, 'command', command)
        object.__setattr__(self, 'output', output)


    def __setattr__(self, name, value):
        raise AttributeError('Record instances are immutable')


    def __delattr__(self, name):
        raise AttributeError('Record instances are immutable')


    def __eq__(self, other):
        if isinstance(other, Record):
            return tuple(self) == tuple(other)
        return NotImplemented


    def __hash__(self):
        return hash(tuple(self))


    def __iter__(self):
        return iter((self.sequence, self.command, self.output))


    def __repr__(self):
        return 'Record(%d, %r, %r)' % (self.sequence, self.command, self.output)


# end of class Record



def format(record):
    """ Return the text block written to the audit log for *record*.
    """

    lines = list()
    lines.append(separator)
    lines.append('Timestamp: ' + str(record.sequence))
    lines.append('Command: ' + record.command)
    lines.append('Output:')
    lines.append(record.output)
    lines.append(separator)
    lines.append('')

    return '\n'.join(lines)



class Sink(ABC):
    """ Minimal contract for an audit destination. Implementations must not
        raise; a record that cannot be stored is dropped.
    """

    @abstractmethod
    def append(self, record: Record) -> None:
        """ Store *record*.
        """


class Log(Sink):
    """ Append records to the file at *path*, never truncating what is
        already there. The file is opened for each record, so rotating or
        removing it while the daemon runs is harmless.

        If the file cannot be opened or written the record is silently
        dropped; there is no retry.
    """

    def __init__(self, path=default_path):
        self.path = path
        self.lock = threading.Lock()


    def append(self, record: Record) -> None:

        text = format(record)

        # Holding the lock across the whole write keeps records from
        # different worker threads from interleaving.

        with self.lock:
            try:
                with open(self.path, 'a', encoding=frame.encoding, errors=frame.errors) as log:
                    log.write(text)
            except OSError as e:
                logger.debug("audit record %d dropped: %s", record.sequence, e)


# end of class Log


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
