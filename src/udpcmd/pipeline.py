""" The command pipeline: decode a payload, check its sequence against the
    gate, run the command, and record the outcome. :func:`Pipeline.process`
    returns one of three dispositions for every payload it is handed.
"""

import logging

from . import audit
from . import gate as gatemodule
from .protocol import frame

logger = logging.getLogger(__name__)

DUPLICATE_OR_STALE = 'duplicate or stale sequence'


class Disposition:
    """ Base class for the terminal outcome of processing one payload.
    """

    executed = False
    rejected = False
    malformed = False

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.detail())


    def detail(self):
        raise NotImplementedError


class Executed(Disposition):
    """ The payload was admitted and run; *record* is the
        :class:`udpcmd.audit.Record` handed to the audit sink.
    """

    executed = True

    def __init__(self, record):
        self.record = record

    def detail(self):
        return self.record


class Rejected(Disposition):
    """ The payload decoded cleanly but its sequence was not newer than the
        watermark. Nothing was run or recorded.
    """

    rejected = True

    def __init__(self, reason=DUPLICATE_OR_STALE):
        self.reason = reason

    def detail(self):
        return self.reason


class Malformed(Disposition):
    """ The payload could not be decoded; *error* is the
        :class:`udpcmd.protocol.frame.MalformedFrame` instance describing why.
    """

    malformed = True

    def __init__(self, error):
        self.error = error

    def detail(self):
        return self.error



class Pipeline:
    """ Process payloads one at a time. The *executor* is a
        :class:`udpcmd.execute.Executor` and the *sink* is a
        :class:`udpcmd.audit.Sink`; the *gate* is created here if one is not
        provided, and is owned exclusively by this instance.

        :func:`process` is safe to call from multiple threads: admission is
        atomic in the gate, and every admitted sequence is run exactly once.
    """

    def __init__(self, executor, sink, gate=None,
                 delimiter=frame.default_delimiter,
                 end_marker=frame.default_end_marker):

        frame.check_literals(delimiter, end_marker)

        if gate is None:
            gate = gatemodule.Gate()

        self.executor = executor
        self.sink = sink
        self.gate = gate
        self.delimiter = delimiter
        self.end_marker = end_marker


    def decode(self, raw):
        return frame.decode(raw, self.delimiter, self.end_marker)


    def process(self, raw):
        """ Take one *raw* payload through decode, admission, execution,
            and audit. Returns an :class:`Executed`, :class:`Rejected`, or
            :class:`Malformed` instance.
        """

        try:
            decoded = self.decode(raw)
        except frame.MalformedFrame as e:
            logger.debug("discarding malformed payload: %s", e)
            return Malformed(e)

        if self.gate.admit(decoded.sequence) == False:
            logger.debug("rejecting stale or duplicate sequence %d", decoded.sequence)
            return Rejected(DUPLICATE_OR_STALE)

        logger.debug("running sequence %d: %r", decoded.sequence, decoded.command)
        output = self.executor.run(decoded.command)

        record = audit.Record(decoded.sequence, decoded.command, output)

        # The sink is not supposed to raise; if it does anyway, the command
        # has already run and the caller still needs to hear about it.

        try:
            self.sink.append(record)
        except Exception:
            logger.exception("audit sink failed for sequence %d", decoded.sequence)

        return Executed(record)


# end of class Pipeline


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
