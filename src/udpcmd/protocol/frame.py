""" Encoding and decoding of individual udpcmd frames. Decoding is a pure
    function: any byte sequence either yields a :class:`Frame` or raises
    one of the :class:`MalformedFrame` subclasses defined here.
"""

import re

default_delimiter = '::'
default_end_marker = '#END#'

# Frames are text. Bytes that are not valid UTF-8 are carried through as
# lone surrogates, so that they reach the shell and the audit log unchanged.

encoding = 'utf-8'
errors = 'surrogateescape'

minimum_sequence = -2 ** 63
maximum_sequence = 2 ** 63 - 1

_sequence_pattern = re.compile(r'[+-]?[0-9]+', re.ASCII)
_trailing = '\r\n '


class MalformedFrame(ValueError):
    """ Base class for any payload that cannot be decoded as a frame.
    """

    kind = 'malformed'


class NoDelimiter(MalformedFrame):
    kind = 'no delimiter'


class NoEndMarker(MalformedFrame):
    kind = 'no end marker'


class InvalidSequence(MalformedFrame):
    kind = 'invalid sequence'



class Frame:
    """ One decoded (*sequence*, *command*) pair. The *sequence* is an
        opaque, totally ordered integer; nothing here assumes it is a
        timestamp. The *command* never has trailing carriage return, line
        feed, or space characters.
    """

    __slots__ = ('sequence', 'command')

    def __init__(self, sequence, command):
        self.sequence = sequence
        self.command = command


    def __eq__(self, other):
        if isinstance(other, Frame):
            return self.sequence == other.sequence and self.command == other.command
        return NotImplemented


    def __hash__(self):
        return hash((self.sequence, self.command))


    def __repr__(self):
        return 'Frame(%d, %r)' % (self.sequence, self.command)


# end of class Frame



def check_literals(delimiter, end_marker):
    """ Raise ValueError if either framing literal is unusable.
    """

    if not isinstance(delimiter, str) or delimiter == '':
        raise ValueError('the delimiter must be a non-empty string')

    if not isinstance(end_marker, str) or end_marker == '':
        raise ValueError('the end marker must be a non-empty string')



def decode(raw, delimiter=default_delimiter, end_marker=default_end_marker):
    """ Parse the *raw* bytes of a single datagram and return a
        :class:`Frame`. The first occurrence of the *delimiter* separates the
        sequence from the command; the first occurrence of the *end_marker*
        after the delimiter terminates the command. Anything after the end
        marker is ignored.
    """

    text = raw.decode(encoding, errors)

    delimiter_at = text.find(delimiter)
    if delimiter_at == -1:
        raise NoDelimiter('no %r delimiter in payload' % (delimiter))

    command_at = delimiter_at + len(delimiter)
    end_at = text.find(end_marker, command_at)
    if end_at == -1:
        raise NoEndMarker('no %r end marker after the delimiter' % (end_marker))

    sequence = parse_sequence(text[:delimiter_at])
    command = text[command_at:end_at].rstrip(_trailing)

    return Frame(sequence, command)



def encode(sequence, command, delimiter=default_delimiter, end_marker=default_end_marker):
    """ Return the bytes for a frame carrying *sequence* and *command*. A
        command containing the *end_marker* is refused, since the receiving
        side would truncate it; likewise for a sequence that does not fit in
        a signed 64-bit integer.
    """

    if isinstance(sequence, bool) or not isinstance(sequence, int):
        raise TypeError('the sequence must be an integer')

    if sequence < minimum_sequence or sequence > maximum_sequence:
        raise ValueError('sequence out of 64-bit range: ' + str(sequence))

    if end_marker in command:
        raise ValueError('the command cannot contain the end marker %r' % (end_marker))

    text = str(sequence) + delimiter + command + end_marker
    return text.encode(encoding, errors)



def parse_sequence(text):
    """ Strict base-10 parse of a sequence field: an optional sign followed by
        ASCII digits, with nothing before or after.
    """

    if _sequence_pattern.fullmatch(text) is None:
        raise InvalidSequence('sequence is not an integer: %r' % (text))

    sequence = int(text)

    if sequence < minimum_sequence or sequence > maximum_sequence:
        raise InvalidSequence('sequence out of 64-bit range: ' + text)

    return sequence


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
