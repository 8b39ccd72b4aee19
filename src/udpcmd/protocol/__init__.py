""" The udpcmd wire protocol. A frame is a single datagram of text::

        <sequence><delimiter><command><end marker>

    The delimiter and end marker are literal substrings, ``::`` and
    ``#END#`` by default. There is no escaping; a command containing the end
    marker is cut short at the first occurrence of it.

    The protocol layer does not depend on any transport implementation.
"""

from . import frame

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
