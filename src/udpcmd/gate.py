""" The anti-replay gate. A :class:`Gate` remembers the highest sequence
    value it has admitted, and only admits values strictly greater than that.
"""

import threading

sentinel = -1


class Gate:
    """ Admit or reject candidate sequence values. The watermark starts at
        *initial*, which must be lower than any sequence value the sender
        will legitimately use; the default of -1 admits zero and anything
        above it on a fresh gate.

        The watermark only ever increases, and is never reset for the
        lifetime of the instance. There is no window: a value arriving after
        a larger one has been admitted is rejected, even if it was never
        seen before.

        :ivar lock: Guards the check-and-set in :func:`admit`.
    """

    def __init__(self, initial=sentinel):

        if isinstance(initial, bool) or not isinstance(initial, int):
            raise TypeError('the initial watermark must be an integer')

        self.lock = threading.Lock()
        self._watermark = initial


    def admit(self, candidate):
        """ Return True if *candidate* is newer than anything previously
            admitted, and make it the new watermark. Return False otherwise,
            leaving the watermark unchanged.
        """

        # The comparison and the assignment have to happen under the same
        # lock; two threads must never both admit against the same stale
        # watermark.

        with self.lock:
            if candidate > self._watermark:
                self._watermark = candidate
                return True

        return False


    def current(self):
        """ Return the watermark: the highest sequence value admitted so far,
            or the initial value if nothing has been admitted.
        """

        with self.lock:
            return self._watermark


# end of class Gate


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
