""" Command execution. The :class:`Executor` is the small contract the
    pipeline relies on; :class:`Shell` is the real implementation, handing
    the command to the host's command interpreter and capturing its
    standard output.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod

from .protocol import frame

logger = logging.getLogger(__name__)

launch_failure = '[Error opening pipe]'


class Executor(ABC):
    """ Minimal contract for running a command. Implementations must not
        raise: a command that cannot be started is reported as a diagnostic
        string in place of its output.
    """

    @abstractmethod
    def run(self, command: str) -> str:
        """ Run *command* to completion and return its captured output.
        """


class Shell(Executor):
    """ Run commands via ``/bin/sh -c``. Standard input is ``/dev/null``,
        standard error is inherited from the daemon, and standard output is
        captured and returned as text. The call blocks until the command
        exits; there is no timeout.
    """

    def __init__(self, executable=None):
        self.executable = executable


    def run(self, command: str) -> str:

        # The command came off the wire as surrogate-escaped text; turn it
        # back into the exact bytes that were received.

        argument = command.encode(frame.encoding, frame.errors)

        try:
            process = subprocess.Popen(argument, shell=True,
                                       executable=self.executable,
                                       stdin=subprocess.DEVNULL,
                                       stdout=subprocess.PIPE)
        except (OSError, ValueError) as e:
            # ValueError is what an embedded NUL byte gets you.
            logger.debug("cannot launch %r: %s", command, e)
            return launch_failure

        with process:
            output = process.stdout.read()

        logger.debug("%r exited with status %d", command, process.returncode)
        return output.decode(frame.encoding, frame.errors)


# end of class Shell


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
