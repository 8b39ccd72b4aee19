""" Python implementation of udpcmd: a receiver for single-datagram shell
    commands. Each datagram carries a sequence value and a command; commands
    are run only if their sequence is newer than anything run before, and
    every command run is recorded in an append-only audit log.
"""

# Utility components.

from . import json

# Protocol and the pieces of the pipeline, leaf first.

from . import protocol
from . import gate
from . import execute
from . import audit
from . import pipeline

# Transport, configuration, and the daemon itself.

from . import transport
from . import config
from . import send
from .daemon import Daemon
from .pipeline import Pipeline

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
