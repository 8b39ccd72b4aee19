""" The udpcmd daemon: receive payloads from the configured transport and
    feed each one to a :class:`udpcmd.pipeline.Pipeline`. The loop runs
    until the transport fails, which is the only condition that stops the
    service.
"""

import argparse
import logging
import queue
import sys
import threading

from . import audit
from . import config
from . import execute
from . import pipeline
from . import transport

logger = logging.getLogger(__name__)


class Daemon:
    """ Wire a transport receiver to a command pipeline, using the supplied
        :class:`udpcmd.config.Configuration`. The *executor*, *sink*, and
        *receiver* default to the real implementations described by the
        configuration; tests substitute fakes.

        With ``workers`` set to zero (the default) each payload is processed
        to completion before the next one is received, and a long running
        command holds up everything behind it. With ``workers`` above zero,
        payloads are queued for a pool of background threads, all sharing
        the one pipeline and therefore the one sequence gate.

        Queued payloads are capped at :attr:`backlog`; once the workers fall
        that far behind, the receive loop stops reading and further payloads
        wait in the transport's own buffer, as they would with no workers.

        :ivar pipeline: The :class:`udpcmd.pipeline.Pipeline` instance.
        :ivar receiver: The transport receiver payloads are read from.
    """

    backlog = 64
    stop_timeout = 5

    def __init__(self, configuration=None, executor=None, sink=None, receiver=None):

        if configuration is None:
            configuration = config.Configuration()

        if executor is None:
            executor = execute.Shell()

        if sink is None:
            sink = audit.Log(configuration.log)

        if receiver is None:
            backend = transport.backend(configuration.transport)
            receiver = backend.Receiver(configuration.port, configuration.address, configuration.maximum)

        self.config = configuration
        self.receiver = receiver
        self.pipeline = pipeline.Pipeline(executor, sink,
                                          delimiter=configuration.delimiter,
                                          end_marker=configuration.end_marker)

        self.queue = None
        self.workers = list()


    def run(self):
        """ Bind the transport and process payloads until the transport
            raises :class:`udpcmd.transport.TransportError`, which is
            propagated to the caller after the transport is closed.
        """

        self.receiver.open()
        logger.info("Listening for %s packets on port %d ...",
                    self.config.transport.upper(), self.receiver.port)

        if self.config.workers > 0:
            self._start_workers(self.config.workers)

        try:
            while True:
                raw = self.receiver.recv()

                if self.queue is None:
                    self.pipeline.process(raw)
                else:
                    self.queue.put(raw)
        finally:
            self.receiver.close()
            self._stop_workers()


    def _start_workers(self, count):

        self.queue = queue.Queue(maxsize=self.backlog)

        for thread_number in range(count):
            thread = threading.Thread(target=self._worker_main)
            thread.daemon = True
            thread.start()
            self.workers.append(thread)


    def _stop_workers(self):

        if self.queue is None:
            return

        # One None per worker; each worker exits after dequeueing one. A
        # worker stuck on a command that never returns cannot drain the
        # queue, so give up waiting on it; the workers are daemon threads.

        for thread in self.workers:
            try:
                self.queue.put(None, timeout=self.stop_timeout)
            except queue.Full:
                logger.debug("worker queue still full, not waiting for workers")
                break


    def _worker_main(self):
        """ This is the 'main' method for the worker threads: pull a payload
            off the queue, and hand it to the pipeline. A worker exits when
            it dequeues None.
        """

        while True:
            raw = self.queue.get()

            if raw is None:
                break

            try:
                self.pipeline.process(raw)
            except Exception:
                logger.exception("unhandled error processing payload")


# end of class Daemon



def arguments(argv=None):
    """ Parse the command line: ``udpcmdd [port] [options]``. The port is
        left as a string here; see :func:`command_line_port`.
    """

    parser = argparse.ArgumentParser(
        description='Listen for framed commands and run them in the shell.')

    parser.add_argument('port', nargs='?', default=None,
                        help='port to listen on (default: %d)' % (config.defaults['port']))
    parser.add_argument('--address', default=None,
                        help='interface address to bind (default: all)')
    parser.add_argument('--delimiter', default=None,
                        help='literal separating sequence from command (default: %r)' % (config.defaults['delimiter']))
    parser.add_argument('--end-marker', dest='end_marker', default=None,
                        help='literal terminating the command (default: %r)' % (config.defaults['end_marker']))
    parser.add_argument('--log', default=None,
                        help='audit log path (default: %s)' % (config.defaults['log']))
    parser.add_argument('--transport', choices=transport.backends, default=None,
                        help='transport backend (default: %s)' % (config.defaults['transport']))
    parser.add_argument('--workers', type=int, default=None,
                        help='worker threads; 0 runs commands in the receive loop')
    parser.add_argument('--config', dest='filename', default=None,
                        help='JSON configuration file (default: %s in the udpcmd directory)' % (config.default_filename))
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log every payload')

    return parser.parse_args(argv)



def command_line_port(value):
    """ Return the port requested on the command line, or None if *value*
        is not a usable port number, in which case the port from the
        configuration file, the environment, or the default applies.
    """

    try:
        port = config.check_port(value)
    except ValueError:
        port = 0

    if port <= 0:
        logger.warning("Invalid port %r. Using the configured port.", value)
        return None

    return port



def configure_logging(verbose=False):

    if verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, stream=sys.stderr,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')



def main(argv=None):
    """ Entry point for ``udpcmdd``. Returns the process exit status.
    """

    if argv is None:
        argv = sys.argv[1:]

    parsed = arguments(argv)
    configure_logging(parsed.verbose)

    if parsed.port is not None:
        parsed.port = command_line_port(parsed.port)

    overrides = dict()
    for key in ('port', 'address', 'delimiter', 'end_marker', 'log', 'transport', 'workers'):
        overrides[key] = getattr(parsed, key)

    try:
        configuration = config.load(parsed.filename, **overrides)
    except (OSError, ValueError) as e:
        logger.error("Error: %s", e)
        return 1

    daemon = Daemon(configuration)

    try:
        daemon.run()
    except transport.TransportError as e:
        logger.error("Error: %s", e)
    except KeyboardInterrupt:
        logger.info("Interrupted")

    logger.error("Failed to run command executor.")
    return 1


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
