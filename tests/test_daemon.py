import shutil
import threading
import time

import pytest
import udpcmd


def test_run_until_transport_fails(executor, sink, scripted_receiver):

    payloads = (b'5::echo hi#END#',
                b'5::echo bye#END#',
                b'garbage',
                b'3::echo stale#END#',
                b'6::echo bye#END#')

    receiver = scripted_receiver(payloads)
    daemon = udpcmd.Daemon(udpcmd.config.Configuration(), executor, sink, receiver)

    with pytest.raises(udpcmd.transport.TransportReceiveError):
        daemon.run()

    assert receiver.opened == True
    assert receiver.closed == True
    assert executor.calls == ['echo hi', 'echo bye']
    assert [record.sequence for record in sink.records] == [5, 6]
    assert daemon.pipeline.gate.current() == 6


def test_configured_literals(executor, sink, scripted_receiver):

    configuration = udpcmd.config.Configuration(delimiter='|', end_marker='<<')
    receiver = scripted_receiver((b'1::ignored#END#', b'2|uptime<<'))
    daemon = udpcmd.Daemon(configuration, executor, sink, receiver)

    with pytest.raises(udpcmd.transport.TransportError):
        daemon.run()

    assert executor.calls == ['uptime']


def test_workers(sink, scripted_receiver):

    class LockedExecutor(udpcmd.execute.Executor):
        def __init__(self):
            self.calls = list()
            self.lock = threading.Lock()

        def run(self, command):
            with self.lock:
                self.calls.append(command)
            return command + '\n'

    executor = LockedExecutor()
    payloads = [b'%d::cmd %d#END#' % (number, number) for number in range(1, 21)]
    payloads.extend(payloads)

    configuration = udpcmd.config.Configuration(workers=4)
    daemon = udpcmd.Daemon(configuration, executor, sink, scripted_receiver(payloads))

    with pytest.raises(udpcmd.transport.TransportError):
        daemon.run()

    # Workers drain what was already queued before they exit.

    assert len(daemon.workers) == 4
    for thread in daemon.workers:
        thread.join(5)
        assert thread.is_alive() == False

    # Workers can take payloads out of order, so not every sequence need
    # run; but none runs twice, and every run is audited.

    assert 1 <= len(executor.calls) <= 20
    assert len(executor.calls) == len(set(executor.calls))
    assert len(sink.records) == len(executor.calls)
    assert daemon.pipeline.gate.current() == max(record.sequence for record in sink.records)


def test_bounded_backlog(sink, scripted_receiver):
    """ With every worker stuck, the receive loop stops taking payloads once
        the backlog is full instead of queueing without limit.
    """

    release = threading.Event()
    started = threading.Event()

    class BlockingExecutor(udpcmd.execute.Executor):
        def run(self, command):
            started.set()
            release.wait(10)
            return ''

    payloads = [b'%d::cmd#END#' % (number) for number in range(1, 101)]
    receiver = scripted_receiver(payloads)

    configuration = udpcmd.config.Configuration(workers=1)
    daemon = udpcmd.Daemon(configuration, BlockingExecutor(), sink, receiver)
    daemon.backlog = 5
    daemon.stop_timeout = 0.1

    failures = list()

    def run():
        try:
            daemon.run()
        except udpcmd.transport.TransportError as e:
            failures.append(e)

    thread = threading.Thread(target=run)
    thread.daemon = True
    thread.start()

    assert started.wait(5)
    time.sleep(0.2)

    # One payload is with the worker, five are queued, and the loop is
    # blocked trying to queue the next one it has already read.

    assert daemon.queue.qsize() == 5
    assert len(receiver.payloads) == 100 - 1 - 5 - 1

    release.set()
    thread.join(10)
    assert thread.is_alive() == False
    assert len(failures) == 1
    assert len(receiver.payloads) == 0


def test_default_components():

    configuration = udpcmd.config.Configuration(port=0, log='/tmp/somewhere.log')
    daemon = udpcmd.Daemon(configuration)

    assert isinstance(daemon.receiver, udpcmd.transport.udp.Receiver)
    assert isinstance(daemon.pipeline.executor, udpcmd.execute.Shell)
    assert isinstance(daemon.pipeline.sink, udpcmd.audit.Log)
    assert daemon.pipeline.sink.path == '/tmp/somewhere.log'
    assert daemon.pipeline.gate.current() == -1


@pytest.mark.skipif(shutil.which('sh') is None, reason='requires a POSIX shell')
def test_end_to_end(tmp_path):
    """ Real datagrams, a real shell, and a real audit log.
    """

    class CountingReceiver(udpcmd.transport.udp.Receiver):
        """ Stop after a fixed number of datagrams. """

        def __init__(self, expected, **kwargs):
            udpcmd.transport.udp.Receiver.__init__(self, **kwargs)
            self.expected = expected
            self.ready = threading.Event()

        def open(self):
            udpcmd.transport.udp.Receiver.open(self)
            self.socket.settimeout(10)
            self.ready.set()

        def recv(self):
            if self.expected == 0:
                raise udpcmd.transport.TransportReceiveError('done')
            self.expected -= 1
            return udpcmd.transport.udp.Receiver.recv(self)

    log = tmp_path / 'command_executor.log'
    configuration = udpcmd.config.Configuration(port=0, address='127.0.0.1', log=str(log))
    receiver = CountingReceiver(3, port=0, address='127.0.0.1')
    daemon = udpcmd.Daemon(configuration, receiver=receiver)

    failures = list()

    def run():
        try:
            daemon.run()
        except udpcmd.transport.TransportError as e:
            failures.append(e)

    thread = threading.Thread(target=run)
    thread.daemon = True
    thread.start()

    assert receiver.ready.wait(5)
    port = receiver.port

    udpcmd.transport.udp.send(b'10::echo hello  \r\n#END#', '127.0.0.1', port)
    udpcmd.transport.udp.send(b'10::echo replayed#END#', '127.0.0.1', port)
    udpcmd.transport.udp.send(b'11::echo world#END#', '127.0.0.1', port)

    thread.join(15)
    assert thread.is_alive() == False
    assert str(failures[0]) == 'done'

    expected = ('=====\nTimestamp: 10\nCommand: echo hello\nOutput:\nhello\n\n=====\n'
                '=====\nTimestamp: 11\nCommand: echo world\nOutput:\nworld\n\n=====\n')

    assert log.read_text() == expected


def test_main_bind_failure(monkeypatch, caplog):

    class Unbindable(udpcmd.transport.udp.Receiver):
        def open(self):
            raise udpcmd.transport.TransportPortError('cannot bind UDP port %d' % (self.port))

    monkeypatch.setattr(udpcmd.transport.udp, 'Receiver', Unbindable)

    assert udpcmd.daemon.main(['8123']) == 1
    assert 'cannot bind UDP port 8123' in caplog.text


def test_main_invalid_port(monkeypatch, caplog, tmp_path):

    seen = list()

    class Recorder(udpcmd.transport.udp.Receiver):
        def open(self):
            seen.append(self.port)
            raise udpcmd.transport.TransportPortError('stop here')

    monkeypatch.setattr(udpcmd.transport.udp, 'Receiver', Recorder)

    for argument in ('0', '-5', 'banana', '70000'):
        assert udpcmd.daemon.main([argument]) == 1

    assert seen == [7755, 7755, 7755, 7755]
    assert "Invalid port 'banana'. Using the configured port." in caplog.text

    # A valid port from the environment or a file survives a bad argument.

    monkeypatch.setenv('UDPCMD_PORT', '8124')
    assert udpcmd.daemon.main(['banana']) == 1

    settings = tmp_path / 'settings.json'
    settings.write_text('{"port": 8125}')
    monkeypatch.delenv('UDPCMD_PORT')
    assert udpcmd.daemon.main(['0', '--config', str(settings)]) == 1

    assert udpcmd.daemon.main(['9001', '--config', str(settings)]) == 1

    assert seen[4:] == [8124, 8125, 9001]


def test_command_line_port():

    assert udpcmd.daemon.command_line_port('8000') == 8000

    for value in ('0', '-1', '65536', 'banana', ''):
        assert udpcmd.daemon.command_line_port(value) is None


def test_main_bad_configuration(tmp_path):

    assert udpcmd.daemon.main(['--config', str(tmp_path / 'missing.json')]) == 1
    assert udpcmd.daemon.main(['--delimiter', '']) == 1


def test_arguments():

    parsed = udpcmd.daemon.arguments(['9000', '--end-marker', '<<', '--workers', '3', '-v'])
    assert parsed.port == '9000'
    assert parsed.end_marker == '<<'
    assert parsed.workers == 3
    assert parsed.verbose == True
    assert parsed.delimiter is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
