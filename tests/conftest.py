import pytest
import udpcmd


class FakeExecutor(udpcmd.execute.Executor):
    """ Record every command instead of running it, and return scripted
        output: *outputs* maps a command to its output, anything else gets
        the *default* output.
    """

    def __init__(self, outputs=None, default=''):
        self.calls = list()
        self.outputs = dict(outputs or ())
        self.default = default

    def run(self, command):
        self.calls.append(command)
        return self.outputs.get(command, self.default)


class FakeSink(udpcmd.audit.Sink):

    def __init__(self):
        self.records = list()

    def append(self, record):
        self.records.append(record)


class ScriptedReceiver(udpcmd.transport.base.Receiver):
    """ Hand back a fixed list of payloads, then fail the way a broken
        socket would.
    """

    def __init__(self, payloads):
        self.payloads = list(payloads)
        self.port = 0
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True

    def recv(self):
        if self.payloads:
            return self.payloads.pop(0)
        raise udpcmd.transport.TransportReceiveError('out of payloads')


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def fresh_pipeline(executor, sink):
    return udpcmd.Pipeline(executor, sink)


@pytest.fixture
def scripted_receiver():
    return ScriptedReceiver


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """ Keep the user's configuration directory and any UDPCMD_* variables
        from leaking into the tests.
    """

    for variable, kind in udpcmd.config.environment.values():
        monkeypatch.delenv(variable, raising=False)

    monkeypatch.setenv('UDPCMD_HOME', str(tmp_path / 'home'))
    monkeypatch.setattr(udpcmd.config.directory, 'found', None)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
