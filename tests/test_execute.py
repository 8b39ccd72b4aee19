import shutil

import pytest
import udpcmd

pytestmark = pytest.mark.skipif(shutil.which('sh') is None, reason='requires a POSIX shell')


def test_stdout_is_captured():

    shell = udpcmd.execute.Shell()
    assert shell.run('echo hi') == 'hi\n'
    assert shell.run('printf "a\\nb"') == 'a\nb'


def test_shell_features():

    shell = udpcmd.execute.Shell()
    assert shell.run('echo one; echo two | tr a-z A-Z') == 'one\nTWO\n'


def test_stderr_not_captured():

    shell = udpcmd.execute.Shell()
    assert shell.run('echo oops 1>&2') == ''


def test_stdin_is_empty():

    shell = udpcmd.execute.Shell()
    assert shell.run('cat') == ''


def test_exit_status_ignored():

    shell = udpcmd.execute.Shell()
    assert shell.run('echo partial; exit 3') == 'partial\n'


def test_launch_failure():

    # An embedded NUL cannot be passed to exec().

    shell = udpcmd.execute.Shell()
    assert shell.run('echo \x00') == udpcmd.execute.launch_failure

    shell = udpcmd.execute.Shell(executable='/nonexistent/shell')
    assert shell.run('echo hi') == '[Error opening pipe]'


def test_non_utf8_output():

    shell = udpcmd.execute.Shell()
    output = shell.run("printf '\\377'")
    assert output.encode('utf-8', 'surrogateescape') == b'\xff'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
