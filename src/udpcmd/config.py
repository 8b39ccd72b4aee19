""" Configuration for the udpcmd daemon. Values come from, in increasing
    order of precedence: the built-in defaults, the JSON file
    ``udpcmd.json`` in the configuration :func:`directory`, environment
    variables, and finally whatever the caller passes to :func:`load`
    (typically, command-line arguments).

    The resulting :class:`Configuration` is validated once and not changed
    afterwards.
"""

import os

from . import audit
from . import json
from . import transport
from .protocol import frame
from .transport import udp

default_filename = 'udpcmd.json'

defaults = dict()
defaults['port'] = udp.default_port
defaults['address'] = ''
defaults['delimiter'] = frame.default_delimiter
defaults['end_marker'] = frame.default_end_marker
defaults['log'] = audit.default_path
defaults['maximum'] = 1024
defaults['workers'] = 0
defaults['transport'] = 'udp'

# Environment variables that override individual settings, and the type
# each one is converted to.

environment = dict()
environment['port'] = ('UDPCMD_PORT', int)
environment['delimiter'] = ('UDPCMD_DELIMITER', str)
environment['end_marker'] = ('UDPCMD_END_MARKER', str)
environment['log'] = ('UDPCMD_LOG', str)
environment['transport'] = ('UDPCMD_TRANSPORT', str)
environment['workers'] = ('UDPCMD_WORKERS', int)


class Configuration:
    """ A validated, read-only set of daemon settings. Each setting is
        available as an attribute, and the instance acts like a read-only
        dictionary for the same names.
    """

    def __init__(self, **settings):

        unknown = set(settings) - set(defaults)
        if unknown:
            unknown = ', '.join(sorted(unknown))
            raise ValueError('unknown configuration settings: ' + unknown)

        values = dict(defaults)
        values.update(settings)

        values['port'] = check_port(values['port'])
        frame.check_literals(values['delimiter'], values['end_marker'])

        maximum = to_integer('maximum', values['maximum'])
        if maximum < 1:
            raise ValueError('maximum payload size must be positive: ' + str(maximum))
        values['maximum'] = maximum

        workers = to_integer('workers', values['workers'])
        if workers < 0:
            raise ValueError('worker count cannot be negative: ' + str(workers))
        values['workers'] = workers

        for key in ('log', 'address'):
            if not isinstance(values[key], str):
                raise ValueError('%s must be a string: %r' % (key, values[key]))

        if values['transport'] not in transport.backends:
            raise ValueError('unknown transport backend: ' + repr(values['transport']))

        object.__setattr__(self, '_values', values)


    def __contains__(self, key):
        return key in self._values


    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)

        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(name)


    def __getitem__(self, key):
        return self._values[key]


    def __iter__(self):
        return iter(self._values)


    def __len__(self):
        return len(self._values)


    def __repr__(self):
        return 'Configuration(%s)' % (', '.join('%s=%r' % item for item in sorted(self._values.items())))


    def __setattr__(self, name, value):
        raise AttributeError('the configuration cannot be changed once loaded')


    def items(self):
        return self._values.items()


# end of class Configuration



def check_port(port):
    """ Return *port* as an integer, raising ValueError if it is not a
        valid UDP/TCP port number. Zero is accepted, and means the
        operating system will pick a free port.
    """

    port = to_integer('port', port)

    if port < 0 or port > 65535:
        raise ValueError('invalid port: ' + str(port))

    return port



def to_integer(name, value):
    """ Return *value* as an integer. Booleans, None, and anything else
        int() cannot convert are a ValueError naming the setting.
    """

    if isinstance(value, bool) or isinstance(value, float) and not value.is_integer():
        raise ValueError('invalid %s: %r' % (name, value))

    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError('invalid %s: %r' % (name, value))



def directory(default=None):
    """ Return the directory location where the configuration file lives.
        This defaults to ``$HOME/.udpcmd``, but can be overridden by calling
        this method with an absolute path, or by setting the ``UDPCMD_HOME``
        environment variable prior to the first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['UDPCMD_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['UDPCMD_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('UDPCMD_HOME and HOME environment variables not set, cannot determine udpcmd configuration directory')

    found = os.path.join(home, '.udpcmd')

    directory.found = found
    return found

directory.found = None



def load(filename=None, **overrides):
    """ Build a :class:`Configuration`. The JSON file at *filename* is read
        if specified, otherwise ``udpcmd.json`` in the configuration
        :func:`directory` is read if it exists. Environment variables are
        applied next, and any keyword *overrides* whose value is not None
        are applied last.
    """

    if filename is None:
        try:
            filename = os.path.join(directory(), default_filename)
        except RuntimeError:
            filename = None
        else:
            if os.path.exists(filename):
                pass
            else:
                filename = None

    settings = dict()

    if filename is not None:
        settings.update(read(filename))

    settings.update(from_environment())

    for key, value in overrides.items():
        if value is not None:
            settings[key] = value

    return Configuration(**settings)



def read(filename):
    """ Return the dictionary of settings contained in the JSON file
        *filename*.
    """

    with open(filename, 'rb') as contents:
        raw = contents.read()

    try:
        settings = json.loads(raw)
    except json.DecodeError as e:
        raise ValueError('invalid JSON in %s: %s' % (filename, e))

    if isinstance(settings, dict):
        pass
    else:
        raise ValueError('configuration file must contain a JSON object: ' + filename)

    return settings



def from_environment(environ=None):
    """ Return the settings specified via environment variables.
    """

    if environ is None:
        environ = os.environ

    settings = dict()

    for key, (variable, kind) in environment.items():
        try:
            value = environ[variable]
        except KeyError:
            continue

        try:
            settings[key] = kind(value)
        except ValueError:
            raise ValueError('invalid value for %s: %r' % (variable, value))

    return settings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
