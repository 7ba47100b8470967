""" Environment-driven configuration for packnet, and loading of the JSON
    Pack description files a module uses to announce itself.

    All settings have defaults matching the deployed protocol; the
    environment variables only need to be set to deviate from them.
"""

import os

from . import json


legacy = 'legacy'
strict = 'strict'
compat_modes = (legacy, strict)

default_fragment_size = 128
default_pending_limit = 64
default_transport = 'loopback'
default_zmq_address = '127.0.0.1'
default_zmq_port = 10139


def _integer(variable, default, minimum=0):
    """ Return the integer value of the environment *variable*, or *default*
        if it is not set. A ValueError is raised if the value is not an
        integer, or is less than *minimum*.
    """

    try:
        value = os.environ[variable]
    except KeyError:
        return default

    try:
        value = int(value)
    except ValueError:
        raise ValueError("%s must be an integer, not %s" % (variable, repr(value)))

    if value < minimum:
        raise ValueError("%s must be at least %d, not %d" % (variable, minimum, value))

    return value



def compat():
    """ Return the fragmentation/registry compatibility mode, either 'legacy'
        (byte-exact with existing peers, quirks included) or 'strict'
        (corrected arithmetic, items recorded as items). Controlled by the
        ``PACKNET_COMPAT`` environment variable.
    """

    mode = os.environ.get('PACKNET_COMPAT', legacy)
    mode = mode.strip().lower()

    if mode in compat_modes:
        return mode

    raise ValueError('PACKNET_COMPAT must be one of %s, not %s' % (compat_modes, repr(mode)))



def directory(default=None):
    """ Return the directory location where Pack description files are kept.
        This defaults to ``$HOME/.packnet``, but can be overridden by calling
        this method with a valid path, or by setting the ``PACKNET_HOME``
        environment variable. Changes to the environment variable are ignored
        once this method has found a directory.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        if os.path.exists(default):
            pass
        else:
            os.makedirs(default, mode=0o775)

        os.environ['PACKNET_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['PACKNET_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('PACKNET_HOME and HOME environment variables not set, cannot determine packnet configuration directory')

    found = os.path.join(home, '.packnet')

    directory.found = found
    return found

directory.found = None



def fragment_size():
    """ The largest serialized packet, in characters, that is transmitted
        without fragmentation. ``PACKNET_FRAGMENT_SIZE`` overrides the
        default of 128; every peer on a channel must agree on it.
    """

    return _integer('PACKNET_FRAGMENT_SIZE', default_fragment_size, minimum=1)



def pending_limit():
    """ The maximum number of incomplete reassemblies a socket will hold
        before evicting the oldest one. Zero disables the bound.
    """

    return _integer('PACKNET_PENDING_LIMIT', default_pending_limit)



def transport():
    """ Name of the transport backend, from ``PACKNET_TRANSPORT``.
    """

    backend = os.environ.get('PACKNET_TRANSPORT', default_transport)
    return backend.strip().lower()



def zmq_address():
    return os.environ.get('PACKNET_ZMQ_ADDRESS', default_zmq_address)



def zmq_port():
    return _integer('PACKNET_ZMQ_PORT', default_zmq_port, minimum=1)



def load_pack(name):
    """ Load a Pack description and return it as a
        :class:`packnet.registry.Pack` instance. The *name* is either a path
        to a JSON file, or the bare name of a file in the ``packs``
        subdirectory of :func:`directory`; ``mypack`` resolves to
        ``$PACKNET_HOME/packs/mypack.json``.
    """

    from .registry import Pack

    name = str(name)

    if os.path.sep in name or name.endswith('.json'):
        filename = os.path.expanduser(name)
    else:
        filename = os.path.join(directory(), 'packs', name + '.json')

    with open(filename, 'rb') as contents:
        raw = contents.read()

    try:
        description = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError("invalid JSON in %s: %s" % (filename, str(e)))

    if isinstance(description, dict):
        pass
    else:
        raise ValueError('pack description must be a JSON object: ' + filename)

    return Pack.from_dict(description)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
