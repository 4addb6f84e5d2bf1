""" Emulations for commands outside their supported version range. When a
    command fails the primary range check, the connection asks :func:`find`
    whether an emulation is registered for it whose fallback range accepts
    the negotiated version; if so, the emulation is invoked in place of the
    command and returns a :class:`~mythproto.packet.Packet` shaped like the
    reply the real command would have produced.

    Emulations are plain functions with the signature
    ``emulation(connection, command, args)``, registered with the
    :func:`register` decorator. They talk to the backend through the same
    connection, one ordinary command at a time.
"""

import logging

from . import packet
from . import responses
from . import version
from . import versionrange

logger = logging.getLogger(__name__)

_registry = dict()


class Emulation:

    def __init__(self, name, range, function):

        self.name = name
        self.range = range
        self.function = function


    def accepts(self, version):
        return self.range.is_in_fallback_range(version)


    def __call__(self, connection, command, args):
        logger.info("%s is not supported in protocol version %s, emulating it", self.name, connection.version)
        return self.function(connection, command, args)


    def __repr__(self):
        return "<Emulation %s %r>" % (self.name, self.range)


# end of class Emulation



def register(name, range):
    """ Decorator: register the decorated function as an emulation of
        command *name*. The fallback bounds of *range* decide which
        versions it covers. Several emulations may be registered for the
        same command; :func:`find` tries them in registration order.
    """

    if range.has_fallback():
        pass
    else:
        raise ValueError('emulation of %s needs a range with fallback bounds' % (name))

    def decorator(function):
        emulation = Emulation(name, range, function)

        try:
            emulations = _registry[name]
        except KeyError:
            emulations = list()
            _registry[name] = emulations

        emulations.append(emulation)
        return function

    return decorator


def find(name, version):
    """ Return the first emulation registered for *name* that covers
        *version*, or None.
    """

    try:
        emulations = _registry[name]
    except KeyError:
        return None

    for emulation in emulations:
        if emulation.accepts(version):
            return emulation

    return None


def registered():
    return dict((name, list(emulations)) for name, emulations in _registry.items())



def free_recorder_ids(connection):
    """ Walk the free recorders with GET_NEXT_FREE_RECORDER, starting at -1
        and passing the last id back in, until the backend wraps around to
        an id already seen or answers 'nohost'. Returns the sorted ids.
    """

    seen = set()
    current = -1

    while True:
        reply = connection.send('GET_NEXT_FREE_RECORDER', [str(current)])
        recorder = responses.RecorderInfo.read(connection.version, reply.args)

        if not recorder.found():
            break

        current = recorder.id()
        if current in seen:
            break

        seen.add(current)

    return sorted(seen)


@register('GET_FREE_RECORDER_COUNT', versionrange.protocol(9, 87, start_fallback=3))
def free_recorder_count(connection, command, args):

    ids = free_recorder_ids(connection)
    return packet.Packet([str(len(ids))], connection.version)


@register('GET_FREE_RECORDER_LIST', versionrange.protocol(17, 87, start_fallback=3))
def free_recorder_list(connection, command, args):

    ids = free_recorder_ids(connection)

    if ids:
        reply = [str(number) for number in ids]
    else:
        reply = ['0']

    return packet.Packet(reply, connection.version)


@register('QUERY_FREESPACE', versionrange.protocol(stop=17, stop_fallback=version.LATEST))
def free_space(connection, command, args):
    """ Newer backends only report the usage of each storage directory,
        or from protocol 32 the summed usage of all of them, in bytes; the
        old reply was in megabytes.
    """

    if connection.version < version.get(32):
        reply = connection.send('QUERY_FREE_SPACE_LIST')
        entries = responses.free_space_list(connection.version, reply.args)

        total = sum(entry.total() for entry in entries)
        used = sum(entry.used() for entry in entries)
    else:
        reply = connection.send('QUERY_FREE_SPACE_SUMMARY')
        summary = responses.FreeSpaceSummary.read(connection.version, reply.args)

        total = summary.total()
        used = summary.used()

    total = total // (1024 * 1024)
    used = used // (1024 * 1024)

    return packet.Packet([str(total), str(used)], connection.version)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
