""" Asynchronous backend events. Once a connection announced itself with
    events enabled, the backend pushes ``BACKEND_MESSAGE`` frames at any
    time::

        BACKEND_MESSAGE[]:[]DONE_RECORDING 1 3600 -1[]:[]empty

    The second argument is a command string: the event name followed by
    its inline arguments. Any further frame arguments are extra data; the
    backend pads events that carry none with a literal ``empty``.

    Events are :class:`~mythproto.properties.Properties` objects, addressed
    by name like any response. Event kinds without a declared layout still
    decode, as a plain :class:`Event` with no named properties.
"""

from . import command
from . import packet
from . import version as versions
from . import versionrange
from .errors import ProtocolError, ResponseSizeError
from .properties import Properties, Property, Schema
from .values import DataType

protocol = versionrange.protocol

INT = DataType.INTEGER
BOOL = DataType.BOOLEAN

EMPTY = 'empty'
CLIENT_MESSAGE = 'CLIENT_MESSAGE'

_types = dict()


def register(cls):
    """ Class decorator: make *cls* the decoder for events named
        ``cls.event_name``.
    """

    _types[cls.event_name] = cls
    return cls



class Event(Properties):
    """ A backend event. Events may carry more values than their schema
        declares; the surplus is available as :attr:`extra`.
    """

    event_name = None
    schema = Schema('Event', ())

    def __init__(self, name, version, values):

        self.name = name
        Properties.__init__(self, version, values)


    def check_size(self, values):

        expected = self.resolved.count()

        if len(values) < expected:
            raise ResponseSizeError("%d args expected but %d args found." % (expected, len(values)))


    @property
    def extra(self):
        return self.values[self.count():]


    def __repr__(self):
        return "<%s %s %s %r>" % (type(self).__name__, self.name, self.version, self.values)


# end of class Event



@register
class DoneRecording(Event):
    """ A recorder finished a recording. """

    event_name = 'DONE_RECORDING'
    schema = Schema('DoneRecording', (
        Property('RECORDER_ID', type=INT),
        Property('RECORDED_SECONDS', type=INT),
        Property('RECORDED_FRAMES', protocol(45), INT),
    ))


@register
class AskRecording(Event):
    """ A recording is about to start on a busy recorder; the backend asks
        whether it may interrupt whatever the recorder is doing.
    """

    event_name = 'ASK_RECORDING'
    schema = Schema('AskRecording', (
        Property('RECORDER_ID', type=INT),
        Property('SECONDS_TILL_RECORDING', type=INT),
        Property('HAS_RECORDING', protocol(23), BOOL),
        Property('HAS_LATER_SHOWING', protocol(37), BOOL),
        Property('TITLE', protocol(5, 37)),
        Property('CHANNEL_NUMBER', protocol(5, 37)),
        Property('CHANNEL_SIGN', protocol(5, 37)),
        Property('CHANNEL_NAME', protocol(5, 37)),
    ))


@register
class FileWritten(Event):

    event_name = 'FILE_WRITTEN'
    schema = Schema('FileWritten', (
        Property('FILE_PATH', protocol(77)),
        Property('FILE_SIZE', protocol(77), INT),
    ), protocol(77))


@register
class ShutdownCountdown(Event):

    event_name = 'SHUTDOWN_COUNTDOWN'
    schema = Schema('ShutdownCountdown', (
        Property('SECONDS', type=INT),
    ))


@register
class SystemEvent(Event):
    """ A system event, for example ``REC_STARTED`` or ``CLIENT_CONNECTED``.
        After the event type the backend sends alternating keys and values,
        such as ``CHANID 1004 STARTTIME ... SENDER myhost``.
    """

    event_name = 'SYSTEM_EVENT'
    schema = Schema('SystemEvent', (
        Property('EVENT_TYPE'),
    ))

    def event_type(self):
        return self.get('EVENT_TYPE')


    def pairs(self):
        """ The key/value arguments following the event type, as a
            dictionary.
        """

        extra = self.extra
        found = dict()

        for index in range(0, len(extra) - 1, 2):
            found[extra[index]] = extra[index + 1]

        return found


    def sender(self):
        return self.pairs().get('SENDER')


@register
class ClientError(Event):
    """ Synthesized locally when the connection fails underneath a running
        event stream, so that listeners learn about it the same way they
        learn about everything else.
    """

    event_name = CLIENT_MESSAGE
    schema = Schema('ClientError', (
        Property('EXCEPTION_NAME'),
        Property('EXCEPTION_MESSAGE'),
    ))

    exception = None

    @classmethod
    def from_exception(cls, exception, version=None):

        if version is None:
            version = versions.LATEST

        values = (type(exception).__name__, str(exception))
        event = cls(CLIENT_MESSAGE, version, values)
        event.exception = exception
        return event



def arguments(frame):
    """ Split a ``BACKEND_MESSAGE`` frame into the event name and the values
        of the event: the inline arguments of its command string, followed
        by the extra frame arguments without the trailing ``empty``.
    """

    args = list(frame.args) if isinstance(frame, packet.Packet) else list(frame)

    if len(args) < 2:
        raise ProtocolError("backend message with %d arguments" % (len(args)))

    if args[0] != packet.BACKEND_MESSAGE:
        raise ProtocolError("not a backend message: %r" % (args[0]))

    parsed = command.Command.parse(args[1])
    values = list(parsed.arguments)

    extra = args[2:]
    if extra and extra[-1] == EMPTY:
        extra = extra[:-1]

    values.extend(extra)
    return parsed.name, values


def decode(frame, version=None):
    """ Return the :class:`Event` for a ``BACKEND_MESSAGE`` frame, using the
        registered class for its name if there is one. A frame too short for
        the declared layout falls back to a plain :class:`Event`.
    """

    if version is None:
        version = getattr(frame, 'version', None)
    if version is None:
        version = versions.LATEST

    name, values = arguments(frame)

    cls = _types.get(name, Event)

    try:
        return cls(name, version, values)
    except ResponseSizeError:
        return Event(name, version, values)


def types():
    return dict(_types)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
