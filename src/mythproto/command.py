""" The command catalogue: every command name the backend ever understood,
    along with the range of protocol versions in which it is valid. Some
    commands act as a namespace for sub-commands; those carry their own
    catalogue and know where in an outgoing request the sub-command name
    is found.

    Command strings are the first argument of a request frame, with the
    command name and its inline arguments separated by single spaces:
    ``QUERY_RECORDER 1`` or ``ANN Monitor myhost 0``.
"""

from . import versionrange
from .errors import UnknownCommandError, UnsupportedCommandError

SEPARATOR = ' '

# Where the sub-command name appears in a request: the second token of the
# command string itself, or the first token of the first extra argument.

ARGUMENT = 'argument'
PACKET = 'packet'

MYTH_PROTO_VERSION = 'MYTH_PROTO_VERSION'
ANN = 'ANN'
DONE = 'DONE'
BACKEND_MESSAGE = 'BACKEND_MESSAGE'


class CommandInfo:
    """ Catalogue entry for one command or sub-command.
    """

    def __init__(self, name, range, parent=None, position=None):

        self.name = name
        self.range = range
        self.parent = parent
        self.position = position
        self.subcommands = dict()


    def add(self, name, range):

        info = CommandInfo(name, range, parent=self)
        self.subcommands[name] = info
        return info


    def subcommand(self, name):
        """ Return the catalogue entry for sub-command *name*, raising
            :class:`UnknownCommandError` if there is none.
        """

        try:
            return self.subcommands[name]
        except KeyError:
            raise UnknownCommandError(name, parent=self.name) from None


    def is_supported(self, version):
        return self.range.is_in_range(version)


    def check(self, version):
        """ Raise :class:`UnsupportedCommandError` if this entry is not valid
            in *version*.
        """

        if self.range.is_in_range(version):
            return

        raise UnsupportedCommandError(self.full_name, version, self.range)


    @property
    def full_name(self):
        if self.parent is None:
            return self.name
        return self.parent.name + SEPARATOR + self.name


    def __repr__(self):
        return "<CommandInfo %s %s>" % (self.full_name, self.range)


# end of class CommandInfo



class Command:
    """ A parsed command string: the command name plus its inline
        arguments.
    """

    def __init__(self, name, arguments=()):

        self.name = name
        self.arguments = list(arguments)


    @classmethod
    def parse(cls, text):

        text = str(text)
        tokens = text.split(SEPARATOR)
        return cls(tokens[0], tokens[1:])


    def subcommand(self, args=()):
        """ The sub-command name of this request, if the command has
            sub-commands and the request names one. *args* are the extra
            arguments that follow the command string in the frame.
        """

        info = lookup(self.name)

        if info.position == ARGUMENT:
            if self.arguments:
                return self.arguments[0]
        elif info.position == PACKET:
            if args:
                first = args[0]
                if first is not None and first != '':
                    return str(first).split(SEPARATOR)[0]

        return None


    def __str__(self):
        return SEPARATOR.join([self.name] + [str(argument) for argument in self.arguments])


    def __repr__(self):
        return "<Command %s>" % (str(self))


# end of class Command



def lookup(name):
    """ Return the :class:`CommandInfo` for *name*, raising
        :class:`UnknownCommandError` if the command was never part of the
        protocol.
    """

    try:
        return _catalogue[name]
    except KeyError:
        raise UnknownCommandError(name) from None


def validate(command, args, version):
    """ Check that *command* (a string or :class:`Command`) and the
        sub-command it names, if any, are valid in *version*. Returns the
        parsed :class:`Command`. Nothing is sent; the caller decides what
        to do about an :class:`UnsupportedCommandError`, which is raised
        before any sub-command is looked at.
    """

    if isinstance(command, Command):
        pass
    else:
        command = Command.parse(command)

    info = lookup(command.name)
    info.check(version)

    subname = command.subcommand(args)

    if subname is not None:
        info.subcommand(subname).check(version)

    return command


def supported(version):
    """ Return a dictionary of every command valid in *version*, mapping
        the command name to the sorted list of its valid sub-commands.
    """

    found = dict()

    for name, info in _catalogue.items():
        if info.is_supported(version):
            subcommands = [sub.name for sub in info.subcommands.values() if sub.is_supported(version)]
            found[name] = sorted(subcommands)

    return found


def names():
    return list(_catalogue.keys())



def _range(start=None, stop=None):
    return versionrange.protocol(start, stop)


# Name, start, stop. None means open ended.

_COMMANDS = (
    (MYTH_PROTO_VERSION, 1, None),
    (ANN, 0, None),
    (DONE, 0, None),
    ('QUERY_RECORDINGS', 0, None),
    ('QUERY_RECORDING', 32, None),
    ('QUERY_FREE_SPACE', 17, None),
    ('QUERY_FREE_SPACE_LIST', 17, None),
    ('QUERY_FREESPACE', 0, 17),
    ('QUERY_FREE_SPACE_SUMMARY', 32, None),
    ('QUERY_LOAD', 15, None),
    ('QUERY_UPTIME', 15, None),
    ('QUERY_MEMSTATS', 15, None),
    ('QUERY_CHECKFILE', 0, None),
    ('QUERY_GUIDEDATATHROUGH', 15, None),
    ('QUEUE_TRANSCODE', 0, 23),
    ('QUEUE_TRANSCODE_STOP', 0, 23),
    ('QUEUE_TRANSCODE_CUTLIST', 0, 23),
    ('STOP_RECORDING', 0, None),
    ('CHECK_RECORDING', 0, None),
    ('DELETE_RECORDING', 0, None),
    ('DELETE_FAILED_RECORDING', 38, 39),
    ('FORCE_DELETE_RECORDING', 16, None),
    ('REACTIVATE_RECORDING', 5, 19),
    ('UNDELETE_RECORDING', 36, None),
    ('RESCHEDULE_RECORDINGS', 15, None),
    ('FORGET_RECORDING', 0, None),
    ('QUERY_GETALLPENDING', 0, None),
    ('QUERY_GETALLSCHEDULED', 0, None),
    ('QUERY_GETCONFLICTING', 0, None),
    ('QUERY_GETEXPIRING', 23, None),
    ('GET_FREE_RECORDER', 0, 87),
    ('GET_FREE_RECORDER_COUNT', 9, 87),
    ('GET_FREE_RECORDER_LIST', 17, 87),
    ('GET_NEXT_FREE_RECORDER', 3, 87),
    ('GET_FREE_INPUT_INFO', 87, None),
    ('QUERY_RECORDER', 0, None),
    ('SET_NEXT_LIVETV_DIR', 32, None),
    ('SET_CHANNEL_INFO', 28, None),
    ('QUERY_REMOTEENCODER', 0, None),
    ('GET_RECORDER_FROM_NUM', 0, None),
    ('GET_RECORDER_NUM', 0, None),
    ('QUERY_FILETRANSFER', 0, None),
    ('QUERY_GENPIXMAP', 0, 61),
    ('QUERY_GENPIXMAP2', 61, None),
    ('QUERY_PIXMAP_LASTMODIFIED', 17, None),
    ('QUERY_PIXMAP_GET_IF_MODIFIED', 49, None),
    ('QUERY_ISRECORDING', 0, None),
    ('MESSAGE', 0, None),
    ('FILL_PROGRAM_INFO', 0, None),
    ('LOCK_TUNER', 0, None),
    ('FREE_TUNER', 0, None),
    ('QUERY_IS_ACTIVE_BACKEND', 0, None),
    ('QUERY_ACTIVE_BACKENDS', 72, None),
    ('QUERY_COMMBREAK', 17, None),
    ('QUERY_CUTLIST', 17, None),
    ('QUERY_BOOKMARK', 17, None),
    ('SET_BOOKMARK', 17, None),
    ('QUERY_SETTING', 17, None),
    ('SET_SETTING', 17, None),
    ('ALLOW_SHUTDOWN', 19, None),
    ('BLOCK_SHUTDOWN', 19, None),
    ('SHUTDOWN_NOW', 0, None),
    (BACKEND_MESSAGE, 0, None),
    ('REFRESH_BACKEND', 5, None),
    ('OK', 16, None),
    ('UNKNOWN_COMMAND', 16, None),
    ('QUERY_TIME_ZONE', 42, None),
    ('QUERY_FILE_EXISTS', 49, None),
    ('QUERY_FILE_HASH', 51, None),
    ('GO_TO_SLEEP', 45, None),
    ('QUERY_HOSTNAME', 50, None),
    ('QUERY_SG_GETFILELIST', 44, None),
    ('QUERY_SG_FILEQUERY', 44, None),
    ('DOWNLOAD_FILE', 58, None),
    ('DOWNLOAD_FILE_NOW', 58, None),
    ('SCAN_VIDEOS', 64, None),
    ('DELETE_FILE', 46, None),
)

# Parent, position, and (name, start, stop) for each sub-command.

_SUBCOMMANDS = (
    (ANN, ARGUMENT, (
        ('Playback', 0, None),
        ('Frontend', 0, None),
        ('SlaveBackend', 0, None),
        ('MediaServer', 68, None),
        ('RingBuffer', 0, 20),
        ('FileTransfer', 0, None),
        ('Monitor', 22, None),
    )),
    ('QUERY_RECORDING', ARGUMENT, (
        ('BASENAME', 32, None),
        ('TIMESLOT', 32, None),
    )),
    ('QUERY_FILETRANSFER', PACKET, (
        ('IS_OPEN', 0, None),
        ('DONE', 0, None),
        ('REQUEST_BLOCK', 0, None),
        ('SEEK', 0, None),
        ('SET_TIMEOUT', 28, None),
        ('WRITE_BLOCK', 46, None),
        ('REOPEN', 70, None),
    )),
    ('QUERY_REMOTEENCODER', PACKET, (
        ('GET_STATE', 0, None),
        ('GET_FLAGS', 37, None),
        ('IS_BUSY', 0, None),
        ('MATCHES_RECORDING', 0, None),
        ('START_RECORDING', 0, None),
        ('RECORD_PENDING', 0, None),
        ('CANCEL_NEXT_RECORDING', 37, None),
        ('STOP_RECORDING', 37, None),
        ('GET_MAX_BITRATE', 17, None),
        ('GET_CURRENT_RECORDING', 19, None),
        ('GET_FREE_INPUTS', 37, None),
        ('GET_SLEEPSTATUS', 45, None),
        ('GET_RECORDING_STATUS', 63, None),
    )),
    ('QUERY_RECORDER', PACKET, (
        ('IS_RECORDING', 0, None),
        ('GET_FRAMERATE', 0, None),
        ('GET_FRAMES_WRITTEN', 0, None),
        ('GET_FILE_POSITION', 0, None),
        ('GET_FREE_SPACE', 0, 20),
        ('GET_MAX_BITRATE', 17, None),
        ('GET_CURRENT_RECORDING', 19, None),
        ('GET_KEYFRAME_POS', 0, None),
        ('FILL_POSITION_MAP', 0, None),
        ('FILL_DURATION_MAP', 77, None),
        ('SETUP_RING_BUFFER', 0, 20),
        ('GET_RECORDING', 0, None),
        ('STOP_PLAYING', 0, 20),
        ('FRONTEND_READY', 0, None),
        ('CANCEL_NEXT_RECORDING', 0, None),
        ('SPAWN_LIVETV', 0, None),
        ('STOP_LIVETV', 0, None),
        ('PAUSE_RECORDER', 18, 18),
        ('PAUSE', 0, None),
        ('UNPAUSE', 18, 18),
        ('FINISH_RECORDING', 0, None),
        ('SET_LIVE_RECORDING', 26, None),
        ('TOGGLE_INPUTS', 0, 27),
        ('GET_CONNECTED_INPUTS', 27, 37),
        ('GET_FREE_INPUTS', 37, None),
        ('GET_INPUT', 27, None),
        ('SET_INPUT', 27, None),
        ('TOGGLE_CHANNEL_FAVORITE', 0, None),
        ('CHANGE_CHANNEL', 0, None),
        ('SET_CHANNEL', 0, None),
        ('SET_SIGNAL_MONITORING_RATE', 18, None),
        ('GET_COLOUR', 30, None),
        ('GET_CONTRAST', 30, None),
        ('GET_BRIGHTNESS', 30, None),
        ('GET_HUE', 30, None),
        ('CHANGE_COLOUR', 0, None),
        ('CHANGE_CONTRAST', 0, None),
        ('CHANGE_BRIGHTNESS', 0, None),
        ('CHANGE_HUE', 0, None),
        ('CHECK_CHANNEL', 0, None),
        ('SHOULD_SWITCH_CARD', 17, None),
        ('CHECK_CHANNEL_PREFIX', 0, None),
        ('GET_NEXT_PROGRAM_INFO', 0, None),
        ('GET_PROGRAM_INFO', 0, 21),
        ('GET_INPUT_NAME', 0, 21),
        ('GET_CHANNEL_INFO', 28, None),
        ('REQUEST_BLOCK_RINGBUF', 0, 20),
        ('SEEK_RINGBUF', 0, 20),
        ('DONE_RINGBUF', 0, 20),
    )),
    (BACKEND_MESSAGE, PACKET, (
        ('DONE_RECORDING', 0, None),
        ('UPDATE_FILE_SIZE', 54, None),
        ('RECORDING_LIST_CHANGE', 0, None),
        ('UPDATE_PROG_INFO', 52, None),
        ('MASTER_UPDATE_PROG_INFO', 54, 87),
        ('MASTER_UPDATE_REC_INFO', 87, 87),
        ('LIVETV_CHAIN', 20, None),
        ('ASK_RECORDING', 0, None),
        ('SCHEDULE_CHANGE', 0, None),
        ('CLEAR_SETTINGS_CACHE', 23, None),
        ('RESET_IDLETIME', 40, None),
        ('SYSTEM_EVENT', 0, None),
        ('COMMFLAG_START', 0, None),
        ('SHUTDOWN_COUNTDOWN', 0, None),
        ('SHUTDOWN_NOW', 0, None),
        ('SIGNAL', 0, None),
        ('DOWNLOAD_FILE', 58, None),
        ('VIDEO_LIST_CHANGE', 63, None),
        ('VIDEO_LIST_NO_CHANGE', 69, None),
        ('GENERATED_PIXMAP', 61, None),
        ('FILE_WRITTEN', 77, None),
    )),
)


def _build():

    catalogue = dict()

    for name, start, stop in _COMMANDS:
        catalogue[name] = CommandInfo(name, _range(start, stop))

    for parent, position, subcommands in _SUBCOMMANDS:
        info = catalogue[parent]
        info.position = position

        for name, start, stop in subcommands:
            info.add(name, _range(start, stop).restrict(info.range))

    return catalogue


_catalogue = _build()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
