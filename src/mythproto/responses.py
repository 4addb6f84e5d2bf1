""" Response schemas for the messages most clients need: program records,
    channel records, recorder addresses and disk usage. Each class names
    its :class:`~mythproto.properties.Schema` in the ``schema`` class
    attribute; everything else is inherited from
    :class:`~mythproto.properties.Properties`.

    The enumerations that go with those records live here too, since their
    numbering is as version dependent as the records themselves.
"""

from . import versionrange
from .errors import ResponseSizeError
from .properties import Properties, Property, Schema
from .values import DataType, VersionableEnum

protocol = versionrange.protocol

INT = DataType.INTEGER
BOOL = DataType.BOOLEAN
DATE = DataType.DATE
FLOAT = DataType.FLOAT
BITMASK = DataType.BITMASK
ENUM = DataType.ENUM

NOHOST = 'nohost'
TOTAL_DISK_SPACE = 'TotalDiskSpace'


class RecordingStatus(VersionableEnum):
    """ The REC_STATUS of a program. Negative values describe what did or
        will happen to a recording, positive values why it will not be
        recorded. Several members were renumbered or renamed at protocol 19.
    """

    UNKNOWN = 0
    WILL_RECORD = -1
    RECORDING = -2
    RECORDED = -3
    TUNER_BUSY = (((0, 12), (19, -8)), protocol())
    LOW_DISKSPACE = (((0, 11), (19, -7)), protocol())
    CANCELLED = (((0, 6), (19, -6)), protocol())
    DELETED = (-5, protocol(stop=19))
    MISSED = (-5, protocol(19))
    STOPPED = (-4, protocol(stop=19))
    ABORTED = (-4, protocol(19))
    FAILED = (-9, protocol(31))
    TUNING = (-10, protocol(63))
    MISSED_FUTURE = (-11, protocol(65))
    OTHER_TUNING = (-12, protocol(73))
    OTHER_RECORDING = (-13, protocol(73))
    MANUAL_OVERRIDE = (1, protocol(stop=7))
    DONT_RECORD = (1, protocol(7))
    PREVIOUS_RECORDING = 2
    CURRENT_RECORDING = 3
    EARLIER_SHOWING = 4
    TOO_MANY_RECORDINGS = 5
    NOT_LISTED = (((17, 13), (19, 6)), protocol(17))
    LOWER_REC_PRIORITY = (7, protocol(stop=4))
    CONFLICT = (7, protocol(4))
    MANUAL_CONFLICT = (8, protocol(stop=4))
    LATER_SHOWING = (8, protocol(4))
    AUTO_CONFLICT = (9, protocol(stop=4))
    REPEAT = (9, protocol(12))
    OVERLAP = (10, protocol(stop=7))
    INACTIVE = (10, protocol(15))
    NEVER_RECORD = (11, protocol(19))
    OFFLINE = (12, protocol(28))
    OTHER_SHOWING = (13, protocol(33))


class ProgramFlags(VersionableEnum):
    """ Bits of the PROGRAM_FLAGS field. Protocol 57 reshuffled most of the
        upper bits to make room for the new ones.
    """

    COMMFLAG = 0x1
    CUTLIST = 0x2
    AUTOEXP = 0x4
    EDITING = 0x8
    BOOKMARK = 0x10
    INUSERECORDING = (((21, 0x20), (57, 0x100000)), protocol(21))
    INUSEPLAYING = (((23, 0x40), (57, 0x200000)), protocol(23))
    STEREO = (0x80, protocol(27, 35))
    CC = (0x100, protocol(27, 35))
    HDTV = (0x200, protocol(27, 35))
    REALLYEDITING = (((53, 0x80), (57, 0x20)), protocol(53))
    COMMPROCESSING = (((53, 0x100), (57, 0x40)), protocol(53))
    DELETEPENDING = (((53, 0x200), (57, 0x80)), protocol(53))
    TRANSCODED = (((28, 0x400), (57, 0x100)), protocol(28))
    WATCHED = (((31, 0x800), (57, 0x200)), protocol(31))
    PRESERVED = (((32, 0x1000), (57, 0x400)), protocol(32))
    CHANCOMMFREE = (0x800, protocol(57))
    REPEAT = (0x1000, protocol(57))
    DUPLICATE = (0x2000, protocol(57))
    REACTIVATE = (0x4000, protocol(57))
    IGNOREBOOKMARK = (0x8000, protocol(57))
    INUSEOTHER = (0x400000, protocol(57))


class AudioProperties(VersionableEnum):
    STEREO = (0x01, protocol(35))
    MONO = (0x02, protocol(35))
    SURROUND = (0x04, protocol(35))
    DOLBY = (0x08, protocol(35))
    HARDHEAR = (0x10, protocol(37))
    VISUALIMPAIR = (0x20, protocol(37))


class VideoProperties(VersionableEnum):
    HDTV = (0x01, protocol(35))
    WIDESCREEN = (0x02, protocol(35))
    AVC = (0x04, protocol(37))
    HD_720 = (0x08, protocol(45))
    HD_1080 = (0x10, protocol(45))
    DAMAGED = (0x20, protocol(70))


class SubtitleType(VersionableEnum):
    HARDHEAR = (0x01, protocol(35))
    NORMAL = (0x02, protocol(35))
    ONSCREEN = (0x04, protocol(35))
    SIGNED = (0x08, protocol(37))



def decode_long(high, low):
    """ Combine two signed 32-bit halves, as sent by backends before
        protocol 57 (66 for disk usage), into one integer.
    """

    return (int(high) << 32) | (int(low) & 0xffffffff)


def encode_long(value):
    """ Inverse of :func:`decode_long`; returns the (high, low) strings.
    """

    value = int(value)
    high = value >> 32
    low = value & 0xffffffff
    if low >= 0x80000000:
        low -= 0x100000000

    return str(high), str(low)



PROGRAM_SCHEMA = Schema('ProgramInfo', (
    Property('TITLE'),
    Property('SUBTITLE'),
    Property('DESCRIPTION'),
    Property('SEASON', protocol(67), INT, default='0'),
    Property('EPISODE', protocol(67), INT, default='0'),
    Property('TOTALEPISODES', protocol(78), INT, default='0'),
    Property('SYNDICATED_EPISODE', protocol(76), default='0'),
    Property('CATEGORY'),
    Property('CHANNEL_ID', type=INT),
    Property('CHANNEL_NUMBER'),
    Property('CHANNEL_SIGN'),
    Property('CHANNEL_NAME'),
    Property('PATH_NAME'),
    Property('FILESIZE_HIGH', protocol(stop=57), INT, default='0'),
    Property('FILESIZE_LOW', protocol(stop=57), INT, default='0'),
    Property('FILESIZE', protocol(57), INT, default='0'),
    Property('START_DATE_TIME', type=DATE),
    Property('END_DATE_TIME', type=DATE),
    Property('DUPLICATE', protocol(stop=57), BOOL, default='0'),
    Property('SHAREABLE', protocol(stop=57), BOOL, default='0'),
    Property('FIND_ID', type=INT, default='0'),
    Property('HOSTNAME'),
    Property('SOURCE_ID', type=INT),
    Property('CARD_ID', type=INT),
    Property('INPUT_ID', type=INT),
    Property('REC_PRIORITY', type=INT, default='0'),
    Property('REC_STATUS', type=ENUM, default='0', enumeration=RecordingStatus),
    Property('REC_ID', type=INT, default='0'),
    Property('REC_TYPE', type=INT, default='0'),
    Property('REC_DUPS', protocol(stop=3), INT, default='0'),
    Property('DUP_IN', protocol(3), INT, default='0'),
    Property('DUP_METHOD', protocol(3), INT, default='0'),
    Property('REC_START_TIME', type=DATE),
    Property('REC_END_TIME', type=DATE),
    Property('REPEAT', type=BOOL, default='0'),
    Property('PROGRAM_FLAGS', type=BITMASK, default='0', enumeration=ProgramFlags),
    Property('REC_GROUP', protocol(3), default='Default'),
    Property('CHAN_COMM_FREE', protocol(3, 57), BOOL, default='0'),
    Property('CHANNEL_OUTPUT_FILTERS', protocol(6)),
    Property('SERIES_ID', protocol(8)),
    Property('PROGRAM_ID', protocol(8)),
    Property('INETREF', protocol(67)),
    Property('LAST_MODIFIED', protocol(11), DATE),
    Property('STARS', protocol(12), FLOAT, default='0.0'),
    Property('ORIGINAL_AIRDATE', protocol(12), DATE),
    Property('HAS_AIRDATE', protocol(15, 57), BOOL, default='0'),
    Property('TIMESTRETCH', protocol(18, 23), FLOAT, default='1.0'),
    Property('PLAY_GROUP', protocol(23), default='Default'),
    Property('REC_PRIORITY2', protocol(25), INT, default='0'),
    Property('PARENT_ID', protocol(31), INT, default='0'),
    Property('STORAGE_GROUP', protocol(32), default='Default'),
    Property('AUDIO_PROPERTIES', protocol(35), BITMASK, default='0', enumeration=AudioProperties),
    Property('VIDEO_PROPERTIES', protocol(35), BITMASK, default='0', enumeration=VideoProperties),
    Property('SUBTITLE_TYPE', protocol(35), BITMASK, default='0', enumeration=SubtitleType),
    Property('YEAR', protocol(41), INT, default='0'),
    Property('PART_NUMBER', protocol(76), INT, default='0'),
    Property('PART_TOTAL', protocol(76), INT, default='0'),
    Property('CATEGORY_TYPE', protocol(79), INT, default='0'),
    Property('RECORDED_ID', protocol(82), INT, default='0'),
    Property('INPUT_NAME', protocol(86)),
    Property('BOOKMARK_UPDATE', protocol(86), DATE),
))


class ProgramInfo(Properties):
    """ One program, recorded, scheduled or currently airing. This is by
        far the most common record on the wire and the one whose layout
        changed the most.
    """

    schema = PROGRAM_SCHEMA

    def file_size(self):
        """ The file size in bytes. Older backends split it into two signed
            32-bit halves.
        """

        if self.is_supported('FILESIZE'):
            return self.value('FILESIZE')

        return decode_long(self.get('FILESIZE_HIGH'), self.get('FILESIZE_LOW'))


    def set_file_size(self, size):

        if self.is_supported('FILESIZE'):
            self.assign('FILESIZE', size)
        else:
            high, low = encode_long(size)
            self.set('FILESIZE_HIGH', high)
            self.set('FILESIZE_LOW', low)


    def flags(self):
        return self.value('PROGRAM_FLAGS')


    def status(self):
        return self.value('REC_STATUS')


    def found(self):
        """ Backends answer lookups for unknown programs with a record
            whose title and channel are empty.
        """

        return bool(self.get('TITLE') or self.get('CHANNEL_ID'))


# end of class ProgramInfo



def programs(version, args, offset=0):
    """ Read a program list reply: a count followed by that many program
        records back to back.
    """

    count = int(args[offset])
    offset += 1
    width = PROGRAM_SCHEMA.count(version)

    found = list()
    for index in range(count):
        found.append(ProgramInfo.read(version, args, offset))
        offset += width

    return found



CHANNEL_SCHEMA = Schema('Channel', (
    Property('CHANNEL_ID', type=INT),
    Property('CHANNEL_SIGN'),
    Property('CHANNEL_NUMBER'),
    Property('SOURCE_ID', type=INT),
), protocol(28))

# Guide fields shared by records that describe what is on a channel.

LISTING_SCHEMA = Schema('Listing', (
    Property('TITLE'),
    Property('SUBTITLE'),
    Property('DESCRIPTION'),
    Property('CATEGORY'),
    Property('START_DATE_TIME', type=DATE),
    Property('END_DATE_TIME', type=DATE),
    Property('SERIES_ID', protocol(8)),
    Property('PROGRAM_ID', protocol(8)),
))


class ChannelInfo(Properties):
    """ A channel together with the listing currently on it; the reply to
        ``QUERY_RECORDER <id>[]:[]GET_CHANNEL_INFO``.
    """

    schema = CHANNEL_SCHEMA + LISTING_SCHEMA



class RecorderInfo(Properties):
    """ Where a recorder lives. ``GET_NEXT_FREE_RECORDER`` and friends reply
        with the hostname ``nohost`` when there is no such recorder.
    """

    schema = Schema('RecorderInfo', (
        Property('RECORDER_ID', type=INT),
        Property('HOSTNAME'),
        Property('HOSTPORT', type=INT),
    ))

    def found(self):
        return self.get('HOSTNAME') != NOHOST


    def id(self):
        return self.value('RECORDER_ID')



class FreeSpace(Properties):
    """ Disk usage as reported by ``QUERY_FREESPACE``, in megabytes. The
        command only exists before protocol 17; later backends get the same
        reply through the emulation in :mod:`mythproto.fallback`, so the
        layout itself is valid everywhere.
    """

    schema = Schema('FreeSpace', (
        Property('TOTAL_SPACE', type=INT, default='0'),
        Property('USED_SPACE', type=INT, default='0'),
    ))

    def total(self):
        return self.value('TOTAL_SPACE') * 1024 * 1024


    def used(self):
        return self.value('USED_SPACE') * 1024 * 1024



class FreeSpaceListEntry(Properties):
    """ One storage directory in the reply to ``QUERY_FREE_SPACE_LIST``,
        which sends these records back to back. Sizes are in kilobytes on
        the wire; :func:`total` and :func:`used` return bytes.
    """

    schema = Schema('FreeSpaceListEntry', (
        Property('HOSTNAME'),
        Property('DIRECTORIES', protocol(32)),
        Property('IS_LOCAL', protocol(32), BOOL),
        Property('FILESYSTEM_ID', protocol(32)),
        Property('STORAGE_GROUP_ID', protocol(37), INT),
        Property('BLOCK_SIZE', protocol(47), INT),
        Property('TOTAL_SPACE1', protocol(17, 66), INT),
        Property('TOTAL_SPACE2', protocol(17, 66), INT),
        Property('TOTAL_SPACE', protocol(66), INT),
        Property('USED_SPACE1', protocol(17, 66), INT),
        Property('USED_SPACE2', protocol(17, 66), INT),
        Property('USED_SPACE', protocol(66), INT),
    ), protocol(17))

    def total(self):
        if self.is_supported('TOTAL_SPACE'):
            kilobytes = self.value('TOTAL_SPACE')
        else:
            kilobytes = decode_long(self.get('TOTAL_SPACE1'), self.get('TOTAL_SPACE2'))
        return kilobytes * 1024


    def used(self):
        if self.is_supported('USED_SPACE'):
            kilobytes = self.value('USED_SPACE')
        else:
            kilobytes = decode_long(self.get('USED_SPACE1'), self.get('USED_SPACE2'))
        return kilobytes * 1024


    def is_summary(self):
        """ From protocol 32 the backend appends a pseudo entry whose
            directory is 'TotalDiskSpace', holding the totals.
        """

        if self.is_supported('DIRECTORIES'):
            return self.get('DIRECTORIES').split(',')[0] == TOTAL_DISK_SPACE
        return False



def free_space_list(version, args):
    """ Split a ``QUERY_FREE_SPACE_LIST`` reply into its entries, raising
        :class:`~mythproto.errors.ResponseSizeError` if the arguments do
        not divide into whole records.
    """

    count = FreeSpaceListEntry.schema.count(version)
    if count == 0:
        raise ResponseSizeError("QUERY_FREE_SPACE_LIST is not available in protocol version %s" % (version))

    if len(args) % count != 0:
        expected = (len(args) // count + 1) * count
        raise ResponseSizeError("%d args expected but %d args found." % (expected, len(args)))

    return [FreeSpaceListEntry.read(version, args, offset) for offset in range(0, len(args), count)]



class FreeSpaceSummary(Properties):
    """ Disk usage across all storage groups, ``QUERY_FREE_SPACE_SUMMARY``.
    """

    schema = Schema('FreeSpaceSummary', (
        Property('TOTAL_SPACE1', protocol(32, 66), INT),
        Property('TOTAL_SPACE2', protocol(32, 66), INT),
        Property('USED_SPACE1', protocol(32, 66), INT),
        Property('USED_SPACE2', protocol(32, 66), INT),
        Property('TOTAL_SPACE', protocol(66), INT),
        Property('USED_SPACE', protocol(66), INT),
    ), protocol(32))

    def total(self):
        if self.is_supported('TOTAL_SPACE'):
            return self.value('TOTAL_SPACE')
        return decode_long(self.get('TOTAL_SPACE1'), self.get('TOTAL_SPACE2'))


    def used(self):
        if self.is_supported('USED_SPACE'):
            return self.value('USED_SPACE')
        return decode_long(self.get('USED_SPACE1'), self.get('USED_SPACE2'))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
