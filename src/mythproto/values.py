""" Conversion between raw wire strings and Python values. Every property in
    a schema is tagged with a :class:`DataType`; :func:`decode` and
    :func:`encode` interpret the raw string according to that tag and the
    negotiated protocol version.

    The version matters in two places. Date/time values switched from local
    time to UTC at protocol 75, and a number of enumerations renumbered their
    members over the years; see :class:`VersionableEnum`.
"""

import datetime
import enum
import logging

from . import version
from . import versionrange

logger = logging.getLogger(__name__)

NULL_DAY = '0000-00-00'
NULL_TIME = '00:00:00'

PROTOCOL_FORMAT = '%Y-%m-%dT%H:%M:%S'
TIME_FORMAT = '%H:%M:%S'

# Formats for date strings without the 'T' separator, keyed by the length
# of the string they parse.

FORMATS_BY_LENGTH = {
    10: '%Y-%m-%d',
    16: '%Y-%m-%d %H:%M',
    19: '%Y-%m-%d %H:%M:%S',
}


class DataType(enum.Enum):
    INTEGER = 'integer'
    STRING = 'string'
    DATE = 'date'
    TIME = 'time'
    BOOLEAN = 'boolean'
    FLOAT = 'float'
    BITMASK = 'bitmask'
    BLOB = 'blob'
    ENUM = 'enum'


class VersionableEnum(enum.Enum):
    """ Base class for enumerations whose numeric value on the wire depends
        on the protocol version. Each member is declared with either a plain
        integer or a tuple of ``(version_number, value)`` pairs, optionally
        followed by the :class:`VersionRange` in which the member exists::

            class Status(VersionableEnum):
                UNKNOWN = 0
                TUNER_BUSY = (((0, 12), (19, -8)),)
                DELETED = (-5, versionrange.protocol(stop=19))
                MISSED = (-5, versionrange.protocol(19))

        Two members may share a numeric value as long as their ranges differ.
    """

    def __init__(self, values, range=None):

        if isinstance(values, int):
            values = ((0, values),)

        pairs = list()
        for number, value in values:
            pairs.append((version.get(number), value))

        self.pairs = tuple(pairs)

        if range is None:
            range = versionrange.DEFAULT_RANGE

        self.range = range


    def value_at(self, protocol):
        """ Return the numeric value of this member for the given *protocol*
            version: the last pair whose version is not newer than *protocol*.
            Returns None if no pair applies yet.
        """

        protocol = version.get(protocol)
        found = None

        for pair_version, value in self.pairs:
            if pair_version <= protocol:
                found = value
            else:
                break

        return found


    def is_supported(self, protocol):
        return self.range.is_in_range(protocol)


    @classmethod
    def members(cls, protocol):
        """ All members that exist in the given *protocol* version, in
            declaration order.
        """

        return [member for member in cls if member.is_supported(protocol)]


    @classmethod
    def lookup(cls, protocol, value):
        """ Find the member whose numeric value at *protocol* is *value*.
            Returns None if no active member has that value.
        """

        value = int(value)

        for member in cls:
            if member.is_supported(protocol) and member.value_at(protocol) == value:
                return member

        return None


    @classmethod
    def flags(cls, protocol, value):
        """ Interpret *value* as a bitmask, returning the set of active
            members whose bits are all present. Zero-valued members are
            never included.
        """

        value = int(value)
        found = set()

        for member in cls.members(protocol):
            bits = member.value_at(protocol)
            if bits and (value & bits) == bits:
                found.add(member)

        return found


    @classmethod
    def mask(cls, protocol, members):
        """ Inverse of :func:`flags`: combine *members* into an integer for
            the given *protocol* version.
        """

        value = 0
        for member in members:
            bits = member.value_at(protocol)
            if bits is None:
                raise ValueError("%s has no value in protocol version %s" % (member, protocol))
            value |= bits

        return value


# end of class VersionableEnum



def is_utc(protocol):
    """ Return True if date/time values are transmitted in UTC for the given
        *protocol* version. Older backends use the backend's local time.
    """

    return version.get(protocol) >= version.UTC_FROM


def decode(type, raw, protocol, enumeration=None):
    """ Convert the *raw* wire string to a Python value of the given *type*.
        Empty strings decode as None for every type except STRING.
    """

    if raw is None:
        return None

    if type is DataType.STRING:
        return raw

    if raw.strip() == '':
        return None

    if type is DataType.INTEGER:
        return int(raw)

    if type is DataType.FLOAT:
        return float(raw)

    if type is DataType.BLOB:
        return raw.encode('utf-8')

    if type is DataType.BOOLEAN:
        return decode_boolean(raw)

    if type is DataType.DATE:
        return decode_date(raw, is_utc(protocol))

    if type is DataType.TIME:
        return decode_time(raw, is_utc(protocol))

    if type is DataType.ENUM:
        member = enumeration.lookup(protocol, raw)
        if member is None:
            logger.warning("unknown %s value %s for protocol version %s", enumeration.__name__, raw, protocol)
        return member

    if type is DataType.BITMASK:
        if enumeration is None:
            return int(raw)
        return enumeration.flags(protocol, raw)

    raise TypeError('unhandled data type: ' + repr(type))


def decode_boolean(raw):

    if raw.isdigit():
        value = int(raw)
        if value > 1:
            logger.warning("unexpected value %d while decoding a boolean", value)
        return value > 0

    return raw.lower() == 'ok'


def decode_date(raw, utc=False):
    """ Parse a date or date/time string. Accepts unix timestamps, the
        'T'-separated protocol format (optionally suffixed with 'Z'), and
        space-separated dates with or without seconds. Backends use
        '0000-00-00' to mean no date at all.
    """

    if raw == '' or raw.startswith(NULL_DAY):
        return None

    if raw.isdigit():
        if utc:
            return datetime.datetime.fromtimestamp(int(raw), datetime.timezone.utc)
        return datetime.datetime.fromtimestamp(int(raw))

    if 'T' in raw:
        pattern = PROTOCOL_FORMAT
        text = raw.rstrip('Z')
    else:
        pattern = FORMATS_BY_LENGTH.get(len(raw))
        text = raw

    if pattern is None:
        logger.warning("no date format matches %r", raw)
        return None

    try:
        parsed = datetime.datetime.strptime(text, pattern)
    except ValueError:
        logger.warning("unable to parse date %r using pattern %r", raw, pattern)
        return None

    if utc:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)

    return parsed


def decode_time(raw, utc=False):

    if raw == NULL_TIME:
        return None

    try:
        parsed = datetime.datetime.strptime(raw, TIME_FORMAT).time()
    except ValueError:
        logger.warning("unable to parse time %r using pattern %r", raw, TIME_FORMAT)
        return None

    if utc:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)

    return parsed


def encode(type, value, protocol, enumeration=None):
    """ Convert a Python *value* to its wire string for the given *type*.
        None encodes as the empty string.
    """

    if value is None:
        return ''

    if type is DataType.STRING:
        return str(value)

    if type is DataType.BOOLEAN:
        return '1' if value else '0'

    if type is DataType.BLOB:
        if isinstance(value, bytes):
            return value.decode('utf-8')
        return str(value)

    if type is DataType.DATE:
        return encode_date(value, is_utc(protocol))

    if type is DataType.TIME:
        return value.strftime(TIME_FORMAT)

    if type is DataType.ENUM:
        if isinstance(value, VersionableEnum):
            value = value.value_at(protocol)
        return str(int(value))

    if type is DataType.BITMASK:
        if isinstance(value, (set, frozenset, list, tuple)):
            value = enumeration.mask(protocol, value)
        return str(int(value))

    if type is DataType.FLOAT:
        return repr(float(value))

    return str(int(value))


def encode_date(value, utc=False):
    """ UTC-era backends expect ISO timestamps with a 'Z' suffix; older
        backends expect seconds since the epoch.
    """

    if isinstance(value, datetime.datetime):
        pass
    elif isinstance(value, datetime.date):
        return value.strftime(FORMATS_BY_LENGTH[10])
    else:
        raise TypeError('expected a datetime, got ' + repr(value))

    if utc:
        value = value.astimezone(datetime.timezone.utc)
        return value.strftime(PROTOCOL_FORMAT) + 'Z'

    return str(int(value.timestamp()))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
