import pytest

from mythproto import responses
from mythproto.errors import ResponseSizeError
from mythproto.properties import NOT_SUPPORTED
from mythproto.responses import (
    ChannelInfo,
    FreeSpace,
    FreeSpaceSummary,
    ProgramFlags,
    ProgramInfo,
    RecorderInfo,
    RecordingStatus,
)


def test_program_field_counts():
    """ The program record grew and shrank over the years. 23056 sits
        between 56 and 57 and still has the old layout.
    """

    schema = responses.PROGRAM_SCHEMA

    assert schema.count(0) == 29
    assert schema.count(56) == 47
    assert schema.count(23056) == 47
    assert schema.count(57) == 42
    assert schema.count(88) == 53


def test_program_positions():

    schema = responses.PROGRAM_SCHEMA

    assert schema.index('START_DATE_TIME', 56) == 11
    assert schema.index('START_DATE_TIME', 57) == 10
    assert schema.index('START_DATE_TIME', 88) == 14

    assert schema.index('FILESIZE', 56) == NOT_SUPPORTED
    assert schema.index('FILESIZE_HIGH', 57) == NOT_SUPPORTED
    assert schema.index('SEASON', 66) == NOT_SUPPORTED
    assert schema.index('SEASON', 67) == 3


def test_file_size_split():

    program = ProgramInfo.new(56)
    program.set('FILESIZE_HIGH', '1')
    program.set('FILESIZE_LOW', '-1')

    assert program.file_size() == 0x1ffffffff

    program.set_file_size(5000000000)
    assert program.get('FILESIZE_HIGH') == '1'
    assert program.get('FILESIZE_LOW') == '705032704'
    assert program.file_size() == 5000000000


def test_file_size():

    program = ProgramInfo.new(57)
    program.set('FILESIZE', '8589934591')

    assert program.file_size() == 8589934591

    program.set_file_size(12)
    assert program.get('FILESIZE') == '12'


def test_long_halves():

    assert responses.decode_long('0', '-1') == 0xffffffff
    assert responses.encode_long(0xffffffff) == ('0', '-1')
    assert responses.encode_long(12) == ('0', '12')


def test_program_status():

    old = ProgramInfo.new(18)
    old.set('REC_STATUS', '12')
    assert old.status() is RecordingStatus.TUNER_BUSY

    new = ProgramInfo.new(19)
    new.set('REC_STATUS', '-8')
    assert new.status() is RecordingStatus.TUNER_BUSY

    assert ProgramInfo.new(88).status() is RecordingStatus.UNKNOWN


def test_program_flags():

    program = ProgramInfo.new(88)
    program.set('PROGRAM_FLAGS', str(0x201))

    assert program.flags() == set((ProgramFlags.WATCHED, ProgramFlags.COMMFLAG))


def test_program_found():

    program = ProgramInfo.new(88)
    assert program.found() == False

    program.set('TITLE', 'News')
    assert program.found()


def test_program_list():

    width = responses.PROGRAM_SCHEMA.count(88)

    first = ProgramInfo.new(88)
    first.set('TITLE', 'News')
    second = ProgramInfo.new(88)
    second.set('TITLE', 'Weather')

    args = ['2'] + first.all() + second.all()
    found = responses.programs(88, args)

    assert len(found) == 2
    assert found[0].get('TITLE') == 'News'
    assert found[1].get('TITLE') == 'Weather'
    assert len(args) == 1 + 2 * width

    assert responses.programs(88, ['0']) == []


def test_channel_info():

    schema = ChannelInfo.schema

    assert schema.count(27) == 0
    assert schema.count(28) == 12
    assert schema.names()[:4] == ['CHANNEL_ID', 'CHANNEL_SIGN', 'CHANNEL_NUMBER', 'SOURCE_ID']

    values = ['1004', 'BBC', '4', '1', 'News', '', 'The news', 'news',
              '2012-01-02T03:04:05', '2012-01-02T04:04:05', 'EP1', 'EP1.1']
    channel = ChannelInfo(28, values)

    assert channel.value('CHANNEL_ID') == 1004
    assert channel.get('TITLE') == 'News'
    assert channel.get('PROGRAM_ID') == 'EP1.1'


def test_recorder_info():

    missing = RecorderInfo.read(88, ['-1', 'nohost', '-1'])
    assert missing.found() == False

    recorder = RecorderInfo.read(88, ['3', 'backend', '6543'])
    assert recorder.found()
    assert recorder.id() == 3
    assert recorder.value('HOSTPORT') == 6543


def test_free_space():

    space = FreeSpace(10, ['4096', '1024'])

    assert space.total() == 4096 * 1024 * 1024
    assert space.used() == 1024 * 1024 * 1024


def test_free_space_summary():

    split = FreeSpaceSummary(65, ['1', '0', '0', '1073741824'])
    assert split.total() == 4 * 1024 * 1024 * 1024
    assert split.used() == 1024 * 1024 * 1024

    combined = FreeSpaceSummary(66, ['1000', '500'])
    assert combined.total() == 1000
    assert combined.used() == 500

    with pytest.raises(ResponseSizeError):
        FreeSpaceSummary(31, ['1000', '500'])


def test_free_space_list():

    assert responses.FreeSpaceListEntry.schema.count(20) == 5
    assert responses.FreeSpaceListEntry.schema.count(88) == 8
    assert responses.FreeSpaceListEntry.schema.count(16) == 0

    args = [
        'alpha', '/video', '1', 'fs1', '1', '4096', '2048', '1024',
        'alpha', 'TotalDiskSpace', '0', '-2', '-2', '0', '2048', '1024',
    ]
    entries = responses.free_space_list(88, args)

    assert len(entries) == 2
    assert entries[0].total() == 2048 * 1024
    assert entries[0].used() == 1024 * 1024
    assert entries[0].is_summary() == False
    assert entries[1].is_summary()

    with pytest.raises(ResponseSizeError):
        responses.free_space_list(88, args[:-1])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
