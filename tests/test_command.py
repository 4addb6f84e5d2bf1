import pytest

from mythproto import command
from mythproto.errors import UnknownCommandError, UnsupportedCommandError
from mythproto.versionrange import protocol


def test_lookup():

    info = command.lookup('QUERY_LOAD')
    assert info.range == protocol(15)
    assert info.is_supported(15)
    assert info.is_supported(14) == False

    with pytest.raises(UnknownCommandError) as caught:
        command.lookup('NO_SUCH_COMMAND')

    assert caught.value.command == 'NO_SUCH_COMMAND'
    assert caught.value.parent is None


def test_parse():

    parsed = command.Command.parse('ANN Playback myhost 0')
    assert parsed.name == 'ANN'
    assert parsed.arguments == ['Playback', 'myhost', '0']
    assert str(parsed) == 'ANN Playback myhost 0'

    assert command.Command.parse('QUERY_LOAD').arguments == []


def test_subcommand_positions():
    """ ANN carries its sub-command inline; QUERY_RECORDER carries it in the
        first extra argument.
    """

    assert command.Command.parse('ANN Monitor myhost 0').subcommand() == 'Monitor'
    assert command.Command.parse('QUERY_RECORDER 1').subcommand(['CHANGE_CHANNEL 1']) == 'CHANGE_CHANNEL'
    assert command.Command.parse('QUERY_RECORDER 1').subcommand() is None
    assert command.Command.parse('QUERY_LOAD').subcommand(['anything']) is None


def test_validate_top_level():

    command.validate('QUERY_LOAD', [], 15)

    with pytest.raises(UnsupportedCommandError) as caught:
        command.validate('QUERY_LOAD', [], 14)

    assert caught.value.command == 'QUERY_LOAD'
    assert caught.value.range == protocol(15)

    with pytest.raises(UnsupportedCommandError):
        command.validate('QUEUE_TRANSCODE', [], 88)

    with pytest.raises(UnknownCommandError):
        command.validate('NO_SUCH_COMMAND', [], 88)


def test_validate_subcommands():

    command.validate('QUERY_RECORDER 1', ['GET_FREE_SPACE'], 19)

    with pytest.raises(UnsupportedCommandError) as caught:
        command.validate('QUERY_RECORDER 1', ['GET_FREE_SPACE'], 20)

    assert caught.value.command == 'QUERY_RECORDER GET_FREE_SPACE'

    with pytest.raises(UnknownCommandError) as caught:
        command.validate('QUERY_RECORDER 1', ['NO_SUCH_THING'], 88)

    assert caught.value.parent == 'QUERY_RECORDER'


def test_validate_announce():

    command.validate('ANN Monitor myhost 0', [], 22)
    command.validate('ANN Playback myhost 0', [], 5)

    with pytest.raises(UnsupportedCommandError):
        command.validate('ANN Monitor myhost 0', [], 21)

    with pytest.raises(UnknownCommandError):
        command.validate('ANN Lurker myhost 0', [], 88)


def test_top_level_checked_first():
    """ An unsupported command is reported as such, even when the
        sub-command it names does not exist at all.
    """

    with pytest.raises(UnsupportedCommandError):
        command.validate('QUERY_RECORDING NO_SUCH_THING', [], 31)

    with pytest.raises(UnknownCommandError):
        command.validate('QUERY_RECORDING NO_SUCH_THING', [], 32)

    command.validate('QUERY_RECORDING BASENAME 1004_20120102030405.mpg', [], 32)


def test_never_supported():
    """ PAUSE_RECORDER and UNPAUSE were declared for an empty range and were
        never valid anywhere.
    """

    for number in (0, 17, 18, 19, 88):
        with pytest.raises(UnsupportedCommandError):
            command.validate('QUERY_RECORDER 1', ['PAUSE_RECORDER'], number)

    command.validate('QUERY_RECORDER 1', ['PAUSE'], 18)


def test_subcommand_ranges_clipped():

    info = command.lookup('QUERY_RECORDING')
    assert info.subcommand('BASENAME').range == protocol(32)
    assert info.subcommand('BASENAME').full_name == 'QUERY_RECORDING BASENAME'


def test_supported():

    old = command.supported(5)
    assert 'GET_NEXT_FREE_RECORDER' in old
    assert 'QUERY_LOAD' not in old
    assert 'Monitor' not in old['ANN']

    new = command.supported(88)
    assert 'GET_NEXT_FREE_RECORDER' not in new
    assert 'MediaServer' in new['ANN']
    assert 'RingBuffer' not in new['ANN']
    assert new['ANN'] == sorted(new['ANN'])
    assert new['QUERY_LOAD'] == []


def test_names():

    everything = command.names()
    assert 'QUERY_FREESPACE' in everything
    assert 'MYTH_PROTO_VERSION' in everything
    assert len(everything) == len(set(everything))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
