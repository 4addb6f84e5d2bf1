import logging

import pytest

from mythproto import fallback
from mythproto import packet
from mythproto import version
from mythproto.errors import ResponseSizeError
from mythproto.versionrange import protocol


class Scripted:
    """ Stands in for a connection: answers each command from a list of
        canned replies and remembers what it was asked.
    """

    def __init__(self, number, replies):
        self.version = version.get(number)
        self.replies = dict(replies)
        self.sent = list()

    def send(self, command, args=()):
        args = list(args)
        self.sent.append([command] + args)

        reply = self.replies[command]
        if callable(reply):
            reply = reply(args)

        return packet.Packet(reply, self.version)


def next_free(recorders):
    """ Reply the way GET_NEXT_FREE_RECORDER does: the recorder after the
        given one, wrapping around at the end.
    """

    def reply(args):
        if not recorders:
            return ['-1', 'nohost', '-1']

        current = int(args[0])
        ordered = sorted(recorders)
        for recorder in ordered:
            if recorder > current:
                break
        else:
            recorder = ordered[0]

        return [str(recorder), 'backend', '6543']

    return reply


def test_selection():
    """ GET_FREE_RECORDER_COUNT exists from version 9; the emulation covers
        versions 3 through 8.
    """

    assert fallback.find('GET_FREE_RECORDER_COUNT', 5) is not None
    assert fallback.find('GET_FREE_RECORDER_COUNT', 3) is not None
    assert fallback.find('GET_FREE_RECORDER_COUNT', 2) is None
    assert fallback.find('QUERY_FREESPACE', 17) is not None
    assert fallback.find('QUERY_FREESPACE', 88) is not None
    assert fallback.find('QUERY_LOAD', 5) is None


def test_register():

    @fallback.register('EXAMPLE_COMMAND', protocol(9, start_fallback=3))
    def example(connection, command, args):
        return packet.Packet(['emulated'])

    emulation = fallback.find('EXAMPLE_COMMAND', 5)
    assert emulation is not None
    assert emulation.function is example
    assert fallback.find('EXAMPLE_COMMAND', 2) is None

    assert 'EXAMPLE_COMMAND' in fallback.registered()


def test_register_needs_fallback():

    with pytest.raises(ValueError):
        fallback.register('EXAMPLE_PLAIN', protocol(9))


def test_free_recorder_count(caplog):

    connection = Scripted(5, {'GET_NEXT_FREE_RECORDER': next_free([1, 2])})
    emulation = fallback.find('GET_FREE_RECORDER_COUNT', connection.version)

    with caplog.at_level(logging.INFO, logger='mythproto.fallback'):
        reply = emulation(connection, 'GET_FREE_RECORDER_COUNT', [])

    assert reply.args == ['2']
    assert connection.sent[0] == ['GET_NEXT_FREE_RECORDER', '-1']
    assert 'emulating' in caplog.text


def test_free_recorder_list():

    connection = Scripted(5, {'GET_NEXT_FREE_RECORDER': next_free([3, 1, 2])})
    reply = fallback.free_recorder_list(connection, 'GET_FREE_RECORDER_LIST', [])
    assert reply.args == ['1', '2', '3']

    connection = Scripted(5, {'GET_NEXT_FREE_RECORDER': next_free([])})
    reply = fallback.free_recorder_list(connection, 'GET_FREE_RECORDER_LIST', [])
    assert reply.args == ['0']


def test_free_space_split():

    summary = ['1', '0', '0', '1073741824']
    connection = Scripted(65, {'QUERY_FREE_SPACE_SUMMARY': summary})

    reply = fallback.free_space(connection, 'QUERY_FREESPACE', [])
    assert reply.args == ['4096', '1024']


def test_free_space():

    summary = [str(2048 * 1024 * 1024), str(512 * 1024 * 1024)]
    connection = Scripted(88, {'QUERY_FREE_SPACE_SUMMARY': summary})

    reply = fallback.free_space(connection, 'QUERY_FREESPACE', [])
    assert reply.args == ['2048', '512']
    assert connection.sent == [['QUERY_FREE_SPACE_SUMMARY']]


def test_free_space_list():
    """ Between protocol 17 and 32 there is no summary; the usage of each
        directory, in kilobytes, is added up instead.
    """

    entries = [
        'alpha', '0', '1048576', '0', '524288',
        'beta', '0', '2097152', '0', '0',
    ]
    connection = Scripted(20, {'QUERY_FREE_SPACE_LIST': entries})

    reply = fallback.free_space(connection, 'QUERY_FREESPACE', [])
    assert reply.args == ['3072', '512']
    assert connection.sent == [['QUERY_FREE_SPACE_LIST']]


def test_free_space_list_size():

    connection = Scripted(20, {'QUERY_FREE_SPACE_LIST': ['alpha', '0', '1048576']})

    with pytest.raises(ResponseSizeError):
        fallback.free_space(connection, 'QUERY_FREESPACE', [])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
