import pytest

from mythproto import events
from mythproto import packet
from mythproto import version
from mythproto.errors import CommunicationError, ProtocolError


def test_done_recording():

    frame = ['BACKEND_MESSAGE', 'DONE_RECORDING 1 3600 -1', 'empty']
    event = events.decode(frame, 88)

    assert isinstance(event, events.DoneRecording)
    assert event.name == 'DONE_RECORDING'
    assert event.value('RECORDER_ID') == 1
    assert event.value('RECORDED_SECONDS') == 3600
    assert event.value('RECORDED_FRAMES') == -1
    assert event.extra == []


def test_done_recording_before_frames():

    event = events.decode(['BACKEND_MESSAGE', 'DONE_RECORDING 1 3600', 'empty'], 40)

    assert isinstance(event, events.DoneRecording)
    assert event.count() == 2
    assert event.get('RECORDED_FRAMES') is None


def test_version_from_packet():

    frame = packet.Packet(['BACKEND_MESSAGE', 'DONE_RECORDING 1 3600', 'empty'], version.get(40))
    event = events.decode(frame)

    assert event.version == version.get(40)
    assert event.count() == 2


def test_arguments():

    name, values = events.arguments(['BACKEND_MESSAGE', 'SHUTDOWN_COUNTDOWN 30', 'empty'])
    assert name == 'SHUTDOWN_COUNTDOWN'
    assert values == ['30']

    # Only a trailing 'empty' is padding.
    name, values = events.arguments(['BACKEND_MESSAGE', 'SIGNAL 3', 'empty', 'slock 1'])
    assert values == ['3', 'empty', 'slock 1']


def test_unregistered_event():

    event = events.decode(['BACKEND_MESSAGE', 'SOMETHING_NEW a b', 'empty'], 88)

    assert type(event) is events.Event
    assert event.name == 'SOMETHING_NEW'
    assert event.extra == ['a', 'b']


def test_short_event():
    """ A known event that is too short for its declared layout still
        decodes, as a plain event.
    """

    event = events.decode(['BACKEND_MESSAGE', 'DONE_RECORDING 1', 'empty'], 88)

    assert type(event) is events.Event
    assert event.extra == ['1']


def test_system_event():

    frame = ['BACKEND_MESSAGE', 'SYSTEM_EVENT REC_STARTED CHANID 1004 SENDER myhost', 'empty']
    event = events.decode(frame, 88)

    assert isinstance(event, events.SystemEvent)
    assert event.event_type() == 'REC_STARTED'
    assert event.pairs() == {'CHANID': '1004', 'SENDER': 'myhost'}
    assert event.sender() == 'myhost'


def test_file_written():

    event = events.decode(['BACKEND_MESSAGE', 'FILE_WRITTEN /srv/1004.ts 1234', 'empty'], 77)

    assert isinstance(event, events.FileWritten)
    assert event.get('FILE_PATH') == '/srv/1004.ts'
    assert event.value('FILE_SIZE') == 1234


def test_not_an_event():

    with pytest.raises(ProtocolError):
        events.decode(['OK'], 88)

    with pytest.raises(ProtocolError):
        events.decode(['QUERY_LOAD', 'x'], 88)


def test_client_error():

    failure = CommunicationError('connection closed after 0 of 8 bytes')
    event = events.ClientError.from_exception(failure)

    assert event.name == events.CLIENT_MESSAGE
    assert event.version == version.LATEST
    assert event.get('EXCEPTION_NAME') == 'CommunicationError'
    assert event.get('EXCEPTION_MESSAGE') == 'connection closed after 0 of 8 bytes'
    assert event.exception is failure


def test_types():

    registered = events.types()

    assert registered['DONE_RECORDING'] is events.DoneRecording
    assert registered['SYSTEM_EVENT'] is events.SystemEvent
    assert registered[events.CLIENT_MESSAGE] is events.ClientError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
