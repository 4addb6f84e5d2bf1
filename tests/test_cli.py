import mythproto
from mythproto import cli


def test_versions(capsys):

    assert cli.main(['versions']) == 0

    listed = mythproto.json.loads(capsys.readouterr().out)
    numbers = [entry['number'] for entry in listed]

    assert numbers[0] == 0
    assert numbers[-1] == -1
    assert numbers.index(23056) == numbers.index(56) + 1

    v88 = listed[numbers.index(88)]
    assert v88['token'] == 'XmasGift'
    assert v88['name'] == '88'
    assert v88['metadata']['Date'] == '2015-08-19'


def test_commands(capsys):

    assert cli.main(['commands', '5']) == 0

    listed = mythproto.json.loads(capsys.readouterr().out)
    assert 'GET_NEXT_FREE_RECORDER' in listed
    assert 'QUERY_LOAD' not in listed
    assert 'Playback' in listed['ANN']


def test_unknown_version(capsys):

    assert cli.main(['commands', '9999']) == 2
    assert 'unknown protocol version' in capsys.readouterr().err


def test_probe(backend, capsys):

    assert cli.main(['probe', '127.0.0.1', '-p', str(backend.port), '-t', '2']) == 0

    result = mythproto.json.loads(capsys.readouterr().out)
    assert result['accepted'] == True
    assert result['version'] == 88
    assert backend.done.wait(2)


def test_probe_rejected(backend):

    backend.version = 63
    result = cli.probe('127.0.0.1', backend.port, 88, 2)

    assert result['accepted'] == False
    assert result['version'] == 63


def test_probe_unreachable(backend, capsys):

    port = backend.port
    backend.close()

    assert cli.main(['probe', '127.0.0.1', '-p', str(port), '-t', '1']) == 1
    assert 'unable to connect' in capsys.readouterr().err


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
