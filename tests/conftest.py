import socket
import threading

import pytest

import mythproto
from mythproto import packet


class FakeBackend:
    """ A scripted stand-in for a backend control port, listening on the
        loopback interface. It answers the version handshake, replies OK to
        any ANN, and otherwise replies from the ``replies`` dictionary,
        keyed by the full command string or just the command name. A reply
        may be a list of arguments, a callable taking the request arguments
        and returning such a list, or SILENT to never answer at all.
    """

    SILENT = object()

    def __init__(self, version=88):

        self.version = version
        self.replies = dict()
        self.received = list()
        self.clients = list()
        self.done = threading.Event()
        self.running = True

        self.lock = threading.Lock()
        self.write_lock = threading.Lock()

        self.server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.server.bind(('127.0.0.1', 0))
        self.server.listen(5)
        self.server.settimeout(0.1)
        self.port = self.server.getsockname()[1]

        self.thread = threading.Thread(target=self.accept, daemon=True)
        self.thread.start()


    def accept(self):

        while self.running:
            try:
                client, address = self.server.accept()
            except socket.timeout:
                continue
            except OSError:
                return

            client.settimeout(None)
            self.clients.append(client)

            serving = threading.Thread(target=self.serve, args=(client,), daemon=True)
            serving.start()


    def serve(self, client):

        try:
            while True:
                args = packet.read(client)

                with self.lock:
                    self.received.append(args)

                tokens = args[0].split(' ')
                name = tokens[0]

                if name == 'MYTH_PROTO_VERSION':
                    if int(tokens[1]) == self.version:
                        self.write(client, ['ACCEPT', str(self.version)])
                    else:
                        self.write(client, ['REJECT', str(self.version)])
                        break
                elif name == 'DONE':
                    self.done.set()
                    break
                else:
                    reply = self.reply(args)
                    if reply is not self.SILENT:
                        self.write(client, reply)
        except mythproto.errors.MythProtocolError:
            pass
        finally:
            client.close()


    def reply(self, args):

        key = args[0]

        try:
            handler = self.replies[key]
        except KeyError:
            handler = self.replies.get(key.split(' ')[0])

        if handler is None:
            if key.startswith('ANN '):
                return ['OK']
            return ['UNKNOWN_COMMAND']

        if callable(handler):
            return handler(args)

        return handler


    def write(self, client, args):

        with self.write_lock:
            packet.write(client, args)


    def push(self, args):
        """ Send an unsolicited frame, such as an event, to every client.
        """

        for client in list(self.clients):
            self.write(client, args)


    def drop(self):
        """ Hang up on every client without saying anything.
        """

        for client in list(self.clients):
            try:
                client.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            client.close()


    def commands(self):

        with self.lock:
            return [args[0] for args in self.received]


    def close(self):

        self.running = False
        self.server.close()
        self.drop()
        self.thread.join(1)


# end of class FakeBackend



@pytest.fixture
def backend():

    server = FakeBackend()
    yield server
    server.close()


@pytest.fixture
def connection(backend):

    link = mythproto.open('127.0.0.1', backend.port, version=88, timeout=2)
    yield link
    link.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
