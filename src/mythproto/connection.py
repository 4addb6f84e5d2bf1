""" Command connection to a backend. A :class:`Connection` negotiates the
    protocol version, validates every command against the catalogue before
    writing a single byte, and multiplexes synchronous replies with the
    asynchronous event stream the backend pushes over the same socket.

    Threading model: the handshake is a plain synchronous exchange. After
    that a single reader thread owns all reads from the socket; it polls the
    TCP socket alongside an inproc ZeroMQ PAIR socket that :func:`close`
    uses to wake it up. Replies are handed to the one caller waiting in
    :func:`Connection.send`; events are queued for a dispatcher thread that
    invokes the registered listeners in arrival order.
"""

from __future__ import annotations

import logging
import queue
import socket
import threading
from typing import Iterable, Optional

import zmq

from . import command as commands
from . import config
from . import events
from . import fallback
from . import packet
from . import version as versions
from .errors import (
    CommunicationError,
    ConnectionStateError,
    MythProtocolError,
    ProtocolError,
    ReadTimeout,
    VersionRejected,
)
from .listeners import Listeners

logger = logging.getLogger(__name__)

# Packet traffic, one line per frame: '> ' for sent, '< ' for received.
messages = logging.getLogger(__name__ + ".messages")

zmq_context = zmq.Context()

CLOSED = "CLOSED"
HANDSHAKE = "HANDSHAKE"
OPEN = "OPEN"

ACCEPT = "ACCEPT"
REJECT = "REJECT"
OK = "OK"

MONITOR = "Monitor"
PLAYBACK = "Playback"

# Event modes sent with ANN. The last two arrived in protocol 57.
EVENTS_NONE = 0
EVENTS_NORMAL = 1
EVENTS_NON_SYSTEM = 2
EVENTS_SYSTEM_ONLY = 3

_EVENT_MODES_VERSION = 57

# Commands permitted before the connection announced itself.
_BEFORE_ANN = (commands.MYTH_PROTO_VERSION, commands.ANN, commands.DONE)


class PendingReply:
    """One-slot rendezvous between the caller of :func:`Connection.send`
    and the reader thread."""

    def __init__(self):
        self.packet: Optional[packet.Packet] = None
        self.error: Optional[BaseException] = None
        self.event = threading.Event()

    def wait(self, timeout: Optional[float]) -> bool:
        return self.event.wait(timeout)

    def complete(self, reply: packet.Packet) -> None:
        self.packet = reply
        self.event.set()

    def fail(self, error: BaseException) -> None:
        self.error = error
        self.event.set()


class Connection:
    """A command connection to one backend.

    The connection moves from ``CLOSED`` through ``HANDSHAKE`` to ``OPEN``
    and back to ``CLOSED``; it cannot be reopened once closed.
    """

    def __init__(self, host: str, port: Optional[int] = None, version=None, timeout: Optional[float] = None):
        self.host = host
        self.port = config.port if port is None else int(port)
        self.timeout = config.timeout if timeout is None else float(timeout)

        if version is None:
            version = config.preferred
        requested = versions.get(version)
        if requested.is_latest:
            requested = versions.maximum()
        self.requested = requested

        self.version = None
        self.state = CLOSED
        self.error: Optional[BaseException] = None
        self.announced = False
        self.listening = False

        self.socket: Optional[socket.socket] = None
        self.listeners = Listeners()

        self._used = False
        self._state_lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._pending: Optional[PendingReply] = None
        self._events = queue.SimpleQueue()
        self._reader: Optional[threading.Thread] = None
        self._dispatcher: Optional[threading.Thread] = None
        self._signal_rx = None
        self._signal_tx = None

    # --- lifecycle ---

    def open(self) -> "Connection":
        """Connect and negotiate the protocol version. Raises
        :class:`VersionRejected` if the backend speaks another version;
        the connection is closed in that case."""

        with self._state_lock:
            if self._used:
                raise ConnectionStateError("a connection cannot be reopened")
            self._used = True
            self.state = HANDSHAKE

        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=config.connect_timeout)
            self.socket.settimeout(self.timeout)
            self._handshake()
        except OSError as exc:
            self._teardown()
            raise CommunicationError(f"unable to connect to {self.host}:{self.port}: {exc}") from exc
        except Exception:
            self._teardown()
            raise

        internal = f"inproc://mythproto.Connection:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        with self._state_lock:
            self.state = OPEN

        self._reader = threading.Thread(target=self.run, name=f"mythproto-reader-{self.host}", daemon=True)
        self._reader.start()

        logger.debug("connected to %s:%d, protocol version %s", self.host, self.port, self.version)
        return self

    def _handshake(self) -> None:
        requested = self.requested

        text = f"{commands.MYTH_PROTO_VERSION} {requested.number}"
        if requested.token is not None:
            text = text + " " + requested.token

        self._write([text])
        args = packet.read(self.socket)
        messages.debug("< %r", args)

        if len(args) < 2:
            raise ProtocolError(f"unexpected handshake reply: {args!r}")

        answer = args[0]
        try:
            number = int(args[1])
        except ValueError:
            raise ProtocolError(f"unexpected handshake reply: {args!r}") from None

        if answer == ACCEPT:
            accepted = versions.find(number)
            if accepted is None:
                raise ProtocolError(f"backend accepted unknown protocol version {number}")
            self.version = accepted
        elif answer == REJECT:
            raise VersionRejected(requested, number)
        else:
            raise ProtocolError(f"unexpected handshake reply: {args!r}")

    def close(self) -> None:
        """Say DONE, stop the reader and dispatcher threads and close the
        socket. Closing a closed connection does nothing."""

        with self._state_lock:
            if self.state == CLOSED:
                return
            healthy = self.state == OPEN and self.error is None
            self.state = CLOSED

        if healthy:
            try:
                self._write([commands.DONE])
            except CommunicationError as exc:
                logger.debug("unable to send DONE to %s: %s", self.host, exc)

        self._stop(ConnectionStateError("connection closed"))

    def _stop(self, reason: BaseException) -> None:
        current = threading.current_thread()

        if self._signal_tx is not None:
            self._signal_tx.send(b"")

        if self._reader is not None and self._reader is not current:
            self._reader.join(self.timeout + 1)

        pending = self._pending
        self._pending = None
        if pending is not None:
            pending.fail(reason)

        self._events.put(None)
        if self._dispatcher is not None and self._dispatcher is not current:
            self._dispatcher.join(self.timeout + 1)

        self._teardown()

    def _teardown(self) -> None:
        with self._state_lock:
            self.state = CLOSED

        if self.socket is not None:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

        for signal in (self._signal_tx, self._signal_rx):
            if signal is not None:
                signal.close(linger=0)

        self._signal_tx = None
        self._signal_rx = None

    def _fail(self, error: BaseException) -> None:
        """The connection is broken: wake any waiting caller, tell the
        listeners, and shut everything down."""

        with self._state_lock:
            if self.state == CLOSED:
                return
            self.state = CLOSED
            self.error = error

        logger.debug("connection to %s failed: %s", self.host, error)

        if self.listening:
            self._events.put(events.ClientError.from_exception(error, self.version))

        if isinstance(error, CommunicationError):
            reason = error
        else:
            reason = CommunicationError(f"{type(error).__name__}: {error}")

        self._stop(reason)

    def __enter__(self):
        if self.state == CLOSED and not self._used:
            self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()

    # --- commands ---

    def send(self, command, args: Iterable = ()) -> Optional[packet.Packet]:
        """Send *command* with the extra frame *args* and return the reply
        :class:`~mythproto.packet.Packet`.

        The command and its sub-command are checked against the catalogue
        first. A command outside its range is emulated if an emulation
        covers the negotiated version, and raises
        :class:`UnsupportedCommandError` otherwise.
        """

        self._check_open()

        text = str(command)
        args = ["" if arg is None else str(arg) for arg in args]
        parsed = commands.Command.parse(text)
        info = commands.lookup(parsed.name)

        self._gate(parsed)

        if info.is_supported(self.version):
            commands.validate(parsed, args, self.version)
        else:
            emulation = fallback.find(parsed.name, self.version)
            if emulation is None:
                info.check(self.version)
            return emulation(self, text, args)

        if parsed.name == commands.DONE:
            self.close()
            return None

        reply = self._exchange([text] + args)

        if parsed.name == commands.ANN and reply.args[:1] == [OK]:
            self.announced = True

        return reply

    def _gate(self, parsed: commands.Command) -> None:
        name = parsed.name

        if name == commands.ANN:
            if self.announced:
                raise ConnectionStateError("ANN may only be sent once per connection")
        elif name in _BEFORE_ANN:
            pass
        elif not self.announced:
            raise ConnectionStateError(f"{name} is not permitted before ANN")

    def _check_open(self) -> None:
        if self.state != OPEN:
            if self.error is not None:
                raise ConnectionStateError(f"connection failed earlier: {self.error}")
            raise ConnectionStateError(f"connection is {self.state}")

    def _exchange(self, args) -> packet.Packet:
        with self._send_lock:
            self._check_open()

            pending = PendingReply()
            self._pending = pending

            try:
                self._write(args)
            except CommunicationError as exc:
                self._pending = None
                self._fail(exc)
                raise

            if not pending.wait(self.timeout):
                self._pending = None
                error = ReadTimeout(f"no reply to {args[0]} within {self.timeout:.1f} seconds")
                self._fail(error)
                raise error

        if pending.error is not None:
            if isinstance(pending.error, MythProtocolError):
                raise pending.error
            raise CommunicationError(str(pending.error)) from pending.error

        return pending.packet

    def _write(self, args) -> None:
        messages.debug("> %r", args)
        packet.write(self.socket, args)

    def announce(self, mode: str = MONITOR, events=EVENTS_NONE) -> packet.Packet:
        """Announce this client to the backend. *events* is one of the
        ``EVENTS_*`` modes; ``True`` means :data:`EVENTS_NORMAL`. Any mode
        other than :data:`EVENTS_NONE` also enables event listening.

        Backends older than protocol 22 have no ``Monitor`` connections,
        and only know the first two event modes before protocol 57; both
        are downgraded with a warning rather than refused."""

        events = int(events)

        if mode == MONITOR and not commands.lookup(commands.ANN).subcommand(MONITOR).is_supported(self.version):
            logger.warning("ANN %s is not supported in protocol version %s, using ANN %s", MONITOR, self.version, PLAYBACK)
            mode = PLAYBACK

        if events > EVENTS_NORMAL and self.version < versions.get(_EVENT_MODES_VERSION):
            logger.warning("event mode %d is not supported in protocol version %s, using %d", events, self.version, EVENTS_NORMAL)
            events = EVENTS_NORMAL

        hostname = socket.gethostname()
        text = f"{commands.ANN} {mode} {hostname} {events}"

        reply = self.send(text)
        if reply.args[:1] != [OK]:
            raise ProtocolError(f"backend refused {text!r}: {reply.args!r}")

        if events != EVENTS_NONE:
            self.enable_event_listening()

        return reply

    # --- events ---

    def enable_event_listening(self) -> None:
        """Start delivering events to the registered listeners. Events that
        arrived before this call were discarded."""

        if self.state != OPEN or not self.announced:
            raise ConnectionStateError("event listening requires an open, announced connection")

        if self.listening:
            return

        self.listening = True
        self._dispatcher = threading.Thread(target=self.dispatch, name=f"mythproto-events-{self.host}", daemon=True)
        self._dispatcher.start()

    def add_event_listener(self, listener) -> None:
        self.listeners.add(listener)

    def remove_event_listener(self, listener) -> None:
        self.listeners.remove(listener)

    def dispatch(self) -> None:
        while True:
            item = self._events.get()
            if item is None:
                break

            if isinstance(item, packet.Packet):
                try:
                    event = events.decode(item, self.version)
                except MythProtocolError:
                    logger.exception("unable to decode event %r", item.args)
                    continue
            else:
                event = item

            self.listeners.propagate(event)

    # --- reader ---

    def run(self) -> None:
        # Plain sockets come back from poll() as their file descriptor.
        fileno = self.socket.fileno()

        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        try:
            while True:
                ready = dict(poller.poll())

                if self._signal_rx in ready:
                    self._signal_rx.recv(flags=zmq.NOBLOCK)
                    break

                if fileno in ready:
                    args = packet.read(self.socket)
                    self._incoming(args)
        except Exception as exc:
            self._fail(exc)

    def _incoming(self, args) -> None:
        messages.debug("< %r", args)
        frame = packet.Packet(args, self.version)

        if frame.is_event():
            if self.listening:
                self._events.put(frame)
            else:
                logger.debug("discarding event, listening is not enabled: %r", args)
            return

        pending = self._pending
        if pending is None:
            logger.warning("discarding unsolicited reply from %s: %r", self.host, args)
            return

        self._pending = None
        pending.complete(frame)

    def __repr__(self):
        return f"<Connection {self.host}:{self.port} {self.state} version {self.version}>"


def open(host: str, port: Optional[int] = None, version=None, timeout: Optional[float] = None) -> Connection:
    """Create a :class:`Connection` and open it."""

    connection = Connection(host, port, version, timeout)
    connection.open()
    return connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
