""" Framing for the command socket. Every frame is an eight character
    decimal length followed by that many bytes of UTF-8 payload, the
    arguments joined with ``[]:[]``.
"""

from __future__ import annotations

import socket
import time
from typing import Iterable, List, Optional

from .errors import CommunicationError, ReadTimeout

# Separator between arguments within one payload
DELIMITER = "[]:[]"

# Width of the decimal length header
HEADER_SIZE = 8

BACKEND_MESSAGE = "BACKEND_MESSAGE"


class Packet:
    """One decoded frame: its arguments, when it was read, and the protocol
    version that was in effect at the time."""

    def __init__(self, args: Iterable[Optional[str]], version=None, created: Optional[float] = None):
        self.args: List[str] = ["" if arg is None else str(arg) for arg in args]
        self.version = version
        self.created = time.time() if created is None else created

    def is_event(self) -> bool:
        return bool(self.args) and self.args[0] == BACKEND_MESSAGE

    def __getitem__(self, index):
        return self.args[index]

    def __len__(self):
        return len(self.args)

    def __iter__(self):
        return iter(self.args)

    def __eq__(self, other):
        if isinstance(other, Packet):
            return self.args == other.args
        return NotImplemented

    def __repr__(self):
        return f"<Packet {self.args!r}>"


def encode(args: Iterable[Optional[str]]) -> bytes:
    """
    Serialize a list of arguments -> one frame

    Layout:
        [8 byte zero padded decimal length][arg0[]:[]arg1[]:[]...]

    The length counts encoded bytes, not characters.
    """

    payload = DELIMITER.join("" if arg is None else str(arg) for arg in args)
    payload = payload.encode("utf-8")

    header = b"%08d" % len(payload)
    if len(header) != HEADER_SIZE:
        raise CommunicationError(f"payload too large for one frame: {len(payload)} bytes")

    return header + payload


def decode_header(header: bytes) -> int:
    # Upstream backends left-justify the length and pad it with spaces.
    text = header.decode("ascii", errors="replace").strip()

    if not text.isdigit():
        raise CommunicationError(f"invalid frame header: {header!r}")

    return int(text)


def decode_payload(payload: bytes) -> List[str]:
    if not payload:
        return []

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CommunicationError(f"frame payload is not UTF-8: {exc}") from exc

    return text.split(DELIMITER)


def decode(frame: bytes) -> List[str]:
    """
    Deserialize one complete frame -> list of arguments
    """

    if len(frame) < HEADER_SIZE:
        raise CommunicationError(f"truncated frame header: {frame!r}")

    length = decode_header(frame[:HEADER_SIZE])
    payload = frame[HEADER_SIZE:]

    if len(payload) != length:
        raise CommunicationError(f"frame announces {length} bytes but carries {len(payload)}")

    return decode_payload(payload)


def read_exactly(sock: socket.socket, size: int) -> bytes:
    chunks = []
    remaining = size

    while remaining > 0:
        try:
            chunk = sock.recv(remaining)
        except socket.timeout:
            raise ReadTimeout(f"timed out after reading {size - remaining} of {size} bytes") from None
        except OSError as exc:
            raise CommunicationError(f"read failed: {exc}") from exc

        if not chunk:
            raise CommunicationError(f"connection closed after {size - remaining} of {size} bytes")

        chunks.append(chunk)
        remaining -= len(chunk)

    return b"".join(chunks)


def read(sock: socket.socket) -> List[str]:
    """Read one frame from *sock*, blocking until it is complete."""

    length = decode_header(read_exactly(sock, HEADER_SIZE))
    if length == 0:
        return []

    return decode_payload(read_exactly(sock, length))


def write(sock: socket.socket, args: Iterable[Optional[str]]) -> None:
    frame = encode(args)

    try:
        sock.sendall(frame)
    except socket.timeout:
        raise CommunicationError("timed out while writing") from None
    except OSError as exc:
        raise CommunicationError(f"write failed: {exc}") from exc


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
