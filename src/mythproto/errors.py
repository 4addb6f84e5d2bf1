"""Exception hierarchy.

Every error raised by this package derives from :class:`MythProtocolError`.
Version and command checks raise before anything touches the socket; I/O
failures surface as :class:`CommunicationError` and leave the connection
unusable.
"""

from __future__ import annotations


class MythProtocolError(Exception):
    """Base class for all mythproto errors."""


class UnknownCommandError(MythProtocolError):
    """The command (or sub-command) is not in the catalogue for any version."""

    def __init__(self, command: str, parent: str = None):
        self.command = command
        self.parent = parent
        if parent:
            text = f"unknown {parent} sub-command: {command!r}"
        else:
            text = f"unknown command: {command!r}"
        super().__init__(text)


class UnsupportedCommandError(MythProtocolError):
    """The command is known, but not usable at the negotiated version."""

    def __init__(self, command: str, version, range):
        self.command = command
        self.version = version
        self.range = range
        super().__init__(
            f"{command} is not supported in protocol version {version}, "
            f"supported range is {range}"
        )


class CommunicationError(MythProtocolError):
    """Socket I/O failed or the peer sent something unreadable."""


class ReadTimeout(CommunicationError):
    """No reply arrived within the configured read timeout."""


class ProtocolError(CommunicationError):
    """The backend replied with something this client does not understand."""


class VersionRejected(CommunicationError):
    """The backend refused the requested protocol version."""

    def __init__(self, requested, number: int):
        self.requested = requested
        self.number = number
        super().__init__(
            f"backend rejected protocol version {requested}, "
            f"it speaks version {number}"
        )


class ConnectionStateError(MythProtocolError):
    """The connection is not in a state that permits the operation."""


class VersionRangeError(MythProtocolError, ValueError):
    """A version range or schema is declared inconsistently."""


class UnknownPropertyError(MythProtocolError, KeyError):
    """A property name was used that the schema never declared."""

    def __str__(self):
        return str(self.args[0]) if self.args else ''


class ResponseSizeError(MythProtocolError, ValueError):
    """The number of values does not match the resolved schema."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
