""" Connection defaults. Each value may be overridden with an environment
    variable, read once at import time::

        MYTHPROTO_PORT      backend control port
        MYTHPROTO_TIMEOUT   seconds to wait for a reply
        MYTHPROTO_VERSION   protocol version to request in the handshake

    Callers can also change the module attributes directly; connections
    read them when they are created.
"""

import logging
import os

from . import version

logger = logging.getLogger(__name__)


def _environment(name, convert, default):

    try:
        raw = os.environ[name]
    except KeyError:
        return default

    try:
        return convert(raw)
    except (KeyError, ValueError):
        logger.warning("ignoring invalid %s=%r, using %r", name, raw, default)
        return default


def _version(raw):
    return version.get(int(raw))


port = _environment('MYTHPROTO_PORT', int, 6543)
timeout = _environment('MYTHPROTO_TIMEOUT', float, 10.0)
connect_timeout = 5.0
preferred = _environment('MYTHPROTO_VERSION', _version, version.maximum())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
