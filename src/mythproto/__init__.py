""" Python client for the MythTV backend protocol. The protocol went through
    dozens of incompatible revisions; this package knows all of them, checks
    every command against the negotiated version, and lets callers address
    reply fields by name regardless of where a given version puts them.
"""

# Utility components.

from . import errors
from . import json
from . import listeners

# Version handling, used by everything below.

from . import version
from . import versionrange
from . import values
from . import properties

# Wire format and catalogues.

from . import packet
from . import command
from . import responses
from . import events
from . import fallback
from . import config

# Primary public-facing interfaces.

from . import connection
open = connection.open

from .connection import Connection
from .packet import Packet
from .version import Version
from .versionrange import VersionRange

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
