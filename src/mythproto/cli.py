""" The ``mythproto`` command line tool: dump the version and command
    catalogues as JSON, or probe a backend for the protocol version it
    speaks.
"""

import argparse
import logging
import sys

from . import command
from . import config
from . import connection
from . import errors
from . import json
from . import version


def describe(entry):
    """ JSON-friendly description of one protocol version.
    """

    description = dict()
    description['number'] = entry.number
    description['name'] = str(entry)
    description['token'] = entry.token
    description['metadata'] = dict(entry.metadata)

    return description


def versions():
    return [describe(entry) for entry in version.protocol]


def commands(number):
    return command.supported(version.get(number))


def probe(host, port=None, requested=None, timeout=None):
    """ Open a connection to *host*, note the negotiated protocol version,
        and close it again. A rejection is not an error here: the backend
        tells us which version it wants, which is what we came for.
    """

    result = dict()
    result['host'] = host

    try:
        link = connection.open(host, port, requested, timeout)
    except errors.VersionRejected as rejected:
        result['accepted'] = False
        result['version'] = rejected.number
        return result

    try:
        result['accepted'] = True
        result['version'] = link.version.number
        result['token'] = link.version.token
    finally:
        link.close()

    return result


def arguments(argv=None):

    parser = argparse.ArgumentParser(
        prog='mythproto',
        description='Inspect the MythTV protocol version and command catalogues',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log packet traffic to stderr',
    )

    subparsers = parser.add_subparsers(dest='action', required=True)

    subparsers.add_parser('versions', help='List every known protocol version')

    listing = subparsers.add_parser('commands', help='List the commands valid in one protocol version')
    listing.add_argument('version', type=int, help='Protocol version number, for example 63')

    probing = subparsers.add_parser('probe', help='Ask a backend which protocol version it speaks')
    probing.add_argument('host', help='Backend hostname')
    probing.add_argument('-p', '--port', type=int, default=None, help='Control port (default: %d)' % (config.port))
    probing.add_argument('-V', '--protocol', type=int, default=None, help='Protocol version to request')
    probing.add_argument('-t', '--timeout', type=float, default=None, help='Read timeout in seconds')

    return parser.parse_args(argv)


def main(argv=None):

    args = arguments(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        if args.action == 'versions':
            result = versions()
        elif args.action == 'commands':
            result = commands(args.version)
        else:
            result = probe(args.host, args.port, args.protocol, args.timeout)
    except KeyError as error:
        print('mythproto: %s' % (error.args[0]), file=sys.stderr)
        return 2
    except errors.MythProtocolError as error:
        print('mythproto: %s' % (error), file=sys.stderr)
        return 1

    sys.stdout.write(json.pretty(result).decode('utf-8'))
    sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
