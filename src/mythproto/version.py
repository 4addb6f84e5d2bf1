""" Protocol and database version catalogues. Every protocol revision the
    backend ever shipped is listed here, in the order it was released, along
    with the handshake token required from version 62 onward and whatever
    is known about its provenance.

    Versions compare by their position in the catalogue, not by their wire
    number: 23056 was a maintenance branch released between 56 and 57, and
    the open-ended :data:`LATEST` sentinel has a wire number of -1 but is
    newer than everything else.
"""

import functools

DATE = 'Date'
SVN_COMMIT = 'SVN-Rev.'
GIT_COMMIT = 'Git Commit'
MYTH_RELEASE = 'MythTV-Release'
MYTHBUNTU_RELEASE = 'MythBuntu-Release'

LATEST_NUMBER = -1


@functools.total_ordering
class Version:
    """ One entry in a version :class:`Catalogue`. Instances are created by
        the catalogue and never modified afterwards.

        :ivar ordinal: Position within the catalogue; this is what comparisons use.
        :ivar number: The number sent and received on the wire.
        :ivar token: Handshake token, if this version requires one.
        :ivar metadata: Dictionary of provenance details (date, commits, release).
    """

    def __init__(self, catalogue, ordinal, number, token=None, metadata=None):

        self.catalogue = catalogue
        self.ordinal = ordinal
        self.number = number
        self.token = token

        if metadata is None:
            metadata = dict()

        self.metadata = metadata


    def __eq__(self, other):
        if isinstance(other, Version):
            return self.catalogue is other.catalogue and self.ordinal == other.ordinal
        return NotImplemented


    def __lt__(self, other):
        if isinstance(other, Version):
            if self.catalogue is not other.catalogue:
                raise TypeError("cannot compare %s and %s versions" % (self.catalogue.name, other.catalogue.name))
            return self.ordinal < other.ordinal
        return NotImplemented


    def __hash__(self):
        return hash((self.catalogue.name, self.ordinal))


    def __int__(self):
        return self.number


    def __repr__(self):
        return "<%s version %s>" % (self.catalogue.name, str(self))


    def __str__(self):
        if self.number == LATEST_NUMBER:
            return 'LATEST'
        return "%02d" % (self.number)


    @property
    def is_latest(self):
        return self.number == LATEST_NUMBER


    @property
    def previous(self):
        """ The version released immediately before this one, or None if
            this is the first entry in the catalogue.
        """

        if self.ordinal == 0:
            return None
        return self.catalogue[self.ordinal - 1]


    @property
    def next(self):
        """ The version released immediately after this one, or None if
            this is the :data:`LATEST` sentinel.
        """

        if self.ordinal + 1 >= len(self.catalogue):
            return None
        return self.catalogue[self.ordinal + 1]


    @property
    def date(self):
        return self.metadata.get(DATE)


    @property
    def release(self):
        return self.metadata.get(MYTH_RELEASE)


# end of class Version



class Catalogue:
    """ An ordered line of versions. The first entry is the open lower bound
        and the last entry is the open upper bound for any version range
        built against this catalogue.
    """

    def __init__(self, name, entries):

        self.name = name
        self._ordered = list()
        self._by_number = dict()

        for ordinal, entry in enumerate(entries):
            number, token, metadata = entry
            version = Version(self, ordinal, number, token, metadata)
            self._ordered.append(version)
            self._by_number[number] = version

        self.first = self._ordered[0]
        self.latest = self._ordered[-1]


    def __getitem__(self, ordinal):
        return self._ordered[ordinal]


    def __iter__(self):
        return iter(self._ordered)


    def __len__(self):
        return len(self._ordered)


    def __contains__(self, version):
        return isinstance(version, Version) and version.catalogue is self


    def find(self, number):
        """ Return the version with the wire *number*, or None.
        """

        return self._by_number.get(int(number))


    def get(self, number):
        """ Return the version with the wire *number*. A :class:`Version`
            from this catalogue is returned unchanged; anything unknown
            raises KeyError.
        """

        if isinstance(number, Version):
            if number.catalogue is not self:
                raise KeyError("%r is not a %s version" % (number, self.name))
            return number

        try:
            return self._by_number[int(number)]
        except KeyError:
            raise KeyError("unknown %s version: %r" % (self.name, number))


    def maximum(self):
        """ The newest concrete version, which is the entry just before the
            open-ended sentinel.
        """

        return self._ordered[-2]


# end of class Catalogue



def _metadata(date=None, svn=None, git=None, release=None, mythbuntu=None):

    metadata = dict()

    for key, value in ((DATE, date), (SVN_COMMIT, svn), (GIT_COMMIT, git),
                       (MYTH_RELEASE, release), (MYTHBUNTU_RELEASE, mythbuntu)):
        if value is not None:
            metadata[key] = value

    return metadata


# Columns: number, token, date, svn revision, git commit(s), release.
# The final element of a row, when present, is the MythBuntu release.

_PROTOCOL_VERSIONS = (
    (0, None, None, None, None, None),
    (1, None, '2004-01-29', '3021', 'e6ffdd37481937e09ec7', None),
    (2, None, '2004-02-03', '3078', 'bc9ecb5d63ca65b427a6', None),
    (3, None, '2004-02-05', '3112', '13be2e34c22fa59d3874', None),
    (4, None, '2004-02-27', '3308', 'e3f1508f4eb01052eded', None),
    (5, None, '2004-04-10', '3503', 'fbb6c46dd476b974e641', None),
    (6, None, '2004-05-01', '3589', '7038088d7ff6bff8d178', None),
    (7, None, '2004-05-08', '3617', '443b50aad3e36e672fbf', None),
    (8, None, '2004-05-09', '3621', 'ddc3ba7379051f63b642', '0.15'),
    (9, None, '2004-06-04', '3838', '2543a5c99b83e0d2bb07', None),
    (10, None, '2004-07-01', '3966', '304c592c14ce7cc4b038', None),
    (11, None, '2004-07-06', '3973', 'f223614972b66a47682a', None),
    (12, None, '2004-07-10', '3988', 'c5dbecde01ea70f8add7', None),
    (13, None, '2004-08-16', '4122', 'ad4597cdc8ef89a91ef7', None),
    (14, None, '2004-10-06', '4508', '2a743b9ded4095b78a90', '0.17'),
    (15, None, '2005-03-23', '5833', 'f9bb13c9be24ddad4591', '0.18'),
    (16, None, '2005-05-03', '6284', 'e452f9a6fc03f261ab04', None),
    (17, None, '2005-05-24', '6482', 'a975132f72aab16ce5b2', None),
    (18, None, '2005-07-19', '6865', '240102c549d351d5b285', None),
    (19, None, '2005-10-09', '7427', 'd71e95c15342f12ecbd4', None),
    (20, None, '2005-11-05', '7739', '244771e83ab75f64f6ae', None),
    (21, None, '2005-11-10', '7826', 'ce1b4f5d7d54b34ca907', None),
    (22, None, '2005-11-15', '7883', 'a7af182e72ad9a81c52e', None),
    (23, None, '2006-01-10', '8553', '546724c8c9a3b573946e', None),
    (24, None, '2006-01-15', '8617', 'e271b33dce644f8c6dd2', None),
    (25, None, '2006-01-17', '8628', 'bb8a1b09e91b5b3c7d5a', None),
    (26, None, '2006-01-17', '8754', 'fcb87d603529e426a6cc', '0.19'),
    (27, None, '2006-02-15', '8973', '253a31568d27bf080f94', None),
    (28, None, '2006-03-28', '9524', 'cc49c6ff3b674a9ad1e4', None),
    (29, None, '2006-04-01', '9592', '2116c72efb6633036608', None),
    (30, None, '2006-05-22', '9968', 'b54b9e176ddec280a8ed', '0.20'),
    (31, None, '2006-09-24', '11278', 'b64f4f654b9f88bd5860', '0.20-fixes'),
    (32, None, '2006-11-30', '12151', 'a4796b5fc991f6739d71', None),
    (33, None, '2007-03-01', '12904', 'd2f00684f17c6f6bd3cd', None),
    (34, None, '2007-04-13', '13230', '69307f175c5bfd926bcb', None),
    (35, None, '2007-07-16', '13952', '2ec595b45d09fec565ee', None),
    (36, None, '2007-09-11', '14483', 'b94ee87382b87a7126c5', None),
    (37, None, '2008-01-14', '15437', 'b3c20d633a874f886f11', None),
    (38, None, '2008-01-23', '15550', '975b5a71e4e55345da6e', None),
    (39, None, '2008-01-31', '15701', 'b2d8e1fe354a796d54bf', '0.21'),
    (40, None, '2008-02-17', '16090', '34048055f51197778129', None),
    (41, None, '2008-09-25', '18419', 'ad871fd258218dd87c9d', None),
    (42, None, '2008-10-07', '18574', '7a4c6703d76598943580', None),
    (43, None, '2008-12-22', '19417', '52259b824062fb261989', None),
    (44, None, '2009-02-12', '19978', '47918f95763a0874acac', None),
    (45, None, '2009-05-09', '20523', '852b80ae3a2dc6cfcf67', None),
    (46, None, '2009-08-08', '21158', '48b0dff7a796dbec38dc', None),
    (47, None, '2009-08-16', '21298', '23313c004e217d3ccd0b', None),
    (48, None, '2009-08-23', '21445', '2fdeb3fc4acf89989a5d', None),
    (49, None, '2009-10-01', '22164', '3c131674bcd3aa853588', None),
    (50, None, '2009-10-02', '22170', 'b515e6c5b2f9384135d2', '0.22'),
    (51, None, '2009-11-23', '22892', '8c36504df2f3eb89502a', None),
    (52, None, '2009-11-30', '22932', 'bddb06933b3932730990', None),
    (53, None, '2009-12-06', '22955', '5b6770d22545a21211d8', None),
    (54, None, '2009-12-18', '22976', 'fead9968a5f28c33bb7d', None),
    (55, None, '2009-12-21', '22992', 'b2247829b3050be1da88', None),
    (56, None, '2009-12-29', '23028,23012', 'c1a564c9b62e3150d7c3,07948b49f4f7ecd79e6d28ff2faf1a7c4f516078', '0.23', '10.04'),
    (23056, None, '2010-07-17', '25366', 'feafbbce465d0a573937', '0.23.1'),
    (57, None, '2010-05-16', '24694,23636', '6e17b4de938428becdee,bfa20e9cd66ce89929f10bdeeecf75d2b7fd1166', None),
    (58, None, '2010-07-17', '25362,25229', '0bba872055b07014f16b,c1e00b45da0b65d23b0023a6e596061f847f75ea,7fce1004ab6e3692a5cfd1b6166d31f611447a05', None),
    (59, None, '2010-08-26', '25858', '3af3489357da268916c0', None),
    (60, None, '2010-09-03', '26101', '961dc80a878226da3f39', None),
    (61, None, '2010-09-03', '26106', 'c65a45682845f16c3ce6', None),
    (62, '78B5631E', '2010-09-13', '26280', 'c590e97346959463ef05', None),
    (63, '3875641D', '2010-09-25', '26518', '67fd5cffa0c31d2eddac', '0.24', '11.04'),
    (64, '8675309J', '2010-11-20', '27308', '69f594d3d3dbc573b90e', None),
    (65, 'D2BB94C2', '2011-03-08', None, 'e965e4bab1d37fd9fa94', None),
    (66, '0C0FFEE0', '2011-05-25', None, '64d448acdd27b0384748,1508085eb3cf5f5b88af', None),
    (67, '0G0G0G0', '2011-06-03', None, 'a41e9657c0e9dfbfb412', None),
    (68, '90094EAD', '2011-07-09', None, 'a17e689bdc00df4f04ca', None),
    (69, '63835135', '2011-07-11', None, 'fb34130d3a7d3c5991fa', None),
    (70, '53153836', '2011-11-30', None, '1da9d23d2838bc2d2e0bc06e2e9e1d382897d21d', None),
    (71, '05e82186', '2012-01-15', None, '3281cdd32cbc7fe27a6b693bbc1406aa98b288ca', None),
    (72, 'D78EFD6F', '2012-01-29', None, '7a94153c8cbd637e6b84ead48e3fedcfb94b0241', '0.25', '12.04'),
    (73, 'D7FE8D6F', '2012-04-11', None, 'cbb8eb1ee32a658a519d2d5fb751ace114f63bf9', None),
    (74, 'SingingPotato', '2012-05-09', None, '3fb9d6eb779e08d91df8a849a5be38e219c34bed', None),
    (75, 'SweetRock', '2012-05-30', None, '1f8c59021075d4c46889d19b0082c6dcdf04a455,a7cf09d9df392e8ce22d05d19bb10dc779fa9583,4f028f388c38c1677b6c79c5efcc461f8b20cb4c', '0.26'),
    (76, 'FireWilde', '2012-11-23', None, 'd4dcff374e,9acc8531963129714201dc263bbf94e0d963fed8,dfd37f38fc0c8874aeab09ac98a9cb488c8c3a89', None),
    (77, 'WindMark', '2013-01-01', None, '49dbed5be0,a1f979393d4897d91b338581a14a2e245d76fa16,9497ba1b63a5a6a91b06dbb85beea37444ef3ccc,030ba69', '0.26'),
    (78, 'IceBurns', '2013-10-13', None, 'e8bfd99e2', '0.28'),
    (79, 'BasaltGiant', '2013-10-23', None, 'e8bfd99e2', '0.28'),
    (80, 'TaDah!', '2014-03-16', None, '8aefe1bcf0,2f1a5350be,b257f3c860,d9217461ff,d0185093e,e6c8a78685,e350c8fb0,b9d40e407,efafb148f', '0.28'),
    (81, 'MultiRecDos', '2014-05-08', None, 'cd8666848', '0.28'),
    (82, 'IdIdO', '2014-06-02', None, 'e8a99d45c', '0.28'),
    (83, 'BreakingGlass', '2014-07-22', None, '1dab19079', '0.28'),
    (84, 'CanaryCoalmine', '2015-01-29', None, 'b220116f77', '0.28'),
    (85, 'BluePool', '2015-02-04', None, 'a4f65ce15b', '0.28'),
    (86, '(ノಠ益ಠ)ノ彡┻━┻ ', '2015-04-27', None, 'bcd7d65ef7', '0.28'),
    (87, '(ノಠ益ಠ)ノ彡┻━┻ (No entiendo!)', '2015-05-15', None, '189a7be2a,d273696311', '0.28'),
    (88, 'XmasGift', '2015-08-19', None, 'a2676c2dd,20603add4', '0.28'),
    (LATEST_NUMBER, None, None, None, None, None),
)


def _protocol_entries():

    for row in _PROTOCOL_VERSIONS:
        number, token, date, svn, git, release = row[:6]
        mythbuntu = row[6] if len(row) > 6 else None
        metadata = _metadata(date, svn, git, release, mythbuntu)
        yield (number, token, metadata)


_DATABASE_VERSIONS = (
    1029, 1037, 1042, 1047, 1056, 1057, 1061, 1062, 1072, 1074, 1082, 1085,
    1088, 1108, 1143, 1158, 1170, 1171, 1182, 1193, 1244, 1257, 1277, 1278,
    1302, 1309, 1310, 1344, LATEST_NUMBER,
)


protocol = Catalogue('protocol', _protocol_entries())
database = Catalogue('database', ((number, None, None) for number in _DATABASE_VERSIONS))

VERSION_00 = protocol.first
LATEST = protocol.latest

DATABASE_FIRST = database.first
DATABASE_LATEST = database.latest

# Protocol 62 is the first release that requires a token in the
# MYTH_PROTO_VERSION handshake.

TOKEN_REQUIRED = protocol.get(62)

# From protocol 75 onward all date/time values on the wire are in UTC.

UTC_FROM = protocol.get(75)

get = protocol.get
find = protocol.find
maximum = protocol.maximum


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
