"""Version ranges.

A :class:`VersionRange` is the half-open interval ``[start, stop)`` of
versions in which a command, a property, or a whole schema is valid. The
``LATEST`` sentinel of a catalogue as the stop bound means "still valid";
the first entry of a catalogue as the start bound means "since forever".

Optional fallback bounds widen the interval for callers that can live with
a degraded implementation, typically an emulation built from older or newer
commands. :meth:`VersionRange.is_in_range` never looks at them; only
:meth:`VersionRange.is_in_fallback_range` does.

The class is agnostic of the version line: the same code handles protocol
versions and database schema versions.
"""

from __future__ import annotations

from typing import Dict, Optional, Union

from . import version
from .errors import VersionRangeError
from .version import Catalogue, Version

Bound = Union[Version, int, None]


class VersionRange:
    """Half-open version interval with optional fallback bounds."""

    def __init__(
        self,
        start: Bound = None,
        stop: Bound = None,
        start_fallback: Bound = None,
        stop_fallback: Bound = None,
        start_info: Optional[Dict[str, str]] = None,
        stop_info: Optional[Dict[str, str]] = None,
        catalogue: Optional[Catalogue] = None,
    ):
        if catalogue is None:
            catalogue = _catalogue_of(start, stop, start_fallback, stop_fallback)

        self.catalogue = catalogue
        self.start = catalogue.first if start is None else catalogue.get(start)
        self.stop = catalogue.latest if stop is None else catalogue.get(stop)
        self.start_fallback = None if start_fallback is None else catalogue.get(start_fallback)
        self.stop_fallback = None if stop_fallback is None else catalogue.get(stop_fallback)
        self.start_info = dict(start_info or {})
        self.stop_info = dict(stop_info or {})

        if self.start > self.stop:
            raise VersionRangeError(f"range start {self.start} is after its stop {self.stop}")

        if self.start_fallback is not None and self.start_fallback > self.start:
            raise VersionRangeError(
                f"fallback start {self.start_fallback} is after range start {self.start}"
            )

        if self.stop_fallback is not None and self.stop_fallback < self.stop:
            raise VersionRangeError(
                f"fallback stop {self.stop_fallback} is before range stop {self.stop}"
            )

    # --- predicates ---

    def is_in_range(self, candidate: Union[Version, int]) -> bool:
        """True if *candidate* lies in ``[start, stop)``."""
        candidate = self.catalogue.get(candidate)
        if candidate < self.start:
            return False
        return self.stop.is_latest or candidate < self.stop

    def is_in_fallback_range(self, candidate: Union[Version, int]) -> bool:
        """True if *candidate* is in range, or inside one of the fallback
        extensions below ``start`` or at/above ``stop``."""
        candidate = self.catalogue.get(candidate)

        if self.is_in_range(candidate):
            return True

        if self.start_fallback is not None:
            if self.start_fallback <= candidate < self.start:
                return True

        if self.stop_fallback is not None and candidate >= self.stop:
            if self.stop_fallback.is_latest or candidate < self.stop_fallback:
                return True

        return False

    def has_fallback(self) -> bool:
        return self.start_fallback is not None or self.stop_fallback is not None

    def contains(self, other: "VersionRange") -> bool:
        """True if *other* lies entirely within this range."""
        return self.start <= other.start and other.stop <= self.stop

    # --- algebra ---

    def restrict(self, parent: "VersionRange") -> "VersionRange":
        """Intersect with *parent*: the later start and the earlier stop.

        ``LATEST`` has the highest ordinal, so it loses against any concrete
        stop. Fallback bounds and metadata of this range are kept.
        """
        if parent.catalogue is not self.catalogue:
            raise VersionRangeError(
                f"cannot restrict a {self.catalogue.name} range by a {parent.catalogue.name} range"
            )

        start = max(self.start, parent.start)
        stop = min(self.stop, parent.stop)

        if start > stop:
            raise VersionRangeError(f"{self} and {parent} do not overlap")

        if start == self.start and stop == self.stop:
            return self

        start_fallback = self.start_fallback
        if start_fallback is not None and start_fallback > start:
            start_fallback = None

        stop_fallback = self.stop_fallback
        if stop_fallback is not None and stop_fallback < stop:
            stop_fallback = None

        return VersionRange(
            start,
            stop,
            start_fallback,
            stop_fallback,
            self.start_info,
            self.stop_info,
            catalogue=self.catalogue,
        )

    # --- value semantics ---

    def _key(self):
        return (self.catalogue.name, self.start, self.stop, self.start_fallback, self.stop_fallback)

    def __eq__(self, other):
        if not isinstance(other, VersionRange):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        return f"[{self.start},{self.stop})"

    def __repr__(self):
        extra = ""
        if self.start_fallback is not None:
            extra += f" start_fallback={self.start_fallback}"
        if self.stop_fallback is not None:
            extra += f" stop_fallback={self.stop_fallback}"
        return f"<VersionRange {self}{extra}>"


def _catalogue_of(*bounds) -> Catalogue:
    for bound in bounds:
        if isinstance(bound, Version):
            return bound.catalogue
    return version.protocol


def protocol(start: Bound = None, stop: Bound = None, **kwargs) -> VersionRange:
    """Shorthand for a protocol version range; integers are wire numbers."""
    return VersionRange(start, stop, catalogue=version.protocol, **kwargs)


def database(start: Bound = None, stop: Bound = None, **kwargs) -> VersionRange:
    """Shorthand for a database schema version range."""
    return VersionRange(start, stop, catalogue=version.database, **kwargs)


DEFAULT_RANGE = protocol()
DATABASE_DEFAULT_RANGE = database()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
