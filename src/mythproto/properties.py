"""Positional property engine.

Backend responses are flat lists of strings. Which string means what depends
on the protocol version: fields were added and removed over the years, and
every addition or removal shifts the position of all fields after it.

A :class:`Schema` declares every field a response kind ever had, in wire
order, each with its own version range. :meth:`Schema.resolve` filters that
declaration down to the fields active in one version and numbers them from
zero; the result is cached, since it depends only on the schema and the
version. :class:`Properties` is the base class for response objects: it
pairs a version with the raw values and resolves names to positions.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .errors import ResponseSizeError, UnknownPropertyError, VersionRangeError
from .values import DataType, decode, encode
from .versionrange import DEFAULT_RANGE, VersionRange

# Returned by index lookups for a property that is declared, but not
# present in the version being resolved.

NOT_SUPPORTED = -1


class Property:
    """Declaration of one field: name, version range, type and default."""

    def __init__(
        self,
        name: str,
        range: Optional[VersionRange] = None,
        type: DataType = DataType.STRING,
        default: Optional[str] = None,
        skip: bool = False,
        enumeration=None,
    ):
        self.name = name
        self.inherits = range is None
        self.range = DEFAULT_RANGE if range is None else range
        self.type = type
        self.default = default
        self.skip = skip
        self.enumeration = enumeration

        if type is DataType.ENUM and enumeration is None:
            raise VersionRangeError(f"property {name} is an ENUM without an enumeration")

    def clipped(self, range: VersionRange) -> "Property":
        """A copy of this property with its range restricted to *range*.

        A property that never overlaps *range* keeps its name but gets an
        empty range, so that it still counts as declared.
        """
        start = max(self.range.start, range.start)
        stop = min(self.range.stop, range.stop)

        if start > stop:
            clipped = VersionRange(range.start, range.start, catalogue=range.catalogue)
        else:
            clipped = self.range.restrict(range)

        return Property(self.name, clipped, self.type, self.default, self.skip, self.enumeration)

    def __repr__(self):
        return f"<Property {self.name} {self.range} {self.type.name}>"


class Resolved:
    """The active fields of a schema for one version, with fresh indices."""

    def __init__(self, schema: "Schema", version, properties: Sequence[Property]):
        self.schema = schema
        self.version = version
        self.properties = tuple(properties)
        self._index: Dict[str, int] = {prop.name: i for i, prop in enumerate(self.properties)}

    def count(self) -> int:
        return len(self.properties)

    def index(self, name: str) -> int:
        """Wire position of *name*, or :data:`NOT_SUPPORTED`.

        Raises :class:`UnknownPropertyError` if the schema never declared
        the name.
        """
        try:
            return self._index[name]
        except KeyError:
            if name in self.schema:
                return NOT_SUPPORTED
            raise UnknownPropertyError(f"{self.schema.name} has no property {name!r}")

    def is_supported(self, name: str) -> bool:
        return self.index(name) != NOT_SUPPORTED

    def property(self, name: str) -> Property:
        return self.properties[self._index[name]]

    def names(self) -> List[str]:
        return [prop.name for prop in self.properties]

    def __contains__(self, name):
        return name in self._index

    def __iter__(self) -> Iterator[Property]:
        return iter(self.properties)

    def __len__(self):
        return len(self.properties)

    def __repr__(self):
        return f"<Resolved {self.schema.name}@{self.version} {self.names()}>"


class Schema:
    """Ordered declaration of every field a message kind has ever had."""

    def __init__(self, name: str, properties: Iterable[Property], range: Optional[VersionRange] = None):
        self.name = name
        self.range = DEFAULT_RANGE if range is None else range
        self._by_name: Dict[str, Property] = {}
        self._resolved: Dict[object, Resolved] = {}
        self._lock = threading.Lock()

        # A property declared without a range lives as long as its schema.
        declared = []
        for prop in properties:
            if prop.inherits:
                prop = Property(prop.name, self.range, prop.type, prop.default, prop.skip, prop.enumeration)
            declared.append(prop)

        self.properties = tuple(declared)

        for prop in self.properties:
            if prop.name in self._by_name:
                raise VersionRangeError(f"{name}: property {prop.name} declared twice")

            if prop.range.catalogue is not self.range.catalogue:
                raise VersionRangeError(f"{name}: property {prop.name} uses a different version line")

            if not self.range.contains(prop.range):
                raise VersionRangeError(
                    f"{name}: range {prop.range} of property {prop.name} "
                    f"lies outside the schema range {self.range}"
                )

            self._by_name[prop.name] = prop

    def resolve(self, version) -> Resolved:
        """Return the active properties for *version*, numbered from zero."""
        version = self.range.catalogue.get(version)

        try:
            return self._resolved[version]
        except KeyError:
            pass

        with self._lock:
            resolved = self._resolved.get(version)
            if resolved is None:
                resolved = self._resolve(version)
                self._resolved[version] = resolved

        return resolved

    def _resolve(self, version) -> Resolved:
        active = []

        if self.range.is_in_range(version):
            for prop in self.properties:
                if prop.skip:
                    continue
                if prop.range.restrict(self.range).is_in_range(version):
                    active.append(prop)

        return Resolved(self, version, active)

    def count(self, version) -> int:
        return self.resolve(version).count()

    def index(self, name: str, version) -> int:
        return self.resolve(version).index(name)

    def property(self, name: str) -> Property:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownPropertyError(f"{self.name} has no property {name!r}")

    def names(self) -> List[str]:
        return [prop.name for prop in self.properties]

    def __add__(self, other: "Schema") -> "Schema":
        """Concatenate two schemas; the result is valid where both are."""
        if not isinstance(other, Schema):
            return NotImplemented

        range = self.range.restrict(other.range)
        properties = [prop.clipped(range) for prop in self.properties + other.properties]
        return Schema(f"{self.name}+{other.name}", properties, range)

    def __contains__(self, name):
        return name in self._by_name

    def __iter__(self) -> Iterator[Property]:
        return iter(self.properties)

    def __len__(self):
        return len(self.properties)

    def __repr__(self):
        return f"<Schema {self.name} {self.range} ({len(self.properties)} properties)>"


class Properties:
    """Base class for response objects addressed by property name.

    Subclasses set the :attr:`schema` class attribute. Instances hold the
    protocol version and the raw wire strings; reads and writes go through
    the resolved schema, so callers never deal with positions.
    """

    schema: Schema = None

    def __init__(self, version, values: Sequence[str]):
        self.version = self.schema.range.catalogue.get(version)
        self.resolved = self.schema.resolve(self.version)

        values = list(values)
        self.check_size(values)
        self.values = values

    @classmethod
    def new(cls, version) -> "Properties":
        """A new outgoing message with every active property at its default."""
        resolved = cls.schema.resolve(version)
        values = [prop.default if prop.default is not None else "" for prop in resolved]
        return cls(version, values)

    @classmethod
    def read(cls, version, args: Sequence[str], offset: int = 0) -> "Properties":
        """Build an instance from ``args[offset:]``, consuming exactly as
        many values as the schema has active properties. Replies that carry
        several records back to back are read by advancing *offset* by
        :meth:`count` each time."""
        count = cls.schema.count(version)
        values = list(args[offset : offset + count])
        return cls(version, values)

    def check_size(self, values: List[str]) -> None:
        expected = self.resolved.count()
        if len(values) != expected:
            raise ResponseSizeError("%d args expected but %d args found." % (expected, len(values)))

    # --- raw access ---

    def index(self, name: str) -> int:
        return self.resolved.index(name)

    def is_supported(self, name: str) -> bool:
        return self.resolved.is_supported(name)

    def count(self) -> int:
        return self.resolved.count()

    def get(self, name: str) -> Optional[str]:
        """Raw value of *name*, or None if the field is not in this version."""
        index = self.index(name)
        if index == NOT_SUPPORTED:
            return None
        return self.values[index]

    def set(self, name: str, value: Optional[str]) -> None:
        """Set the raw value of *name*. Fields not in this version are ignored."""
        index = self.index(name)
        if index == NOT_SUPPORTED:
            return
        self.values[index] = "" if value is None else str(value)

    def all(self) -> List[str]:
        return list(self.values[: self.count()])

    def to_dict(self) -> Dict[str, str]:
        return {prop.name: self.values[i] for i, prop in enumerate(self.resolved)}

    # --- typed access ---

    def value(self, name: str):
        """Decoded value of *name* according to its declared type."""
        index = self.index(name)
        if index == NOT_SUPPORTED:
            return None
        prop = self.resolved.properties[index]
        return decode(prop.type, self.values[index], self.version, prop.enumeration)

    def assign(self, name: str, value) -> None:
        """Encode *value* according to the declared type and store it."""
        index = self.index(name)
        if index == NOT_SUPPORTED:
            return
        prop = self.resolved.properties[index]
        self.values[index] = encode(prop.type, value, self.version, prop.enumeration)

    def __eq__(self, other):
        if not isinstance(other, Properties):
            return NotImplemented
        return type(self) is type(other) and self.version == other.version and self.values == other.values

    def __repr__(self):
        return f"<{type(self).__name__} {self.version} {self.to_dict()}>"


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
