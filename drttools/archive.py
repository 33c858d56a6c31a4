# -*- coding: utf-8 -*-

# Copyright (C) 2022-2024 Sebastian Ramacher <sebastian@ramacher.at>

# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

"""Suites and codenames of the Debian archive

Every suite has exactly one codename and vice versa.  Testing, stable
and oldstable (and their codenames) may carry an extension, e.g.
stable-backports or bookworm-security.
"""

from enum import Enum, unique

from drttools import ParseError


class InvalidSuiteError(ParseError):
    pass


class InvalidCodenameError(ParseError):
    pass


class InvalidExtensionError(ParseError):
    pass


class InvalidSuiteOrCodenameError(ParseError):
    pass


@unique
class Extension(Enum):

    BACKPORTS = 'backports'
    SECURITY = 'security'
    UPDATES = 'updates'
    PROPOSED_UPDATES = 'proposed-updates'

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise InvalidExtensionError("invalid extension: %s" % value) from None


# suite name -> codename, in the order unstable, testing, stable, oldstable, experimental
SUITE_CODENAMES = {
    'unstable': 'sid',
    'testing': 'trixie',
    'stable': 'bookworm',
    'oldstable': 'bullseye',
    'experimental': 'rc-buggy',
}
CODENAME_SUITES = {codename: suite for suite, codename in SUITE_CODENAMES.items()}

_EXTENSIBLE_SUITES = frozenset(['testing', 'stable', 'oldstable'])
_EXTENSIBLE_CODENAMES = frozenset(SUITE_CODENAMES[x] for x in _EXTENSIBLE_SUITES)


class _ArchiveName(object):

    __slots__ = ['_name', '_extension']

    NAMES = frozenset()
    EXTENSIBLE = frozenset()
    PARSE_ERROR = ParseError

    def __init__(self, name, extension=None):
        if name not in self.NAMES:
            raise self.PARSE_ERROR("invalid %s: %s" % (self.__class__.__name__.lower(), name))
        if extension is not None:
            if not isinstance(extension, Extension):
                raise TypeError("extension must be an Extension, got %r" % (extension,))
            if name not in self.EXTENSIBLE:
                raise self.PARSE_ERROR("%s cannot carry an extension" % name)
        self._name = name
        self._extension = extension

    @classmethod
    def parse(cls, value):
        if value in cls.NAMES:
            return cls(value)
        if '-' not in value:
            raise cls.PARSE_ERROR("invalid %s: %s" % (cls.__name__.lower(), value))
        name, extension = value.split('-', 1)
        extension = Extension.parse(extension)
        if name not in cls.EXTENSIBLE:
            raise cls.PARSE_ERROR("invalid %s: %s" % (cls.__name__.lower(), value))
        return cls(name, extension)

    @property
    def name(self):
        return self._name

    @property
    def extension(self):
        return self._extension

    @property
    def accepts_extension(self):
        return self._name in self.EXTENSIBLE

    def with_extension(self, extension):
        """Return the same suite with the given extension

        Suites that cannot carry an extension are returned unchanged.
        """
        if not self.accepts_extension:
            return self
        return self.__class__(self._name, extension)

    def without_extension(self):
        if self._extension is None:
            return self
        return self.__class__(self._name)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._name == other._name and self._extension == other._extension

    def __hash__(self):
        return hash((self.__class__.__name__, self._name, self._extension))

    def __str__(self):
        if self._extension is not None:
            return '%s-%s' % (self._name, self._extension)
        return self._name

    def __repr__(self):
        return '%s(%r, %s)' % (self.__class__.__name__, self._name, self._extension)


class Suite(_ArchiveName):

    NAMES = frozenset(SUITE_CODENAMES)
    EXTENSIBLE = _EXTENSIBLE_SUITES
    PARSE_ERROR = InvalidSuiteError

    @classmethod
    def from_codename(cls, codename):
        return cls(CODENAME_SUITES[codename.name], codename.extension)

    def to_codename(self):
        return Codename.from_suite(self)


class Codename(_ArchiveName):

    NAMES = frozenset(CODENAME_SUITES)
    EXTENSIBLE = _EXTENSIBLE_CODENAMES
    PARSE_ERROR = InvalidCodenameError

    @classmethod
    def from_suite(cls, suite):
        return cls(SUITE_CODENAMES[suite.name], suite.extension)

    def to_suite(self):
        return Suite.from_codename(self)


Suite.UNSTABLE = Suite('unstable')
Suite.TESTING = Suite('testing')
Suite.STABLE = Suite('stable')
Suite.OLDSTABLE = Suite('oldstable')
Suite.EXPERIMENTAL = Suite('experimental')

Codename.SID = Codename('sid')
Codename.TRIXIE = Codename('trixie')
Codename.BOOKWORM = Codename('bookworm')
Codename.BULLSEYE = Codename('bullseye')
Codename.RC_BUGGY = Codename('rc-buggy')


class SuiteOrCodename(object):
    """Either a suite or a codename

    A suite and its codename compare and hash equal, so both can be used
    interchangeably as keys.  str() gives back the name the value was
    created from.
    """

    __slots__ = ['_value']

    def __init__(self, value):
        if not isinstance(value, (Suite, Codename)):
            raise TypeError("expected a Suite or a Codename, got %r" % (value,))
        self._value = value

    @classmethod
    def parse(cls, value):
        extension_error = None
        for klass in (Suite, Codename):
            try:
                return cls(klass.parse(value))
            except InvalidExtensionError as e:
                extension_error = e
            except ParseError:
                pass
        if extension_error is not None:
            raise extension_error
        raise InvalidSuiteOrCodenameError("invalid suite or codename: %s" % value)

    @property
    def value(self):
        return self._value

    @property
    def suite(self):
        if isinstance(self._value, Suite):
            return self._value
        return self._value.to_suite()

    @property
    def codename(self):
        if isinstance(self._value, Codename):
            return self._value
        return self._value.to_codename()

    @property
    def extension(self):
        return self._value.extension

    def with_extension(self, extension):
        return SuiteOrCodename(self._value.with_extension(extension))

    def without_extension(self):
        return SuiteOrCodename(self._value.without_extension())

    def __eq__(self, other):
        # bare Suite and Codename values hash differently, so they never compare equal
        if isinstance(other, SuiteOrCodename):
            return self.suite == other.suite
        return NotImplemented

    def __hash__(self):
        # always via the suite so that aliases end up in the same bucket
        return hash(self.suite)

    def __str__(self):
        return str(self._value)

    def __repr__(self):
        return 'SuiteOrCodename(%r)' % (self._value,)


SuiteOrCodename.UNSTABLE = SuiteOrCodename(Suite.UNSTABLE)
