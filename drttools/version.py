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

"""Debian package versions

A version consists of an optional epoch, the upstream version and an
optional Debian revision, i.e. [epoch:]upstream[-revision].  Versions
are ordered as dpkg orders them, with the one exception that a missing
revision always sorts before a present one.
"""

import re
from functools import total_ordering

from drttools import ParseError

_EPOCH_RE = re.compile(r'[0-9]+')
_REVISION_RE = re.compile(r'[A-Za-z0-9.+~]+')
_DIGITS_RE = re.compile(r'[0-9]*')
_NON_DIGITS_RE = re.compile(r'[^0-9]*')

BINNMU_MARKER = '+b'


class VersionError(ParseError):
    pass


class InvalidEpochError(VersionError):
    pass


class InvalidUpstreamVersionError(VersionError):
    pass


class InvalidDebianRevisionError(VersionError):
    pass


def _char_order(c):
    if c == '~':
        return -1
    if c.isalpha():
        return ord(c)
    return ord(c) + 256


def compare_non_digits(a, b):
    """Compare two runs of non-digit characters

    Letters sort before all other characters and a tilde sorts before
    anything, even the end of the string.

    :return: a negative number, zero or a positive number
    """
    for i in range(max(len(a), len(b))):
        ac = _char_order(a[i]) if i < len(a) else 0
        bc = _char_order(b[i]) if i < len(b) else 0
        if ac != bc:
            return ac - bc
    return 0


def _cmp(a, b):
    return (a > b) - (a < b)


def compare_segments(a, b):
    """Compare two upstream versions or two revisions

    Both strings are consumed in alternating runs of non-digits and
    digits.  Non-digit runs are compared with compare_non_digits, digit
    runs numerically (an empty run counts as 0).
    """
    while a or b:
        a_str = _NON_DIGITS_RE.match(a).group()
        b_str = _NON_DIGITS_RE.match(b).group()
        res = compare_non_digits(a_str, b_str)
        if res:
            return res
        a = a[len(a_str):]
        b = b[len(b_str):]

        a_num = _DIGITS_RE.match(a).group()
        b_num = _DIGITS_RE.match(b).group()
        res = _cmp(int(a_num or 0), int(b_num or 0))
        if res:
            return res
        a = a[len(a_num):]
        b = b[len(b_num):]
    return 0


def _canonical_segments(value):
    segments = []
    while value:
        non_digits = _NON_DIGITS_RE.match(value).group()
        value = value[len(non_digits):]
        digits = _DIGITS_RE.match(value).group()
        value = value[len(digits):]
        segments.append((non_digits, int(digits or 0)))
    return tuple(segments)


def _check_upstream_version(upstream_version, has_epoch, has_revision):
    if not upstream_version:
        raise InvalidUpstreamVersionError("empty upstream version")
    allowed = '.+~'
    if has_epoch:
        allowed += ':'
    if has_revision:
        allowed += '-'
    for c in upstream_version:
        if not (c.isascii() and c.isalnum()) and c not in allowed:
            raise InvalidUpstreamVersionError("invalid character %r in upstream version %s" % (c, upstream_version))


@total_ordering
class PackageVersion(object):
    """The version of a Debian package

    Instances are immutable; compare them with the usual operators.
    """

    __slots__ = ['_epoch', '_upstream_version', '_debian_revision']

    def __init__(self, epoch, upstream_version, debian_revision=None):
        if epoch is not None:
            if not isinstance(epoch, int) or isinstance(epoch, bool) or epoch < 0:
                raise InvalidEpochError("invalid epoch %r" % (epoch,))
        _check_upstream_version(upstream_version, epoch is not None, debian_revision is not None)
        if debian_revision is not None and not _REVISION_RE.fullmatch(debian_revision):
            raise InvalidDebianRevisionError("invalid Debian revision %r" % debian_revision)

        self._epoch = epoch
        self._upstream_version = upstream_version
        self._debian_revision = debian_revision

    @classmethod
    def parse(cls, value):
        """Parse a version string

        :param value: A version as found in the Version field of a package
        :return: A PackageVersion
        :raises VersionError: if the epoch, the upstream version or the revision is malformed
        """
        epoch = None
        if ':' in value:
            epoch_str, value = value.split(':', 1)
            if not _EPOCH_RE.fullmatch(epoch_str):
                raise InvalidEpochError("invalid epoch %r" % epoch_str)
            epoch = int(epoch_str)

        debian_revision = None
        if '-' in value:
            value, debian_revision = value.rsplit('-', 1)
            if not debian_revision:
                raise InvalidDebianRevisionError("empty Debian revision")

        return cls(epoch, value, debian_revision)

    @property
    def epoch(self):
        return self._epoch

    @property
    def upstream_version(self):
        return self._upstream_version

    @property
    def debian_revision(self):
        return self._debian_revision

    @property
    def has_epoch(self):
        return self._epoch is not None

    @property
    def is_native(self):
        return self._debian_revision is None

    @property
    def epoch_or_0(self):
        return self._epoch if self._epoch is not None else 0

    def _binnmu_split(self):
        # binNMU suffixes are part of the revision, or of the upstream
        # version for native packages
        value = self._upstream_version if self.is_native else self._debian_revision
        index = value.rfind(BINNMU_MARKER)
        if index < 0:
            return None
        suffix = value[index + len(BINNMU_MARKER):]
        if not suffix.isdigit() or not suffix.isascii():
            return None
        return value[:index], int(suffix)

    @property
    def binnmu_version(self):
        """The binNMU counter, i.e. X for versions ending in +bX, or None"""
        split = self._binnmu_split()
        return split[1] if split is not None else None

    @property
    def has_binnmu_version(self):
        return self._binnmu_split() is not None

    def without_binnmu_version(self):
        """Return this version with its +bX suffix removed"""
        split = self._binnmu_split()
        if split is None:
            return self
        if self.is_native:
            return PackageVersion(self._epoch, split[0], None)
        return PackageVersion(self._epoch, self._upstream_version, split[0])

    def compare(self, other):
        """Compare with another version

        :return: -1, 0 or 1 if this version is older, the same or newer than other
        """
        res = _cmp(self.epoch_or_0, other.epoch_or_0)
        if res:
            return res
        res = compare_segments(self._upstream_version, other._upstream_version)
        if res:
            return _cmp(res, 0)
        if self._debian_revision is None or other._debian_revision is None:
            return _cmp(self._debian_revision is not None, other._debian_revision is not None)
        return _cmp(compare_segments(self._debian_revision, other._debian_revision), 0)

    def __eq__(self, other):
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other):
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self):
        revision = self._debian_revision
        return hash((self.epoch_or_0,
                     _canonical_segments(self._upstream_version),
                     revision is not None,
                     _canonical_segments(revision or ''),
                     ))

    def __str__(self):
        version = self._upstream_version
        if self._epoch is not None:
            version = '%d:%s' % (self._epoch, version)
        if self._debian_revision is not None:
            version = '%s-%s' % (version, self._debian_revision)
        return version

    def __repr__(self):
        return '%s(%r, %r, %r)' % (self.__class__.__name__, self._epoch, self._upstream_version,
                                   self._debian_revision)


def version_compare(a, b):
    """Compare two version strings

    :return: -1, 0 or 1
    :raises VersionError: if either of the versions cannot be parsed
    """
    return PackageVersion.parse(a).compare(PackageVersion.parse(b))
