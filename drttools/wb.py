# -*- coding: utf-8 -*-

# Copyright (C) 2021-2024 Sebastian Ramacher <sebastian@ramacher.at>

# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

"""Commands for wanna-build

The builders in this module produce WBCommand instances, the textual
commands understood by wanna-build (see
https://release.debian.org/wanna-build.txt).
"""

from drttools.architectures import Architecture
from drttools.archive import SuiteOrCodename


class WBError(Exception):
    pass


class InvalidArchitectureForCommandError(WBError):

    def __init__(self, architecture, command):
        super().__init__("invalid architecture %s for wb command '%s'" % (architecture, command))
        self.architecture = architecture
        self.command = command


class WBExecutionError(WBError):

    def __init__(self, command, message):
        super().__init__("unable to execute wb command '%s': %s" % (command, message))
        self.command = command


class SessionError(WBError):
    pass


class WBCommand(object):
    """A single command for wanna-build

    Commands are immutable; only the builders below create them.
    """

    __slots__ = ['_command']

    def __init__(self, command):
        self._command = command

    def __str__(self):
        return self._command

    def __repr__(self):
        return 'WBCommand(%r)' % self._command

    def __eq__(self, other):
        if not isinstance(other, WBCommand):
            return NotImplemented
        return self._command == other._command

    def __lt__(self, other):
        if not isinstance(other, WBCommand):
            return NotImplemented
        return self._command < other._command

    def __hash__(self):
        return hash(self._command)


class WBArchitecture(object):
    """An architecture as understood by wanna-build

    Besides real architectures, wanna-build knows "ANY" (all
    architecture-dependent builds) and "ALL" (everything), and "-arch"
    to exclude an architecture, e.g. "ANY -i386".
    """

    __slots__ = ['_architecture', '_exclude', '_special']

    ANY = None  # initialised below
    ALL = None  # initialised below

    def __init__(self, architecture=None, *, exclude=False, special=None):
        self._architecture = architecture
        self._exclude = exclude
        self._special = special

    @classmethod
    def parse(cls, value):
        if value == 'ANY':
            return cls.ANY
        if value == 'ALL':
            return cls.ALL
        if value.startswith('-'):
            return cls.exclude(Architecture.parse(value[1:]))
        return cls.architecture(Architecture.parse(value))

    @classmethod
    def architecture(cls, architecture):
        return cls(architecture)

    @classmethod
    def exclude(cls, architecture):
        return cls(architecture, exclude=True)

    @property
    def arch(self):
        return self._architecture

    @property
    def is_exclusion(self):
        return self._exclude

    def __str__(self):
        if self._special is not None:
            return self._special
        if self._exclude:
            return '-%s' % self._architecture
        return str(self._architecture)

    def __repr__(self):
        return 'WBArchitecture(%s)' % self

    def __eq__(self, other):
        if not isinstance(other, WBArchitecture):
            return NotImplemented
        return (self._architecture, self._exclude, self._special) == \
            (other._architecture, other._exclude, other._special)

    def __hash__(self):
        return hash((self._architecture, self._exclude, self._special))


WBArchitecture.ANY = WBArchitecture(special='ANY')
WBArchitecture.ALL = WBArchitecture(special='ALL')


class SourceSpecifier(object):
    """A source package, optionally with version, architectures and suite"""

    def __init__(self, source):
        self.source = source
        self.version = None
        self.architectures = []
        self.suite = None

    def with_version(self, version):
        self.version = version
        return self

    def with_suite(self, suite):
        """Set the suite; unstable is used if it is not set"""
        self.suite = suite
        return self

    def with_architectures(self, architectures):
        """Add architectures; ANY is used if none are set"""
        self.architectures.extend(architectures)
        return self

    def with_archive_architectures(self, architectures):
        self.architectures.extend(WBArchitecture.architecture(arch) for arch in architectures)
        return self

    def check_architectures(self, command, forbidden_architectures=(Architecture.SOURCE,), forbid_all=False):
        for arch in self.architectures:
            if arch.arch in forbidden_architectures or (forbid_all and arch == WBArchitecture.ALL):
                raise InvalidArchitectureForCommandError(arch, command)

    def __str__(self):
        source = self.source
        if self.version is not None:
            source = '%s_%s' % (source, self.version)
        architectures = ' '.join(str(arch) for arch in self.architectures) or str(WBArchitecture.ANY)
        suite = self.suite if self.suite is not None else SuiteOrCodename.UNSTABLE
        return '%s . %s . %s' % (source, architectures, suite)


class WBCommandBuilder(object):

    def build(self):
        """Build the wanna-build command"""
        return WBCommand(str(self))


class BinNMU(WBCommandBuilder):
    """Builder for "nmu" commands"""

    def __init__(self, source, message):
        source.check_architectures('nmu', forbidden_architectures=(Architecture.SOURCE, Architecture.ALL),
                                   forbid_all=True)
        self._source = source
        self._message = message
        self._nmu_version = None
        self._extra_depends = None
        self._dep_wait = None

    def with_nmu_version(self, version):
        """Set the binNMU version; otherwise wanna-build picks the next one"""
        self._nmu_version = version
        return self

    def with_extra_depends(self, extra_depends):
        self._extra_depends = extra_depends
        return self

    def with_dependency_wait(self, dep_wait):
        self._dep_wait = dep_wait
        return self

    def __str__(self):
        command = 'nmu '
        if self._nmu_version is not None:
            command += '%d ' % self._nmu_version
        command += '%s . -m "%s"' % (self._source, self._message)
        if self._extra_depends is not None:
            command += ' --extra-depends "%s"' % self._extra_depends
        if self._dep_wait is not None:
            command += ' --dependency-wait "%s"' % self._dep_wait
        return command


class DepWait(WBCommandBuilder):
    """Builder for "dw" commands"""

    def __init__(self, source, message):
        source.check_architectures('dw')
        self._source = source
        self._message = message

    def __str__(self):
        return 'dw %s . -m "%s"' % (self._source, self._message)


class BuildPriority(WBCommandBuilder):
    """Builder for "bp" commands"""

    def __init__(self, source, priority):
        source.check_architectures('bp')
        self._source = source
        self._priority = priority

    def __str__(self):
        return 'bp %d %s' % (self._priority, self._source)


class Fail(WBCommandBuilder):
    """Builder for "fail" commands"""

    def __init__(self, source, message):
        source.check_architectures('fail')
        self._source = source
        self._message = message

    def __str__(self):
        return 'fail %s . -m "%s"' % (self._source, self._message)


class Unblock(WBCommandBuilder):
    """Builder for "unblock" commands

    The architecture is only given for binNMUs and the "_tpu" suffix
    selects uploads to testing-proposed-updates.
    """

    def __init__(self, source, version, *, tpu=False, architecture=None):
        self._source = source
        self._version = version
        self._tpu = tpu
        self._architecture = architecture

    def __str__(self):
        command = 'unblock %s' % self._source
        if self._tpu:
            command += '_tpu'
        command += '/%s' % self._version
        if self._architecture is not None:
            command += '/%s' % self._architecture
        return command
