# -*- coding: utf-8 -*-

# Copyright (C) 2024 Sebastian Ramacher <sebastian@ramacher.at>

# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

import logging

from drttools import ParseError
from drttools.version import PackageVersion
from drttools.wb import BinNMU, BuildPriority, SourceSpecifier, WBError


class NMUList(object):
    """Schedule binNMUs for a list of source packages

    Every line of the input names a source package, optionally with a
    version ("source_version").  Empty lines and lines starting with "#"
    are ignored.
    """

    def __init__(self, options, source_packages):
        logger_name = ".".join((self.__class__.__module__, self.__class__.__name__))
        self.logger = logging.getLogger(logger_name)
        self.options = options
        self.source_packages = source_packages

    def parse_line(self, line):
        """Return (source, version or None) for a line, or None to ignore it

        :raises ParseError: if the version is invalid
        """
        line = line.strip()
        if not line or line.startswith('#'):
            return None
        source = line.split()[0]
        if '_' not in source:
            return source, None
        source, version = source.split('_', 1)
        return source, PackageVersion.parse(version)

    def build_commands(self, lines):
        commands = []
        for line in lines:
            try:
                entry = self.parse_line(line)
            except ParseError as e:
                self.logger.warning("Skipping %s: %s", line.strip(), e)
                print("# Skipping %s: %s" % (line.strip(), e))
                continue
            if entry is None:
                continue

            source, version = entry
            try:
                commands.extend(self.build_source_commands(source, version))
            except WBError as e:
                self.logger.warning("Skipping %s: %s", source, e)
                print("# Skipping %s: %s" % (source, e))
        return commands

    def build_source_commands(self, source, version=None):
        source_specifier = SourceSpecifier(source)
        if version is not None:
            source_specifier.with_version(version)
        if self.options.suite is not None:
            source_specifier.with_suite(self.options.suite)
        if self.options.nmu_architectures:
            if self.source_packages.is_ma_same(source):
                self.logger.info("%s: Multi-Arch: same, ignoring requested architectures", source)
            else:
                source_specifier.with_archive_architectures(self.options.nmu_architectures)

        binnmu = BinNMU(source_specifier, self.options.message)
        if self.options.extra_depends:
            binnmu.with_extra_depends(self.options.extra_depends)
        if self.options.dep_wait:
            binnmu.with_dependency_wait(self.options.dep_wait)
        commands = [binnmu.build()]
        if self.options.build_priority is not None:
            commands.append(BuildPriority(source_specifier, self.options.build_priority).build())
        return commands
