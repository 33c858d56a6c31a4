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

import logging
import os

from debian import deb822

from drttools import MultiArch, ParseError
from drttools.utils import open_possibly_compressed, possibly_compressed


def source_of_binary(paragraph):
    """Return the source package name of a binary package paragraph

    The Source field may carry a version ("src (1.0-1)"); without a Source
    field the source is named like the binary package.
    """
    source = paragraph.get('Source')
    if source:
        return source.split()[0]
    return paragraph['Package']


class SourcePackages(object):
    """Sources building Multi-Arch: same binaries

    Binaries of such sources need to be co-installable across
    architectures, so they have to be rebuilt on all architectures at once.
    """

    def __init__(self, ma_same_sources=()):
        logger_name = ".".join((self.__class__.__module__, self.__class__.__name__))
        self.logger = logging.getLogger(logger_name)
        self._ma_same_sources = set(ma_same_sources)

    @classmethod
    def from_packages_files(cls, filenames):
        source_packages = cls()
        for filename in filenames:
            source_packages.read_packages_file(filename)
        return source_packages

    @classmethod
    def from_cache_dir(cls, cache_dir, architectures, *, suite='unstable'):
        """Load Packages_<arch> (or Packages_<suite>_<arch>) files from the cache

        Missing files are logged and ignored.
        """
        source_packages = cls()
        for arch in architectures:
            candidates = ['Packages_%s' % arch, 'Packages_%s_%s' % (suite, arch)]
            for candidate in candidates:
                try:
                    filename = possibly_compressed(os.path.join(cache_dir, candidate))
                except FileNotFoundError:
                    continue
                source_packages.read_packages_file(filename)
                break
            else:
                source_packages.logger.warning("No Packages file for %s in %s", arch, cache_dir)
        return source_packages

    def read_packages_file(self, filename):
        """Collect the sources of all Multi-Arch: same binaries in a Packages file"""
        self.logger.info("Loading binary packages from %s", filename)
        with open_possibly_compressed(filename) as fd:
            for paragraph in deb822.Packages.iter_paragraphs(fd, use_apt_pkg=False):
                if 'Package' not in paragraph:
                    continue
                multi_arch = paragraph.get('Multi-Arch')
                if multi_arch is None:
                    continue
                try:
                    multi_arch = MultiArch.parse(multi_arch.strip())
                except ParseError as e:
                    self.logger.warning("Ignoring %s: %s", paragraph['Package'], e)
                    continue
                if multi_arch == MultiArch.SAME:
                    self._ma_same_sources.add(source_of_binary(paragraph))

    def is_ma_same(self, source):
        return source in self._ma_same_sources

    def __len__(self):
        return len(self._ma_same_sources)
