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

"""Persisted set of binNMUs that have already been scheduled

The cache is a YAML document of the form::

  binnmus:
    - nmu foo_1.0-1 . amd64 . unstable . -m "Rebuild on buildd"

It is loaded once at start-up and written back once at the end of a run.
"""

import logging

import yaml

from drttools.utils import write_atomically
from drttools.wb import WBCommand


class ScheduledBinNMUs(object):

    def __init__(self, commands=()):
        logger_name = ".".join((self.__class__.__module__, self.__class__.__name__))
        self.logger = logging.getLogger(logger_name)
        self._commands = []
        self._known = set()
        for command in commands:
            self.record(command)

    @classmethod
    def load(cls, filename):
        """Load the cache from filename

        A missing or unreadable file results in an empty cache.
        """
        cache = cls()
        try:
            with open(filename, encoding='utf-8') as fd:
                data = yaml.safe_load(fd)
        except FileNotFoundError:
            cache.logger.info("%s does not exist, starting with an empty cache", filename)
            return cache
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            cache.logger.warning("Unable to read %s, starting with an empty cache: %s", filename, e)
            return cache

        if data is None:
            return cache
        if not isinstance(data, dict) or not isinstance(data.get('binnmus', []), list):
            cache.logger.warning("%s is malformed, starting with an empty cache", filename)
            return cache

        for command in data.get('binnmus', []):
            if not isinstance(command, str):
                cache.logger.warning("%s is malformed, starting with an empty cache", filename)
                return cls()
            cache.record(WBCommand(command))
        cache.logger.info("Loaded %d scheduled binNMUs from %s", len(cache), filename)
        return cache

    def store(self, filename):
        self.logger.info("Writing %d scheduled binNMUs to %s", len(self), filename)
        data = {'binnmus': [str(command) for command in self._commands]}
        write_atomically(filename, lambda fd: yaml.safe_dump(data, fd, default_flow_style=False))

    def contains(self, command):
        return command in self._known

    def record(self, command):
        if command in self._known:
            return
        self._known.add(command)
        self._commands.append(command)

    def __contains__(self, command):
        return self.contains(command)

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)
