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

"""Configuration file handling

The configuration file consists of "KEY = value" lines; lines starting
with "#" are comments.  Keys are lower-cased and stored as attributes of
the options object, unless the command line already set them.
"""

import os

from drttools import ParseError
from drttools.architectures import RELEASE_ARCHITECTURES, Architecture
from drttools.dispatcher import DEFAULT_BUILDD, DEFAULT_WB_COMMAND
from drttools.excusesprocessor import BUILDD_SIGNER_SUFFIX

SCHEDULED_BINNMUS_FILE = 'scheduled-binnmus.yaml'


class ConfigurationError(Exception):
    pass


def _xdg_dir(variable, fallback):
    value = os.environ.get(variable)
    if not value:
        value = os.path.join(os.path.expanduser('~'), fallback)
    return os.path.join(value, 'drt-tools')


def default_config_file():
    return os.path.join(_xdg_dir('XDG_CONFIG_HOME', '.config'), 'drt.conf')


def read_config(filename, options, *, required=True):
    """Read the configuration file and set the additional options

    :param required: if False, a missing file is not an error
    """
    if not os.path.isfile(filename):
        if required:
            raise ConfigurationError("Unable to read the configuration file (%s)" % filename)
        return options

    with open(filename, encoding='utf-8') as config:
        for line in config:
            if '=' in line and not line.strip().startswith('#'):
                k, v = line.split('=', 1)
                k = k.strip().lower()
                v = v.strip()
                if not getattr(options, k, None):
                    setattr(options, k, v)
    return options


def apply_defaults(options):
    """Fill in unset options and convert them to their final types"""
    if not getattr(options, 'state_dir', None):
        options.state_dir = _xdg_dir('XDG_DATA_HOME', os.path.join('.local', 'share'))
    if not getattr(options, 'cache_dir', None):
        options.cache_dir = _xdg_dir('XDG_CACHE_HOME', '.cache')
    if not getattr(options, 'excuses', None):
        options.excuses = os.path.join(options.cache_dir, 'excuses.yaml')
    for key in ('state_dir', 'cache_dir', 'excuses'):
        setattr(options, key, os.path.expanduser(getattr(options, key)))
    if not getattr(options, 'buildd', None):
        options.buildd = DEFAULT_BUILDD
    if not getattr(options, 'wb_command', None):
        options.wb_command = DEFAULT_WB_COMMAND
    if not getattr(options, 'buildd_signer_suffix', None):
        options.buildd_signer_suffix = BUILDD_SIGNER_SUFFIX

    architectures = getattr(options, 'architectures', None)
    if not architectures:
        options.architectures = list(RELEASE_ARCHITECTURES)
    elif isinstance(architectures, str):
        try:
            options.architectures = [Architecture.parse(arch) for arch in architectures.split()]
        except ParseError as e:
            raise ConfigurationError("Invalid ARCHITECTURES: %s" % e) from e

    options.scheduled_binnmus = os.path.join(options.state_dir, SCHEDULED_BINNMUS_FILE)
    return options
