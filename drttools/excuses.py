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

"""Reading britney's excuses.yaml

Only the fields needed to decide on binNMUs and unblocks are kept.
"""

import logging
from collections import namedtuple
from datetime import datetime

import yaml

from drttools import Component, ParseError
from drttools.architectures import Architecture
from drttools.policies import PolicyVerdict


class ExcusesParseError(ParseError):
    pass


Excuses = namedtuple('Excuses', [
    'generated_date',
    'sources',
])

AgeInfo = namedtuple('AgeInfo', [
    'age_requirement',
    'current_age',
    'verdict',
])

BuiltOnBuildd = namedtuple('BuiltOnBuildd', [
    # maps an Architecture to the signer of the upload (or None)
    'signed_by',
    'verdict',
])

PolicyInfo = namedtuple('PolicyInfo', [
    'age',
    'builtonbuildd',
    'autopkgtest',
    # all other policies: policy name -> PolicyVerdict
    'extras',
])


_ExcusesItem = namedtuple('ExcusesItem', [
    'is_candidate',
    'new_version',
    'old_version',
    'item_name',
    'source',
    'component',
    'invalidated_by_other_package',
    # list of Architecture, or None if there are no missing builds
    'missing_builds',
    'migration_policy_verdict',
    'policy_info',
])


class ExcusesItem(_ExcusesItem):
    """The excuses of a single migration item

    The item name encodes the kind of migration: "-src" is a removal,
    "src/arch" a binNMU and the suffixes "_pu" and "_tpu" denote uploads
    to proposed-updates and testing-proposed-updates.
    """

    __slots__ = ()

    @property
    def is_removal(self):
        return self.item_name.startswith('-')

    @property
    def is_binnmu(self):
        return '/' in self.item_name

    @property
    def binnmu_arch(self):
        if not self.is_binnmu:
            return None
        arch = self.item_name.split('/', 1)[1]
        return arch.split('_', 1)[0]

    @property
    def is_from_pu(self):
        return self.item_name.endswith('_pu')

    @property
    def is_from_tpu(self):
        return self.item_name.endswith('_tpu')


def _field(data, key, expected_type, required=True):
    try:
        value = data[key]
    except KeyError:
        if required:
            raise ExcusesParseError("missing field %s" % key) from None
        return None
    if value is None and not required:
        return None
    if not isinstance(value, expected_type) or isinstance(value, bool) and expected_type is int:
        raise ExcusesParseError("field %s has unexpected type %s" % (key, type(value).__name__))
    return value


def _version_field(data, key):
    value = data.get(key)
    if value is None:
        raise ExcusesParseError("missing field %s" % key)
    # yaml turns unquoted versions like 2 into numbers
    return str(value)


def parse_age_info(data):
    return AgeInfo(_field(data, 'age-requirement', int),
                   _field(data, 'current-age', int),
                   PolicyVerdict.parse(_field(data, 'verdict', str)))


def parse_builtonbuildd(data):
    signed_by = {}
    for arch, signer in (_field(data, 'signed-by', dict, required=False) or {}).items():
        if signer is not None and not isinstance(signer, str):
            raise ExcusesParseError("signer for %s has unexpected type %s" % (arch, type(signer).__name__))
        signed_by[Architecture.parse(arch)] = signer
    return BuiltOnBuildd(signed_by, PolicyVerdict.parse(_field(data, 'verdict', str)))


def parse_policy_info(data):
    age = None
    builtonbuildd = None
    autopkgtest = None
    extras = {}
    for policy, info in data.items():
        if not isinstance(info, dict):
            raise ExcusesParseError("policy %s has unexpected type %s" % (policy, type(info).__name__))
        if policy == 'age':
            age = parse_age_info(info)
        elif policy == 'builtonbuildd':
            builtonbuildd = parse_builtonbuildd(info)
        elif policy == 'autopkgtest':
            autopkgtest = PolicyVerdict.parse(_field(info, 'verdict', str))
        else:
            extras[policy] = PolicyVerdict.parse(_field(info, 'verdict', str))
    return PolicyInfo(age, builtonbuildd, autopkgtest, extras)


def parse_excuses_item(data):
    """Convert one entry of the "sources" list into an ExcusesItem

    :raises ParseError: if the entry is malformed
    """
    if not isinstance(data, dict):
        raise ExcusesParseError("excuses item has unexpected type %s" % type(data).__name__)

    component = _field(data, 'component', str, required=False)
    if component is not None:
        component = Component.parse(component)

    missing_builds = None
    missing_builds_raw = _field(data, 'missing-builds', dict, required=False)
    if missing_builds_raw is not None:
        missing_builds = [Architecture.parse(x)
                          for x in _field(missing_builds_raw, 'on-architectures', list, required=False) or ()]

    verdict = _field(data, 'migration-policy-verdict', str, required=False)
    if verdict is not None:
        verdict = PolicyVerdict.parse(verdict)

    policy_info = _field(data, 'policy_info', dict, required=False)
    if policy_info is not None:
        policy_info = parse_policy_info(policy_info)

    return ExcusesItem(_field(data, 'is-candidate', bool),
                       _version_field(data, 'new-version'),
                       _version_field(data, 'old-version'),
                       _field(data, 'item-name', str),
                       _field(data, 'source', str),
                       component,
                       _field(data, 'invalidated-by-other-package', bool, required=False),
                       missing_builds,
                       verdict,
                       policy_info,
                       )


def parse_excuses(data):
    """Convert decoded excuses.yaml into Excuses

    Malformed items are logged and skipped.
    """
    logger = logging.getLogger(__name__)
    if not isinstance(data, dict) or not isinstance(data.get('sources'), list):
        raise ExcusesParseError("excuses do not contain a list of sources")

    generated_date = data.get('generated-date')
    if isinstance(generated_date, str):
        try:
            generated_date = datetime.strptime(generated_date, '%Y-%m-%d %H:%M:%S.%f')
        except ValueError:
            logger.warning("Unable to parse generated-date %s", generated_date)
            generated_date = None

    sources = []
    for entry in data['sources']:
        try:
            sources.append(parse_excuses_item(entry))
        except ParseError as e:
            name = entry.get('item-name', '<unknown>') if isinstance(entry, dict) else '<unknown>'
            logger.warning("Skipping excuses item %s: %s", name, e)
            print("# Skipping %s: %s" % (name, e))
    return Excuses(generated_date, sources)


def read_excuses(filename):
    """Read and parse an excuses.yaml file"""
    logger = logging.getLogger(__name__)
    logger.info("Loading excuses from %s", filename)
    with open(filename, encoding='utf-8') as fd:
        return parse_excuses(yaml.safe_load(fd))
