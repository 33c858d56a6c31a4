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

"""Turn excuses into binNMUs and unblocks

Items whose binaries were not built on a buildd cannot migrate to
testing.  For those a binNMU is scheduled on the offending
architectures.  Uploads to testing-proposed-updates and binNMU items that
wait for approval get an unblock.
"""

import logging

from drttools import Component, ParseError
from drttools.architectures import Architecture
from drttools.policies import PolicyVerdict
from drttools.version import PackageVersion
from drttools.wb import BinNMU, SourceSpecifier, Unblock, WBError

BUILDD_SIGNER_SUFFIX = '@buildd.debian.org'
BINNMU_MESSAGE = 'Rebuild on buildd'


class ExcusesProcessor(object):

    def __init__(self, options, source_packages, scheduled_binnmus):
        """Decide on actions for excuses items

        :param options: an object with the attributes "dry_run",
          "ignore_age", "ignore_autopkgtests", "no_rebuilds", "no_unblocks" and
          optionally "buildd_signer_suffix"
        :param source_packages: a SourcePackages instance
        :param scheduled_binnmus: a ScheduledBinNMUs instance; updated
          unless running in dry-run mode
        """
        logger_name = ".".join((self.__class__.__module__, self.__class__.__name__))
        self.logger = logging.getLogger(logger_name)
        self.options = options
        self.source_packages = source_packages
        self.scheduled_binnmus = scheduled_binnmus
        self.buildd_signer_suffix = getattr(options, 'buildd_signer_suffix', None) or BUILDD_SIGNER_SUFFIX

    def is_actionable(self, item):
        if item.is_removal:
            self.logger.debug("%s not actionable: removal", item.source)
            return False
        if item.is_from_pu:
            self.logger.debug("%s not actionable: pu request", item.source)
            return False
        if item.invalidated_by_other_package:
            self.logger.debug("%s not actionable: invalidated by other package", item.source)
            return False
        return True

    def is_unblock_candidate(self, item):
        return (item.is_from_tpu or item.is_binnmu) and \
            item.migration_policy_verdict == PolicyVerdict.REJECTED_NEEDS_APPROVAL

    def is_binnmu_candidate(self, item):
        if item.is_from_tpu or item.is_binnmu:
            self.logger.debug("%s: no binNMU for tpu and binNMU items", item.source)
            return False
        if item.component not in (Component.MAIN, None):
            self.logger.debug("%s: no binNMU in %s", item.source, item.component)
            return False
        if item.missing_builds is not None:
            self.logger.debug("%s: no binNMU: missing builds", item.source)
            return False
        return True

    def is_binnmu_required(self, item):
        policy_info = item.policy_info
        if policy_info is None:
            return False

        builtonbuildd = policy_info.builtonbuildd
        if builtonbuildd is not None:
            if builtonbuildd.verdict == PolicyVerdict.PASS:
                self.logger.debug("%s: no binNMU required: passing", item.source)
                return False
            if builtonbuildd.verdict == PolicyVerdict.REJECTED_CANNOT_DETERMINE_IF_PERMANENT:
                self.logger.debug("%s: no binNMU possible: missing builds", item.source)
                return False

        age = policy_info.age
        if age is not None and not self.options.ignore_age:
            # integer division; a requirement of 1 day gives a bound of 0
            if age.current_age < min(age.age_requirement // 2, age.age_requirement - 1):
                self.logger.debug("%s: no binNMU possible: too young: %d days (required: %d days)",
                                  item.source, age.current_age, age.age_requirement)
                return False

        autopkgtest = policy_info.autopkgtest
        if autopkgtest is not None and autopkgtest != PolicyVerdict.PASS and \
                not self.options.ignore_autopkgtests:
            self.logger.debug("%s: no binNMU possible: autopkgtest verdict %s", item.source, autopkgtest)
            return False

        for policy, verdict in policy_info.extras.items():
            if verdict != PolicyVerdict.PASS:
                self.logger.debug("%s: no binNMU possible: %s verdict %s", item.source, policy, verdict)
                return False

        return True

    def offending_architectures(self, item):
        """Architectures with binaries not signed by a buildd

        Returns None if no binNMU can fix the situation.
        """
        builtonbuildd = item.policy_info.builtonbuildd
        if builtonbuildd is None:
            self.logger.warning("%s: considered candidate, but no builtonbuildd information", item.source)
            return None

        archs = []
        for arch, signer in builtonbuildd.signed_by.items():
            if signer is None or signer.endswith(self.buildd_signer_suffix):
                continue
            if arch == Architecture.ALL:
                self.logger.debug("%s: cannot binNMU arch: all", item.source)
                return None
            archs.append(arch)

        if not archs:
            self.logger.warning("%s: considered candidate, but no architecture with missing build", item.source)
            return None
        return archs

    def build_binnmu(self, item):
        if not self.is_binnmu_candidate(item) or not self.is_binnmu_required(item):
            return None
        archs = self.offending_architectures(item)
        if archs is None:
            return None

        try:
            version = PackageVersion.parse(item.new_version)
        except ParseError as e:
            self.logger.error("%s: unable to parse version %s: %s", item.source, item.new_version, e)
            print("# Skipping %s: invalid version %s" % (item.source, item.new_version))
            return None

        source_specifier = SourceSpecifier(item.source).with_version(version)
        if self.source_packages.is_ma_same(item.source):
            self.logger.debug("%s: Multi-Arch: same, rebuilding everywhere", item.source)
        else:
            source_specifier.with_archive_architectures(archs)
        try:
            return BinNMU(source_specifier, BINNMU_MESSAGE).build()
        except WBError as e:
            self.logger.error("%s: failed to construct nmu command: %s", item.source, e)
            return None

    def build_unblock(self, item):
        try:
            version = PackageVersion.parse(item.new_version)
        except ParseError as e:
            self.logger.error("%s: unable to parse version %s: %s", item.source, item.new_version, e)
            print("# Skipping %s: invalid version %s" % (item.source, item.new_version))
            return None
        return Unblock(item.source, version, tpu=item.is_from_tpu, architecture=item.binnmu_arch).build()

    def build_action(self, item):
        """Return the command for an item, or None if nothing needs to be done"""
        if not self.is_actionable(item):
            return None
        if self.is_unblock_candidate(item):
            return self.build_unblock(item)
        return self.build_binnmu(item)

    def process(self, excuses):
        """Process all items and return the lists (unblocks, binnmus)

        BinNMUs that were scheduled by an earlier run are dropped.  New
        binNMUs are recorded as scheduled unless running in dry-run mode.
        """
        unblocks = []
        binnmus = []
        for item in excuses.sources:
            if not self.is_actionable(item):
                continue

            if self.is_unblock_candidate(item):
                if self.options.no_unblocks:
                    continue
                command = self.build_unblock(item)
                if command is not None:
                    unblocks.append(command)
                continue

            if self.options.no_rebuilds:
                continue
            command = self.build_binnmu(item)
            if command is None:
                continue
            if self.scheduled_binnmus.contains(command):
                self.logger.info("%s: skipping, already scheduled", command)
                continue
            if not self.options.dry_run:
                self.scheduled_binnmus.record(command)
            binnmus.append(command)
        return unblocks, binnmus
