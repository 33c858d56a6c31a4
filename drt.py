#!/usr/bin/python3 -u
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

"""
= Introduction =

drt-tools helps the Debian release team with recurring chores around
testing migration.

Sub-commands:

 * process-excuses: reads britney's excuses.yaml and schedules binNMUs
   for packages whose binaries were not built on a buildd (and thus
   cannot migrate), and unblocks for uploads to testing-proposed-updates
   and binNMUs that need approval.  BinNMUs are only scheduled once; the
   scheduled ones are remembered in scheduled-binnmus.yaml in the state
   directory.

 * nmu-list: schedules binNMUs for a list of source packages read from a
   file or the standard input.

All commands are sent to wanna-build on the buildd host over a single SSH
connection.  With --dry-run, the commands are only printed and no state
is written.

The excuses and the Packages_<arch> files are expected in the cache
directory; downloading them is left to external tools.
"""

import logging
import optparse
import os
import sys

from drttools import ParseError
from drttools.archive import SuiteOrCodename
from drttools.architectures import Architecture
from drttools.config import ConfigurationError, apply_defaults, default_config_file, read_config
from drttools.dispatcher import SSHSession, execute_wb_commands
from drttools.excuses import read_excuses
from drttools.excusesprocessor import ExcusesProcessor
from drttools.nmulist import NMUList
from drttools.scheduled import ScheduledBinNMUs
from drttools.sourcepackages import SourcePackages
from drttools.wb import SessionError, WBExecutionError

__version__ = '0.3.0'

COMMANDS = ('process-excuses', 'nmu-list')


class DrtTools(object):
    """drt-tools application class"""

    def __init__(self, args=None):
        """Class constructor

        Sets up logging and parses the command line and the configuration
        file.
        """

        # setup logging - provide the "short level name" (i.e. INFO -> I)
        old_factory = logging.getLogRecordFactory()
        short_level_mapping = {
            'CRITICAL': 'F',
            'INFO': 'I',
            'WARNING': 'W',
            'ERROR': 'E',
            'DEBUG': 'N',
        }

        def record_factory(*args, **kwargs):   # pragma: no cover
            record = old_factory(*args, **kwargs)
            record.shortlevelname = short_level_mapping.get(record.levelname, record.levelname)
            return record

        logging.setLogRecordFactory(record_factory)
        logging.basicConfig(format='{shortlevelname}: [{asctime}] - {message}',
                            style='{',
                            datefmt="%Y-%m-%dT%H:%M:%S%z",
                            stream=sys.stdout,
                            )

        self.logger = logging.getLogger()
        self.__parse_arguments(sys.argv[1:] if args is None else args)

    def __parse_arguments(self, args):
        """Parse the command line arguments and read the configuration file"""
        parser = optparse.OptionParser(usage="%%prog [options] {%s} [command options]" % ",".join(COMMANDS),
                                       version="%prog " + __version__)
        parser.disable_interspersed_args()
        parser.add_option("-v", "", action="count", dest="verbose", default=0,
                          help="enable verbose output (twice for debug output)")
        parser.add_option("-c", "--config", action="store", dest="config", default=None,
                          help="path for the configuration file")
        parser.add_option("-n", "--dry-run", action="store_true", dest="dry_run", default=False,
                          help="only print the commands and do not write any state")
        parser.add_option("", "--buildd", action="store", dest="buildd", default=None,
                          help="host running wanna-build")
        (self.options, args) = parser.parse_args(args)

        if self.options.verbose >= 2:
            self.logger.setLevel(logging.DEBUG)
        elif self.options.verbose:
            self.logger.setLevel(logging.INFO)
        else:
            self.logger.setLevel(logging.WARNING)
        try:  # pragma: no cover
            if int(os.environ.get('DRT_TOOLS_DEBUG', '0')):
                self.logger.setLevel(logging.DEBUG)
        except ValueError:  # pragma: no cover
            pass

        if not args or args[0] not in COMMANDS:
            parser.error("expected one of the commands: %s" % ", ".join(COMMANDS))
        self.command = args[0]
        if self.command == 'process-excuses':
            self.__parse_process_excuses_arguments(args[1:])
        else:
            self.__parse_nmu_list_arguments(args[1:])

        try:
            if self.options.config is None:
                read_config(default_config_file(), self.options, required=False)
            else:
                read_config(self.options.config, self.options)
            apply_defaults(self.options)
        except ConfigurationError as e:
            self.logger.error("%s, exiting!", e)
            sys.exit(1)

    def __parse_process_excuses_arguments(self, args):
        parser = optparse.OptionParser(usage="%prog [options] process-excuses [command options]")
        parser.add_option("", "--ignore-age", action="store_true", dest="ignore_age", default=False,
                          help="schedule binNMUs regardless of the age of the package")
        parser.add_option("", "--ignore-autopkgtests", action="store_true", dest="ignore_autopkgtests",
                          default=False, help="schedule binNMUs regardless of autopkgtest results")
        parser.add_option("", "--no-rebuilds", action="store_true", dest="no_rebuilds", default=False,
                          help="do not schedule binNMUs")
        parser.add_option("", "--no-unblocks", action="store_true", dest="no_unblocks", default=False,
                          help="do not schedule unblocks")
        (command_options, rest) = parser.parse_args(args)
        if rest:
            parser.error("unexpected arguments: %s" % " ".join(rest))
        for k, v in vars(command_options).items():
            setattr(self.options, k, v)

    def __parse_nmu_list_arguments(self, args):
        parser = optparse.OptionParser(usage="%prog [options] nmu-list [command options] [FILE]")
        parser.add_option("-m", "--message", action="store", dest="message", default=None,
                          help="binNMU changelog message (required)")
        parser.add_option("-s", "--suite", action="store", dest="suite", default=None,
                          help="suite or codename to schedule the binNMUs in (default: unstable)")
        parser.add_option("-a", "--architecture", action="append", dest="nmu_architectures", default=[],
                          help="restrict binNMUs to architecture (may be given multiple times)")
        parser.add_option("", "--bp", action="store", type="int", dest="build_priority", default=None,
                          help="build priority")
        parser.add_option("", "--dw", action="store", dest="dep_wait", default=None,
                          help="dependency wait")
        parser.add_option("", "--extra-depends", action="store", dest="extra_depends", default=None,
                          help="extra dependencies")
        (command_options, rest) = parser.parse_args(args)
        if not command_options.message:
            parser.error("a message is required")
        if len(rest) > 1:
            parser.error("at most one input file may be given")
        try:
            if command_options.suite is not None:
                command_options.suite = SuiteOrCodename.parse(command_options.suite)
            command_options.nmu_architectures = [Architecture.parse(arch)
                                                 for arch in command_options.nmu_architectures]
        except ParseError as e:
            parser.error(str(e))
        command_options.input = rest[0] if rest else None
        for k, v in vars(command_options).items():
            setattr(self.options, k, v)

    def load_source_packages(self, suite=None):
        suite = 'unstable' if suite is None else str(suite.suite)
        return SourcePackages.from_cache_dir(self.options.cache_dir, self.options.architectures, suite=suite)

    def execute(self, commands, *, echo=True):
        session = SSHSession(self.options.buildd, wb_command=self.options.wb_command)
        execute_wb_commands(commands, self.options.dry_run, session=session, echo=echo)

    def process_excuses(self):
        source_packages = self.load_source_packages()
        excuses = read_excuses(self.options.excuses)
        scheduled_binnmus = ScheduledBinNMUs.load(self.options.scheduled_binnmus)

        processor = ExcusesProcessor(self.options, source_packages, scheduled_binnmus)
        unblocks, binnmus = processor.process(excuses)

        if not self.options.dry_run:
            scheduled_binnmus.store(self.options.scheduled_binnmus)

        if not self.options.no_unblocks:
            print("# Unblocks")
            for unblock in unblocks:
                print(unblock)
        if not self.options.no_rebuilds:
            print("# Rebuild on buildds for testing migration")
            for binnmu in binnmus:
                print(binnmu)
        self.execute(unblocks + binnmus, echo=False)

    def nmu_list(self):
        source_packages = self.load_source_packages(self.options.suite)
        nmu_list = NMUList(self.options, source_packages)
        if self.options.input is None:
            commands = nmu_list.build_commands(sys.stdin)
        else:
            with open(self.options.input, encoding='utf-8') as fd:
                commands = nmu_list.build_commands(fd)
        self.execute(commands)

    def main(self):
        """Main method

        Runs the selected command and returns the exit status.
        """
        try:
            if self.command == 'process-excuses':
                self.process_excuses()
            else:
                self.nmu_list()
        except (SessionError, WBExecutionError) as e:
            self.logger.error("%s", e)
            return 1
        except (OSError, ParseError) as e:
            self.logger.error("%s, exiting!", e)
            return 1
        finally:
            logging.shutdown()
        return 0


def main():
    sys.exit(DrtTools().main())


if __name__ == '__main__':
    main()
