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

"""Run wanna-build commands on the buildd host

All commands share one SSH connection (an OpenSSH control master).  Each
command is run as its own invocation of wb, receiving the command on its
standard input.  All invocations are started concurrently and every one
of them runs to completion, even if others fail.
"""

import asyncio
import logging
import os
import shutil
import tempfile

from drttools.wb import SessionError, WBExecutionError

DEFAULT_BUILDD = 'wuiet.debian.org'
DEFAULT_WB_COMMAND = 'wb'


class SSHSession(object):
    """A multiplexed SSH connection to the buildd host"""

    def __init__(self, host=DEFAULT_BUILDD, *, wb_command=DEFAULT_WB_COMMAND, ssh='ssh'):
        logger_name = ".".join((self.__class__.__module__, self.__class__.__name__))
        self.logger = logging.getLogger(logger_name)
        self.host = host
        self.wb_command = wb_command
        self.ssh = ssh
        self._control_dir = None

    @property
    def control_path(self):
        if self._control_dir is None:
            return None
        return os.path.join(self._control_dir, 'ctl')

    async def connect(self):
        self._control_dir = tempfile.mkdtemp(prefix='drt-tools-ssh-')
        self.logger.info("Connecting to %s", self.host)
        try:
            proc = await asyncio.create_subprocess_exec(
                self.ssh, '-o', 'ControlMaster=yes', '-o', 'ControlPath=%s' % self.control_path,
                '-o', 'ControlPersist=yes', '-fN', self.host,
                stdin=asyncio.subprocess.DEVNULL)
            returncode = await proc.wait()
        except OSError as e:
            self._cleanup()
            raise SessionError("unable to connect to %s: %s" % (self.host, e)) from e
        if returncode != 0:
            self._cleanup()
            raise SessionError("unable to connect to %s: ssh exited with %d" % (self.host, returncode))

    async def command(self):
        """Start one invocation of wb over the shared connection"""
        return await asyncio.create_subprocess_exec(
            self.ssh, '-o', 'ControlPath=%s' % self.control_path, self.host, self.wb_command,
            stdin=asyncio.subprocess.PIPE)

    async def close(self):
        if self._control_dir is None:
            return
        try:
            proc = await asyncio.create_subprocess_exec(
                self.ssh, '-o', 'ControlPath=%s' % self.control_path, '-O', 'exit', self.host,
                stdin=asyncio.subprocess.DEVNULL, stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL)
            await proc.wait()
        except OSError as e:
            self.logger.warning("Unable to close connection to %s: %s", self.host, e)
        finally:
            self._cleanup()

    def _cleanup(self):
        if self._control_dir is not None:
            shutil.rmtree(self._control_dir, ignore_errors=True)
            self._control_dir = None


async def execute_wb_command(session, command):
    """Run a single command; raises WBExecutionError on failure"""
    try:
        proc = await session.command()
    except OSError as e:
        raise WBExecutionError(command, str(e)) from e
    try:
        proc.stdin.write(str(command).encode('utf-8'))
        await proc.stdin.drain()
    except OSError as e:
        raise WBExecutionError(command, str(e)) from e
    finally:
        # reap the child even if it stopped reading
        proc.stdin.close()
        returncode = await proc.wait()
    if returncode != 0:
        raise WBExecutionError(command, "exit status %d" % returncode)


async def execute_wb_commands_async(commands, dry_run=False, *, session=None, buildd=DEFAULT_BUILDD, echo=True):
    """Print and (unless dry_run) execute commands

    With echo=False, the caller is responsible for printing the commands.

    :raises SessionError: if the connection could not be established
    :raises WBExecutionError: the first failed command after all commands finished
    """
    logger = logging.getLogger(__name__)
    commands = list(commands)
    if echo:
        for command in commands:
            print(command)
    if dry_run or not commands:
        return

    if session is None:
        session = SSHSession(buildd)
    await session.connect()
    try:
        results = await asyncio.gather(*(execute_wb_command(session, command) for command in commands),
                                       return_exceptions=True)
    finally:
        await session.close()

    failures = [result for result in results if isinstance(result, BaseException)]
    for failure in failures:
        logger.error("%s", failure)
    if failures:
        raise failures[0]
    logger.info("Executed %d wb commands", len(commands))


def execute_wb_commands(commands, dry_run=False, *, session=None, buildd=DEFAULT_BUILDD, echo=True):
    asyncio.run(execute_wb_commands_async(commands, dry_run, session=session, buildd=buildd, echo=echo))
