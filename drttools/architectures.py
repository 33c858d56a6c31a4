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

from enum import Enum, unique

from drttools import ParseError


class InvalidArchitectureError(ParseError):
    pass


@unique
class Architecture(Enum):
    """Release and ports architectures

    Besides the real architectures, this includes the pseudo-architectures
    "all" (architecture independent binaries) and "source".
    """

    ALL = 'all'
    SOURCE = 'source'
    ALPHA = 'alpha'
    AMD64 = 'amd64'
    ARM64 = 'arm64'
    ARMEL = 'armel'
    ARMHF = 'armhf'
    HPPA = 'hppa'
    HURD_AMD64 = 'hurd-amd64'
    HURD_I386 = 'hurd-i386'
    I386 = 'i386'
    IA64 = 'ia64'
    LOONG64 = 'loong64'
    M68K = 'm68k'
    MIPS64EL = 'mips64el'
    MIPSEL = 'mipsel'
    POWERPC = 'powerpc'
    PPC64 = 'ppc64'
    PPC64EL = 'ppc64el'
    RISCV64 = 'riscv64'
    S390X = 's390x'
    SH4 = 'sh4'
    SPARC64 = 'sparc64'
    X32 = 'x32'

    def __str__(self):
        return self.value

    @property
    def is_pseudo(self):
        return self in (Architecture.ALL, Architecture.SOURCE)

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise InvalidArchitectureError("invalid architecture: %s" % value) from None


RELEASE_ARCHITECTURES = (
    Architecture.AMD64,
    Architecture.ARM64,
    Architecture.ARMEL,
    Architecture.ARMHF,
    Architecture.I386,
    Architecture.MIPS64EL,
    Architecture.PPC64EL,
    Architecture.RISCV64,
    Architecture.S390X,
)
