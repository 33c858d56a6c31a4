import unittest
from contextlib import redirect_stdout
from io import StringIO

from drttools.architectures import Architecture
from drttools.archive import SuiteOrCodename
from drttools.nmulist import NMUList

from . import FakeSourcePackages, MockObject


def new_nmu_list(*ma_same_sources, **kwargs):
    options = {
        'message': 'Rebuild for libfoo2',
        'suite': None,
        'nmu_architectures': [],
        'build_priority': None,
        'dep_wait': None,
        'extra_depends': None,
    }
    options.update(kwargs)
    return NMUList(MockObject(**options), FakeSourcePackages(*ma_same_sources))


def build(nmu_list, *lines):
    return [str(command) for command in nmu_list.build_commands(lines)]


class TestNMUList(unittest.TestCase):

    def test_simple(self):
        assert build(new_nmu_list(), 'foo\n', '\n', '# comment\n', 'bar_1.0-2\n') == [
            'nmu foo . ANY . unstable . -m "Rebuild for libfoo2"',
            'nmu bar_1.0-2 . ANY . unstable . -m "Rebuild for libfoo2"',
        ]

    def test_options(self):
        nmu_list = new_nmu_list(suite=SuiteOrCodename.parse('trixie'),
                                nmu_architectures=[Architecture.AMD64, Architecture.I386],
                                build_priority=-10, dep_wait='libfoo-dev (>= 2)', extra_depends='libfoo-dev (>= 2)')
        assert build(nmu_list, 'foo') == [
            'nmu foo . amd64 i386 . trixie . -m "Rebuild for libfoo2" --extra-depends "libfoo-dev (>= 2)"'
            ' --dependency-wait "libfoo-dev (>= 2)"',
            'bp -10 foo . amd64 i386 . trixie',
        ]

    def test_multi_arch_same(self):
        nmu_list = new_nmu_list('foo', nmu_architectures=[Architecture.AMD64])
        assert build(nmu_list, 'foo', 'bar') == [
            'nmu foo . ANY . unstable . -m "Rebuild for libfoo2"',
            'nmu bar . amd64 . unstable . -m "Rebuild for libfoo2"',
        ]

    def test_invalid_lines(self):
        nmu_list = new_nmu_list(nmu_architectures=[Architecture.ALL])
        with redirect_stdout(StringIO()) as output:
            assert build(nmu_list, 'foo_1.0_1', 'bar') == []
        lines = output.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith('# Skipping foo_1.0_1')
        assert lines[1].startswith('# Skipping bar')


if __name__ == '__main__':
    unittest.main()
