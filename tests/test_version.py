import itertools
import unittest

from drttools.version import (
    InvalidDebianRevisionError,
    InvalidEpochError,
    InvalidUpstreamVersionError,
    PackageVersion,
    VersionError,
    compare_non_digits,
    compare_segments,
    version_compare,
)


class TestVersionParsing(unittest.TestCase):

    def test_parse_full(self):
        version = PackageVersion.parse('1:2.0~rc1-3')
        assert version.epoch == 1
        assert version.upstream_version == '2.0~rc1'
        assert version.debian_revision == '3'
        assert version.has_epoch
        assert not version.is_native
        assert str(version) == '1:2.0~rc1-3'

    def test_parse_native(self):
        version = PackageVersion.parse('20240101')
        assert version.epoch is None
        assert version.epoch_or_0 == 0
        assert version.debian_revision is None
        assert version.is_native
        assert str(version) == '20240101'

    def test_revision_split_at_last_dash(self):
        version = PackageVersion.parse('1.0-beta-2')
        assert version.upstream_version == '1.0-beta'
        assert version.debian_revision == '2'

    def test_colon_in_upstream_with_epoch(self):
        version = PackageVersion.parse('2:1.0:3-1')
        assert version.epoch == 2
        assert version.upstream_version == '1.0:3'

    def test_invalid_epoch(self):
        for value in ('a:1.0-1', ':1.0-1', '-1:1.0', '1.0:1', '1\n:1.0-1', ' 1:1.0-1'):
            with self.assertRaises(InvalidEpochError, msg=value):
                PackageVersion.parse(value)
        with self.assertRaises(InvalidEpochError):
            PackageVersion(-1, '1.0')

    def test_invalid_upstream_version(self):
        for value in ('', '1:', '1.0_1', '-1', '1.0 1'):
            with self.assertRaises(InvalidUpstreamVersionError, msg=value):
                PackageVersion.parse(value)
        with self.assertRaises(InvalidUpstreamVersionError):
            PackageVersion(None, '1:0')
        with self.assertRaises(InvalidUpstreamVersionError):
            PackageVersion(None, '1-0')

    def test_invalid_revision(self):
        for value in ('1.0-', '1.0-1_2', '1.0-1:2', '1.0-1\n', '1.0-1 '):
            with self.assertRaises(VersionError, msg=value):
                PackageVersion.parse(value)
        with self.assertRaises(InvalidDebianRevisionError):
            PackageVersion.parse('1.0-')
        with self.assertRaises(InvalidDebianRevisionError):
            PackageVersion.parse('1.0-1\n')
        with self.assertRaises(InvalidUpstreamVersionError):
            PackageVersion.parse('1.0\n')
        with self.assertRaises(InvalidDebianRevisionError):
            PackageVersion(None, '1.0', '')

    def test_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            PackageVersion.parse('a:b')


class TestVersionOrdering(unittest.TestCase):

    def test_compare_non_digits(self):
        assert compare_non_digits('~~', '~~a') < 0
        assert compare_non_digits('~~a', '~') < 0
        assert compare_non_digits('~', '') < 0
        assert compare_non_digits('', 'a') < 0
        assert compare_non_digits('a', '+') < 0
        assert compare_non_digits('abc', 'abc') == 0
        assert compare_non_digits('b', 'a') > 0

    def test_compare_segments(self):
        assert compare_segments('1.10', '1.9') > 0
        assert compare_segments('1.0', '1.00') == 0
        assert compare_segments('1.0', '1.0.0') < 0
        assert compare_segments('', '') == 0

    def test_epoch_dominates(self):
        assert PackageVersion(1, '0.1', None) > PackageVersion(0, '9.9', '9')

    def test_zero_epoch(self):
        a = PackageVersion.parse('2.0-1')
        b = PackageVersion.parse('0:2.0-1')
        assert a == b
        assert hash(a) == hash(b)

    def test_tilde(self):
        assert PackageVersion.parse('1.0~dfsg-1') < PackageVersion.parse('1.0-1')
        assert PackageVersion.parse('1.0-1') < PackageVersion.parse('1.0+dfsg-1')
        assert PackageVersion.parse('1.0~rc1~1-1') < PackageVersion.parse('1.0~rc1-1')

    def test_native_before_revision(self):
        assert PackageVersion.parse('1.0') < PackageVersion.parse('1.0-0')
        assert PackageVersion.parse('1.0') < PackageVersion.parse('1.0-~')
        assert PackageVersion.parse('1.1') > PackageVersion.parse('1.0-5')

    def test_numeric_segments(self):
        assert PackageVersion.parse('1.10-1') > PackageVersion.parse('1.9-1')
        assert PackageVersion.parse('1.0-10') > PackageVersion.parse('1.0-9')
        assert PackageVersion.parse('1.00-1') == PackageVersion.parse('1.0-1')
        assert hash(PackageVersion.parse('1.00-1')) == hash(PackageVersion.parse('1.0-1'))

    def test_total_order(self):
        versions = [PackageVersion.parse(v) for v in (
            '1.0~~', '1.0~~a', '1.0~', '1.0', '1.0-1', '1.0-1+b1', '1.0+dfsg-1', '1.0a', '1.1', '1:0.1',
            '0:1.0-1', '2.0~beta1-1', '1.0-1.1', '1.0-1~bpo12+1',
        )]
        for a, b in itertools.product(versions, repeat=2):
            assert sum((a < b, a == b, a > b)) == 1, (a, b)
        for a, b, c in itertools.product(versions, repeat=3):
            if a < b and b < c:
                assert a < c, (a, b, c)

    def test_sorting(self):
        expected = ['1.0~~', '1.0~~a', '1.0~', '1.0', '1.0-1~bpo12+1', '1.0-1', '1.0-1+b1', '1.0-1.1',
                    '1.0a', '1.0+dfsg-1', '1.1', '2.0~beta1-1', '1:0.1']
        shuffled = list(reversed(expected))
        shuffled.sort(key=PackageVersion.parse)
        assert shuffled == expected

    def test_version_compare(self):
        assert version_compare('1.0-1', '1.0-2') == -1
        assert version_compare('1:1.0-1', '1.0-2') == 1
        assert version_compare('1.0-1', '0:1.0-1') == 0

    def test_compare_with_other_types(self):
        assert PackageVersion.parse('1.0') != '1.0'


class TestBinNMUVersion(unittest.TestCase):

    def test_binnmu_version(self):
        version = PackageVersion.parse('1.0-1+b2')
        assert version.binnmu_version == 2
        assert version.has_binnmu_version
        assert version.without_binnmu_version() == PackageVersion.parse('1.0-1')
        assert str(version.without_binnmu_version()) == '1.0-1'

    def test_no_binnmu_version(self):
        version = PackageVersion.parse('1.0-1')
        assert version.binnmu_version is None
        assert not version.has_binnmu_version
        assert version.without_binnmu_version() is version

    def test_native_binnmu_version(self):
        version = PackageVersion.parse('2:1.0+b12')
        assert version.binnmu_version == 12
        assert str(version.without_binnmu_version()) == '2:1.0'

    def test_non_numeric_suffix(self):
        version = PackageVersion.parse('1.0-1+build1')
        assert version.binnmu_version is None
        assert str(version.without_binnmu_version()) == '1.0-1+build1'

    def test_rightmost_marker(self):
        version = PackageVersion.parse('1.0-1+b1+b3')
        assert version.binnmu_version == 3
        assert str(version.without_binnmu_version()) == '1.0-1+b1'


if __name__ == '__main__':
    unittest.main()
