import os
import shutil
import tempfile
import unittest
from unittest import mock

from drttools.architectures import RELEASE_ARCHITECTURES, Architecture
from drttools.config import ConfigurationError, apply_defaults, default_config_file, read_config

from . import MockObject


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config = os.path.join(self.tmpdir, 'drt.conf')

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def write_config(self, content):
        with open(self.config, 'w', encoding='utf-8') as fd:
            fd.write(content)

    def test_read_config(self):
        self.write_config('# comment\nCACHE_DIR = /srv/cache\nBUILDD=buildd.example.org\n'
                          'ARCHITECTURES = amd64 s390x\n# STATE_DIR = /nowhere\n')
        options = read_config(self.config, MockObject(buildd=None, dry_run=False))
        assert options.cache_dir == '/srv/cache'
        assert options.buildd == 'buildd.example.org'
        assert not hasattr(options, 'state_dir')

        apply_defaults(options)
        assert options.architectures == [Architecture.AMD64, Architecture.S390X]
        assert options.excuses == '/srv/cache/excuses.yaml'

    def test_command_line_wins(self):
        self.write_config('BUILDD = buildd.example.org\n')
        options = read_config(self.config, MockObject(buildd='other.example.org'))
        assert options.buildd == 'other.example.org'

    def test_missing_config(self):
        with self.assertRaises(ConfigurationError):
            read_config(self.config, MockObject())
        options = read_config(self.config, MockObject(), required=False)
        assert not hasattr(options, 'buildd')

    def test_defaults(self):
        environ = {
            'XDG_DATA_HOME': os.path.join(self.tmpdir, 'data'),
            'XDG_CACHE_HOME': os.path.join(self.tmpdir, 'cache'),
            'XDG_CONFIG_HOME': os.path.join(self.tmpdir, 'config'),
        }
        with mock.patch.dict(os.environ, environ):
            options = apply_defaults(MockObject())
            assert default_config_file() == os.path.join(self.tmpdir, 'config', 'drt-tools', 'drt.conf')
        assert options.state_dir == os.path.join(self.tmpdir, 'data', 'drt-tools')
        assert options.cache_dir == os.path.join(self.tmpdir, 'cache', 'drt-tools')
        assert options.excuses == os.path.join(self.tmpdir, 'cache', 'drt-tools', 'excuses.yaml')
        assert options.scheduled_binnmus == os.path.join(self.tmpdir, 'data', 'drt-tools', 'scheduled-binnmus.yaml')
        assert options.architectures == list(RELEASE_ARCHITECTURES)
        assert options.buildd == 'wuiet.debian.org'
        assert options.wb_command == 'wb'
        assert options.buildd_signer_suffix == '@buildd.debian.org'

    def test_invalid_architectures(self):
        with self.assertRaises(ConfigurationError):
            apply_defaults(MockObject(architectures='amd64 vax', state_dir='/x', cache_dir='/y'))


if __name__ == '__main__':
    unittest.main()
