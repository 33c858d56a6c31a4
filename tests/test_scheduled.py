import os
import shutil
import tempfile
import unittest

import yaml

from drttools.scheduled import ScheduledBinNMUs
from drttools.wb import WBCommand

NMU_FOO = WBCommand('nmu foo_1.0-1 . amd64 . unstable . -m "Rebuild on buildd"')
NMU_BAR = WBCommand('nmu bar_2.0-1 . ANY . unstable . -m "Rebuild on buildd"')


class TestScheduledBinNMUs(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.filename = os.path.join(self.tmpdir, 'state', 'scheduled-binnmus.yaml')

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def write(self, content):
        os.makedirs(os.path.dirname(self.filename), exist_ok=True)
        with open(self.filename, 'w', encoding='utf-8') as fd:
            fd.write(content)

    def test_record(self):
        scheduled = ScheduledBinNMUs()
        assert not scheduled.contains(NMU_FOO)
        scheduled.record(NMU_FOO)
        scheduled.record(NMU_BAR)
        scheduled.record(NMU_FOO)
        assert scheduled.contains(NMU_FOO)
        assert NMU_BAR in scheduled
        assert list(scheduled) == [NMU_FOO, NMU_BAR]

    def test_store_and_load(self):
        ScheduledBinNMUs([NMU_FOO, NMU_BAR]).store(self.filename)
        assert not os.path.exists(self.filename + '.new')
        with open(self.filename, encoding='utf-8') as fd:
            assert yaml.safe_load(fd) == {'binnmus': [str(NMU_FOO), str(NMU_BAR)]}

        scheduled = ScheduledBinNMUs.load(self.filename)
        assert list(scheduled) == [NMU_FOO, NMU_BAR]
        assert scheduled.contains(WBCommand(str(NMU_BAR)))

    def test_missing_file(self):
        assert len(ScheduledBinNMUs.load(self.filename)) == 0

    def test_empty_file(self):
        self.write('')
        assert len(ScheduledBinNMUs.load(self.filename)) == 0

    def test_corrupt_file(self):
        for content in ('binnmus: [unterminated', 'just a string', 'binnmus: 3', 'binnmus:\n- foo\n- {a: b}\n',
                        '- nmu foo\n'):
            self.write(content)
            with self.assertLogs('drttools.scheduled', level='WARNING'):
                assert len(ScheduledBinNMUs.load(self.filename)) == 0, content


if __name__ == '__main__':
    unittest.main()
